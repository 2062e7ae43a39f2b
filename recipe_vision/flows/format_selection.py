"""Format selection step.

Given the photo, the user-confirmed ingredients and the draft instructions,
the model picks a presentation format ("list" or "step-by-step") and renders
the final recipe text in it. The choice itself is the model's; this step only
surfaces it after schema validation.
"""

from typing import Sequence

from recipe_vision.models.models import FormatSelectionInput, FormatSelectionOutput, ImageInput
from recipe_vision.prompts.prompts import get_format_selection_prompt
from recipe_vision.utils.logger import logger


async def select_recipe_format(
    client,
    image: ImageInput,
    ingredients: Sequence[str],
    instructions: Sequence[str],
) -> FormatSelectionOutput:
    """Choose a recipe format and format the recipe.

    Args:
        client: ModelClient (or any object with a compatible ``generate``).
        image: Validated photo of the dish.
        ingredients: Confirmed ingredients, joined one per line for the prompt.
        instructions: Draft instructions, joined one per line for the prompt.

    Returns:
        FormatSelectionOutput with ``format`` in {"list", "step-by-step"} and
        the non-empty formatted recipe.

    Raises:
        ModelInvocationError: If the model call fails or returns invalid output.
    """
    prompt_input = FormatSelectionInput(
        photo=image,
        ingredients="\n".join(ingredients),
        instructions="\n".join(instructions),
    )
    output = await client.generate(get_format_selection_prompt(), prompt_input)
    logger.info(f"Recipe format selected: {output.format} ({len(output.formatted_recipe)} chars)")
    return output

