"""Recipe generation step: photo -> raw instructions and serving suggestions."""

from recipe_vision.models.models import ImageInput, RecipeDraft, RecipeGenerationInput
from recipe_vision.prompts.prompts import get_recipe_generation_prompt
from recipe_vision.utils.logger import logger


async def generate_recipe_draft(client, image: ImageInput) -> RecipeDraft:
    """Generate a draft recipe from the photo alone.

    The draft is returned as-is; checking that instructions and serving
    suggestions are present is the caller's job.

    Raises:
        ModelInvocationError: If the model call fails or returns invalid output.
    """
    draft = await client.generate(get_recipe_generation_prompt(), RecipeGenerationInput(photo=image))
    logger.info(
        f"Recipe draft generated: {len(draft.instructions)} instructions, "
        f"serving suggestions {'present' if draft.serving_suggestions else 'missing'}"
    )
    return draft
