"""Ingredient extraction step.

Sends the photo of a dish to Gemini and returns the candidate ingredients the
user will confirm. Safety thresholds for this prompt come from config.
"""

from recipe_vision.models.models import ImageInput, IngredientExtractionInput
from recipe_vision.prompts.prompts import get_ingredient_extraction_prompt
from recipe_vision.utils.logger import logger


async def extract_ingredients(client, image: ImageInput) -> list[str]:
    """Extract candidate ingredient names from a photo.

    Args:
        client: ModelClient (or any object with a compatible ``generate``).
        image: Validated photo of the dish.

    Returns:
        Ordered, de-duplicated ingredient names. May be empty.

    Raises:
        ModelInvocationError: If the model call fails or returns invalid output.
    """
    prompt = get_ingredient_extraction_prompt()
    output = await client.generate(prompt, IngredientExtractionInput(photo=image))

    ingredients = list(dict.fromkeys(output.ingredients))  # Remove duplicates, preserve order
    logger.info(f"Ingredients extracted from image: {ingredients} (total: {len(ingredients)})")
    return ingredients
