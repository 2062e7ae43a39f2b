"""Server actions for Recipe Vision.

The two operations the UI (session state machine or HTTP API) calls:

- get_ingredients_action(): photo -> candidate ingredients
- generate_recipe_action(): photo + confirmed ingredients -> formatted recipe

Both validate the image locally first, never raise, and return a result with
exactly one of a value or a fixed user-facing error message. The underlying
cause is logged for operators only.
"""

from typing import Optional, Sequence

from recipe_vision.flows.format_selection import select_recipe_format
from recipe_vision.flows.images import parse_image_data_uri
from recipe_vision.flows.ingredients import extract_ingredients
from recipe_vision.flows.model_client import ModelClient, get_model_client
from recipe_vision.flows.recipe import generate_recipe_draft
from recipe_vision.models.errors import IncompleteGenerationError, PreconditionError
from recipe_vision.models.models import IngredientsResult, RecipeActionResult, RecipeResult
from recipe_vision.utils.logger import logger

INGREDIENTS_ERROR = "Could not process the image. Please try another one."
RECIPE_ERROR = "An unexpected error occurred while generating the recipe."


def normalize_ingredients(ingredients: Sequence[str]) -> list[str]:
    """Trim names, drop blanks and duplicates, keep the user's order."""
    return list(dict.fromkeys(name.strip() for name in ingredients if name and name.strip()))


async def get_ingredients_action(photo_data_uri: str, client: Optional[ModelClient] = None) -> IngredientsResult:
    """Identify candidate ingredients in a photo of a dish.

    Args:
        photo_data_uri: Photo as ``data:<mime>;base64,<data>``.
        client: Model client; defaults to the process-wide instance.

    Returns:
        IngredientsResult with ``ingredients`` (possibly empty) or ``error``.
    """
    try:
        image = parse_image_data_uri(photo_data_uri)
        ingredients = await extract_ingredients(client or get_model_client(), image)
        return IngredientsResult(ingredients=ingredients)
    except Exception as e:
        logger.error(f"Ingredient extraction failed: {e}", exc_info=True)
        return IngredientsResult(error=INGREDIENTS_ERROR)


async def generate_recipe_action(
    photo_data_uri: str,
    confirmed_ingredients: Sequence[str],
    client: Optional[ModelClient] = None,
) -> RecipeActionResult:
    """Generate a formatted recipe for a photo and the ingredients the user confirmed.

    Two sequential phases:
    1. Recipe generation from the photo alone (instructions + serving suggestions)
    2. Format selection using the confirmed ingredients and the draft instructions

    Phase 2 never runs if phase 1 fails or returns empty instructions or
    serving suggestions. The serving suggestions in the result come from
    phase 1; the ingredients the model originally extracted are not used,
    only the confirmed ones.

    Args:
        photo_data_uri: Photo as ``data:<mime>;base64,<data>``.
        confirmed_ingredients: Ingredients the user kept.
        client: Model client; defaults to the process-wide instance.

    Returns:
        RecipeActionResult with ``recipe`` or ``error``.
    """
    try:
        image = parse_image_data_uri(photo_data_uri)
        ingredients = normalize_ingredients(confirmed_ingredients)
        if not ingredients:
            raise PreconditionError("At least one confirmed ingredient is required")

        client = client or get_model_client()

        draft = await generate_recipe_draft(client, image)
        if not draft.is_complete:
            raise IncompleteGenerationError("The AI could not generate a recipe from this image.")

        formatted = await select_recipe_format(client, image, ingredients, draft.instructions)

        return RecipeActionResult(
            recipe=RecipeResult(
                formatted_recipe=formatted.formatted_recipe,
                serving_suggestions=draft.serving_suggestions,
            )
        )
    except Exception as e:
        logger.error(f"Recipe generation failed: {e}", exc_info=True)
        return RecipeActionResult(error=RECIPE_ERROR)
