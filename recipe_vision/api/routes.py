"""HTTP endpoints for the two Recipe Vision actions.

Action failures are reported in the ``error`` field of a 200 response, the
same shape the actions return; only malformed request bodies produce 422.
"""

from fastapi import APIRouter, Depends

from recipe_vision.actions.actions import generate_recipe_action, get_ingredients_action
from recipe_vision.flows.model_client import ModelClient, get_model_client
from recipe_vision.models.models import (
    IngredientsRequest,
    IngredientsResult,
    RecipeActionResult,
    RecipeRequest,
)

router = APIRouter(prefix="/api", tags=["recipes"])


@router.post("/ingredients", response_model=IngredientsResult, response_model_exclude_none=True)
async def get_ingredients(
    request: IngredientsRequest,
    client: ModelClient = Depends(get_model_client),
) -> IngredientsResult:
    """Identify candidate ingredients in a photo of a dish."""
    return await get_ingredients_action(request.image, client=client)


@router.post("/recipe", response_model=RecipeActionResult, response_model_exclude_none=True)
async def generate_recipe(
    request: RecipeRequest,
    client: ModelClient = Depends(get_model_client),
) -> RecipeActionResult:
    """Generate a formatted recipe from a photo and the confirmed ingredients."""
    return await generate_recipe_action(request.image, request.confirmed_ingredients, client=client)
