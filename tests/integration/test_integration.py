"""End-to-end tests against the live Gemini API.

Run with a real key in .env:

    pytest tests/integration -v

Photos placed in images/ are used for the full upload -> confirm -> recipe
flow. A generated image exercises the request plumbing when none exist.
"""

import base64
from io import BytesIO

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from recipe_vision.actions.actions import get_ingredients_action
from recipe_vision.api.app import app
from recipe_vision.flows.images import detect_image_mime
from recipe_vision.session.session import RecipeVisionSession, Step
from recipe_vision.utils.logger import logger

pytestmark = pytest.mark.integration


def to_data_uri(image_bytes: bytes) -> str:
    mime_type = detect_image_mime(image_bytes)
    return f"data:{mime_type};base64,{base64.b64encode(image_bytes).decode('utf-8')}"


@pytest.fixture(scope="module")
def generated_image_uri():
    output = BytesIO()
    Image.new("RGB", (256, 256), (200, 40, 30)).save(output, format="PNG")
    return to_data_uri(output.getvalue())


@pytest.mark.asyncio
async def test_ingredients_action_returns_exactly_one_field(generated_image_uri):
    result = await get_ingredients_action(generated_image_uri)

    assert (result.ingredients is None) != (result.error is None)
    logger.info(f"Generated image result: {result.model_dump(exclude_none=True)}")


def test_api_ingredients_endpoint(generated_image_uri):
    with TestClient(app) as client:
        response = client.post("/api/ingredients", json={"image": generated_image_uri})

    assert response.status_code == 200
    body = response.json()
    assert len(body) == 1
    assert set(body) <= {"ingredients", "error"}


@pytest.mark.asyncio
async def test_full_session_flow(dish_images):
    image_path = dish_images[0]
    session = RecipeVisionSession(session_id="integration")

    await session.select_image(to_data_uri(image_path.read_bytes()))
    assert session.error is None, f"Ingredient extraction failed for {image_path.name}"
    assert session.step is Step.CONFIRM
    assert session.confirmed_ingredients, f"No ingredients identified in {image_path.name}"

    # Drop one ingredient to exercise the confirmed subset
    if len(session.confirmed_ingredients) > 1:
        session.toggle_ingredient(session.confirmed_ingredients[-1])

    await session.generate_recipe()
    assert session.error is None, f"Recipe generation failed for {image_path.name}"
    assert session.step is Step.RECIPE
    assert session.recipe.paragraphs
    assert session.recipe.serving_suggestions
