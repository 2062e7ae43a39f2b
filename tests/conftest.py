"""Shared pytest configuration and fixtures.

Provides a placeholder GEMINI_API_KEY so the validated module-level config
imports without credentials, sample images as bytes and data URIs, and a stub
model client that records every prompt invocation.
"""

import base64
import os

import pytest
from dotenv import load_dotenv

TEST_API_KEY = "test-gemini-key"

# Minimal headers recognized by filetype's magic-byte matchers
PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR" + b"\x00" * 32
JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00" + b"\x00" * 32
GIF_BYTES = b"GIF89a" + b"\x00" * 32

INGREDIENTS_PROMPT = "confirmIngredientsPrompt"
RECIPE_PROMPT = "generateRecipeFromImagePrompt"
FORMAT_PROMPT = "selectRecipeFormatPrompt"


def pytest_configure(config):
    """Load .env, then fall back to a placeholder API key before any module imports config."""
    load_dotenv()
    os.environ.setdefault("GEMINI_API_KEY", TEST_API_KEY)


def to_data_uri(image_bytes: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(image_bytes).decode('utf-8')}"


class StubModelClient:
    """Stand-in for ModelClient keyed by prompt name.

    ``responses`` maps prompt name -> payload validated against the prompt's
    output schema; ``errors`` maps prompt name -> exception to raise.
    """

    def __init__(self, responses=None, errors=None):
        self.responses = dict(responses or {})
        self.errors = dict(errors or {})
        self.calls = []

    @property
    def prompt_names(self):
        return [name for name, _ in self.calls]

    async def generate(self, prompt, prompt_input):
        self.calls.append((prompt.name, prompt_input))
        if prompt.name in self.errors:
            raise self.errors[prompt.name]
        return prompt.output_schema.model_validate(self.responses[prompt.name])


@pytest.fixture
def png_data_uri():
    return to_data_uri(PNG_BYTES, "image/png")


@pytest.fixture
def jpeg_data_uri():
    return to_data_uri(JPEG_BYTES, "image/jpeg")


@pytest.fixture
def stub_client():
    """Stub client whose three prompts all succeed."""
    return StubModelClient(
        responses={
            INGREDIENTS_PROMPT: {"ingredients": ["spaghetti", "tomato", "basil", "parmesan"]},
            RECIPE_PROMPT: {
                "ingredients": ["spaghetti", "tomato", "basil", "parmesan", "garlic"],
                "instructions": ["Boil the pasta.", "Simmer tomatoes with garlic.", "Toss and top with basil."],
                "serving_suggestions": "Serve hot with grated parmesan and a green salad.",
            },
            FORMAT_PROMPT: {
                "format": "step-by-step",
                "formatted_recipe": "Ingredients: spaghetti, tomato, basil\n1. Boil the pasta.\n2. Simmer the sauce.",
            },
        }
    )
