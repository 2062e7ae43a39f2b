"""Prompt templates for the three Recipe Vision model calls.

Each prompt is a PromptTemplate: a name, a template with ``{placeholder}``
fields filled from the prompt input, the input/output schemas, the input
field holding the photo, and per-prompt model configuration. Factory
functions read config at call time so environment overrides apply.
"""

from dataclasses import dataclass, field
from typing import Optional, Type

from pydantic import BaseModel

from recipe_vision.models.models import (
    FormatSelectionInput,
    FormatSelectionOutput,
    IngredientExtractionInput,
    IngredientExtractionOutput,
    RecipeDraft,
    RecipeGenerationInput,
)
from recipe_vision.utils.config import config


@dataclass(frozen=True)
class PromptTemplate:
    """A named structured prompt with its input and output contracts."""

    name: str
    template: str
    input_schema: Type[BaseModel]
    output_schema: Type[BaseModel]
    media_field: str = "photo"
    model: Optional[str] = None
    safety_settings: dict[str, str] = field(default_factory=dict)

    def render(self, prompt_input: BaseModel) -> str:
        """Fill the template placeholders from the input's non-media fields."""
        values = prompt_input.model_dump(exclude={self.media_field})
        return self.template.format(**values)


INGREDIENT_EXTRACTION_TEMPLATE = """You are an AI assistant specialized in identifying ingredients from food images.
Analyze the provided image and extract a list of potential ingredients.
Return the ingredients as a JSON object with an "ingredients" array of strings, one ingredient per entry.
"""

RECIPE_GENERATION_TEMPLATE = """You are an expert chef who can generate recipes from images of dishes.

Analyze the attached image and generate a recipe, including ingredients, instructions, and serving suggestions.

Return a JSON object with:
- "ingredients": array of strings
- "instructions": array of strings, one step per entry, in cooking order
- "serving_suggestions": a short paragraph of serving suggestions
"""

FORMAT_SELECTION_TEMPLATE = """You are an AI expert in recipe formatting. Given a dish and its generated recipe content, you will determine the most appropriate format for the recipe.

You can select between two formats:
- list: A simple list of ingredients and a paragraph of instructions.
- step-by-step: A detailed step-by-step guide with ingredients listed at the beginning.

Consider the attached photo, the ingredients and the instructions when making your decision. For example, if the instructions are very detailed, a step-by-step format would be more appropriate.

Ingredients:
{ingredients}

Instructions:
{instructions}

Choose the best format and then format the recipe accordingly. Use line breaks to separate paragraphs.

Output in JSON format with "format" ("list" or "step-by-step") and "formatted_recipe".
"""


def get_ingredient_extraction_prompt() -> PromptTemplate:
    """Prompt for candidate ingredients in a photo; carries the configured safety thresholds."""
    return PromptTemplate(
        name="confirmIngredientsPrompt",
        template=INGREDIENT_EXTRACTION_TEMPLATE,
        input_schema=IngredientExtractionInput,
        output_schema=IngredientExtractionOutput,
        model=config.IMAGE_DETECTION_MODEL,
        safety_settings=config.safety_settings,
    )


def get_recipe_generation_prompt() -> PromptTemplate:
    return PromptTemplate(
        name="generateRecipeFromImagePrompt",
        template=RECIPE_GENERATION_TEMPLATE,
        input_schema=RecipeGenerationInput,
        output_schema=RecipeDraft,
        model=config.GEMINI_MODEL,
    )


def get_format_selection_prompt() -> PromptTemplate:
    return PromptTemplate(
        name="selectRecipeFormatPrompt",
        template=FORMAT_SELECTION_TEMPLATE,
        input_schema=FormatSelectionInput,
        output_schema=FormatSelectionOutput,
        model=config.GEMINI_MODEL,
    )
