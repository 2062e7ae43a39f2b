"""Data models and schemas for Recipe Vision.

Defines Pydantic models for the three prompt boundaries (input/output of
ingredient extraction, recipe generation and format selection), the final
recipe, and the result shapes returned by the action layer and HTTP API.
All models use Pydantic v2 for strict validation and JSON schema generation.
"""

from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


RecipeFormat = Literal["list", "step-by-step"]


def _clean_strings(values: List[str]) -> List[str]:
    """Strip entries and drop empty ones, preserving order."""
    return [value.strip() for value in values if isinstance(value, str) and value.strip()]


class ImageInput(BaseModel):
    """A decoded, validated image ready to be attached to a prompt.

    Built from a data URI by ``recipe_vision.flows.images.parse_image_data_uri``;
    ``mime_type`` is the type detected from the image's magic bytes.
    """

    model_config = ConfigDict(frozen=True)

    mime_type: Annotated[str, Field(pattern=r"^image/[\w.+-]+$", description="Detected image MIME type")]
    data: Annotated[bytes, Field(min_length=1, repr=False, description="Raw image bytes")]

    @property
    def size_kb(self) -> float:
        return len(self.data) / 1024


# ============================================================================
# Prompt boundary schemas
# ============================================================================


class IngredientExtractionInput(BaseModel):
    """Input for the ingredient extraction prompt."""

    photo: ImageInput


class IngredientExtractionOutput(BaseModel):
    """Candidate ingredients identified in the photo of a dish."""

    ingredients: Annotated[
        List[str], Field(description="A list of potential ingredients identified in the image.")
    ]

    @field_validator("ingredients", mode="after")
    @classmethod
    def clean_ingredients(cls, v: List[str]) -> List[str]:
        return _clean_strings(v)


class RecipeGenerationInput(BaseModel):
    """Input for the recipe generation prompt."""

    photo: ImageInput


class RecipeDraft(BaseModel):
    """Intermediate recipe produced from the photo alone.

    ``instructions`` and ``serving_suggestions`` default to empty so that a
    response missing them still parses; the action layer reports that case as
    an incomplete generation instead of a schema failure.
    """

    ingredients: Annotated[
        List[str], Field(default_factory=list, description="A list of ingredients for the recipe.")
    ]
    instructions: Annotated[
        List[str], Field(default_factory=list, description="A list of instructions for the recipe.")
    ]
    serving_suggestions: Annotated[str, Field("", description="Serving suggestions for the recipe.")]

    @field_validator("ingredients", "instructions", mode="after")
    @classmethod
    def clean_lists(cls, v: List[str]) -> List[str]:
        return _clean_strings(v)

    @field_validator("serving_suggestions", mode="after")
    @classmethod
    def strip_suggestions(cls, v: str) -> str:
        return v.strip()

    @property
    def is_complete(self) -> bool:
        return bool(self.instructions) and bool(self.serving_suggestions)


class FormatSelectionInput(BaseModel):
    """Input for the format selection prompt.

    Ingredients and instructions are newline-separated text blocks.
    """

    photo: ImageInput
    ingredients: Annotated[str, Field(min_length=1, description="A list of ingredients for the recipe.")]
    instructions: Annotated[str, Field(min_length=1, description="The generated instructions for the recipe.")]


class FormatSelectionOutput(BaseModel):
    """Presentation format chosen by the model and the recipe rendered in it."""

    format: Annotated[RecipeFormat, Field(description="The selected recipe format.")]
    formatted_recipe: Annotated[
        str,
        Field(min_length=1, description="The recipe formatted according to the selected format."),
    ]

    @field_validator("formatted_recipe", mode="before")
    @classmethod
    def strip_recipe(cls, v):
        return v.strip() if isinstance(v, str) else v


# ============================================================================
# Results returned to callers
# ============================================================================


class RecipeResult(BaseModel):
    """Final recipe shown to the user.

    ``formatted_recipe`` may contain line breaks meant to render as paragraph breaks.
    ``serving_suggestions`` is carried over verbatim from the recipe draft.
    """

    model_config = ConfigDict(populate_by_name=True)

    formatted_recipe: Annotated[str, Field(min_length=1, alias="formattedRecipe")]
    serving_suggestions: Annotated[str, Field(min_length=1, alias="servingSuggestions")]

    @property
    def paragraphs(self) -> List[str]:
        """Non-empty lines of the formatted recipe, one per paragraph."""
        return _clean_strings(self.formatted_recipe.splitlines())


class IngredientsResult(BaseModel):
    """Result of the ingredient extraction action: exactly one of ingredients or error."""

    ingredients: Optional[List[str]] = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def exactly_one_field(self) -> "IngredientsResult":
        if (self.ingredients is None) == (self.error is None):
            raise ValueError("Exactly one of 'ingredients' or 'error' must be set")
        return self


class RecipeActionResult(BaseModel):
    """Result of the recipe generation action: exactly one of recipe or error."""

    recipe: Optional[RecipeResult] = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def exactly_one_field(self) -> "RecipeActionResult":
        if (self.recipe is None) == (self.error is None):
            raise ValueError("Exactly one of 'recipe' or 'error' must be set")
        return self


# ============================================================================
# HTTP request bodies
# ============================================================================


class IngredientsRequest(BaseModel):
    """Request body for POST /api/ingredients."""

    model_config = ConfigDict(str_strip_whitespace=True)

    image: Annotated[str, Field(min_length=1, description="Photo of a dish as data:<mime>;base64,<data>")]


class RecipeRequest(BaseModel):
    """Request body for POST /api/recipe."""

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    image: Annotated[str, Field(min_length=1, description="Photo of a dish as data:<mime>;base64,<data>")]
    confirmed_ingredients: Annotated[
        List[str],
        Field(
            alias="confirmedIngredients",
            min_length=1,
            max_length=100,
            description="Ingredients the user confirmed (1-100 items)",
        ),
    ]
