"""Session state machine for the upload -> confirm -> recipe flow.

One RecipeVisionSession holds one user's in-memory state:

    upload --(image selected, extraction succeeds)--> confirm
    upload --(extraction fails)--> upload             (error set)
    confirm --(toggle ingredient)--> confirm
    confirm --(generate, confirmed set non-empty)--> recipe   (optimistic)
    recipe --(generation fails)--> confirm            (rollback, error set)
    any --(start over)--> upload                      (full reset)

Local problems (not an image, missing preconditions, wrong step, a call
already in flight) raise.
Remote failures never raise: they revert to the previous stable step and
surface the action's message in ``error``.

Each model call is awaited in turn. ``start_over`` bumps the session epoch so
the result of a call still in flight is discarded when it arrives; the call
itself is not cancelled.
"""

import uuid
from enum import Enum
from typing import Optional

from recipe_vision.actions.actions import generate_recipe_action, get_ingredients_action
from recipe_vision.flows.images import parse_image_data_uri
from recipe_vision.models.errors import (
    ImageFormatError,
    InvalidTransitionError,
    PreconditionError,
    RequestInFlightError,
    UnsupportedImageTypeError,
)
from recipe_vision.models.models import RecipeResult
from recipe_vision.utils.logger import logger

IMAGE_FORMAT_ERROR = "Please upload an image file."
UNSUPPORTED_IMAGE_ERROR = "Unsupported image type. Please upload a JPEG, PNG, WEBP or HEIC photo."
PRECONDITION_ERROR = "Something went wrong. Please start over."


class Step(str, Enum):
    UPLOAD = "upload"
    CONFIRM = "confirm"
    RECIPE = "recipe"


class RecipeVisionSession:
    """In-memory state and transitions for one user's recipe session.

    Args:
        client: Model client handed to the actions; defaults to the process-wide one.
        session_id: Identifier used in log context. Generated when omitted.
    """

    def __init__(self, client=None, session_id: Optional[str] = None) -> None:
        self.session_id = session_id or uuid.uuid4().hex[:12]
        self._client = client
        self._epoch = 0
        self._reset()

    def _reset(self) -> None:
        self.step: Step = Step.UPLOAD
        self.image: Optional[str] = None
        self.ingredients: list[str] = []
        self.confirmed_ingredients: list[str] = []
        self.recipe: Optional[RecipeResult] = None
        self.error: Optional[str] = None
        self.pending: bool = False

    def _log(self, message: str) -> None:
        logger.info(message, extra={"session_id": self.session_id, "step": self.step.value})

    def _require_step(self, expected: Step, operation: str) -> None:
        if self.step is not expected:
            raise InvalidTransitionError(f"{operation} is only allowed in '{expected.value}', session is in '{self.step.value}'")

    def _require_idle(self, operation: str) -> None:
        if self.pending:
            raise RequestInFlightError(f"{operation} rejected: a model call is still pending")

    def _is_stale(self, epoch: int) -> bool:
        if epoch != self._epoch:
            logger.debug("Discarding result of abandoned call", extra={"session_id": self.session_id})
            return True
        return False

    async def select_image(self, photo_data_uri: str) -> None:
        """Upload step: validate the photo locally, then extract its ingredients.

        Raises:
            ImageFormatError: The input is not a supported image. No remote call
                is made and the session stays in ``upload``. Images of a type
                the model rejects raise UnsupportedImageTypeError and get their
                own message.
            InvalidTransitionError: Not in ``upload``.
            RequestInFlightError: An extraction for this session is still pending.
        """
        self._require_step(Step.UPLOAD, "select_image")
        self._require_idle("select_image")
        try:
            parse_image_data_uri(photo_data_uri)
        except UnsupportedImageTypeError:
            self.error = UNSUPPORTED_IMAGE_ERROR
            raise
        except ImageFormatError:
            self.error = IMAGE_FORMAT_ERROR
            raise

        self.error = None
        self.image = photo_data_uri
        self.pending = True
        epoch = self._epoch
        self._log("Extracting ingredients")

        result = await get_ingredients_action(photo_data_uri, client=self._client)
        if self._is_stale(epoch):
            return
        self.pending = False

        if result.error is not None:
            self.error = result.error
            self.step = Step.UPLOAD
            return

        self.ingredients = list(result.ingredients)
        self.confirmed_ingredients = list(result.ingredients)
        self.step = Step.CONFIRM
        self._log(f"{len(self.ingredients)} ingredients ready for confirmation")

    def toggle_ingredient(self, ingredient: str) -> None:
        """Confirm step: remove the ingredient if confirmed, otherwise add it."""
        self._require_step(Step.CONFIRM, "toggle_ingredient")
        if ingredient in self.confirmed_ingredients:
            self.confirmed_ingredients = [i for i in self.confirmed_ingredients if i != ingredient]
        else:
            self.confirmed_ingredients = [*self.confirmed_ingredients, ingredient]

    async def generate_recipe(self) -> None:
        """Confirm step: generate the recipe, moving to ``recipe`` optimistically.

        Raises:
            PreconditionError: No image or no confirmed ingredients. No remote call is made.
            InvalidTransitionError: Not in ``confirm``.
            RequestInFlightError: A generation for this session is still pending.
        """
        self._require_step(Step.CONFIRM, "generate_recipe")
        self._require_idle("generate_recipe")
        if not self.image or not self.confirmed_ingredients:
            self.error = PRECONDITION_ERROR
            raise PreconditionError("generate_recipe requires an image and at least one confirmed ingredient")

        self.error = None
        self.step = Step.RECIPE
        self.pending = True
        epoch = self._epoch
        self._log(f"Generating recipe with {len(self.confirmed_ingredients)} confirmed ingredients")

        result = await generate_recipe_action(self.image, self.confirmed_ingredients, client=self._client)
        if self._is_stale(epoch):
            return
        self.pending = False

        if result.error is not None:
            self.error = result.error
            self.step = Step.CONFIRM
            return

        self.recipe = result.recipe
        self._log("Recipe ready")

    def start_over(self) -> None:
        """Reset everything and return to ``upload``; abandons any call in flight."""
        self._epoch += 1
        self._reset()
        self._log("Session reset")
