"""Exception hierarchy for Recipe Vision.

Local validation errors (image format, session preconditions) are raised
before any model call. Remote failures are wrapped in ModelInvocationError.
The action layer maps every one of these to a fixed user-facing message.
"""


class RecipeVisionError(Exception):
    """Base class for all Recipe Vision errors."""


class ImageFormatError(RecipeVisionError):
    """Input is not a supported image data URI."""


class UnsupportedImageTypeError(ImageFormatError):
    """Input is an image, but of a type the model does not accept (e.g. GIF)."""


class ModelInvocationError(RecipeVisionError):
    """The hosted model call failed, timed out, or returned unusable output."""

    def __init__(self, message: str, prompt: str | None = None) -> None:
        super().__init__(message)
        self.prompt = prompt


class SchemaValidationError(ModelInvocationError):
    """Prompt input or model output does not match the declared schema."""


class IncompleteGenerationError(RecipeVisionError):
    """Recipe generation succeeded but instructions or serving suggestions are empty."""


class SessionStateError(RecipeVisionError):
    """Session operation not allowed in the current state."""


class RequestInFlightError(SessionStateError):
    """A model call for this session is still pending."""


class PreconditionError(SessionStateError):
    """Recipe generation requested without an image or confirmed ingredients."""


class InvalidTransitionError(SessionStateError):
    """Operation is not valid for the session's current step."""
