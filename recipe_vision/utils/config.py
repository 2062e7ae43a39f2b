"""Configuration management for Recipe Vision.

Loads environment variables from system environment and .env file.
Priority order: system environment > .env file > hardcoded defaults
"""

import os

from dotenv import load_dotenv


# Load .env file (if exists, silently continues if missing)
load_dotenv()

SAFETY_THRESHOLDS = (
    "BLOCK_NONE",
    "BLOCK_ONLY_HIGH",
    "BLOCK_MEDIUM_AND_ABOVE",
    "BLOCK_LOW_AND_ABOVE",
    "OFF",
)


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self) -> None:
        """Initialize configuration from environment variables."""
        self.GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
        # Model used for recipe generation and format selection
        self.GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
        # Image Detection Model: model used for the ingredient extraction prompt
        self.IMAGE_DETECTION_MODEL: str = os.getenv("IMAGE_DETECTION_MODEL", "gemini-2.5-flash")
        # Server bind address and port
        self.HOST: str = os.getenv("HOST", "0.0.0.0")
        self.PORT: int = int(os.getenv("PORT", "7777"))
        # Maximum decoded image size (in MB) accepted from a data URI. Default: 10 MB
        self.MAX_IMAGE_SIZE_MB: int = int(os.getenv("MAX_IMAGE_SIZE_MB", "10"))
        # Image Compression: re-encode large images as JPEG before sending them to the model
        self.COMPRESS_IMG: bool = os.getenv("COMPRESS_IMG", "true").lower() in ("true", "1", "yes")
        # Only compress images above this size (in KB)
        self.COMPRESS_IMG_THRESHOLD_KB: int = int(os.getenv("COMPRESS_IMG_THRESHOLD_KB", "300"))
        # LLM Model Parameters
        # Temperature: 0.0 = deterministic, 1.0 = max randomness
        self.TEMPERATURE: float = float(os.getenv("TEMPERATURE", "0.4"))
        # Max Output Tokens: a full formatted recipe fits comfortably in 2048
        self.MAX_OUTPUT_TOKENS: int = int(os.getenv("MAX_OUTPUT_TOKENS", "2048"))
        # Upper bound (seconds) for a single model call. No retries are made after a timeout.
        self.MODEL_TIMEOUT_SECONDS: float = float(os.getenv("MODEL_TIMEOUT_SECONDS", "60"))

        # Safety thresholds for the ingredient extraction prompt, one per harm category
        self.SAFETY_HATE_SPEECH: str = os.getenv("SAFETY_HATE_SPEECH", "BLOCK_ONLY_HIGH")
        self.SAFETY_DANGEROUS_CONTENT: str = os.getenv("SAFETY_DANGEROUS_CONTENT", "BLOCK_NONE")
        self.SAFETY_HARASSMENT: str = os.getenv("SAFETY_HARASSMENT", "BLOCK_MEDIUM_AND_ABOVE")
        self.SAFETY_SEXUALLY_EXPLICIT: str = os.getenv("SAFETY_SEXUALLY_EXPLICIT", "BLOCK_LOW_AND_ABOVE")

    @property
    def safety_settings(self) -> dict[str, str]:
        """Harm category -> threshold mapping passed through to the model provider."""
        return {
            "HARM_CATEGORY_HATE_SPEECH": self.SAFETY_HATE_SPEECH,
            "HARM_CATEGORY_DANGEROUS_CONTENT": self.SAFETY_DANGEROUS_CONTENT,
            "HARM_CATEGORY_HARASSMENT": self.SAFETY_HARASSMENT,
            "HARM_CATEGORY_SEXUALLY_EXPLICIT": self.SAFETY_SEXUALLY_EXPLICIT,
        }

    def validate(self) -> None:
        """Validate required configuration.

        Raises:
            ValueError: If the API key is missing or invalid values are provided.
        """
        if not self.GEMINI_API_KEY:
            raise ValueError("GEMINI_API_KEY environment variable is required")
        if not (0.0 <= self.TEMPERATURE <= 1.0):
            raise ValueError(
                f"TEMPERATURE must be between 0.0 and 1.0, got: {self.TEMPERATURE}"
            )
        if self.MAX_OUTPUT_TOKENS < 512:
            raise ValueError(
                f"MAX_OUTPUT_TOKENS must be at least 512, got: {self.MAX_OUTPUT_TOKENS}"
            )
        if self.MODEL_TIMEOUT_SECONDS <= 0:
            raise ValueError(
                f"MODEL_TIMEOUT_SECONDS must be positive, got: {self.MODEL_TIMEOUT_SECONDS}"
            )
        if self.MAX_IMAGE_SIZE_MB < 1:
            raise ValueError(
                f"MAX_IMAGE_SIZE_MB must be at least 1, got: {self.MAX_IMAGE_SIZE_MB}"
            )
        for category, threshold in self.safety_settings.items():
            if threshold not in SAFETY_THRESHOLDS:
                raise ValueError(
                    f"Safety threshold for {category} must be one of {', '.join(SAFETY_THRESHOLDS)}, got: {threshold}"
                )


# Create module-level config instance and validate immediately
config = Config()
config.validate()
