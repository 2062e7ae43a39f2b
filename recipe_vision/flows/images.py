"""Image input handling for Recipe Vision.

Turns the data URI picked by the user into a validated ImageInput and
prepares its bytes for transmission to the model:

- parse_image_data_uri(): data URI -> ImageInput, raising ImageFormatError
- validate_image_format(): magic-byte check (filetype)
- validate_image_size(): MAX_IMAGE_SIZE_MB limit
- compress_image(): Pillow JPEG re-encode for large images
- prepare_image_for_model(): bytes and MIME type to attach to a prompt

Every check here runs locally, before any model call.
"""

import base64
import binascii
import re
from io import BytesIO
from typing import Optional

import filetype
from PIL import Image

from recipe_vision.models.errors import ImageFormatError, UnsupportedImageTypeError
from recipe_vision.models.models import ImageInput
from recipe_vision.utils.config import config
from recipe_vision.utils.logger import logger

# MIME types accepted inline by the Gemini vision models
SUPPORTED_IMAGE_MIME_TYPES = (
    "image/jpeg",
    "image/png",
    "image/webp",
    "image/heic",
    "image/heif",
)

_DATA_URI_PATTERN = re.compile(
    r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)(?:;[^;,]*)*?;base64,(?P<data>.*)$",
    re.DOTALL,
)


def detect_image_mime(image_bytes: bytes) -> Optional[str]:
    """Return the MIME type identified by the image's magic bytes, or None."""
    kind = filetype.guess(image_bytes)
    return kind.mime if kind is not None else None


def validate_image_format(image_bytes: bytes) -> bool:
    """Validate that the bytes are an image type the model accepts.

    Uses filetype to detect the actual format from magic bytes, not from the
    MIME type declared in the data URI.

    Args:
        image_bytes: Raw image bytes.

    Returns:
        True if valid format, False otherwise.
    """
    mime = detect_image_mime(image_bytes)
    if mime not in SUPPORTED_IMAGE_MIME_TYPES:
        logger.warning(f"Invalid image format: {mime}. Supported: {', '.join(SUPPORTED_IMAGE_MIME_TYPES)}")
        return False
    return True


def validate_image_size(image_bytes: bytes) -> bool:
    """Validate image size against MAX_IMAGE_SIZE_MB.

    Args:
        image_bytes: Raw image bytes.

    Returns:
        True if size valid, False if exceeds limit.
    """
    size_mb = len(image_bytes) / (1024 * 1024)
    if size_mb > config.MAX_IMAGE_SIZE_MB:
        logger.warning(f"Image size {size_mb:.2f}MB exceeds limit of {config.MAX_IMAGE_SIZE_MB}MB")
        return False
    return True


def parse_image_data_uri(data_uri: str) -> ImageInput:
    """Parse and validate a ``data:<mime>;base64,<data>`` image.

    Args:
        data_uri: Image as selected in the browser (FileReader.readAsDataURL output).

    Returns:
        ImageInput with the decoded bytes and the MIME type detected from them.

    Raises:
        ImageFormatError: If the string is not a base64 data URI, declares a
            non-image MIME type, does not decode, is too large, or its bytes
            are not an image.
        UnsupportedImageTypeError: If it is an image the model does not
            accept (declared or detected type outside the allow-list).
    """
    if not isinstance(data_uri, str) or not data_uri.startswith("data:"):
        raise ImageFormatError("Image must be a data URI starting with 'data:'")

    match = _DATA_URI_PATTERN.match(data_uri)
    if match is None:
        raise ImageFormatError("Image data URI must be base64-encoded with a MIME type")

    declared_mime = match.group("mime").lower()
    if not declared_mime.startswith("image/"):
        raise ImageFormatError(f"Not an image: {declared_mime}")
    if declared_mime not in SUPPORTED_IMAGE_MIME_TYPES:
        raise UnsupportedImageTypeError(f"Unsupported image type: {declared_mime}")

    try:
        image_bytes = base64.b64decode("".join(match.group("data").split()), validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImageFormatError(f"Image data is not valid base64: {e}") from e

    if not image_bytes:
        raise ImageFormatError("Image data is empty")

    if not validate_image_size(image_bytes):
        raise ImageFormatError(f"Image too large. Maximum size is {config.MAX_IMAGE_SIZE_MB}MB")

    if not validate_image_format(image_bytes):
        detected_mime = detect_image_mime(image_bytes)
        if detected_mime and detected_mime.startswith("image/"):
            raise UnsupportedImageTypeError(f"Unsupported image type: {detected_mime} (declared {declared_mime})")
        raise ImageFormatError(f"Image content is not a supported image (declared {declared_mime})")

    detected_mime = detect_image_mime(image_bytes)
    if detected_mime != declared_mime:
        logger.debug(f"Declared MIME type {declared_mime} differs from detected {detected_mime}, using detected")

    return ImageInput(mime_type=detected_mime, data=image_bytes)


def compress_image(image_bytes: bytes, max_width: int = 1024) -> bytes:
    """Compress image for API transmission using Pillow.

    Uses JPEG format with quality=85 + optimize + progressive.
    Resizes oversized images and converts color modes to RGB.
    Only compresses if image size is above COMPRESS_IMG_THRESHOLD_KB.

    Args:
        image_bytes: Raw image bytes to compress
        max_width: Maximum image width in pixels

    Returns:
        Compressed JPEG bytes, or the original bytes if below the threshold or
        if Pillow cannot decode them.
    """
    size_kb = len(image_bytes) / 1024
    if size_kb < config.COMPRESS_IMG_THRESHOLD_KB:
        logger.debug(
            f"Image size {size_kb:.1f}KB below compression threshold "
            f"({config.COMPRESS_IMG_THRESHOLD_KB}KB), skipping compression"
        )
        return image_bytes

    try:
        img = Image.open(BytesIO(image_bytes))

        # Convert RGBA/LA/P to RGB for better compression
        if img.mode in ("RGBA", "LA", "P"):
            img = img.convert("RGBA")
            rgb_img = Image.new("RGB", img.size, (255, 255, 255))
            rgb_img.paste(img, mask=img.split()[-1])
            img = rgb_img
        elif img.mode != "RGB":
            img = img.convert("RGB")

        if img.width > max_width:
            ratio = max_width / img.width
            img = img.resize((max_width, int(img.height * ratio)), Image.Resampling.LANCZOS)

        output = BytesIO()
        img.save(output, format="JPEG", quality=85, optimize=True, progressive=True)
        compressed_bytes = output.getvalue()
    except (OSError, ValueError) as e:
        logger.warning(f"Image compression failed, sending original: {e}")
        return image_bytes

    logger.debug(
        f"Image compressed: {size_kb:.1f}KB → {len(compressed_bytes) / 1024:.1f}KB "
        f"({(1 - len(compressed_bytes) / len(image_bytes)) * 100:.1f}% reduction)"
    )
    return compressed_bytes


def prepare_image_for_model(image: ImageInput) -> tuple[bytes, str]:
    """Return the bytes and MIME type to attach to a prompt.

    Applies compression when COMPRESS_IMG is enabled; compressed output is JPEG.
    """
    if not config.COMPRESS_IMG:
        return image.data, image.mime_type

    compressed = compress_image(image.data)
    if compressed is image.data:
        return image.data, image.mime_type
    return compressed, "image/jpeg"
