"""
Image validation and normalization utilities.

Uploads are decoded with Pillow, shrunk to fit inside a bounded square
(never enlarged) and re-encoded as JPEG before being sent upstream.
"""
import base64
import logging
from dataclasses import dataclass
from io import BytesIO
from typing import Optional, Sequence

from PIL import Image, UnidentifiedImageError

from plantcare.config import settings

logger = logging.getLogger(__name__)

NORMALIZED_MIME_TYPE = "image/jpeg"


class ImageValidationError(ValueError):
    """Raised when an upload is missing, unsupported or unreadable."""
    pass


class ImageTooLargeError(ImageValidationError):
    """Raised when an upload exceeds the configured size limit."""
    pass


@dataclass(frozen=True)
class NormalizedImage:
    """A resized, re-encoded image ready for the identification API."""
    mime_type: str
    data: bytes
    width: int
    height: int

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    def to_data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.to_base64()}"


def validate_upload(
    image_bytes: Optional[bytes],
    content_type: Optional[str],
    allowed_types: Optional[Sequence[str]] = None,
    max_size: Optional[int] = None,
) -> None:
    """
    Check an upload before decoding it.

    Args:
        image_bytes: Raw upload content
        content_type: MIME type declared by the client
        allowed_types: Accepted MIME types (defaults to settings)
        max_size: Maximum size in bytes (defaults to settings)

    Raises:
        ImageValidationError: If the upload is empty or of an unsupported type
        ImageTooLargeError: If the upload exceeds the size limit
    """
    allowed_types = allowed_types or settings.allowed_image_types
    max_size = max_size or settings.max_upload_size_bytes

    if not image_bytes:
        raise ImageValidationError("No image file provided")

    if content_type not in allowed_types:
        raise ImageValidationError("Only JPG, PNG, and WEBP files are allowed")

    if len(image_bytes) > max_size:
        raise ImageTooLargeError(
            f"File size must be less than {max_size // (1024 * 1024)}MB"
        )


def normalize_image(
    image_bytes: bytes,
    max_dimension: Optional[int] = None,
    quality: Optional[int] = None,
) -> NormalizedImage:
    """
    Resize an image to fit inside a square and re-encode it as JPEG.

    Args:
        image_bytes: Raw image content
        max_dimension: Bounding square size in pixels (defaults to settings)
        quality: JPEG quality (defaults to settings)

    Returns:
        NormalizedImage with the JPEG bytes and final dimensions

    Raises:
        ImageValidationError: If the bytes cannot be decoded as an image
    """
    max_dimension = max_dimension or settings.image_max_dimension
    quality = quality or settings.image_jpeg_quality

    try:
        with Image.open(BytesIO(image_bytes)) as img:
            img.load()
            original_size = img.size
            rgb = img.convert("RGB")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise ImageValidationError("Invalid image file or corrupted data") from e

    # thumbnail() keeps aspect ratio and never enlarges
    rgb.thumbnail((max_dimension, max_dimension))

    buffer = BytesIO()
    rgb.save(buffer, format="JPEG", quality=quality)

    logger.debug(
        f"Normalized image {original_size[0]}x{original_size[1]} -> "
        f"{rgb.width}x{rgb.height} ({buffer.tell()} bytes)"
    )

    return NormalizedImage(
        mime_type=NORMALIZED_MIME_TYPE,
        data=buffer.getvalue(),
        width=rgb.width,
        height=rgb.height,
    )
