"""
Core image editing operations for Pixel Edit.

This module provides the buffer-level crop and the decode/encode boundary
between raw image bytes and PixelBuffers.

Classes:
    ExportConfig: Encoder settings for "download"

Functions:
    crop_buffer: Copy a sub-rectangle into a new, smaller buffer
    decode_source: Decode raw image bytes into an RGBA PixelBuffer
    load_image_file: Read and decode an image file from disk
    is_supported_format: Check a path's extension against supported formats
    encode_frame: Encode a PixelBuffer for export
"""

import io
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from PE_Libs.constants import (
    DEFAULT_JPEG_QUALITY,
    DEFAULT_OUTPUT_FORMAT,
    EXPORT_FORMATS,
    SUPPORTED_STANDARD_IMAGES,
)
from PE_Libs.errors import DecodeError, EncodeError, InvalidCropGeometry
from PE_Libs.ImageEditingLib.image_models import PixelBuffer, Rect
from PE_Libs.pillow_compat import DecompressionBombError, Image, UnidentifiedImageError

logger = logging.getLogger(__name__)


def crop_buffer(buffer: PixelBuffer, rect: Rect) -> PixelBuffer:
    """
    Copy the region under rect into a new buffer.

    The rectangle is snapped to whole pixels by flooring x, y, width and
    height, so the result measures floor(width) x floor(height).

    Args:
        buffer: Buffer to crop
        rect: Region in the buffer's pixel space

    Returns:
        New PixelBuffer holding only the region

    Raises:
        InvalidCropGeometry: If the snapped region is empty or leaves the buffer
    """
    if not isinstance(buffer, PixelBuffer):
        raise TypeError(f"Expected PixelBuffer, got {type(buffer)}")

    x, y, width, height = rect.snapped()
    if width <= 0 or height <= 0:
        raise InvalidCropGeometry(f"Crop size must be positive, got {width}x{height}")
    if x < 0 or y < 0 or x + width > buffer.width or y + height > buffer.height:
        raise InvalidCropGeometry(
            f"Crop ({x}, {y}, {width}x{height}) outside {buffer.width}x{buffer.height} buffer"
        )

    pixels = buffer.to_array()
    return PixelBuffer.from_array(pixels[y:y + height, x:x + width].copy())


def decode_source(raw_bytes: bytes) -> Tuple[Optional[PixelBuffer], Optional[DecodeError]]:
    """
    Decode encoded image bytes into an RGBA buffer.

    Args:
        raw_bytes: Encoded image data (PNG, JPEG, ...)

    Returns:
        Tuple of (buffer, error); exactly one of the two is None
    """
    if not raw_bytes:
        return None, DecodeError("No image data provided")

    try:
        with Image.open(io.BytesIO(bytes(raw_bytes))) as image:
            image.load()
            buffer = PixelBuffer.from_image(image)
    except (
        UnidentifiedImageError,
        DecompressionBombError,
        OSError,
        SyntaxError,
        ValueError,
        TypeError,
    ) as exc:
        logger.debug(f"Decode failed: {exc}")
        return None, DecodeError(f"Failed to decode image: {exc}")

    if buffer.width == 0 or buffer.height == 0:
        return None, DecodeError("Decoded image has no pixels")

    logger.debug(f"Decoded {buffer.width}x{buffer.height} image")
    return buffer, None


def is_supported_format(file_path: Path) -> bool:
    """
    Check if a file path has a supported image extension.

    Args:
        file_path: Path to the file

    Returns:
        True if the extension is supported
    """
    return Path(file_path).suffix.lower() in SUPPORTED_STANDARD_IMAGES


def load_image_file(file_path: Path) -> Tuple[Optional[PixelBuffer], Optional[DecodeError]]:
    """
    Read and decode an image file.

    Args:
        file_path: Path to an image with a supported extension

    Returns:
        Tuple of (buffer, error); exactly one of the two is None
    """
    file_path = Path(file_path)

    if not is_supported_format(file_path):
        return None, DecodeError(f"Unsupported image format: {file_path.suffix or file_path.name}")

    try:
        raw_bytes = file_path.read_bytes()
    except OSError as exc:
        return None, DecodeError(f"Could not read {file_path}: {exc}")

    return decode_source(raw_bytes)


@dataclass
class ExportConfig:
    """Encoder settings for export.

    Attributes:
        save_format: Image format (PNG, JPEG/JPG, BMP, WEBP, default: PNG)
        quality: JPEG/WEBP quality 1-100 (default: 95)
    """
    save_format: str = DEFAULT_OUTPUT_FORMAT
    quality: int = DEFAULT_JPEG_QUALITY

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExportConfig":
        """Create from dictionary."""
        filtered = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**filtered)

    def normalized_format(self) -> str:
        # PIL uses "JPEG" not "JPG"
        save_format = str(self.save_format).upper()
        if save_format == "JPG":
            save_format = "JPEG"
        return save_format

    def get_save_kwargs(self) -> Dict[str, Any]:
        """Get PIL Image.save() kwargs based on format."""
        save_format = self.normalized_format()
        kwargs: Dict[str, Any] = {"format": save_format}

        if save_format in ("JPEG", "WEBP"):
            kwargs["quality"] = max(1, min(100, int(self.quality)))

        return kwargs


def encode_frame(
    buffer: PixelBuffer,
    config: Optional[ExportConfig] = None,
) -> Tuple[Optional[bytes], Optional[EncodeError]]:
    """
    Encode a buffer for download.

    Args:
        buffer: Rendered frame
        config: Encoder settings (default: PNG)

    Returns:
        Tuple of (encoded_bytes, error); exactly one of the two is None
    """
    config = config or ExportConfig()
    save_format = config.normalized_format()

    if save_format not in EXPORT_FORMATS:
        return None, EncodeError(
            f"Unsupported export format: {config.save_format}. "
            f"Valid formats: {', '.join(EXPORT_FORMATS)}"
        )

    if buffer.width == 0 or buffer.height == 0:
        return None, EncodeError("Cannot export an empty image")

    image = buffer.to_image()
    if save_format in ("JPEG", "BMP"):
        # No alpha channel in these formats
        image = image.convert("RGB")

    stream = io.BytesIO()
    try:
        image.save(stream, **config.get_save_kwargs())
    except (OSError, ValueError, KeyError) as exc:
        return None, EncodeError(f"Failed to encode {save_format}: {exc}")

    logger.info(f"Exported {buffer.width}x{buffer.height} frame as {save_format}")
    return stream.getvalue(), None
