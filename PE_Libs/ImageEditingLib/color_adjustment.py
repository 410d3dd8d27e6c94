"""
Brightness, contrast and saturation adjustment.

All three controls are applied in one vectorised pass over the RGB channels;
alpha is copied through untouched. The stage always reads from the captured
filter base so repeated slider movement never compounds rounding error.

Example:
    >>> adjusted = apply_color_adjustment(base, brightness=20, contrast=10, saturation=120)
"""

from typing import Optional, Tuple

import numpy as np

from PE_Libs.constants import (
    BRIGHTNESS_RANGE,
    CONTRAST_RANGE,
    SATURATION_LUMA_WEIGHTS,
    SATURATION_RANGE,
)
from PE_Libs.errors import DimensionMismatchError
from PE_Libs.ImageEditingLib.image_models import PixelBuffer


def contrast_factor(contrast: float) -> float:
    """
    Scale factor of the 259/255 contrast curve.

    Args:
        contrast: Contrast amount; 0 yields exactly 1.0

    Raises:
        ValueError: If contrast is outside the supported range (the curve
                    diverges at 259 and inverts below -255)
    """
    low, high = CONTRAST_RANGE
    if not (low <= contrast <= high):
        raise ValueError(f"contrast must be {low}..{high}, got {contrast}")
    return (259.0 * (contrast + 255.0)) / (255.0 * (259.0 - contrast))


def _check_range(name: str, value: float, bounds: Tuple[int, int]) -> None:
    low, high = bounds
    if not (low <= value <= high):
        raise ValueError(f"{name} must be {low}..{high}, got {value}")


def adjust_rgb(
    rgb: np.ndarray,
    brightness: float,
    contrast: float,
    saturation: float,
) -> np.ndarray:
    """
    Apply brightness, contrast and saturation to a float RGB array.

    Works on any array whose last axis holds R, G, B. Values are left
    unclamped so callers can inspect the intermediate result.
    """
    values = rgb.astype(np.float64) + brightness

    factor = contrast_factor(contrast)
    values = factor * (values - 128.0) + 128.0

    # Gray is taken from the contrast-adjusted channels
    wr, wg, wb = SATURATION_LUMA_WEIGHTS
    gray = wr * values[..., 0] + wg * values[..., 1] + wb * values[..., 2]
    gray = gray[..., np.newaxis]
    return gray + (saturation / 100.0) * (values - gray)


def apply_color_adjustment(
    original: PixelBuffer,
    brightness: int = 0,
    contrast: int = 0,
    saturation: int = 100,
    reference_size: Optional[Tuple[int, int]] = None,
) -> PixelBuffer:
    """
    Return a new buffer with brightness, contrast and saturation applied.

    Args:
        original: Filter base buffer
        brightness: Additive offset (-100..100)
        contrast: Contrast amount (-100..100), 0 is a no-op
        saturation: Percentage (0..200), 100 is identity, 0 is full gray
        reference_size: Size of the cached filter base, if the caller keeps one

    Returns:
        New PixelBuffer, same dimensions as original

    Raises:
        ValueError: If a parameter is out of range
        DimensionMismatchError: If reference_size differs from original.size
    """
    if not isinstance(original, PixelBuffer):
        raise TypeError(f"Expected PixelBuffer, got {type(original)}")

    _check_range("brightness", brightness, BRIGHTNESS_RANGE)
    _check_range("contrast", contrast, CONTRAST_RANGE)
    _check_range("saturation", saturation, SATURATION_RANGE)

    if reference_size is not None and tuple(reference_size) != original.size:
        raise DimensionMismatchError(reference_size, original.size)

    if brightness == 0 and contrast == 0 and saturation == 100:
        return original

    pixels = original.to_array()
    adjusted = adjust_rgb(pixels[..., :3], brightness, contrast, saturation)
    pixels[..., :3] = np.rint(np.clip(adjusted, 0, 255)).astype(np.uint8)
    return PixelBuffer.from_array(pixels)
