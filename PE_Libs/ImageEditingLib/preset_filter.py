"""
Preset stylistic filters.

Provides the named one-click looks:
- grayscale: Luma-weighted gray
- sepia: Classic brown tone matrix
- vintage: Sepia with lifted, flattened tones
- cool / warm: Per-channel gain toward blue or red
- hdr: Saturation boost around luma followed by a smoothstep S-curve

Every filter reads R, G, B as produced by the color adjustment stage,
clamps its output to [0, 255] and leaves alpha untouched.

Example:
    >>> sepia = apply_preset_filter(buffer, "sepia")
"""

from typing import Callable, Dict

import numpy as np

from PE_Libs.constants import (
    FILTER_COOL,
    FILTER_GRAYSCALE,
    FILTER_HDR,
    FILTER_NAMES,
    FILTER_NONE,
    FILTER_SEPIA,
    FILTER_VINTAGE,
    FILTER_WARM,
    HDR_SATURATION_BOOST,
    PRESET_LUMA_WEIGHTS,
)
from PE_Libs.ImageEditingLib.image_models import PixelBuffer

RgbTransform = Callable[[np.ndarray, np.ndarray, np.ndarray], np.ndarray]

SEPIA_MATRIX = np.array(
    [
        [0.393, 0.769, 0.189],
        [0.349, 0.686, 0.168],
        [0.272, 0.534, 0.131],
    ]
)


def _luma(r: np.ndarray, g: np.ndarray, b: np.ndarray) -> np.ndarray:
    wr, wg, wb = PRESET_LUMA_WEIGHTS
    return wr * r + wg * g + wb * b


def _grayscale(r, g, b):
    gray = _luma(r, g, b)
    return np.stack([gray, gray, gray], axis=-1)


def _sepia(r, g, b):
    rgb = np.stack([r, g, b], axis=-1)
    return np.minimum(255.0, rgb @ SEPIA_MATRIX.T)


def _vintage(r, g, b):
    toned = _sepia(r, g, b)
    lift = np.array([20.0, 20.0, 10.0])
    return np.minimum(255.0, toned * 0.9 + lift)


def _cool(r, g, b):
    return np.stack([r * 0.8, g * 0.95, np.minimum(255.0, b * 1.2)], axis=-1)


def _warm(r, g, b):
    return np.stack(
        [np.minimum(255.0, r * 1.15), np.minimum(255.0, g * 1.05), b * 0.85],
        axis=-1,
    )


def smoothstep_curve(values: np.ndarray) -> np.ndarray:
    """S-curve f(x) = 3x^2 - 2x^3 on values normalised to [0, 1]."""
    x = np.clip(values / 255.0, 0.0, 1.0)
    return (3.0 * x * x - 2.0 * x * x * x) * 255.0


def _hdr(r, g, b):
    lum = _luma(r, g, b)[..., np.newaxis]
    rgb = np.stack([r, g, b], axis=-1)
    boosted = lum + (rgb - lum) * HDR_SATURATION_BOOST
    return smoothstep_curve(boosted)


PRESET_TRANSFORMS: Dict[str, RgbTransform] = {
    FILTER_GRAYSCALE: _grayscale,
    FILTER_SEPIA: _sepia,
    FILTER_VINTAGE: _vintage,
    FILTER_COOL: _cool,
    FILTER_WARM: _warm,
    FILTER_HDR: _hdr,
}


def normalize_filter_name(name: str) -> str:
    """
    Lower-case and validate a filter name.

    Raises:
        ValueError: If the name is not a known preset
    """
    normalized = str(name).strip().lower()
    if normalized not in FILTER_NAMES:
        raise ValueError(
            f"Unknown filter: {name}. Valid filters: {', '.join(FILTER_NAMES)}"
        )
    return normalized


def apply_preset_filter(buffer: PixelBuffer, name: str = FILTER_NONE) -> PixelBuffer:
    """
    Apply a named preset filter.

    Args:
        buffer: Color-adjusted buffer
        name: One of FILTER_NAMES (case-insensitive); 'none' passes through

    Returns:
        New PixelBuffer with the filter applied

    Raises:
        ValueError: If name is not a known preset
        TypeError: If buffer is not a PixelBuffer
    """
    if not isinstance(buffer, PixelBuffer):
        raise TypeError(f"Expected PixelBuffer, got {type(buffer)}")

    name = normalize_filter_name(name)
    if name == FILTER_NONE:
        return buffer

    pixels = buffer.to_array()
    rgb = pixels[..., :3].astype(np.float64)
    transformed = PRESET_TRANSFORMS[name](rgb[..., 0], rgb[..., 1], rgb[..., 2])
    pixels[..., :3] = np.rint(np.clip(transformed, 0, 255)).astype(np.uint8)
    return PixelBuffer.from_array(pixels)
