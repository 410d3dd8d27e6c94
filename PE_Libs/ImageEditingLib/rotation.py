"""
Cardinal rotation (0/90/180/270 degrees clockwise).

Rotations are axis-aligned index permutations, so they are lossless and
four quarter turns return the exact original pixels.
"""

from typing import Tuple

import numpy as np

from PE_Libs.constants import ROTATION_ANGLES
from PE_Libs.ImageEditingLib.image_models import PixelBuffer, Rect

# Clockwise degrees -> np.rot90 k (positive k is counter-clockwise)
_ROT90_STEPS = {0: 0, 90: -1, 180: 2, 270: 1}


def normalize_rotation(degrees: int) -> int:
    """
    Validate a rotation angle.

    Raises:
        ValueError: If degrees is not one of 0, 90, 180, 270
    """
    if degrees not in ROTATION_ANGLES:
        raise ValueError(f"rotation must be one of {ROTATION_ANGLES}, got {degrees}")
    return int(degrees)


def rotated_size(width: int, height: int, degrees: int) -> Tuple[int, int]:
    """Buffer size after rotation."""
    if normalize_rotation(degrees) in (90, 270):
        return height, width
    return width, height


def step_rotation(degrees: int, quarter_turns: int) -> int:
    """Add clockwise quarter turns to an angle, wrapping at 360."""
    return (normalize_rotation(degrees) + 90 * quarter_turns) % 360


def apply_rotation(buffer: PixelBuffer, degrees: int = 0) -> PixelBuffer:
    """
    Rotate a buffer clockwise about its center.

    Args:
        buffer: Source buffer
        degrees: 0, 90, 180 or 270

    Returns:
        New PixelBuffer; width and height swap for 90 and 270
    """
    if not isinstance(buffer, PixelBuffer):
        raise TypeError(f"Expected PixelBuffer, got {type(buffer)}")

    degrees = normalize_rotation(degrees)
    if degrees == 0:
        return buffer

    rotated = np.rot90(buffer.to_array(), k=_ROT90_STEPS[degrees], axes=(0, 1))
    return PixelBuffer.from_array(np.ascontiguousarray(rotated))


def map_rect_to_unrotated(rect: Rect, degrees: int, width: int, height: int) -> Rect:
    """
    Map a rectangle from rotated space back to the unrotated buffer.

    Args:
        rect: Rectangle in the rotated buffer's pixel space
        degrees: Clockwise rotation that produced the rotated buffer
        width: Width of the rotated buffer
        height: Height of the rotated buffer

    Returns:
        The same region expressed in the unrotated buffer's pixel space
    """
    degrees = normalize_rotation(degrees)
    if degrees == 0:
        return rect

    if degrees == 90:
        # Unrotated height equals the rotated width
        return Rect(rect.y, width - rect.right, rect.height, rect.width)

    if degrees == 180:
        return Rect(width - rect.right, height - rect.bottom, rect.width, rect.height)

    # 270: unrotated width equals the rotated height
    return Rect(height - rect.bottom, rect.x, rect.height, rect.width)
