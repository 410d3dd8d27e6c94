"""
Gaussian blur stage.

The blur slider runs 0-100; the effective Gaussian radius is a tenth of
that in device pixels, so 100 gives a 10 px blur. Pillow's separable
Gaussian does the work.

Example:
    >>> blurred = apply_blur(buffer, 40)   # ~4 px Gaussian
"""

from PE_Libs.constants import BLUR_RADIUS_DIVISOR, BLUR_RANGE
from PE_Libs.ImageEditingLib.image_models import PixelBuffer
from PE_Libs.pillow_compat import ImageFilter


def blur_radius_pixels(amount: float) -> float:
    """Gaussian radius in pixels for a slider amount."""
    return float(amount) / BLUR_RADIUS_DIVISOR


def apply_gaussian_blur(image, radius: float = 5.0):
    """
    Apply Gaussian blur to a PIL image.

    Args:
        image: PIL Image
        radius: Blur radius in pixels (0 < radius <= 100)

    Returns:
        Blurred PIL Image (same mode as input)

    Raises:
        ValueError: If radius <= 0 or > 100
        TypeError: If image not PIL Image
    """
    if not hasattr(image, "filter"):
        raise TypeError(f"Expected PIL Image, got {type(image)}")

    if not (0 < radius <= 100):
        raise ValueError(f"radius must be 0 < r <= 100, got {radius}")

    return image.filter(ImageFilter.GaussianBlur(radius=radius))


def apply_blur(buffer: PixelBuffer, amount: int = 0) -> PixelBuffer:
    """
    Blur a buffer by slider amount.

    Args:
        buffer: Rotated, color-adjusted and filtered buffer
        amount: Blur amount (0-100); 0 passes the buffer through

    Returns:
        New PixelBuffer, same dimensions

    Raises:
        ValueError: If amount is outside 0-100
        TypeError: If buffer is not a PixelBuffer
    """
    if not isinstance(buffer, PixelBuffer):
        raise TypeError(f"Expected PixelBuffer, got {type(buffer)}")

    low, high = BLUR_RANGE
    if not (low <= amount <= high):
        raise ValueError(f"blur must be {low}..{high}, got {amount}")

    if amount == 0 or buffer.width == 0 or buffer.height == 0:
        return buffer

    blurred = apply_gaussian_blur(buffer.to_image(), blur_radius_pixels(amount))
    return PixelBuffer.from_image(blurred)
