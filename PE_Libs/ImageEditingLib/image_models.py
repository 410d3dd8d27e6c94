"""
Image editing data models for Pixel Edit.

This module defines core data structures used throughout the editing core.

Classes:
    PixelBuffer: Immutable row-major RGBA raster with explicit width/height
    Rect: Axis-aligned rectangle in source-image pixel space

Type Aliases:
    RgbaColor: A tuple of 4 integers representing RGBA color values (0-255)
"""

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from PE_Libs.constants import CHANNELS
from PE_Libs.pillow_compat import Image

RgbaColor = Tuple[int, int, int, int]


@dataclass(frozen=True)
class PixelBuffer:
    """RGBA raster owned by whichever component holds it.

    Attributes:
        width: Width in pixels
        height: Height in pixels
        pixels: Row-major bytes, 4 per pixel (R, G, B, A)
    """
    width: int
    height: int
    pixels: bytes

    def __post_init__(self):
        if int(self.width) < 0 or int(self.height) < 0:
            raise ValueError(f"Buffer size must be non-negative, got {self.width}x{self.height}")
        if not isinstance(self.pixels, bytes):
            object.__setattr__(self, "pixels", bytes(self.pixels))
        expected = self.width * self.height * CHANNELS
        if len(self.pixels) != expected:
            raise ValueError(
                f"pixels must hold width*height*4 = {expected} bytes, got {len(self.pixels)}"
            )

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    @classmethod
    def blank(cls, width: int, height: int, color: RgbaColor = (0, 0, 0, 0)) -> "PixelBuffer":
        """Create a buffer filled with a single color."""
        return cls(width, height, bytes(color) * (width * height))

    @classmethod
    def from_array(cls, array: np.ndarray) -> "PixelBuffer":
        """
        Build a buffer from an (height, width, 4) array.

        Float arrays are clamped to [0, 255] and rounded half-to-even.
        """
        if array.ndim != 3 or array.shape[2] != CHANNELS:
            raise ValueError(f"Expected array of shape (h, w, 4), got {array.shape}")
        if array.dtype != np.uint8:
            array = np.rint(np.clip(array, 0, 255)).astype(np.uint8)
        height, width = array.shape[:2]
        return cls(width, height, np.ascontiguousarray(array).tobytes())

    def to_array(self) -> np.ndarray:
        """Return a writable (height, width, 4) uint8 copy of the pixels."""
        return np.frombuffer(self.pixels, dtype=np.uint8).reshape(
            self.height, self.width, CHANNELS
        ).copy()

    @classmethod
    def from_image(cls, image: "Image.Image") -> "PixelBuffer":
        """Build a buffer from a PIL Image, converting to RGBA when needed."""
        if not hasattr(image, "tobytes"):
            raise TypeError(f"Expected PIL Image, got {type(image)}")
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        width, height = image.size
        return cls(width, height, image.tobytes())

    def to_image(self) -> "Image.Image":
        """Return the buffer as a PIL RGBA Image."""
        return Image.frombytes("RGBA", (self.width, self.height), self.pixels)

    def pixel(self, x: int, y: int) -> RgbaColor:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} buffer")
        offset = (y * self.width + x) * CHANNELS
        r, g, b, a = self.pixels[offset:offset + CHANNELS]
        return r, g, b, a


@dataclass(frozen=True)
class Rect:
    """Rectangle in source-image pixel space (floats, top-left origin)."""
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @classmethod
    def from_points(cls, x0: float, y0: float, x1: float, y1: float) -> "Rect":
        """Rectangle spanning two corner points in any order."""
        return cls(min(x0, x1), min(y0, y1), abs(x1 - x0), abs(y1 - y0))

    def contains(self, x: float, y: float) -> bool:
        return self.x <= x <= self.right and self.y <= y <= self.bottom

    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def fits_within(self, width: float, height: float) -> bool:
        return (
            self.x >= 0
            and self.y >= 0
            and self.right <= width
            and self.bottom <= height
        )

    def clamped_to(self, width: float, height: float) -> "Rect":
        """Intersect with [0, width] x [0, height]; may produce an empty rect."""
        x0 = min(max(self.x, 0.0), width)
        y0 = min(max(self.y, 0.0), height)
        x1 = min(max(self.right, 0.0), width)
        y1 = min(max(self.bottom, 0.0), height)
        return Rect(x0, y0, max(0.0, x1 - x0), max(0.0, y1 - y0))

    def snapped(self) -> Tuple[int, int, int, int]:
        """Whole-pixel (x, y, width, height), each floored."""
        return (
            int(math.floor(self.x)),
            int(math.floor(self.y)),
            int(math.floor(self.width)),
            int(math.floor(self.height)),
        )

    def to_dict(self):
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}
