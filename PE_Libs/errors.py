"""
Error types for the editing core.

DecodeError and EncodeError are handed back to callers as values from the
decode/encode boundary. InvalidCropGeometry and DimensionMismatchError are
raised internally and resolved inside the core.
"""


class DecodeError(ValueError):
    """Raw bytes could not be decoded into an RGBA raster."""


class EncodeError(ValueError):
    """A raster could not be encoded for export."""


class InvalidCropGeometry(ValueError):
    """A crop rectangle collapsed to zero size or fell outside the buffer."""


class DimensionMismatchError(RuntimeError):
    """A buffer does not match the size of the cached filter base."""

    def __init__(self, expected, actual):
        self.expected = tuple(expected)
        self.actual = tuple(actual)
        super().__init__(
            f"Buffer size {self.actual[0]}x{self.actual[1]} does not match "
            f"expected {self.expected[0]}x{self.expected[1]}"
        )
