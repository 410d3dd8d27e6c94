"""
Pytest configuration and shared fixtures for Pixel Edit tests.

This module provides shared test fixtures and configuration
used across multiple test modules.
"""

import io
import struct
import zlib

import numpy as np
import pytest
from PIL import Image

from PE_Libs.ImageEditingLib.image_models import PixelBuffer
from PE_Libs.PipelineLib.editor_session import EditorSession


def make_gradient(width, height):
    """
    Build a buffer where every pixel is distinct.

    R follows x, G follows y, B mixes both and alpha is varied so
    pass-through can be checked.
    """
    ys, xs = np.mgrid[0:height, 0:width]
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    pixels[..., 0] = (xs * 7) % 256
    pixels[..., 1] = (ys * 11) % 256
    pixels[..., 2] = (xs * 3 + ys * 5) % 256
    pixels[..., 3] = 200 + (xs + ys) % 56
    return PixelBuffer.from_array(pixels)


def install_buffer(session, buffer):
    """Load an already-decoded buffer into a session."""
    ticket = session.begin_load()
    applied, error = session.complete_load(ticket, (buffer, None))
    assert applied and error is None
    return session


def oversized_png(width, height):
    """Build a PNG whose header claims width x height with almost no pixel data."""
    def chunk(kind, data):
        body = kind + data
        return struct.pack(">I", len(data)) + body + struct.pack(">I", zlib.crc32(body))

    header = struct.pack(">IIBBBBB", width, height, 8, 6, 0, 0, 0)
    return (
        b"\x89PNG\r\n\x1a\n"
        + chunk(b"IHDR", header)
        + chunk(b"IDAT", zlib.compress(b"\x00"))
        + chunk(b"IEND", b"")
    )


@pytest.fixture
def gradient_buffer():
    """
    Provide a small 4x3 buffer with distinct pixels.

    Returns:
        PixelBuffer of size 4x3
    """
    return make_gradient(4, 3)


@pytest.fixture
def wide_buffer():
    """Provide a 100x50 buffer with distinct pixels."""
    return make_gradient(100, 50)


@pytest.fixture
def png_bytes():
    """
    Provide an encoded 8x6 RGBA PNG.

    Returns:
        Raw PNG bytes
    """
    image = Image.new("RGBA", (8, 6), (40, 80, 120, 255))
    stream = io.BytesIO()
    image.save(stream, format="PNG")
    return stream.getvalue()


@pytest.fixture
def session():
    """Provide an empty editing session."""
    return EditorSession()


@pytest.fixture
def loaded_session(wide_buffer):
    """Provide a session with the 100x50 buffer loaded."""
    return install_buffer(EditorSession(), wide_buffer)


@pytest.fixture
def sample_rgba_colors():
    """
    Provide a list of sample RGBA color tuples for testing.

    Returns:
        List of (R, G, B, A) tuples with common test colors
    """
    return [
        (255, 0, 0, 255),    # Red
        (0, 255, 0, 255),    # Green
        (0, 0, 255, 255),    # Blue
        (255, 255, 255, 255),  # White
        (0, 0, 0, 255),      # Black
        (128, 128, 128, 255),  # Gray
    ]
