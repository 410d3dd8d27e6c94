"""
Single import seam for Pillow.

Every module in the editing core imports the Pillow symbols it needs from
here, so the rest of the package never spells out ``from PIL import ...``.

Exports:
    Image: the ``PIL.Image`` module
    ImageFilter: the ``PIL.ImageFilter`` module
    UnidentifiedImageError: raised by ``Image.open`` for undecodable input
    DecompressionBombError: raised by ``Image.open`` past the pixel limit
"""
from importlib import import_module
from types import ModuleType


def _import(name: str) -> ModuleType:
    try:
        return import_module(name)
    except ImportError as exc:
        raise ImportError(
            f"pillow (PIL) is required for {name}: install with 'pip install Pillow'"
        ) from exc


Image = _import("PIL.Image")
ImageFilter = _import("PIL.ImageFilter")

UnidentifiedImageError = getattr(Image, "UnidentifiedImageError")
DecompressionBombError = getattr(Image, "DecompressionBombError")
