"""
ImageEditingLib - Pixel transforms and the decode/encode boundary

This module provides the raster model and every pixel transform used by
the render pipeline.
"""

from PE_Libs.ImageEditingLib.image_models import PixelBuffer, Rect, RgbaColor
from PE_Libs.ImageEditingLib.color_adjustment import (
    apply_color_adjustment,
    contrast_factor,
)
from PE_Libs.ImageEditingLib.preset_filter import (
    apply_preset_filter,
    normalize_filter_name,
)
from PE_Libs.ImageEditingLib.blur_filter import apply_blur, blur_radius_pixels
from PE_Libs.ImageEditingLib.rotation import (
    apply_rotation,
    map_rect_to_unrotated,
    normalize_rotation,
    rotated_size,
    step_rotation,
)
from PE_Libs.ImageEditingLib.image_editing_ops import (
    ExportConfig,
    crop_buffer,
    decode_source,
    encode_frame,
    is_supported_format,
    load_image_file,
)

__all__ = [
    "PixelBuffer",
    "Rect",
    "RgbaColor",
    "apply_color_adjustment",
    "contrast_factor",
    "apply_preset_filter",
    "normalize_filter_name",
    "apply_blur",
    "blur_radius_pixels",
    "apply_rotation",
    "map_rect_to_unrotated",
    "normalize_rotation",
    "rotated_size",
    "step_rotation",
    "ExportConfig",
    "crop_buffer",
    "decode_source",
    "encode_frame",
    "is_supported_format",
    "load_image_file",
]
