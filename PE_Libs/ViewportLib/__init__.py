"""
ViewportLib - Zoom/pan mapping and interactive crop

This module converts pointer input between screen and image space and
drives the crop rectangle state machine.
"""

from PE_Libs.ViewportLib.viewport_mapper import (
    Viewport,
    clamp_zoom,
    scroll_offset_for_zoom,
    to_image_space,
    to_screen_space,
    wheel_zoom,
    zoom_about_cursor,
)
from PE_Libs.ViewportLib.crop_engine import (
    CropGesture,
    CropPhase,
    CropState,
    apply_crop,
    cancel_crop,
    constrain_to_ratio,
    hit_test_handle,
    pointer_down,
    pointer_move,
    pointer_up,
)

__all__ = [
    "Viewport",
    "clamp_zoom",
    "scroll_offset_for_zoom",
    "to_image_space",
    "to_screen_space",
    "wheel_zoom",
    "zoom_about_cursor",
    "CropGesture",
    "CropPhase",
    "CropState",
    "apply_crop",
    "cancel_crop",
    "constrain_to_ratio",
    "hit_test_handle",
    "pointer_down",
    "pointer_move",
    "pointer_up",
]
