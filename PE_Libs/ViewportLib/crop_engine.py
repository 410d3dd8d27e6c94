"""
Interactive crop rectangle state machine.

Phases:
    IDLE      no rectangle
    DRAWING   dragging out a fresh rectangle from the pointer-down point
    DEFINED   a finalized rectangle exists
    MOVING    translating the rectangle by the pointer delta
    RESIZING  dragging one corner handle while the opposite corner stays put

Every handler takes screen coordinates plus the current Viewport, converts
them to image space first, and returns a new CropState. The drag itself is
a short-lived CropGesture that is dropped on pointer-up; nothing here
touches the undo history.

Example:
    >>> state = CropState(bounds_width=400, bounds_height=300)
    >>> state = pointer_down(state, 10, 10, Viewport())
    >>> state = pointer_move(state, 110, 60, Viewport())
    >>> state = pointer_up(state, 110, 60, Viewport())
    >>> state.phase, state.rect
    (<CropPhase.DEFINED: 'defined'>, Rect(x=10.0, y=10.0, width=100.0, height=50.0))
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Tuple

from PE_Libs.constants import (
    CROP_RATIO_FREE,
    HANDLE_HIT_RADIUS,
    HANDLE_MIN_RECT_SIZE,
    MIN_CROP_SIZE,
)
from PE_Libs.errors import InvalidCropGeometry
from PE_Libs.HistoryLib.edit_state import parse_crop_ratio
from PE_Libs.ImageEditingLib.image_editing_ops import crop_buffer
from PE_Libs.ImageEditingLib.image_models import PixelBuffer, Rect
from PE_Libs.ViewportLib.viewport_mapper import Point, Viewport

logger = logging.getLogger(__name__)

HANDLES = ("nw", "ne", "sw", "se")


class CropPhase(Enum):
    IDLE = "idle"
    DRAWING = "drawing"
    DEFINED = "defined"
    MOVING = "moving"
    RESIZING = "resizing"


@dataclass(frozen=True)
class CropGesture:
    """Transient drag data, discarded on pointer-up."""
    start: Point
    start_rect: Optional[Rect] = None
    handle: Optional[str] = None


@dataclass(frozen=True)
class CropState:
    """Crop tool state over a frame of bounds_width x bounds_height pixels."""
    bounds_width: float
    bounds_height: float
    crop_ratio: str = CROP_RATIO_FREE
    phase: CropPhase = CropPhase.IDLE
    rect: Optional[Rect] = None
    gesture: Optional[CropGesture] = None

    def __post_init__(self):
        if self.bounds_width < 0 or self.bounds_height < 0:
            raise ValueError(
                f"bounds must be non-negative, got {self.bounds_width}x{self.bounds_height}"
            )
        parse_crop_ratio(self.crop_ratio)

    @property
    def aspect(self) -> Optional[float]:
        return parse_crop_ratio(self.crop_ratio)

    @property
    def is_dragging(self) -> bool:
        return self.phase in (CropPhase.DRAWING, CropPhase.MOVING, CropPhase.RESIZING)

    def with_rect(self, rect: Optional[Rect]) -> "CropState":
        """Adopt a finalized rectangle (e.g. restored from history)."""
        if rect is None:
            return replace(self, phase=CropPhase.IDLE, rect=None, gesture=None)
        clamped = rect.clamped_to(self.bounds_width, self.bounds_height)
        if clamped.is_empty():
            logger.warning(f"Discarding crop area outside {self.bounds_width}x{self.bounds_height}")
            return replace(self, phase=CropPhase.IDLE, rect=None, gesture=None)
        return replace(self, phase=CropPhase.DEFINED, rect=clamped, gesture=None)

    def with_ratio(self, crop_ratio: str) -> "CropState":
        return replace(self, crop_ratio=crop_ratio)

    def with_bounds(self, width: float, height: float) -> "CropState":
        """Resize the frame; an existing rectangle is clamped or dropped."""
        resized = replace(self, bounds_width=width, bounds_height=height)
        return resized.with_rect(self.rect)


def _clamp_point(state: CropState, x: float, y: float) -> Point:
    return (
        min(max(x, 0.0), state.bounds_width),
        min(max(y, 0.0), state.bounds_height),
    )


def _fit_aspect(width: float, height: float, aspect: Optional[float]) -> Tuple[float, float]:
    """Shrink the longer side so width/height matches aspect."""
    if aspect is None or width <= 0 or height <= 0:
        return width, height
    if width / height > aspect:
        return height * aspect, height
    return width, width / aspect


def constrain_to_ratio(rect: Rect, aspect: Optional[float], anchor: Point) -> Rect:
    """
    Shrink rect to aspect, keeping the corner at anchor fixed.

    Args:
        rect: Rectangle with one corner at anchor
        aspect: Target width / height, or None for free
        anchor: The corner that must not move
    """
    width, height = _fit_aspect(rect.width, rect.height, aspect)
    anchor_x, anchor_y = anchor
    x = anchor_x if rect.x >= anchor_x else anchor_x - width
    y = anchor_y if rect.y >= anchor_y else anchor_y - height
    return Rect(x, y, width, height)


def hit_test_handle(rect: Rect, x: float, y: float, zoom: float = 1.0) -> Optional[str]:
    """
    Return the corner handle under an image-space point.

    The hit radius is HANDLE_HIT_RADIUS viewport pixels, so it shrinks in
    image space as zoom grows. Rectangles smaller than HANDLE_MIN_RECT_SIZE
    have no handles.
    """
    if rect.width < HANDLE_MIN_RECT_SIZE or rect.height < HANDLE_MIN_RECT_SIZE:
        return None

    radius = HANDLE_HIT_RADIUS / zoom
    corners = {
        "nw": (rect.x, rect.y),
        "ne": (rect.right, rect.y),
        "sw": (rect.x, rect.bottom),
        "se": (rect.right, rect.bottom),
    }
    for handle in HANDLES:
        corner_x, corner_y = corners[handle]
        if abs(x - corner_x) <= radius and abs(y - corner_y) <= radius:
            return handle
    return None


def _resize(state: CropState, rect: Rect, handle: str, dx: float, dy: float) -> Rect:
    west = handle in ("nw", "sw")
    north = handle in ("nw", "ne")

    fixed_x = rect.right if west else rect.x
    fixed_y = rect.bottom if north else rect.y
    corner_x = (rect.x if west else rect.right) + dx
    corner_y = (rect.y if north else rect.bottom) + dy

    # Room between the fixed corner and the frame edge on the dragged side
    room_x = fixed_x if west else state.bounds_width - fixed_x
    room_y = fixed_y if north else state.bounds_height - fixed_y

    width = max(MIN_CROP_SIZE, fixed_x - corner_x if west else corner_x - fixed_x)
    height = max(MIN_CROP_SIZE, fixed_y - corner_y if north else corner_y - fixed_y)
    width = min(width, room_x)
    height = min(height, room_y)

    aspect = state.aspect
    if aspect is not None and width > 0 and height > 0:
        width, height = _fit_aspect(width, height, aspect)
        if width < MIN_CROP_SIZE or height < MIN_CROP_SIZE:
            # Grow back to the minimum along the ratio, then fit the room again
            grow = max(MIN_CROP_SIZE / width, MIN_CROP_SIZE / height)
            width, height = width * grow, height * grow
            shrink = min(1.0, room_x / width, room_y / height)
            width, height = width * shrink, height * shrink

    x = fixed_x - width if west else fixed_x
    y = fixed_y - height if north else fixed_y
    return Rect(x, y, width, height)


def _move(state: CropState, rect: Rect, dx: float, dy: float) -> Rect:
    max_x = max(0.0, state.bounds_width - rect.width)
    max_y = max(0.0, state.bounds_height - rect.height)
    return Rect(
        min(max(rect.x + dx, 0.0), max_x),
        min(max(rect.y + dy, 0.0), max_y),
        rect.width,
        rect.height,
    )


def pointer_down(state: CropState, screen_x: float, screen_y: float, viewport: Viewport) -> CropState:
    """Start moving, resizing or drawing depending on what is under the pointer."""
    image_x, image_y = viewport.to_image(screen_x, screen_y)

    if state.rect is not None:
        handle = hit_test_handle(state.rect, image_x, image_y, viewport.zoom)
        if handle is not None:
            logger.debug(f"Crop resize start on {handle} handle")
            return replace(
                state,
                phase=CropPhase.RESIZING,
                gesture=CropGesture((image_x, image_y), state.rect, handle),
            )
        if state.rect.contains(image_x, image_y):
            logger.debug("Crop move start")
            return replace(
                state,
                phase=CropPhase.MOVING,
                gesture=CropGesture((image_x, image_y), state.rect),
            )

    start = _clamp_point(state, image_x, image_y)
    logger.debug(f"Crop draw start at ({start[0]:.1f}, {start[1]:.1f})")
    return replace(
        state,
        phase=CropPhase.DRAWING,
        rect=Rect(start[0], start[1], 0.0, 0.0),
        gesture=CropGesture(start),
    )


def pointer_move(state: CropState, screen_x: float, screen_y: float, viewport: Viewport) -> CropState:
    """Update the rectangle for the active gesture; ignored when not dragging."""
    if not state.is_dragging or state.gesture is None:
        return state

    image_x, image_y = viewport.to_image(screen_x, screen_y)
    gesture = state.gesture

    if state.phase == CropPhase.DRAWING:
        current = _clamp_point(state, image_x, image_y)
        spanned = Rect.from_points(gesture.start[0], gesture.start[1], current[0], current[1])
        return replace(state, rect=constrain_to_ratio(spanned, state.aspect, gesture.start))

    dx = image_x - gesture.start[0]
    dy = image_y - gesture.start[1]

    if state.phase == CropPhase.MOVING:
        return replace(state, rect=_move(state, gesture.start_rect, dx, dy))

    return replace(state, rect=_resize(state, gesture.start_rect, gesture.handle, dx, dy))


def pointer_up(state: CropState, screen_x: float, screen_y: float, viewport: Viewport) -> CropState:
    """Finish the gesture; a degenerate rectangle drops back to IDLE."""
    if not state.is_dragging:
        return state

    state = pointer_move(state, screen_x, screen_y, viewport)
    rect = state.rect
    if rect is None or rect.is_empty():
        logger.debug("Crop gesture produced an empty rectangle")
        return replace(state, phase=CropPhase.IDLE, rect=None, gesture=None)

    return replace(state, phase=CropPhase.DEFINED, gesture=None).with_rect(rect)


def cancel_crop(state: CropState) -> CropState:
    """Discard the rectangle without touching any buffer."""
    return replace(state, phase=CropPhase.IDLE, rect=None, gesture=None)


def apply_crop(state: CropState, frame: PixelBuffer) -> Tuple[Optional[PixelBuffer], CropState]:
    """
    Cut the defined rectangle out of the rendered frame.

    Returns:
        Tuple of (cropped_buffer, idle_state); cropped_buffer is None when
        there was no usable rectangle
    """
    idle = cancel_crop(state)
    if state.phase != CropPhase.DEFINED or state.rect is None:
        return None, idle

    try:
        cropped = crop_buffer(frame, state.rect)
    except InvalidCropGeometry as exc:
        logger.warning(f"Discarding crop: {exc}")
        return None, idle

    logger.info(f"Cropped frame to {cropped.width}x{cropped.height}")
    return cropped, idle
