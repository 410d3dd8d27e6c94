"""
Screen <-> image coordinate mapping for zoom and pan.

A rendered frame is drawn with its unscaled top-left corner at an on-screen
origin and scaled by ``zoom``. Image-space coordinates are always
untransformed source pixels, so crop geometry never depends on the view.

Classes:
    Viewport: Zoom factor and pan offset (not part of undo history)

Functions:
    to_image_space / to_screen_space: Algebraic inverse pair
    clamp_zoom: Snap to 0.1 steps within [0.1, 8.0]
    zoom_about_cursor: New pan so the point under the cursor stays put
    scroll_offset_for_zoom: Same correction expressed as a scroll position
"""

from dataclasses import dataclass, replace
from typing import Tuple

from PE_Libs.constants import DEFAULT_ZOOM, MAX_ZOOM, MIN_ZOOM, ZOOM_STEP

Point = Tuple[float, float]


def clamp_zoom(zoom: float) -> float:
    """Clamp to [MIN_ZOOM, MAX_ZOOM] and snap to ZOOM_STEP increments."""
    steps = round(float(zoom) / ZOOM_STEP)
    snapped = round(steps * ZOOM_STEP, 1)
    return min(MAX_ZOOM, max(MIN_ZOOM, snapped))


def to_image_space(
    screen_x: float,
    screen_y: float,
    origin_x: float,
    origin_y: float,
    zoom: float,
) -> Point:
    """Map a screen point to image pixels."""
    if zoom <= 0:
        raise ValueError(f"zoom must be > 0, got {zoom}")
    return (screen_x - origin_x) / zoom, (screen_y - origin_y) / zoom


def to_screen_space(
    image_x: float,
    image_y: float,
    origin_x: float,
    origin_y: float,
    zoom: float,
) -> Point:
    """Map image pixels to a screen point."""
    return image_x * zoom + origin_x, image_y * zoom + origin_y


@dataclass(frozen=True)
class Viewport:
    """Transient view transform.

    Attributes:
        zoom: Scale factor in [0.1, 8.0]
        pan_x: On-screen x of the frame's top-left corner
        pan_y: On-screen y of the frame's top-left corner
    """
    zoom: float = DEFAULT_ZOOM
    pan_x: float = 0.0
    pan_y: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, "zoom", clamp_zoom(self.zoom))

    @property
    def origin(self) -> Point:
        return self.pan_x, self.pan_y

    def to_image(self, screen_x: float, screen_y: float) -> Point:
        return to_image_space(screen_x, screen_y, self.pan_x, self.pan_y, self.zoom)

    def to_screen(self, image_x: float, image_y: float) -> Point:
        return to_screen_space(image_x, image_y, self.pan_x, self.pan_y, self.zoom)

    def panned(self, dx: float, dy: float) -> "Viewport":
        """Free panning, unconstrained."""
        return replace(self, pan_x=self.pan_x + dx, pan_y=self.pan_y + dy)

    def with_zoom(self, zoom: float) -> "Viewport":
        """Change zoom keeping the origin fixed."""
        return replace(self, zoom=zoom)


def zoom_about_cursor(viewport: Viewport, cursor_x: float, cursor_y: float, new_zoom: float) -> Viewport:
    """
    Zoom while keeping the image point under the cursor in place.

    The cursor is converted to content coordinates before the zoom changes,
    then the pan is re-derived so that content * new_zoom + pan == cursor.
    """
    content_x, content_y = viewport.to_image(cursor_x, cursor_y)
    zoom = clamp_zoom(new_zoom)
    return Viewport(
        zoom=zoom,
        pan_x=cursor_x - content_x * zoom,
        pan_y=cursor_y - content_y * zoom,
    )


def wheel_zoom(viewport: Viewport, cursor_x: float, cursor_y: float, steps: int) -> Viewport:
    """Zoom in (positive steps) or out by ZOOM_STEP increments about the cursor."""
    return zoom_about_cursor(viewport, cursor_x, cursor_y, viewport.zoom + steps * ZOOM_STEP)


def scroll_offset_for_zoom(
    scroll_x: float,
    scroll_y: float,
    cursor_offset_x: float,
    cursor_offset_y: float,
    old_zoom: float,
    new_zoom: float,
) -> Point:
    """
    Scroll position that keeps content under the cursor after a zoom.

    Args:
        scroll_x, scroll_y: Scroll position before the zoom
        cursor_offset_x, cursor_offset_y: Cursor position inside the scroll viewport
        old_zoom: Zoom before the change
        new_zoom: Zoom after the change

    Returns:
        New (scroll_x, scroll_y) = content_point * new_zoom - cursor_offset
    """
    if old_zoom <= 0 or new_zoom <= 0:
        raise ValueError(f"zoom must be > 0, got {old_zoom} -> {new_zoom}")
    content_x = (scroll_x + cursor_offset_x) / old_zoom
    content_y = (scroll_y + cursor_offset_y) / old_zoom
    return content_x * new_zoom - cursor_offset_x, content_y * new_zoom - cursor_offset_y
