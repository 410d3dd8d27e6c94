"""
Editing session orchestrator.

An EditorSession owns everything one open image needs:

- the source-of-truth original exactly as decoded
- the working buffer (the original with any applied crops)
- the filter base, a rotated capture of the working buffer that is taken
  once per load/crop/rotation and reused for every color/filter/blur change
- the undo/redo history of EditState
- the crop tool state and the viewport (neither is part of history)

All calls are synchronous. Decoding may happen elsewhere: ``begin_load``
hands out a ticket and ``complete_load`` applies a decode result only if no
newer load or clear happened in between.

Example:
    >>> session = EditorSession()
    >>> buffer, error = session.load_source(png_bytes)
    >>> session.set("brightness", 30)
    >>> frame = session.render()
    >>> session.undo()
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Tuple

from PE_Libs.errors import DecodeError, DimensionMismatchError, EncodeError, InvalidCropGeometry
from PE_Libs.HistoryLib.edit_state import EditState, describe_change
from PE_Libs.HistoryLib.history_stack import HistoryStack
from PE_Libs.ImageEditingLib.image_editing_ops import (
    ExportConfig,
    crop_buffer,
    decode_source,
    encode_frame,
    load_image_file,
)
from PE_Libs.ImageEditingLib.image_models import PixelBuffer, Rect
from PE_Libs.ImageEditingLib.rotation import (
    apply_rotation,
    map_rect_to_unrotated,
    rotated_size,
    step_rotation,
)
from PE_Libs.PipelineLib.editor_config import EditorConfig
from PE_Libs.PipelineLib.performance import PerformanceTracker
from PE_Libs.PipelineLib.pipeline import render_from_filter_base
from PE_Libs.PipelineLib.stage_registry import PipelineStageRegistry
from PE_Libs.ViewportLib import crop_engine
from PE_Libs.ViewportLib.crop_engine import CropState
from PE_Libs.ViewportLib.viewport_mapper import Viewport, wheel_zoom, zoom_about_cursor

logger = logging.getLogger(__name__)

DecodeResult = Tuple[Optional[PixelBuffer], Optional[DecodeError]]


@dataclass(frozen=True)
class LoadTicket:
    """Identifies one load request; stale once a newer load or clear starts."""
    generation: int


@dataclass(frozen=True)
class _CropCheckpoint:
    before: PixelBuffer
    after: PixelBuffer
    state: EditState


class EditorSession:
    """One open image with its edit history, crop tool and viewport."""

    def __init__(
        self,
        config: Optional[EditorConfig] = None,
        registry: Optional[PipelineStageRegistry] = None,
    ):
        self.config = config or EditorConfig()
        self._registry = registry
        self._history = HistoryStack(max_history=self.config.max_history)
        self.viewport = Viewport()
        self.performance = PerformanceTracker(
            latency_window=self.config.latency_window,
            frame_window=self.config.frame_window,
        )

        self._generation = 0
        self._source: Optional[PixelBuffer] = None
        self._working: Optional[PixelBuffer] = None
        self._filter_base: Optional[PixelBuffer] = None
        self._filter_base_source: Optional[PixelBuffer] = None
        self._filter_base_rotation: Optional[int] = None
        self._frame_cache: Optional[Tuple[EditState, PixelBuffer, PixelBuffer]] = None
        self._crop: Optional[CropState] = None
        self._applied_crops: List[_CropCheckpoint] = []
        self._undone_crops: List[_CropCheckpoint] = []

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def history(self) -> HistoryStack:
        return self._history

    @property
    def state(self) -> EditState:
        return self._history.present

    @property
    def has_image(self) -> bool:
        return self._working is not None

    @property
    def source(self) -> Optional[PixelBuffer]:
        """The image exactly as decoded, never modified."""
        return self._source

    @property
    def working_buffer(self) -> Optional[PixelBuffer]:
        """The source with every applied crop, before rotation and filters."""
        return self._working

    @property
    def crop_state(self) -> Optional[CropState]:
        return self._crop

    def frame_size(self) -> Tuple[int, int]:
        """Size of the rendered frame (working buffer after rotation)."""
        self._require_image()
        return rotated_size(self._working.width, self._working.height, self.state.rotation)

    def _require_image(self) -> None:
        if self._working is None:
            raise RuntimeError("No image loaded")

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def begin_load(self) -> LoadTicket:
        """Start a load; any earlier outstanding ticket becomes stale."""
        self._generation += 1
        return LoadTicket(self._generation)

    def complete_load(self, ticket: LoadTicket, result: DecodeResult) -> Tuple[bool, Optional[DecodeError]]:
        """
        Apply a decode result for a ticket.

        Args:
            ticket: Ticket from begin_load()
            result: Tuple of (buffer, error) from decode_source()

        Returns:
            Tuple of (applied, error). A stale ticket returns (False, None)
            and leaves the session untouched, as does a decode error.
        """
        if ticket.generation != self._generation:
            logger.warning(
                f"Discarding stale decode (ticket {ticket.generation}, current {self._generation})"
            )
            return False, None

        buffer, error = result
        if error is not None or buffer is None:
            error = error or DecodeError("Decoder returned no image")
            logger.warning(f"Load failed: {error}")
            return False, error

        self._install(buffer)
        return True, None

    def load_source(self, raw_bytes: bytes) -> DecodeResult:
        """Decode and install image bytes in one step."""
        ticket = self.begin_load()
        result = decode_source(raw_bytes)
        self.complete_load(ticket, result)
        return result

    def load_file(self, file_path: Path) -> DecodeResult:
        """Read, decode and install an image file."""
        ticket = self.begin_load()
        result = load_image_file(file_path)
        self.complete_load(ticket, result)
        return result

    def clear(self) -> None:
        """Drop the current image and invalidate any in-flight decode."""
        self._generation += 1
        self._source = None
        self._working = None
        self._crop = None
        self._invalidate()
        self._applied_crops.clear()
        self._undone_crops.clear()
        logger.info("Session cleared")

    def _install(self, buffer: PixelBuffer) -> None:
        self._source = buffer
        self._working = buffer
        self._invalidate()
        self._applied_crops.clear()
        self._undone_crops.clear()

        # A new image starts a new history; the adjustment values carry over
        initial = self.state.with_changes(crop_area=None)
        self._history = HistoryStack(initial=initial, max_history=self.config.max_history)

        width, height = self.frame_size()
        self._crop = CropState(width, height, crop_ratio=self.state.crop_ratio)
        logger.info(f"Loaded {buffer.width}x{buffer.height} image")

    def _invalidate(self) -> None:
        self._filter_base = None
        self._filter_base_source = None
        self._filter_base_rotation = None
        self._frame_cache = None

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _capture_filter_base(self) -> PixelBuffer:
        rotation = self.state.rotation
        stale = (
            self._filter_base is None
            or self._filter_base_source is not self._working
            or self._filter_base_rotation != rotation
        )
        if stale:
            self._filter_base = apply_rotation(self._working, rotation)
            self._filter_base_source = self._working
            self._filter_base_rotation = rotation
            logger.debug(
                f"Captured filter base {self._filter_base.width}x{self._filter_base.height} "
                f"at {self.state.rotation}°"
            )
        return self._filter_base

    def render(self) -> PixelBuffer:
        """
        Render the current frame.

        Recomputed from the filter base and the present state; an unchanged
        state returns the cached frame.

        Raises:
            RuntimeError: If no image is loaded
            DimensionMismatchError: If the filter base no longer matches the
                frame and ``strict_dimensions`` is set
        """
        self._require_image()
        base = self._capture_filter_base()
        state = self.state

        if self._frame_cache is not None:
            cached_state, cached_base, frame = self._frame_cache
            if cached_state == state and cached_base is base:
                return frame

        expected = self.frame_size()
        self.performance.record_interaction_start("render")
        try:
            frame = render_from_filter_base(base, state, self._registry, reference_size=expected)
        except DimensionMismatchError as error:
            if self.config.strict_dimensions:
                raise
            logger.warning(f"{error}; recapturing filter base")
            self._filter_base = None
            base = self._capture_filter_base()
            frame = render_from_filter_base(base, state, self._registry, reference_size=expected)
        finally:
            self.performance.record_interaction_end()
        self.performance.record_frame()

        self._frame_cache = (state, base, frame)
        return frame

    def export_frame(self, config: Optional[ExportConfig] = None) -> Tuple[Optional[bytes], Optional[EncodeError]]:
        """Encode the current frame (default settings from EditorConfig)."""
        if self._working is None:
            return None, EncodeError("No image loaded")
        return encode_frame(self.render(), config or self.config.export_config())

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def _committed(self, committed: bool) -> bool:
        if committed:
            self._undone_crops.clear()
            self._sync_crop_state()
        return committed

    def set(self, field: str, value: Any) -> bool:
        """
        Change one adjustment.

        Changing the rotation also drops any pending crop area, as one
        history entry.
        """
        if field == "rotation" and self.state.crop_area is not None:
            return self.update(rotation=value, crop_area=None)
        return self._committed(self._history.set(field, value))

    def update(self, **changes: Any) -> bool:
        return self._committed(self._history.update(**changes))

    def set_crop_ratio(self, ratio: str) -> bool:
        return self.set("crop_ratio", ratio)

    def rotate_clockwise(self) -> bool:
        return self.set("rotation", step_rotation(self.state.rotation, 1))

    def rotate_counterclockwise(self) -> bool:
        return self.set("rotation", step_rotation(self.state.rotation, -1))

    def rotate_half_turn(self) -> bool:
        return self.set("rotation", step_rotation(self.state.rotation, 2))

    def undo(self) -> bool:
        previous = self.state
        if not self._history.undo():
            return False

        if self._applied_crops and self._applied_crops[-1].state is previous:
            checkpoint = self._applied_crops.pop()
            self._working = checkpoint.before
            self._undone_crops.append(checkpoint)
            logger.debug("Undo restored pre-crop buffer")

        self._sync_crop_state()
        return True

    def redo(self) -> bool:
        if not self._history.redo():
            return False

        if self._undone_crops and self._undone_crops[-1].state is self.state:
            checkpoint = self._undone_crops.pop()
            self._working = checkpoint.after
            self._applied_crops.append(checkpoint)
            logger.debug("Redo re-applied crop")

        self._sync_crop_state()
        return True

    def reset(self) -> None:
        """Default adjustments; applied crops stay in the working buffer."""
        self._history.reset()
        self._committed(True)

    def clear_history(self) -> None:
        self._history.clear_history()
        self._applied_crops.clear()
        self._undone_crops.clear()

    def history_labels(self) -> List[str]:
        """One label per timeline entry, for a history panel."""
        timeline = self._history.timeline()
        labels = ["Initial state"]
        labels.extend(describe_change(a, b) for a, b in zip(timeline, timeline[1:]))
        return labels

    # ------------------------------------------------------------------
    # Crop tool and viewport
    # ------------------------------------------------------------------

    def _sync_crop_state(self) -> None:
        if self._working is None:
            return
        width, height = self.frame_size()
        crop = self._crop or CropState(width, height)
        if (crop.bounds_width, crop.bounds_height) != (width, height):
            crop = crop.with_bounds(width, height)
        crop = crop.with_ratio(self.state.crop_ratio)
        if not crop.is_dragging:
            crop = crop.with_rect(self.state.crop_area)
        self._crop = crop

    def pointer_down(self, screen_x: float, screen_y: float) -> CropState:
        self._require_image()
        self._crop = crop_engine.pointer_down(self._crop, screen_x, screen_y, self.viewport)
        return self._crop

    def pointer_move(self, screen_x: float, screen_y: float) -> CropState:
        self._require_image()
        self._crop = crop_engine.pointer_move(self._crop, screen_x, screen_y, self.viewport)
        return self._crop

    def pointer_up(self, screen_x: float, screen_y: float) -> CropState:
        """Finish the gesture and record the resulting crop area in history."""
        self._require_image()
        self._crop = crop_engine.pointer_up(self._crop, screen_x, screen_y, self.viewport)
        self._committed(self._history.set_crop_area(self._crop.rect))
        return self._crop

    def cancel_crop(self) -> bool:
        if self._crop is not None:
            self._crop = crop_engine.cancel_crop(self._crop)
        return self._committed(self._history.set_crop_area(None))

    def apply_crop(self) -> bool:
        """
        Bake the pending crop area into the working buffer.

        The rectangle (in rendered-frame space) is snapped to whole pixels
        and mapped back through the rotation, so the next frame measures
        floor(width) x floor(height). Undo restores the uncropped buffer.

        Returns:
            True if the buffer was cropped
        """
        self._require_image()
        rect = self.state.crop_area
        if rect is None and self._crop is not None and self._crop.phase == crop_engine.CropPhase.DEFINED:
            rect = self._crop.rect
            self._history.set_crop_area(rect)
        if rect is None:
            return False

        frame_width, frame_height = self.frame_size()
        snapped = Rect(*rect.snapped())
        mapped = map_rect_to_unrotated(snapped, self.state.rotation, frame_width, frame_height)

        try:
            cropped = crop_buffer(self._working, mapped)
        except InvalidCropGeometry as exc:
            logger.warning(f"Discarding crop area: {exc}")
            self.cancel_crop()
            return False

        before = self._working
        self._working = cropped
        self._history.apply_crop()
        self._applied_crops.append(_CropCheckpoint(before, cropped, self.state))
        del self._applied_crops[:-self.config.max_history]
        self._undone_crops.clear()

        self._crop = crop_engine.cancel_crop(self._crop).with_bounds(*self.frame_size())
        logger.info(f"Applied crop {snapped.width:.0f}x{snapped.height:.0f}")
        return True

    def zoom_at(self, cursor_x: float, cursor_y: float, steps: int = 1) -> Viewport:
        """Wheel zoom about the cursor (positive steps zoom in)."""
        self.viewport = wheel_zoom(self.viewport, cursor_x, cursor_y, steps)
        return self.viewport

    def set_zoom(self, zoom: float, cursor_x: float = 0.0, cursor_y: float = 0.0) -> Viewport:
        self.viewport = zoom_about_cursor(self.viewport, cursor_x, cursor_y, zoom)
        return self.viewport

    def pan(self, dx: float, dy: float) -> Viewport:
        self.viewport = self.viewport.panned(dx, dy)
        return self.viewport
