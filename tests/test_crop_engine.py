"""
Tests for the crop rectangle state machine.

Tests cover:
- Drawing, moving and resizing gestures
- Clamping to the frame
- Aspect ratio constraints
- Handle hit testing at different zoom levels
- Cancel and apply
"""

import unittest

from PE_Libs.ImageEditingLib.image_models import PixelBuffer, Rect
from PE_Libs.ViewportLib.crop_engine import (
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
from PE_Libs.ViewportLib.viewport_mapper import Viewport


def drag(state, start, end, viewport=None):
    viewport = viewport or Viewport()
    state = pointer_down(state, start[0], start[1], viewport)
    state = pointer_move(state, end[0], end[1], viewport)
    return pointer_up(state, end[0], end[1], viewport)


class TestDrawing(unittest.TestCase):
    """Test drawing a fresh rectangle."""

    def setUp(self):
        self.state = CropState(bounds_width=400, bounds_height=300)

    def test_draw_defines_rect(self):
        state = drag(self.state, (10, 10), (110, 60))

        self.assertEqual(state.phase, CropPhase.DEFINED)
        self.assertEqual(state.rect, Rect(10, 10, 100, 50))
        self.assertIsNone(state.gesture)

    def test_phase_while_dragging(self):
        state = pointer_down(self.state, 10, 10, Viewport())

        self.assertEqual(state.phase, CropPhase.DRAWING)
        self.assertTrue(state.is_dragging)

    def test_draw_clamped_to_frame(self):
        state = drag(self.state, (-50, -50), (500, 500))

        self.assertEqual(state.rect, Rect(0, 0, 400, 300))

    def test_draw_respects_zoom(self):
        """Screen coordinates should be mapped through the viewport first."""
        state = drag(self.state, (20, 20), (220, 120), Viewport(zoom=2.0))

        self.assertEqual(state.rect, Rect(10, 10, 100, 50))

    def test_click_without_drag_goes_idle(self):
        state = drag(self.state, (10, 10), (10, 10))

        self.assertEqual(state.phase, CropPhase.IDLE)
        self.assertIsNone(state.rect)

    def test_square_ratio(self):
        state = drag(self.state.with_ratio("1:1"), (0, 0), (100, 50))

        self.assertEqual(state.rect, Rect(0, 0, 50, 50))

    def test_ratio_anchors_start_point(self):
        """Dragging up-left should keep the start corner fixed."""
        state = drag(self.state.with_ratio("1:1"), (100, 100), (0, 50))

        self.assertEqual(state.rect, Rect(50, 50, 50, 50))

    def test_move_ignored_when_idle(self):
        self.assertIs(pointer_move(self.state, 5, 5, Viewport()), self.state)


class TestMoveAndResize(unittest.TestCase):
    """Test gestures on an existing rectangle."""

    def setUp(self):
        self.state = CropState(400, 300).with_rect(Rect(10, 10, 100, 50))

    def test_move(self):
        state = pointer_down(self.state, 50, 30, Viewport())
        self.assertEqual(state.phase, CropPhase.MOVING)

        state = pointer_up(state, 70, 40, Viewport())

        self.assertEqual(state.phase, CropPhase.DEFINED)
        self.assertEqual(state.rect, Rect(30, 20, 100, 50))

    def test_move_clamped(self):
        state = drag(self.state, (50, 30), (1000, 1000))

        self.assertEqual(state.rect, Rect(300, 250, 100, 50))

    def test_resize_se_handle(self):
        state = pointer_down(self.state, 110, 60, Viewport())
        self.assertEqual(state.phase, CropPhase.RESIZING)
        self.assertEqual(state.gesture.handle, "se")

        state = pointer_up(state, 150, 100, Viewport())

        self.assertEqual(state.rect, Rect(10, 10, 140, 90))

    def test_resize_nw_keeps_opposite_corner(self):
        state = drag(self.state, (10, 10), (0, 5))

        self.assertEqual(state.rect.right, 110)
        self.assertEqual(state.rect.bottom, 60)
        self.assertEqual((state.rect.x, state.rect.y), (0, 5))

    def test_resize_minimum_size(self):
        state = drag(self.state, (110, 60), (0, 0))

        self.assertEqual(state.rect, Rect(10, 10, 10, 10))

    def test_resize_stops_at_frame_edge(self):
        state = drag(self.state, (110, 60), (900, 900))

        self.assertEqual(state.rect, Rect(10, 10, 390, 290))

    def test_resize_with_ratio(self):
        state = drag(self.state.with_ratio("1:1"), (110, 60), (210, 260))

        self.assertEqual(state.rect.width, state.rect.height)

    def test_resize_minimum_size_with_ratio(self):
        """Shrinking past the minimum keeps both sides at least 10 px and the ratio intact."""
        state = self.state.with_ratio("16:9").with_rect(Rect(10, 10, 160, 90))

        state = drag(state, (170, 100), (0, 0))

        self.assertEqual((state.rect.x, state.rect.y), (10, 10))
        self.assertAlmostEqual(state.rect.height, 10)
        self.assertAlmostEqual(state.rect.width, 160 / 9)
        self.assertGreaterEqual(state.rect.width, 10)

    def test_cancel(self):
        state = cancel_crop(self.state)

        self.assertEqual(state.phase, CropPhase.IDLE)
        self.assertIsNone(state.rect)


class TestHandles(unittest.TestCase):
    """Test corner handle hit testing."""

    def test_hit_radius_shrinks_with_zoom(self):
        rect = Rect(10, 10, 100, 50)

        self.assertEqual(hit_test_handle(rect, 22, 10, zoom=1.0), "nw")
        self.assertIsNone(hit_test_handle(rect, 22, 10, zoom=2.0))

    def test_corner_order(self):
        rect = Rect(0, 0, 100, 100)

        self.assertEqual(hit_test_handle(rect, 100, 0), "ne")
        self.assertEqual(hit_test_handle(rect, 0, 100), "sw")
        self.assertEqual(hit_test_handle(rect, 100, 100), "se")

    def test_small_rect_has_no_handles(self):
        self.assertIsNone(hit_test_handle(Rect(0, 0, 15, 15), 0, 0))


class TestHelpers(unittest.TestCase):
    """Test ratio constraint, bounds changes and apply."""

    def test_constrain_free(self):
        rect = Rect(0, 0, 30, 10)

        self.assertEqual(constrain_to_ratio(rect, None, (0, 0)), rect)

    def test_constrain_wide(self):
        rect = constrain_to_ratio(Rect(0, 0, 100, 100), 16 / 9, (0, 0))

        self.assertAlmostEqual(rect.height, 56.25)
        self.assertEqual(rect.width, 100)

    def test_with_bounds_clamps_rect(self):
        state = CropState(400, 300).with_rect(Rect(300, 200, 100, 100))

        state = state.with_bounds(350, 250)

        self.assertEqual(state.rect, Rect(300, 200, 50, 50))

    def test_with_rect_outside_goes_idle(self):
        state = CropState(100, 100).with_rect(Rect(200, 200, 10, 10))

        self.assertEqual(state.phase, CropPhase.IDLE)

    def test_apply_crop(self):
        state = CropState(400, 300).with_rect(Rect(10.5, 10, 100.9, 50))
        frame = PixelBuffer.blank(400, 300, (1, 2, 3, 255))

        cropped, idle = apply_crop(state, frame)

        self.assertEqual(cropped.size, (100, 50))
        self.assertEqual(idle.phase, CropPhase.IDLE)

    def test_apply_without_rect(self):
        cropped, idle = apply_crop(CropState(10, 10), PixelBuffer.blank(10, 10))

        self.assertIsNone(cropped)
        self.assertEqual(idle.phase, CropPhase.IDLE)


if __name__ == "__main__":
    unittest.main()
