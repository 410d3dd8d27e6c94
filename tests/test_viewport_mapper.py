"""
Tests for zoom/pan coordinate mapping.
"""

import pytest

from PE_Libs.ViewportLib.viewport_mapper import (
    Viewport,
    clamp_zoom,
    scroll_offset_for_zoom,
    to_image_space,
    to_screen_space,
    wheel_zoom,
    zoom_about_cursor,
)


class TestClampZoom:
    """Tests for clamp_zoom."""

    @pytest.mark.parametrize("raw,expected", [
        (1.0, 1.0),
        (1.234, 1.2),
        (9.0, 8.0),
        (0.01, 0.1),
        (-3, 0.1),
    ])
    def test_clamp(self, raw, expected):
        assert clamp_zoom(raw) == pytest.approx(expected)


class TestSpaceMapping:
    """Tests for the screen/image conversion pair."""

    def test_inverse_pair(self):
        image = to_image_space(130.0, 75.0, 10.0, -5.0, 2.5)
        screen = to_screen_space(image[0], image[1], 10.0, -5.0, 2.5)

        assert screen == pytest.approx((130.0, 75.0))

    def test_zero_zoom_rejected(self):
        with pytest.raises(ValueError):
            to_image_space(0, 0, 0, 0, 0)

    def test_viewport_methods(self):
        viewport = Viewport(zoom=2.0, pan_x=20, pan_y=10)

        assert viewport.to_image(40, 30) == pytest.approx((10.0, 10.0))
        assert viewport.to_screen(10, 10) == pytest.approx((40.0, 30.0))

    def test_viewport_clamps_zoom(self):
        assert Viewport(zoom=20).zoom == 8.0

    def test_panned(self):
        assert Viewport().panned(5, -3).origin == (5, -3)


class TestZoomAboutCursor:
    """The image point under the cursor should stay put."""

    def test_zoom_in_at_point(self):
        viewport = zoom_about_cursor(Viewport(), 50, 50, 1.1)

        assert viewport.zoom == pytest.approx(1.1)
        assert (viewport.pan_x, viewport.pan_y) == pytest.approx((-5.0, -5.0))
        assert viewport.to_image(50, 50) == pytest.approx((50.0, 50.0))

    def test_anchor_survives_many_steps(self):
        viewport = Viewport(zoom=1.5, pan_x=12, pan_y=-30)
        anchor = viewport.to_image(200, 120)

        for steps in (3, -7, 12, -1):
            viewport = wheel_zoom(viewport, 200, 120, steps)
            assert viewport.to_image(200, 120) == pytest.approx(anchor)

    def test_wheel_zoom_steps(self):
        assert wheel_zoom(Viewport(), 0, 0, 3).zoom == pytest.approx(1.3)
        assert wheel_zoom(Viewport(zoom=0.2), 0, 0, -5).zoom == pytest.approx(0.1)

    def test_scroll_offset(self):
        scroll = scroll_offset_for_zoom(0, 0, 50, 50, 1.0, 1.1)

        assert scroll == pytest.approx((5.0, 5.0))
