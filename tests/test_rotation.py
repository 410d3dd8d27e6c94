"""
Tests for cardinal rotation and rotated-space crop mapping.
"""

import pytest

from PE_Libs.ImageEditingLib.image_editing_ops import crop_buffer
from PE_Libs.ImageEditingLib.image_models import Rect
from PE_Libs.ImageEditingLib.rotation import (
    apply_rotation,
    map_rect_to_unrotated,
    normalize_rotation,
    rotated_size,
    step_rotation,
)


class TestRotationHelpers:
    """Tests for angle helpers."""

    def test_normalize_rejects_non_cardinal(self):
        with pytest.raises(ValueError):
            normalize_rotation(45)

    def test_rotated_size(self):
        assert rotated_size(100, 50, 90) == (50, 100)
        assert rotated_size(100, 50, 180) == (100, 50)
        assert rotated_size(100, 50, 270) == (50, 100)

    def test_step_rotation_wraps(self):
        assert step_rotation(270, 1) == 0
        assert step_rotation(0, -1) == 270
        assert step_rotation(90, 2) == 270


class TestApplyRotation:
    """Tests for apply_rotation."""

    def test_zero_is_identity(self, gradient_buffer):
        assert apply_rotation(gradient_buffer, 0) is gradient_buffer

    def test_quarter_turn_is_clockwise(self, gradient_buffer):
        """The top-left pixel should land top-right."""
        rotated = apply_rotation(gradient_buffer, 90)

        assert rotated.size == (3, 4)
        assert rotated.pixel(2, 0) == gradient_buffer.pixel(0, 0)
        assert rotated.pixel(0, 0) == gradient_buffer.pixel(0, 2)

    def test_half_turn(self, gradient_buffer):
        rotated = apply_rotation(gradient_buffer, 180)

        assert rotated.pixel(0, 0) == gradient_buffer.pixel(3, 2)

    def test_four_quarter_turns_restore(self, gradient_buffer):
        buffer = gradient_buffer
        for _ in range(4):
            buffer = apply_rotation(buffer, 90)

        assert buffer == gradient_buffer

    def test_opposite_turns_cancel(self, gradient_buffer):
        assert apply_rotation(apply_rotation(gradient_buffer, 90), 270) == gradient_buffer


class TestMapRectToUnrotated:
    """Cropping a rotated buffer should match rotating a cropped buffer."""

    @pytest.mark.parametrize("degrees", [0, 90, 180, 270])
    def test_crop_commutes_with_rotation(self, wide_buffer, degrees):
        rotated = apply_rotation(wide_buffer, degrees)
        rect = Rect(3, 7, 20, 11)

        mapped = map_rect_to_unrotated(rect, degrees, rotated.width, rotated.height)
        expected = crop_buffer(rotated, rect)
        actual = apply_rotation(crop_buffer(wide_buffer, mapped), degrees)

        assert actual == expected
