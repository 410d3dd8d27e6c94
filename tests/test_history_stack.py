"""
Tests for the undo/redo history.

Tests cover:
- Recording changes and skipping no-ops
- Undo/redo ordering and redo invalidation
- History bound
- Crop area transitions
- Reset and clear
"""

import pytest

from PE_Libs.HistoryLib.edit_state import EditState
from PE_Libs.HistoryLib.history_stack import HistoryStack
from PE_Libs.ImageEditingLib.image_models import Rect


@pytest.fixture
def history():
    return HistoryStack()


class TestRecording:
    """Tests for set/update."""

    def test_set_records_previous_state(self, history):
        assert history.set("brightness", 50)

        assert history.past == [EditState()]
        assert history.present.brightness == 50
        assert history.future == []

    def test_unchanged_value_is_not_recorded(self, history):
        """Setting the same value twice should leave one entry."""
        history.set("brightness", 50)

        assert not history.set("brightness", 50)
        assert len(history.past) == 1

    def test_update_is_one_entry(self, history):
        assert history.update(brightness=10, contrast=20)

        assert len(history.past) == 1
        assert history.present.contrast == 20

    def test_update_without_changes(self, history):
        assert not history.update()

    def test_invalid_value_leaves_history(self, history):
        with pytest.raises(ValueError):
            history.set("saturation", 300)

        assert history.past == []

    def test_unknown_field(self, history):
        with pytest.raises(ValueError):
            history.set("exposure", 1)


class TestUndoRedo:
    """Tests for undo and redo."""

    def test_undo_then_redo(self, history):
        history.set("brightness", 50)

        assert history.undo()
        assert history.present.brightness == 0
        assert len(history.future) == 1

        assert history.redo()
        assert history.present.brightness == 50
        assert history.future == []

    def test_undo_on_empty(self, history):
        assert not history.undo()
        assert not history.redo()
        assert not history.can_undo

    def test_new_change_clears_redo(self, history):
        history.set("blur", 10)
        history.undo()

        history.set("contrast", 5)

        assert not history.can_redo
        assert history.present == EditState(contrast=5)

    def test_timeline_order(self, history):
        history.set("blur", 10)
        history.set("blur", 20)
        history.set("blur", 30)
        history.undo()

        assert [state.blur for state in history.timeline()] == [0, 10, 20, 30]
        assert history.current_index == 2
        assert len(history) == 4

    def test_undo_restores_exact_states(self, history):
        states = []
        for value in (10, 20, 30):
            history.set("brightness", value)
            states.append(history.present)

        history.undo()
        history.undo()

        assert history.present is states[0]
        history.redo()
        assert history.present is states[1]


class TestBounds:
    """Tests for max_history."""

    def test_oldest_dropped(self):
        history = HistoryStack(max_history=3)
        for value in range(1, 6):
            history.set("blur", value)

        assert [state.blur for state in history.past] == [2, 3, 4]

    def test_invalid_max(self):
        with pytest.raises(ValueError):
            HistoryStack(max_history=0)


class TestCropTransitions:
    """Tests for crop area transitions."""

    def test_apply_crop_without_area(self, history):
        assert not history.apply_crop()
        assert history.past == []

    def test_apply_crop_consumes_area(self, history):
        history.set_crop_area(Rect(0, 0, 20, 20))

        assert history.apply_crop()
        assert history.present.crop_area is None

        history.undo()
        assert history.present.crop_area == Rect(0, 0, 20, 20)


class TestResetAndClear:
    """Tests for reset and clear_history."""

    def test_reset_is_undoable(self, history):
        history.update(brightness=30, filter="sepia")

        history.reset()

        assert history.present.is_default()
        history.undo()
        assert history.present.filter == "sepia"

    def test_clear_keeps_present(self, history):
        history.set("blur", 40)
        history.set("blur", 50)
        history.undo()

        history.clear_history()

        assert history.present.blur == 40
        assert not history.can_undo
        assert not history.can_redo
