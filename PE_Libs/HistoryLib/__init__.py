"""
HistoryLib - Undoable edit state

This module holds the EditState value type and the linear undo/redo
history that UI controls mutate.
"""

from PE_Libs.HistoryLib.edit_state import (
    EditState,
    describe_change,
    parse_crop_ratio,
)
from PE_Libs.HistoryLib.history_stack import HistoryStack

__all__ = [
    "EditState",
    "describe_change",
    "parse_crop_ratio",
    "HistoryStack",
]
