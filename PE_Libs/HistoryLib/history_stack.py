"""
Linear undo/redo history over EditState snapshots.

``past`` holds older states (oldest first), ``present`` is the live state,
``future`` holds undone states (nearest redo first). Every mutating
transition that actually changes ``present`` pushes the old state onto
``past`` and clears ``future``; unchanged values never create entries.

Example:
    >>> history = HistoryStack()
    >>> history.set("brightness", 50)
    True
    >>> history.undo()
    True
    >>> history.present.brightness
    0
"""

import logging
from typing import Any, List, Optional

from PE_Libs.constants import DEFAULT_MAX_HISTORY
from PE_Libs.HistoryLib.edit_state import EditState
from PE_Libs.ImageEditingLib.image_models import Rect

logger = logging.getLogger(__name__)


class HistoryStack:
    """Bounded past/present/future history of edit states."""

    def __init__(
        self,
        initial: Optional[EditState] = None,
        max_history: int = DEFAULT_MAX_HISTORY,
    ):
        if int(max_history) < 1:
            raise ValueError(f"max_history must be >= 1, got {max_history}")
        self._past: List[EditState] = []
        self._present: EditState = initial if initial is not None else EditState()
        self._future: List[EditState] = []
        self._max_history = int(max_history)

    @property
    def present(self) -> EditState:
        return self._present

    @property
    def past(self) -> List[EditState]:
        return list(self._past)

    @property
    def future(self) -> List[EditState]:
        return list(self._future)

    @property
    def can_undo(self) -> bool:
        return bool(self._past)

    @property
    def can_redo(self) -> bool:
        return bool(self._future)

    @property
    def current_index(self) -> int:
        """Position of ``present`` within ``timeline()``."""
        return len(self._past)

    def timeline(self) -> List[EditState]:
        """All states, oldest first: past, present, then future."""
        return self._past + [self._present] + self._future

    def __len__(self) -> int:
        return len(self._past) + 1 + len(self._future)

    def _commit(self, new_state: EditState) -> bool:
        if new_state == self._present:
            return False

        self._past.append(self._present)
        if len(self._past) > self._max_history:
            del self._past[0]
        self._present = new_state
        self._future.clear()
        return True

    def set(self, field: str, value: Any) -> bool:
        """
        Change one field.

        Returns:
            True if a history entry was recorded, False for an unchanged value

        Raises:
            ValueError: If field is unknown or the value is out of range
        """
        committed = self._commit(self._present.with_changes(**{field: value}))
        if committed:
            logger.debug(f"History set {field}={value!r} (depth {len(self._past)})")
        return committed

    def update(self, **changes: Any) -> bool:
        """Change several fields as one history entry."""
        if not changes:
            return False
        committed = self._commit(self._present.with_changes(**changes))
        if committed:
            logger.debug(f"History update {sorted(changes)} (depth {len(self._past)})")
        return committed

    def set_crop_area(self, rect: Optional[Rect]) -> bool:
        return self.set("crop_area", rect)

    def apply_crop(self) -> bool:
        """Consume the pending crop area; no-op when none is set."""
        if self._present.crop_area is None:
            return False
        return self.set("crop_area", None)

    def undo(self) -> bool:
        if not self._past:
            return False
        self._future.insert(0, self._present)
        self._present = self._past.pop()
        logger.debug(f"Undo (depth {len(self._past)}, redo {len(self._future)})")
        return True

    def redo(self) -> bool:
        if not self._future:
            return False
        self._past.append(self._present)
        self._present = self._future.pop(0)
        logger.debug(f"Redo (depth {len(self._past)}, redo {len(self._future)})")
        return True

    def reset(self) -> None:
        """Return to default parameters, keeping the old state undoable."""
        self._past.append(self._present)
        if len(self._past) > self._max_history:
            del self._past[0]
        self._present = EditState()
        self._future.clear()
        logger.debug("History reset to defaults")

    def clear_history(self) -> None:
        """Forget past and future, keeping the present state."""
        self._past.clear()
        self._future.clear()
