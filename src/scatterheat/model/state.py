"""
Selection State (Observable Store)
==================================
Holds the pinned (clicked) and hovered record of one chart instance.

Why is this file needed?
------------------------
1. Single writer: Only the InteractionController mutates the selection, and it
   does so through the setters below.
2. Observers: Every change is published synchronously through Qt signals, so
   the tooltip and the detail panel re-render immediately without polling.
3. Reloads: `rebind` carries a selection over to a freshly loaded dataset, or
   drops it when the record disappeared.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from PySide6.QtCore import QObject, Signal

if TYPE_CHECKING:
    from scatterheat.model.records import Dataset, Record

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectionState:
    pinned: Optional[Record] = None
    hovered: Optional[Record] = None


class SelectionStore(QObject):
    """Central selection store with signals for tooltip/detail panel sync."""
    pinned_changed = Signal(object)
    hovered_changed = Signal(object)

    def __init__(self) -> None:
        super().__init__()
        self._state = SelectionState()

    @property
    def state(self) -> SelectionState:
        return self._state

    @property
    def pinned(self) -> Optional[Record]:
        return self._state.pinned

    @property
    def hovered(self) -> Optional[Record]:
        return self._state.hovered

    def set_pinned(self, record: Optional[Record]) -> None:
        self._state = SelectionState(pinned=record, hovered=self._state.hovered)
        self.pinned_changed.emit(record)

    def set_hovered(self, record: Optional[Record]) -> None:
        self._state = SelectionState(pinned=self._state.pinned, hovered=record)
        self.hovered_changed.emit(record)

    def clear(self) -> None:
        self.set_hovered(None)
        self.set_pinned(None)

    def rebind(self, dataset: Dataset) -> None:
        """Re-point the selection at the equal record of a reloaded dataset."""
        pinned = dataset.find_equal(self.pinned) if self.pinned is not None else None
        hovered = dataset.find_equal(self.hovered) if self.hovered is not None else None

        if self.pinned is not None and pinned is None:
            logger.info("Pinned record is not present in the reloaded dataset; clearing it.")

        self.set_hovered(hovered)
        self.set_pinned(pinned)
