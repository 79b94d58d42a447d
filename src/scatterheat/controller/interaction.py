"""
Interaction Controller
======================
The hover/click state machine of one chart instance.

Pointer events from the rendered shapes arrive here synchronously (the Qt
event loop is single-threaded), update the SelectionStore, and re-derive the
visual attributes of *all* elements. There is no incremental class toggling,
so at most one element is ever marked active.
"""
from __future__ import annotations

import logging
from typing import Optional, Sequence, TYPE_CHECKING

from PySide6.QtCore import QObject, Signal

from scatterheat.controller.geometry import VisualAttributes, VisualElement, visual_attributes

if TYPE_CHECKING:
    from scatterheat.model.records import Dataset, Record
    from scatterheat.model.state import SelectionStore

logger = logging.getLogger(__name__)


class InteractionController(QObject):
    # Emitted after every state transition with one VisualAttributes per element
    attributes_changed = Signal(object)

    def __init__(self, store: SelectionStore) -> None:
        super().__init__()
        self.store = store
        self._dataset: Optional[Dataset] = None
        self._elements: tuple[VisualElement, ...] = ()

    @property
    def elements(self) -> tuple[VisualElement, ...]:
        return self._elements

    def attach(self, dataset: Dataset, elements: Sequence[VisualElement]) -> None:
        """Bind to the elements of a fresh render pass (called after every relayout)."""
        self._dataset = dataset
        self._elements = tuple(elements)
        self._publish()

    def attributes(self) -> tuple[VisualAttributes, ...]:
        return visual_attributes(self._elements, self.store.state)

    # ---- events ----

    def on_hover(self, record: Record) -> None:
        if not self._accepts(record):
            return
        self.store.set_hovered(record)
        self._publish()

    def on_hover_end(self) -> None:
        self.store.set_hovered(None)
        self._publish()

    def on_click(self, record: Record) -> None:
        if not self._accepts(record):
            return
        logger.debug(f"Pinned record: {record}")
        self.store.set_pinned(record)
        self._publish()

    # ---- internal ----

    def _accepts(self, record: Record) -> bool:
        if self._dataset is None or not self._dataset.contains(record):
            logger.warning(f"Ignoring event for a record outside the current dataset: {record}")
            return False
        return True

    def _publish(self) -> None:
        self.attributes_changed.emit(self.attributes())
