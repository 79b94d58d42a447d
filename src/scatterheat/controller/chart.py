"""
Chart Context
=============
One instance per chart on screen. It owns all per-chart state: the dataset,
the selection store, the interaction controller, the resize debounce and the
last render pass.

Why is this file needed?
------------------------
1. Pipeline: It runs ScaleBuilder -> GeometryBinder whenever the dataset or
   the container size changes, and hands the result to the widget.
2. Loading: It starts background fetches and makes the most recent request
   authoritative; results of superseded requests are dropped.
3. Teardown: Closing the chart cancels the pending relayout and silences any
   fetch that is still in flight.
"""
from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QObject, Signal

from scatterheat import config
from scatterheat.controller.geometry import VisualElement, bind
from scatterheat.controller.interaction import InteractionController
from scatterheat.controller.resize import ResizeCoordinator
from scatterheat.controller.scales import ScaleSet, build_scales
from scatterheat.controller.workers import LoadWorker
from scatterheat.model.records import ChartVariant, Dataset
from scatterheat.model.state import SelectionStore

logger = logging.getLogger(__name__)


class ChartContext(QObject):
    # (ScaleSet, tuple[VisualElement, ...])
    geometry_changed = Signal(object, object)
    dataset_changed = Signal(object)
    load_started = Signal()
    load_failed = Signal(str)

    def __init__(
        self,
        variant: ChartVariant,
        url: Optional[str] = None,
        padding: float = config.PADDING,
        debounce_ms: int = config.RESIZE_DEBOUNCE_MS,
    ) -> None:
        super().__init__()
        self.variant = variant
        self.url = url or config.DATASET_URLS[variant]
        self.padding = padding

        self.store = SelectionStore()
        self.controller = InteractionController(self.store)
        self.coordinator = ResizeCoordinator(interval_ms=debounce_ms, parent=self)
        self.coordinator.regenerate_requested.connect(self.regenerate)

        self.dataset: Optional[Dataset] = None
        self.scales: Optional[ScaleSet] = None
        self.elements: tuple[VisualElement, ...] = ()
        self.regeneration_count: int = 0

        self._size: tuple[int, int] = (config.MIN_CHART_WIDTH, config.CHART_HEIGHT)
        self._generation: int = 0
        self._workers: dict[int, LoadWorker] = {}
        self._closed: bool = False

    @property
    def size(self) -> tuple[int, int]:
        return self._size

    # ------------------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------------------

    def load(self) -> int:
        """Start a background fetch; returns the generation of this request."""
        self._generation += 1
        generation = self._generation

        # Threads must stay referenced until they finish
        for done in [g for g, w in self._workers.items() if w.isFinished()]:
            self._workers.pop(done).deleteLater()

        worker = LoadWorker(generation, self.variant, self.url, parent=self)
        worker.loaded.connect(self._on_loaded)
        worker.error_occurred.connect(self._on_load_error)
        self._workers[generation] = worker

        self.load_started.emit()
        worker.start()
        return generation

    def _on_loaded(self, generation: int, dataset: Dataset) -> None:
        if self._closed or generation != self._generation:
            logger.debug(f"Dropping stale dataset from request {generation} (current {self._generation}).")
            return
        self.set_dataset(dataset)

    def _on_load_error(self, generation: int, message: str) -> None:
        if self._closed or generation != self._generation:
            logger.debug(f"Dropping stale load error from request {generation}: {message}")
            return
        # Previous dataset and geometry stay on screen
        self.load_failed.emit(message)

    def set_dataset(self, dataset: Dataset) -> None:
        if dataset.variant != self.variant:
            raise ValueError(f"Chart expects a {self.variant} dataset, got {dataset.variant}.")
        self.dataset = dataset
        self.store.rebind(dataset)
        self.dataset_changed.emit(dataset)
        self.regenerate(*self._size)

    # ------------------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------------------

    def resize(self, width: int, height: int) -> None:
        """Container size changed; the relayout is debounced once something is drawn."""
        if self.dataset is None:
            self.regenerate(width, height)
            return
        self.coordinator.notify(width, height)

    def regenerate(self, width: int, height: int) -> None:
        """Clear-and-redraw pass: build scales, bind geometry, re-attach interaction."""
        self._size = (max(int(width), config.MIN_CHART_WIDTH), max(int(height), 2 * int(self.padding) + 1))
        if self.dataset is None:
            return

        w, h = self._size
        self.scales = build_scales(self.dataset, w, h, self.padding)
        self.elements = bind(self.dataset, self.scales)
        self.regeneration_count += 1
        logger.debug(f"Regenerated {len(self.elements)} elements at {w}x{h}.")

        self.geometry_changed.emit(self.scales, self.elements)
        self.controller.attach(self.dataset, self.elements)

    @property
    def is_loading(self) -> bool:
        return any(w.isRunning() for w in self._workers.values())

    def close(self) -> None:
        self._closed = True
        self.coordinator.cancel()
        # Late results are ignored via `_closed`. A running thread must not be
        # destroyed with its owner, and the fetch itself is bounded by its timeout
        for worker in list(self._workers.values()):
            worker.wait()
        self._workers.clear()
