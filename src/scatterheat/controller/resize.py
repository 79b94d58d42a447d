"""Trailing debounce between container resizes and chart regeneration."""
from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QObject, Qt, QTimer, Signal

from scatterheat import config

logger = logging.getLogger(__name__)


class ResizeCoordinator(QObject):
    """
    Collects size changes and emits `regenerate_requested` once the container
    has been quiet for `interval_ms`. Every new size restarts the timer.
    """
    regenerate_requested = Signal(int, int)

    def __init__(self, interval_ms: int = config.RESIZE_DEBOUNCE_MS, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._pending: Optional[tuple[int, int]] = None

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        # Coarse timers may fire up to 5% early
        self._timer.setTimerType(Qt.PreciseTimer)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._fire)

    @property
    def interval(self) -> int:
        return self._timer.interval()

    def is_pending(self) -> bool:
        return self._timer.isActive()

    def notify(self, width: int, height: int) -> None:
        self._pending = (width, height)
        # start() on an active timer restarts it
        self._timer.start()

    def flush(self) -> None:
        """Run a pending regeneration right away."""
        if self._timer.isActive():
            self._timer.stop()
            self._fire()

    def cancel(self) -> None:
        self._timer.stop()
        self._pending = None

    def _fire(self) -> None:
        if self._pending is None:
            return
        width, height = self._pending
        self._pending = None
        logger.debug(f"Resize settled at {width}x{height}; regenerating chart.")
        self.regenerate_requested.emit(width, height)
