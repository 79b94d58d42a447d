"""
Background Workers (Threading)
==============================
This module contains the QThread subclass that downloads a dataset.

Why is this file needed?
------------------------
1. Responsiveness: A slow or unreachable server must not freeze the GUI, so
   the HTTPS request runs off the main thread.
2. Signals: Results and errors travel back to the GUI thread as Qt signals,
   tagged with the generation of the request that produced them.

Classes:
    LoadWorker: Fetches and parses one dataset.
"""
import logging
from typing import Optional

from PySide6.QtCore import QObject, QThread, Signal

from scatterheat import config
from scatterheat.model.io import LoadError, load_dataset
from scatterheat.model.records import ChartVariant

logger = logging.getLogger(__name__)


class LoadWorker(QThread):
    # (generation, Dataset)
    loaded = Signal(int, object)
    # (generation, message)
    error_occurred = Signal(int, str)

    def __init__(
        self,
        generation: int,
        variant: ChartVariant,
        url: str,
        timeout: float = config.FETCH_TIMEOUT,
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        self.generation = generation
        self.variant = variant
        self.url = url
        self.timeout = timeout

    def run(self):
        try:
            logger.info(f"Loading {self.variant} dataset in background thread (request {self.generation})...")
            dataset = load_dataset(self.variant, self.url, timeout=self.timeout)
            self.loaded.emit(self.generation, dataset)
        except LoadError as e:
            logger.error(f"Error in LoadWorker: {e}")
            self.error_occurred.emit(self.generation, str(e))
        except Exception as e:
            logger.exception(f"Unexpected error in LoadWorker: {e}")
            self.error_occurred.emit(self.generation, f"Unexpected error: {e}")
