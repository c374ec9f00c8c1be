"""Worker thread for scanning translation files without blocking the picker."""

from PyQt6.QtCore import QThread, pyqtSignal

from i18n_keys.errors import RefreshCancelled
from i18n_keys.key_lookup import KeyLookup
from utils.logging_setup import get_logger

logger = get_logger("refresh_worker")


class RefreshWorker(QThread):
    entries_ready = pyqtSignal(list)  # KeyEntry list
    cancelled = pyqtSignal()
    failed = pyqtSignal(str)

    def __init__(self, key_lookup: KeyLookup, path: str, force_refresh: bool = False):
        super().__init__()
        self.key_lookup = key_lookup
        self.path = path
        self.force_refresh = force_refresh
        self._cancel_requested = False
        logger.debug(f"Initialized RefreshWorker for {path}, force_refresh: {force_refresh}")

    def cancel(self):
        logger.debug("Refresh cancel requested")
        self._cancel_requested = True

    def is_cancelled(self) -> bool:
        return self._cancel_requested

    def run(self):
        try:
            entries = self.key_lookup.lookup(self.path, force_refresh=self.force_refresh,
                                             is_cancelled=self.is_cancelled)
        except RefreshCancelled:
            self.cancelled.emit()
            return
        except Exception as e:
            logger.error(f"Error in refresh worker: {e}", exc_info=True)
            self.failed.emit(str(e))
            return
        self.entries_ready.emit(entries)
