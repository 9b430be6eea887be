"""
Flat string key/value preferences (backup markers, feature flags).
"""

import logging
import threading
from pathlib import Path
from typing import Optional

from cuisine.utils.error_handler import StorageError

from .base import read_json_document, write_json_document

logger = logging.getLogger(__name__)


class PreferenceStore:
    """Preferences persisted to ``<data_path>/preferences.json``."""

    FILENAME = "preferences.json"

    def __init__(self, data_path: str):
        self.data_path = Path(data_path)
        self.data_path.mkdir(parents=True, exist_ok=True)
        self.preferences_file = self.data_path / self.FILENAME
        self._lock = threading.Lock()

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        value = read_json_document(self.preferences_file).get(key)
        return value if isinstance(value, str) else default

    def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise StorageError(f"Preference '{key}' must be a string")
        self._update(lambda document: document.__setitem__(key, value))
        logger.debug(f"Set preference '{key}'")

    def remove(self, key: str) -> None:
        self._update(lambda document: document.pop(key, None))

    def _update(self, mutate) -> None:
        with self._lock:
            document = read_json_document(self.preferences_file)
            mutate(document)
            try:
                write_json_document(self.preferences_file, document)
            except OSError as e:
                raise StorageError(f"Failed to write preferences: {e}", error_code="STORAGE_WRITE_FAILED")
