"""
Storage contracts consumed by the backup subsystem and the JSON file helper
shared by the file-backed implementations.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List

from cuisine.utils.error_handler import StorageError

logger = logging.getLogger(__name__)


class CollectionStore(ABC):
    """
    Local collection store. ``bulk_replace`` must be all-or-nothing across
    every collection it is given.
    """

    @abstractmethod
    def get_all(self, collection: str) -> List[Any]:
        """Return every record of a collection."""

    @abstractmethod
    def bulk_replace(self, collections: Dict[str, List[Any]]) -> None:
        """Replace the contents of several collections in one transaction."""

    @abstractmethod
    def clear(self, collection: str) -> None:
        """Remove every record of a collection."""


def read_json_document(path: Path) -> Dict[str, Any]:
    """Load a JSON object from ``path``; a missing file reads as empty."""
    if not path.exists():
        return {}

    try:
        with open(path, 'r', encoding='utf-8') as f:
            document = json.load(f)
    except json.JSONDecodeError as e:
        raise StorageError(f"Corrupted storage file {path.name}: {e}", error_code="STORAGE_CORRUPTED")

    if not isinstance(document, dict):
        raise StorageError(f"Storage file {path.name} must contain an object", error_code="STORAGE_CORRUPTED")
    return document


def write_json_document(path: Path, document: Dict[str, Any]) -> None:
    """Write to a temporary file first, then rename for an atomic replace."""
    temp_file = path.with_suffix('.tmp')
    try:
        with open(temp_file, 'w', encoding='utf-8') as f:
            json.dump(document, f, indent=2, ensure_ascii=False)
        temp_file.replace(path)
    except Exception:
        if temp_file.exists():
            temp_file.unlink()
        raise
