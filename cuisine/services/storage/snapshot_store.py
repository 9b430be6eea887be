"""
Store for serialized backup snapshots, keyed by snapshot id.
"""

import logging
import threading
from pathlib import Path
from typing import Optional

from cuisine.models.backup import BackupSnapshot
from cuisine.utils.error_handler import StorageError
from cuisine.utils.serialization import format_timestamp
from cuisine.utils.validators import FieldValidator

from .base import read_json_document, write_json_document

logger = logging.getLogger(__name__)


class SnapshotStore:
    """Snapshots persisted to ``<data_path>/backup_snapshots.json``."""

    FILENAME = "backup_snapshots.json"

    def __init__(self, data_path: str):
        self.data_path = Path(data_path)
        self.data_path.mkdir(parents=True, exist_ok=True)
        self.snapshots_file = self.data_path / self.FILENAME
        self._lock = threading.Lock()

    def get(self, snapshot_id: str) -> Optional[BackupSnapshot]:
        raw = read_json_document(self.snapshots_file).get(snapshot_id)
        if not isinstance(raw, dict) or not isinstance(raw.get("payload"), str):
            return None

        snapshot = BackupSnapshot(id=snapshot_id, payload=raw["payload"])
        created_at = FieldValidator.to_date(raw.get("createdAt"))
        if created_at is not None:
            snapshot.created_at = created_at
        return snapshot

    def put(self, snapshot: BackupSnapshot) -> None:
        """Insert or overwrite the snapshot with the same id."""
        entry = {
            "id": snapshot.id,
            "payload": snapshot.payload,
            "createdAt": format_timestamp(snapshot.created_at),
        }
        with self._lock:
            document = read_json_document(self.snapshots_file)
            document[snapshot.id] = entry
            self._write(document)
        logger.debug(f"Stored snapshot '{snapshot.id}' ({len(snapshot.payload)} chars)")

    def _write(self, document) -> None:
        try:
            write_json_document(self.snapshots_file, document)
        except OSError as e:
            raise StorageError(f"Failed to write snapshots: {e}", error_code="STORAGE_WRITE_FAILED")
