"""
File-backed local collection store. Every collection lives in a single JSON
document so that a bulk replace is one atomic file swap.
"""

import base64
import binascii
import logging
import threading
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional

from cuisine.models.backup import BACKUP_COLLECTIONS
from cuisine.services.backup.record_parsers import RECORD_PARSERS
from cuisine.utils.error_handler import StorageError
from cuisine.utils.serialization import DataSerializer

from .base import CollectionStore, read_json_document, write_json_document

logger = logging.getLogger(__name__)

COLLECTION_NAMES = tuple(wire_key for _, wire_key in BACKUP_COLLECTIONS)


def _decode_blob(value: Any) -> Optional[bytes]:
    if not isinstance(value, str):
        return None
    try:
        return base64.b64decode(value.encode('ascii'), validate=True)
    except (binascii.Error, UnicodeEncodeError):
        return None


class JsonCollectionStore(CollectionStore):
    """Collection store persisted to ``<data_path>/local_db.json``."""

    DB_FILENAME = "local_db.json"

    def __init__(self, data_path: str):
        self.data_path = Path(data_path)
        self.data_path.mkdir(parents=True, exist_ok=True)
        self.db_file = self.data_path / self.DB_FILENAME
        self._lock = threading.Lock()

    def get_all(self, collection: str) -> List[Any]:
        self._check_collection(collection)
        raw_records = read_json_document(self.db_file).get(collection, [])

        records = []
        for i, raw in enumerate(raw_records):
            record = self._deserialize(collection, raw)
            if record is None:
                logger.error(f"Skipping unreadable {collection} record at index {i}")
                continue
            records.append(record)
        return records

    def bulk_replace(self, collections: Dict[str, List[Any]]) -> None:
        for name in collections:
            self._check_collection(name)

        # Serialize everything before touching the file
        serialized = {
            name: [DataSerializer.serialize_record(name, record, local=True) for record in records]
            for name, records in collections.items()
        }

        with self._lock:
            document = read_json_document(self.db_file)
            document.update(serialized)
            try:
                write_json_document(self.db_file, document)
            except OSError as e:
                raise StorageError(f"Failed to write local database: {e}", error_code="STORAGE_WRITE_FAILED")

        logger.info(f"Replaced collections: {', '.join(collections) or 'none'}")

    def clear(self, collection: str) -> None:
        self.bulk_replace({collection: []})

    @staticmethod
    def _check_collection(name: str) -> None:
        if name not in COLLECTION_NAMES:
            raise StorageError(f"Unknown collection: {name}", error_code="UNKNOWN_COLLECTION")

    @staticmethod
    def _deserialize(collection: str, raw: Any) -> Any:
        """Parse a stored record and re-attach what backups never carry."""
        record = RECORD_PARSERS[collection](raw)
        if record is None:
            return None

        if collection == "productTraces":
            photo = _decode_blob(raw.get("photo"))
            if photo is not None:
                record = replace(record, photo=photo)
        elif collection == "invoices":
            images = [_decode_blob(image) for image in raw.get("images") or []]
            record = replace(record, images=[image for image in images if image is not None])
        elif collection == "settings":
            api_key = raw.get("geminiApiKey")
            if isinstance(api_key, str) and api_key:
                record = replace(record, gemini_api_key=api_key)
        return record
