"""
Assembles an export-ready payload from the local collections.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from cuisine.models.backup import BACKUP_COLLECTIONS, BackupPayload
from cuisine.services.storage.base import CollectionStore

logger = logging.getLogger(__name__)

PAYLOAD_VERSION = 1


def build_backup_payload(store: CollectionStore, now: Optional[datetime] = None) -> BackupPayload:
    """
    Read every collection and build a payload.

    Product photos and invoice page images are dropped (binary, not part of
    the text format) and the OCR API key is removed from settings; the
    import side refuses the same data.

    Args:
        store: Local collection store
        now: Export timestamp, defaults to the current UTC time

    Returns:
        BackupPayload ready for serialization
    """
    collections = {
        attribute: store.get_all(wire_key)
        for attribute, wire_key in BACKUP_COLLECTIONS
    }

    collections["product_traces"] = [trace.without_photo() for trace in collections["product_traces"]]
    collections["invoices"] = [invoice.without_images() for invoice in collections["invoices"]]
    collections["settings"] = [settings.without_secrets() for settings in collections["settings"]]

    payload = BackupPayload(
        version=PAYLOAD_VERSION,
        exported_at=now or datetime.now(timezone.utc),
        **collections,
    )
    logger.info(f"Built backup payload with {payload.record_count()} records")
    return payload
