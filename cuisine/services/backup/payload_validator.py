"""
Validation of a whole untyped backup document.

All-or-nothing: a single bad record anywhere refuses the whole document.
A partial import could leave records pointing at rows that were dropped, so
the operator has to fix or regenerate the file instead.
"""

import logging
from typing import Any, Dict, Optional

from cuisine.models.backup import BACKUP_COLLECTIONS, BackupPayload
from cuisine.utils.validators import FieldValidator

from .record_parsers import RECORD_PARSERS, parse_collection

logger = logging.getLogger(__name__)

MIN_PAYLOAD_VERSION = 1


def validate_backup_import_payload(value: Any) -> Optional[BackupPayload]:
    """
    Validate a parsed backup document.

    Args:
        value: Result of ``json.loads`` on the backup file (any type)

    Returns:
        The typed payload, or ``None`` if anything in it is invalid
    """
    if not isinstance(value, dict):
        logger.warning("Backup rejected: document is not an object")
        return None

    version = FieldValidator.to_number(value.get("version"))
    exported_at = FieldValidator.to_date(value.get("exportedAt"))
    if version is None or version < MIN_PAYLOAD_VERSION or exported_at is None:
        logger.warning("Backup rejected: invalid version or export timestamp")
        return None

    collections: Dict[str, list] = {}
    for attribute, wire_key in BACKUP_COLLECTIONS:
        parsed = parse_collection(value.get(wire_key), RECORD_PARSERS[wire_key])
        if parsed is None:
            logger.warning(f"Backup rejected: invalid entry in '{wire_key}'")
            return None
        collections[attribute] = parsed

    payload = BackupPayload(
        version=FieldValidator.to_int(version),
        exported_at=exported_at,
        **collections,
    )
    logger.info(f"Backup validated: version {payload.version}, {payload.record_count()} records")
    return payload
