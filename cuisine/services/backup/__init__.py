"""
Backup and restore of the local dataset.

The export/restore entry points live in ``backup_service``.
"""

from .record_parsers import RECORD_PARSERS, parse_collection
from .payload_validator import validate_backup_import_payload
from .payload_builder import PAYLOAD_VERSION, build_backup_payload
from .auto_backup import AutoBackupOutcome, AutoBackupScheduler

__all__ = [
    'RECORD_PARSERS', 'parse_collection',
    'validate_backup_import_payload',
    'PAYLOAD_VERSION', 'build_backup_payload',
    'AutoBackupOutcome', 'AutoBackupScheduler',
]
