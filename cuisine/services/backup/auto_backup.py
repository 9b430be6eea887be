"""
Weekly auto-backup: a single rolling snapshot slot, refreshed at most once
per interval, plus the one-time migration of snapshots that older versions
kept in the preference store.
"""

import logging
import threading
from datetime import datetime, timedelta, timezone
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from cuisine.models.backup import BackupSnapshot
from cuisine.services.storage.base import CollectionStore
from cuisine.utils.serialization import DataSerializer, format_timestamp
from cuisine.utils.validators import FieldValidator

from .payload_builder import build_backup_payload

logger = logging.getLogger(__name__)

LAST_BACKUP_KEY = "cuisine-backup-last-at"
AUTO_BACKUP_ENABLED_KEY = "cuisine-backup-auto-enabled"
LAST_AUTO_BACKUP_KEY = "cuisine-backup-last-auto-at"
# Where older versions kept the snapshot itself
AUTO_BACKUP_SNAPSHOT_KEY = "cuisine-auto-backup-snapshot"

AUTO_BACKUP_SNAPSHOT_ID = "weekly"
AUTO_BACKUP_INTERVAL = timedelta(days=7)
AUTO_BACKUP_FILENAME_PREFIX = "cuisine-auto-backup"


class AutoBackupOutcome(Enum):
    DONE = "done"
    SKIPPED = "skipped"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def mark_backup(preferences, at: datetime) -> None:
    """Record the time of the latest backup of any kind."""
    preferences.set(LAST_BACKUP_KEY, format_timestamp(at))


class AutoBackupScheduler:
    """
    Decides whether the weekly snapshot is due and writes it.

    ``run_weekly_auto_backup`` is safe to call on every app start: the
    due-check and the write happen under one lock, so concurrent callers
    produce at most one snapshot per interval.
    """

    def __init__(
        self,
        store: CollectionStore,
        preferences,
        snapshots,
        clock: Optional[Callable[[], datetime]] = None,
        interval: timedelta = AUTO_BACKUP_INTERVAL,
        filename_prefix: str = AUTO_BACKUP_FILENAME_PREFIX,
    ):
        """
        Args:
            store: Local collection store the payload is built from
            preferences: PreferenceStore holding the markers and flag
            snapshots: SnapshotStore holding the rolling snapshot
            clock: Returns the current UTC time
            interval: Minimum time between two snapshots
            filename_prefix: Prefix of exported snapshot files
        """
        self.store = store
        self.preferences = preferences
        self.snapshots = snapshots
        self.clock = clock or utc_now
        self.interval = interval
        self.filename_prefix = filename_prefix
        self._lock = threading.Lock()

    def is_enabled(self) -> bool:
        """Auto-backup is on unless explicitly switched off."""
        return self.preferences.get(AUTO_BACKUP_ENABLED_KEY) != "0"

    def set_enabled(self, enabled: bool) -> None:
        self.preferences.set(AUTO_BACKUP_ENABLED_KEY, "1" if enabled else "0")
        logger.info(f"Auto-backup {'enabled' if enabled else 'disabled'}")

    def last_auto_backup_at(self) -> Optional[datetime]:
        raw = self.preferences.get(LAST_AUTO_BACKUP_KEY)
        return FieldValidator.to_date(raw) if raw else None

    def is_due(self) -> bool:
        if not self.is_enabled():
            return False
        last = self.last_auto_backup_at()
        # A missing or unreadable marker counts as due
        if last is None:
            return True
        return self.clock() - last >= self.interval

    def run_weekly_auto_backup(self) -> AutoBackupOutcome:
        """
        Write a fresh snapshot if one is due.

        Returns:
            DONE when a snapshot was written, SKIPPED otherwise
        """
        with self._lock:
            if not self.is_due():
                logger.debug("Auto-backup skipped")
                return AutoBackupOutcome.SKIPPED

            now = self.clock()
            payload = build_backup_payload(self.store, now=now)
            self.snapshots.put(BackupSnapshot(
                id=AUTO_BACKUP_SNAPSHOT_ID,
                payload=DataSerializer.to_json(DataSerializer.serialize_payload(payload), indent=None),
                created_at=now,
            ))
            self.preferences.set(LAST_AUTO_BACKUP_KEY, format_timestamp(now))
            mark_backup(self.preferences, now)

        logger.info(f"Auto-backup written ({payload.record_count()} records)")
        return AutoBackupOutcome.DONE

    def get_stored_snapshot(self) -> Optional[str]:
        """
        Return the serialized snapshot, moving a legacy one into the
        snapshot store first if needed. Running it again is a no-op.
        """
        with self._lock:
            stored = self.snapshots.get(AUTO_BACKUP_SNAPSHOT_ID)
            if stored is not None and stored.payload:
                return stored.payload

            legacy = self.preferences.get(AUTO_BACKUP_SNAPSHOT_KEY)
            if not legacy:
                return None

            self.snapshots.put(BackupSnapshot(
                id=AUTO_BACKUP_SNAPSHOT_ID,
                payload=legacy,
                created_at=self.clock(),
            ))
            self.preferences.remove(AUTO_BACKUP_SNAPSHOT_KEY)

        logger.info("Migrated legacy auto-backup snapshot")
        return legacy

    def export_stored_auto_backup(self, export_dir: str) -> Optional[Path]:
        """
        Write the stored snapshot to ``<prefix>-<date>.json``. Does not run
        the due-check.

        Returns:
            Path of the written file, or None when there is no snapshot
        """
        raw = self.get_stored_snapshot()
        if not raw:
            return None

        now = self.clock()
        export_path = Path(export_dir)
        export_path.mkdir(parents=True, exist_ok=True)
        file_path = export_path / f"{self.filename_prefix}-{now.date().isoformat()}.json"
        file_path.write_text(raw, encoding='utf-8')

        mark_backup(self.preferences, now)
        logger.info(f"Exported stored auto-backup to {file_path}")
        return file_path
