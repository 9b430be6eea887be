"""
Backup service: export to files, restore from files, and the single
success/failure result the settings screen shows to the user.
"""

import json
import logging
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, Optional, Union

from cuisine.models.backup import BackupPayload
from cuisine.services.config_service import BackupConfig
from cuisine.services.storage import CollectionStore, JsonCollectionStore, PreferenceStore, SnapshotStore
from cuisine.utils.encryption import BackupEncryption
from cuisine.utils.error_handler import (
    CuisineError,
    ErrorHandler,
    InvalidBackupError,
    PasswordRequiredError,
    safe_execute,
)
from cuisine.utils.serialization import DataSerializer
from cuisine.utils.validators import FieldValidator

from .auto_backup import (
    LAST_BACKUP_KEY,
    AutoBackupOutcome,
    AutoBackupScheduler,
    mark_backup,
    utc_now,
)
from .payload_builder import build_backup_payload
from .payload_validator import validate_backup_import_payload

logger = logging.getLogger(__name__)

DEFAULT_FILENAME_PREFIX = "cuisine-backup"

EXPORT_SUCCESS_MESSAGE = "Backup exported"
EXPORT_FAILED_MESSAGE = "Backup failed"
RESTORE_SUCCESS_MESSAGE = "Backup restored"
RESTORE_FAILED_MESSAGE = "Restore failed"
INVALID_BACKUP_MESSAGE = "The file is not a valid backup"
PASSWORD_REQUIRED_MESSAGE = "This backup is encrypted, enter its password"
NO_AUTO_BACKUP_MESSAGE = "No automatic backup available yet"


@dataclass
class BackupResult:
    """Outcome of a user-triggered backup operation."""
    success: bool
    message: str
    path: Optional[Path] = None
    payload: Optional[BackupPayload] = None
    error_code: Optional[str] = None


class BackupService:
    """
    Entry points used by the settings screen. Nothing here raises to the
    caller: every operation returns a BackupResult and notifies the user.
    """

    def __init__(
        self,
        store: CollectionStore,
        preferences,
        export_dir: Union[str, Path],
        notifier=None,
        auto_backup: Optional[AutoBackupScheduler] = None,
        encryption: Optional[BackupEncryption] = None,
        clock: Optional[Callable[[], datetime]] = None,
        filename_prefix: str = DEFAULT_FILENAME_PREFIX,
    ):
        """
        Args:
            store: Local collection store
            preferences: PreferenceStore holding the last-backup marker
            export_dir: Directory backup files are written to
            notifier: Object with ``success``/``error`` methods (toasts)
            auto_backup: Scheduler for the weekly snapshot
            encryption: Codec for password-protected exports
            clock: Returns the current UTC time
            filename_prefix: Prefix of exported file names
        """
        self.store = store
        self.preferences = preferences
        self.export_dir = Path(export_dir)
        self.notifier = notifier
        self.auto_backup = auto_backup
        self.encryption = encryption or BackupEncryption()
        self.clock = clock or utc_now
        self.filename_prefix = filename_prefix
        self.error_handler = ErrorHandler()

    @classmethod
    def from_config(cls, config: BackupConfig, notifier=None) -> "BackupService":
        """Wire file-backed stores and the scheduler from configuration."""
        store = JsonCollectionStore(config.data_path)
        preferences = PreferenceStore(config.data_path)
        scheduler = AutoBackupScheduler(
            store,
            preferences,
            SnapshotStore(config.data_path),
            interval=timedelta(days=config.auto_backup_interval_days),
            filename_prefix=config.auto_backup_filename_prefix,
        )
        return cls(
            store,
            preferences,
            config.export_dir,
            notifier=notifier,
            auto_backup=scheduler,
            encryption=BackupEncryption(config.kdf_iterations),
            filename_prefix=config.filename_prefix,
        )

    # Export

    def build_payload(self) -> BackupPayload:
        return build_backup_payload(self.store, now=self.clock())

    def download_backup(self, payload: BackupPayload, filename_prefix: Optional[str] = None) -> Path:
        """Write the payload as pretty-printed UTF-8 JSON."""
        json_text = DataSerializer.to_json(DataSerializer.serialize_payload(payload))
        file_path = self._export_path(filename_prefix, ".json")
        file_path.write_text(json_text, encoding='utf-8')
        mark_backup(self.preferences, self.clock())
        logger.info(f"Backup written to {file_path}")
        return file_path

    def download_encrypted_backup(
        self, payload: BackupPayload, password: str, filename_prefix: Optional[str] = None
    ) -> Path:
        """Write the payload encrypted with ``password``."""
        json_text = DataSerializer.to_json(DataSerializer.serialize_payload(payload))
        blob = self.encryption.encrypt(json_text, password)
        file_path = self._export_path(filename_prefix, ".enc")
        file_path.write_bytes(blob)
        mark_backup(self.preferences, self.clock())
        logger.info(f"Encrypted backup written to {file_path}")
        return file_path

    def export_backup(self, password: Optional[str] = None) -> BackupResult:
        """
        Build a payload from the local data and write it to the export
        directory, encrypted when a password is given.
        """
        try:
            payload = self.build_payload()
            if password:
                path = self.download_encrypted_backup(payload, password)
            else:
                path = self.download_backup(payload)
        except Exception as e:
            return self._fail(e, "Backup export", EXPORT_FAILED_MESSAGE)

        self._notify_success(EXPORT_SUCCESS_MESSAGE)
        return BackupResult(True, EXPORT_SUCCESS_MESSAGE, path=path, payload=payload)

    # Restore

    def read_backup_file(self, data: bytes, password: Optional[str] = None) -> BackupPayload:
        """
        Decode a backup file's content into a validated payload.

        Raises:
            PasswordRequiredError: Encrypted content and no password
            DecryptionError: Wrong password or corrupted encrypted content
            InvalidBackupError: Not JSON, or not a valid backup document
        """
        if self.encryption.is_encrypted(data):
            if not password:
                raise PasswordRequiredError()
            text = self.encryption.decrypt(data, password)
        else:
            try:
                text = bytes(data).decode('utf-8-sig')
            except (UnicodeDecodeError, TypeError):
                raise InvalidBackupError()

        # ValueError also covers over-long integer literals
        try:
            document = json.loads(text)
        except (ValueError, RecursionError):
            raise InvalidBackupError()

        payload = validate_backup_import_payload(document)
        if payload is None:
            raise InvalidBackupError()
        return payload

    def restore_backup(self, data: bytes, password: Optional[str] = None) -> BackupResult:
        """
        Validate a backup and replace every local collection with its
        content in one bulk write. Local data is untouched on any failure.
        """
        try:
            payload = self.read_backup_file(data, password)
            self.store.bulk_replace(self._keep_local_api_keys(payload).collections())
        except PasswordRequiredError as e:
            return self._fail(e, "Backup restore", PASSWORD_REQUIRED_MESSAGE)
        except InvalidBackupError as e:
            return self._fail(e, "Backup restore", INVALID_BACKUP_MESSAGE)
        except Exception as e:
            return self._fail(e, "Backup restore", RESTORE_FAILED_MESSAGE)

        logger.info(f"Restored backup exported at {payload.exported_at.isoformat()}")
        self._notify_success(RESTORE_SUCCESS_MESSAGE)
        return BackupResult(True, RESTORE_SUCCESS_MESSAGE, payload=payload)

    def restore_backup_file(self, file_path: Union[str, Path], password: Optional[str] = None) -> BackupResult:
        try:
            data = Path(file_path).read_bytes()
        except OSError as e:
            return self._fail(e, "Backup restore", RESTORE_FAILED_MESSAGE)
        return self.restore_backup(data, password)

    def _keep_local_api_keys(self, payload: BackupPayload) -> BackupPayload:
        """
        Copy of ``payload`` with the stored API key re-attached to the settings
        row with the same id. ``payload`` itself stays key-free.
        """
        local_keys = {
            settings.id: settings.gemini_api_key
            for settings in self.store.get_all("settings")
            if settings.has_api_key()
        }
        if not local_keys:
            return payload
        return replace(payload, settings=[
            replace(settings, gemini_api_key=local_keys.get(settings.id))
            for settings in payload.settings
        ])

    # Auto-backup

    def run_auto_backup(self) -> Optional[AutoBackupOutcome]:
        """App-start hook; failures are logged and never reach the caller."""
        if self.auto_backup is None:
            return None
        return safe_execute(
            self.auto_backup.run_weekly_auto_backup,
            context="Auto-backup",
            show_to_user=False,
            handler=self.error_handler,
        )

    def export_auto_backup(self) -> BackupResult:
        """Write the stored weekly snapshot to the export directory."""
        if self.auto_backup is None:
            return BackupResult(False, NO_AUTO_BACKUP_MESSAGE, error_code="NO_AUTO_BACKUP")
        try:
            path = self.auto_backup.export_stored_auto_backup(str(self.export_dir))
        except Exception as e:
            return self._fail(e, "Auto-backup export", EXPORT_FAILED_MESSAGE)

        if path is None:
            self._notify_error(NO_AUTO_BACKUP_MESSAGE)
            return BackupResult(False, NO_AUTO_BACKUP_MESSAGE, error_code="NO_AUTO_BACKUP")

        self._notify_success(EXPORT_SUCCESS_MESSAGE)
        return BackupResult(True, EXPORT_SUCCESS_MESSAGE, path=path)

    def last_backup_at(self) -> Optional[datetime]:
        raw = self.preferences.get(LAST_BACKUP_KEY)
        return FieldValidator.to_date(raw) if raw else None

    # Helpers

    def _export_path(self, filename_prefix: Optional[str], suffix: str) -> Path:
        self.export_dir.mkdir(parents=True, exist_ok=True)
        prefix = filename_prefix or self.filename_prefix
        return self.export_dir / f"{prefix}-{self.clock().date().isoformat()}{suffix}"

    def _fail(self, error: Exception, context: str, message: str) -> BackupResult:
        log_level = logging.WARNING if isinstance(error, CuisineError) else logging.ERROR
        self.error_handler.handle_error(error, context, show_to_user=False, log_level=log_level)
        self._notify_error(message)
        return BackupResult(
            False,
            message,
            error_code=getattr(error, "error_code", "UNEXPECTED_ERROR"),
        )

    def _notify_success(self, message: str) -> None:
        if self.notifier is not None:
            self.notifier.success(message)

    def _notify_error(self, message: str) -> None:
        if self.notifier is not None:
            self.notifier.error(message)
