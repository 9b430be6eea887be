"""
Configuration service for backup settings stored in the data directory.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from ..utils.error_handler import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_DATA_PATH = "data"


@dataclass
class BackupConfig:
    """Resolved backup configuration."""
    data_path: str
    export_dir: str
    filename_prefix: str = "cuisine-backup"
    auto_backup_filename_prefix: str = "cuisine-auto-backup"
    auto_backup_interval_days: int = 7
    kdf_iterations: int = 100000

    def validate(self) -> None:
        """Validate configuration values."""
        for name in ("filename_prefix", "auto_backup_filename_prefix"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ConfigurationError(f"{name} must be a non-empty string")
            if any(char in value for char in '/\\:*?"<>|'):
                raise ConfigurationError(f"{name} contains characters not allowed in file names")

        if not isinstance(self.auto_backup_interval_days, int) or self.auto_backup_interval_days < 1:
            raise ConfigurationError("auto_backup_interval_days must be a positive integer")

        if not isinstance(self.kdf_iterations, int) or self.kdf_iterations < 1:
            raise ConfigurationError("kdf_iterations must be a positive integer")


class ConfigService:
    """
    Loads ``config.json`` from the data directory, merged over defaults.
    """

    def __init__(self, data_path: Optional[str] = None):
        """
        Args:
            data_path: Path to persistent data directory; falls back to the
                DATA_PATH environment variable
        """
        self.data_path = Path(data_path or os.getenv("DATA_PATH", DEFAULT_DATA_PATH))
        self.config_file = self.data_path / "config.json"
        self.data_path.mkdir(parents=True, exist_ok=True)

        self._config: Optional[BackupConfig] = None

    def get_backup_config(self) -> BackupConfig:
        if self._config is None:
            self._config = self._load_config()
        return self._config

    def update_backup_config(self, updates: Dict[str, Any]) -> BackupConfig:
        """
        Apply and persist configuration updates.

        Raises:
            ConfigurationError: If a key is unknown or a value is invalid
        """
        current = asdict(self.get_backup_config())
        unknown = set(updates) - set(current)
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

        current.update(updates)
        config = BackupConfig(**current)
        config.validate()

        self._config = config
        self._save_config()
        return config

    def _defaults(self) -> Dict[str, Any]:
        return asdict(BackupConfig(
            data_path=str(self.data_path),
            export_dir=str(self.data_path / "exports"),
        ))

    def _load_config(self) -> BackupConfig:
        values = self._defaults()

        if self.config_file.exists():
            try:
                with open(self.config_file, 'r', encoding='utf-8') as f:
                    stored = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                raise ConfigurationError(
                    f"Failed to read {self.config_file}: {e}",
                    recovery_suggestion="Fix or delete config.json",
                )
            if not isinstance(stored, dict):
                raise ConfigurationError("config.json must contain an object")

            for key, value in stored.items():
                if key in values:
                    values[key] = value
                else:
                    logger.warning(f"Ignoring unknown configuration key '{key}'")

        # The data directory is where config.json was found
        values["data_path"] = str(self.data_path)

        config = BackupConfig(**values)
        config.validate()
        return config

    def _save_config(self) -> None:
        data = asdict(self._config)
        data.pop("data_path", None)
        with open(self.config_file, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, default=str)
        logger.info(f"Saved configuration to {self.config_file}")
