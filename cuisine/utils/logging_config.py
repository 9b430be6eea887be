"""
Logging configuration for the cuisine backup subsystem.
Console output plus rotating log files under ``<data_path>/logs``.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Optional


class CuisineFormatter(logging.Formatter):
    """Adds the source location to ERROR and above."""

    default_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    error_format = (
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s\n"
        "%(pathname)s:%(lineno)d in %(funcName)s"
    )

    def __init__(self):
        super().__init__(self.default_format)
        self._error_formatter = logging.Formatter(self.error_format)

    def format(self, record):
        if record.levelno >= logging.ERROR:
            return self._error_formatter.format(record)
        return super().format(record)


class LoggingConfig:
    """Centralized logging configuration manager."""

    LOG_FILENAME = "cuisine.log"
    ERROR_LOG_FILENAME = "errors.log"

    def __init__(self, data_path: str = "data"):
        self.data_path = Path(data_path)
        self.log_dir = self.data_path / "logs"
        self._configured = False

    def setup_logging(
        self,
        log_level: Optional[str] = None,
        console_output: bool = True,
        file_output: bool = True,
        max_file_size: int = 5 * 1024 * 1024,
        backup_count: int = 3
    ) -> None:
        """
        Set up application logging. Calling it again is a no-op.

        Args:
            log_level: Logging level name; LOG_LEVEL env var when omitted
            console_output: Whether to output logs to stdout
            file_output: Whether to write rotating log files
            max_file_size: Maximum size of a log file before rotation
            backup_count: Number of rotated files to keep
        """
        if self._configured:
            return

        level = self._get_log_level(log_level)

        root_logger = logging.getLogger()
        root_logger.setLevel(level)
        root_logger.handlers.clear()

        formatter = CuisineFormatter()

        if console_output:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(level)
            console_handler.setFormatter(formatter)
            root_logger.addHandler(console_handler)

        if file_output:
            self.log_dir.mkdir(parents=True, exist_ok=True)

            file_handler = logging.handlers.RotatingFileHandler(
                self.log_dir / self.LOG_FILENAME,
                maxBytes=max_file_size,
                backupCount=backup_count,
                encoding='utf-8'
            )
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)

            error_handler = logging.handlers.RotatingFileHandler(
                self.log_dir / self.ERROR_LOG_FILENAME,
                maxBytes=max_file_size,
                backupCount=backup_count,
                encoding='utf-8'
            )
            error_handler.setLevel(logging.ERROR)
            error_handler.setFormatter(formatter)
            root_logger.addHandler(error_handler)

        self._configure_component_loggers(level)
        self._configured = True

        logging.getLogger(__name__).info(f"Logging configured - Level: {logging.getLevelName(level)}")

    @staticmethod
    def _get_log_level(log_level: Optional[str]) -> int:
        """Resolve a level name, falling back to LOG_LEVEL and then INFO."""
        level_str = (log_level or os.getenv("LOG_LEVEL", "INFO")).upper()

        level_map = {
            "DEBUG": logging.DEBUG,
            "INFO": logging.INFO,
            "WARNING": logging.WARNING,
            "ERROR": logging.ERROR,
            "CRITICAL": logging.CRITICAL
        }
        return level_map.get(level_str, logging.INFO)

    @staticmethod
    def _configure_component_loggers(level: int) -> None:
        for component in ("cuisine.services", "cuisine.utils", "cuisine.models"):
            logging.getLogger(component).setLevel(level)

        # Third-party noise
        for name in ("streamlit", "urllib3"):
            logging.getLogger(name).setLevel(logging.WARNING)


logging_config = LoggingConfig()


def setup_application_logging(log_level: Optional[str] = None, data_path: str = "data") -> LoggingConfig:
    """
    Set up application logging with default configuration.

    Args:
        log_level: Logging level override
        data_path: Path to data directory for log files

    Returns:
        The active LoggingConfig
    """
    global logging_config
    logging_config = LoggingConfig(data_path)
    logging_config.setup_logging(log_level=log_level)
    return logging_config


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a component (typically ``__name__``)."""
    return logging.getLogger(name)
