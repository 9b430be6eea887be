"""
Centralized error handling for the backup subsystem.
Provides the exception hierarchy, consistent logging and user-facing
messages.
"""

import logging
from typing import Any, Callable, Optional
from datetime import datetime


class CuisineError(Exception):
    """Base exception class for the cuisine application."""

    def __init__(self, message: str, error_code: str = None, recovery_suggestion: str = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or "GENERAL_ERROR"
        self.recovery_suggestion = recovery_suggestion
        self.timestamp = datetime.now()


class ConfigurationError(CuisineError):
    """Raised when there are configuration-related issues."""
    pass


class StorageError(CuisineError):
    """Raised when local storage reads or writes fail."""
    pass


class InvalidBackupError(CuisineError):
    """Raised when an imported document is not a valid backup."""

    def __init__(self, message: str = "The file is not a valid backup", **kwargs):
        kwargs.setdefault("error_code", "INVALID_BACKUP")
        kwargs.setdefault("recovery_suggestion", "Export a new backup from the source device")
        super().__init__(message, **kwargs)


class EncryptionError(CuisineError):
    """Raised when encrypting a backup fails."""
    pass


class DecryptionError(EncryptionError):
    """
    Raised for every decryption failure. Wrong password and corrupted file
    are deliberately indistinguishable.
    """

    def __init__(self, message: str = "Decryption failed", **kwargs):
        kwargs.setdefault("error_code", "DECRYPTION_FAILED")
        super().__init__(message, **kwargs)


class PasswordRequiredError(DecryptionError):
    """Raised when an encrypted backup is read without a password."""

    def __init__(self, message: str = "This backup is encrypted", **kwargs):
        kwargs.setdefault("error_code", "PASSWORD_REQUIRED")
        kwargs.setdefault("recovery_suggestion", "Enter the password used for the export")
        super().__init__(message, **kwargs)


class ErrorHandler:
    """Centralized error handler with logging and user notification capabilities."""

    def __init__(self, notifier=None):
        """
        Args:
            notifier: Object with an ``error(message)`` method used to show
                errors to the user; no user notification when None
        """
        self.logger = logging.getLogger(__name__)
        self.notifier = notifier

    def handle_error(
        self,
        error: Exception,
        context: str = None,
        show_to_user: bool = True,
        log_level: int = logging.ERROR
    ) -> None:
        """
        Handle an error with logging and optional user notification.

        Args:
            error: The exception that occurred
            context: Additional context about where the error occurred
            show_to_user: Whether to show the error to the user
            log_level: Logging level for the error
        """
        log_message = f"Error in {context}: {str(error)}" if context else str(error)

        if isinstance(error, CuisineError):
            log_message += f" [Code: {error.error_code}]"
            if error.recovery_suggestion:
                log_message += f" [Recovery: {error.recovery_suggestion}]"

        self.logger.log(log_level, log_message, exc_info=True)

        if show_to_user and self.notifier is not None:
            self.notifier.error(self.get_user_message(error), title=context)

    @staticmethod
    def get_user_message(error: Exception) -> str:
        """Message safe to show the user; unexpected errors stay generic."""
        if isinstance(error, CuisineError):
            message = error.message
            if error.recovery_suggestion:
                message += f". {error.recovery_suggestion}"
            return message
        return "An unexpected error occurred"


# Global error handler instance (logging only)
error_handler = ErrorHandler()


def safe_execute(
    func: Callable,
    *args,
    context: str = None,
    default_return: Any = None,
    show_to_user: bool = True,
    handler: Optional[ErrorHandler] = None,
    **kwargs
) -> Any:
    """
    Safely execute a function with error handling.

    Returns:
        Function result or default_return if function fails
    """
    try:
        return func(*args, **kwargs)
    except Exception as e:
        func_context = context or f"{func.__module__}.{func.__name__}"
        (handler or error_handler).handle_error(e, func_context, show_to_user)
        return default_return
