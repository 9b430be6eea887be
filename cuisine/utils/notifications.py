"""
User notification channel: short-lived toasts for backup and restore
outcomes.
"""

import streamlit as st
import logging
from typing import Optional
from datetime import datetime
from enum import Enum

logger = logging.getLogger(__name__)


class NotificationType(Enum):
    """Types of notifications."""
    SUCCESS = "success"
    ERROR = "error"


_TOAST_ICONS = {
    NotificationType.SUCCESS: "✅",
    NotificationType.ERROR: "❌",
}


class Notification:
    """Represents a user notification."""

    def __init__(self, message: str, notification_type: NotificationType,
                 title: Optional[str] = None):
        self.message = message
        self.type = notification_type
        self.title = title
        self.created_at = datetime.now()

    def display_text(self) -> str:
        if self.title:
            return f"**{self.title}**: {self.message}"
        return self.message


class NotificationManager:
    """Sends toasts for the current session."""

    def add_notification(self, message: str, notification_type: NotificationType,
                         title: Optional[str] = None) -> Notification:
        """
        Show a toast.

        Args:
            message: Notification message
            notification_type: Type of notification
            title: Optional title

        Returns:
            The notification that was shown
        """
        notification = Notification(message, notification_type, title)
        st.toast(notification.display_text(), icon=_TOAST_ICONS[notification_type])

        logger.debug(f"Added {notification_type.value} notification: {message}")
        return notification

    def success(self, message: str, title: Optional[str] = None) -> Notification:
        """Add success notification."""
        return self.add_notification(message, NotificationType.SUCCESS, title)

    def error(self, message: str, title: Optional[str] = None) -> Notification:
        """Add error notification."""
        return self.add_notification(message, NotificationType.ERROR, title)


def get_notification_manager() -> NotificationManager:
    """Get or create the notification manager of the current session."""
    if 'notification_manager' not in st.session_state:
        st.session_state.notification_manager = NotificationManager()

    return st.session_state.notification_manager


def show_success(message: str, title: Optional[str] = None) -> Notification:
    """Show success notification."""
    return get_notification_manager().success(message, title)


def show_error(message: str, title: Optional[str] = None) -> Notification:
    """Show error notification."""
    return get_notification_manager().error(message, title)
