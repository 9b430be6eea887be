"""
Unit tests for notification utilities with Streamlit mocked out.
"""

from unittest.mock import MagicMock, patch

import pytest

from cuisine.utils.notifications import (
    Notification,
    NotificationManager,
    NotificationType,
    get_notification_manager,
    show_error,
    show_success,
)


class SessionState(dict):
    """Attribute-style dict, like st.session_state."""

    def __getattr__(self, name):
        try:
            return self[name]
        except KeyError:
            raise AttributeError(name)

    def __setattr__(self, name, value):
        self[name] = value


@pytest.fixture
def mock_st():
    with patch("cuisine.utils.notifications.st") as st:
        st.session_state = SessionState()
        yield st


class TestNotification:
    """Test cases for Notification class."""

    def test_creation(self):
        """Test creating a notification with a title."""
        notification = Notification("Backup exported", NotificationType.SUCCESS, title="Export")

        assert notification.message == "Backup exported"
        assert notification.type == NotificationType.SUCCESS
        assert notification.created_at is not None
        assert notification.display_text() == "**Export**: Backup exported"

    def test_without_title(self):
        """Test display text falls back to the bare message."""
        notification = Notification("Restore failed", NotificationType.ERROR)
        assert notification.display_text() == "Restore failed"


class TestNotificationManager:
    """Test cases for NotificationManager."""

    def test_success_shows_toast(self, mock_st):
        """Test success notifications become a check-mark toast."""
        notification = NotificationManager().success("Backup exported")

        mock_st.toast.assert_called_once_with("Backup exported", icon="✅")
        assert notification.type == NotificationType.SUCCESS

    def test_error_shows_toast(self, mock_st):
        """Test error notifications carry their title and a cross icon."""
        notification = NotificationManager().error("message", title="Backup")

        mock_st.toast.assert_called_once_with("**Backup**: message", icon="❌")
        assert notification.type == NotificationType.ERROR


class TestSessionHelpers:
    """Test cases for the session-scoped helpers."""

    def test_manager_cached_in_session(self, mock_st):
        """Test one manager is kept per session."""
        first = get_notification_manager()
        second = get_notification_manager()

        assert first is second
        assert mock_st.session_state["notification_manager"] is first

    def test_show_helpers(self, mock_st):
        """Test the module helpers route through the session manager."""
        success = show_success("Backup restored")
        error = show_error("Restore failed")

        assert mock_st.toast.call_count == 2
        assert [success.type, error.type] == [NotificationType.SUCCESS, NotificationType.ERROR]

    def test_manager_works_as_backup_notifier(self, mock_st):
        """Test the manager satisfies the notifier interface of the backup service."""
        notifier = MagicMock(wraps=NotificationManager())

        notifier.error("The file is not a valid backup")

        mock_st.toast.assert_called_once_with("The file is not a valid backup", icon="❌")
