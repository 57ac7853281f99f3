"""
Notification-related exceptions.

Raised by the WhatsApp sender only. Order placement never sees them:
NotificationService.notify_new_order() logs and swallows delivery failures.
"""

from .base import ShopException


class NotificationException(ShopException):
    """Base exception for notification errors."""
    pass


class NotificationConfigurationException(NotificationException):
    """Raised when the messaging provider is not configured (e.g. missing auth key)."""

    def __init__(self, reason: str):
        super().__init__(
            f"Notification provider misconfigured: {reason}",
            details={'reason': reason}
        )
        self.reason = reason


class NotificationDeliveryException(NotificationException):
    """Raised when the messaging provider rejects or fails the request."""

    def __init__(self, status: int, reason: str, response_data: dict | None = None):
        super().__init__(
            f"Notification delivery failed with status {status}: {reason}",
            details={'status': status, 'reason': reason}
        )
        self.status = status
        self.reason = reason
        self.response_data = response_data or {}
