"""Data models and exceptions for the notification service.

This module defines result types and custom exceptions used by the email
collaborator.
"""

from dataclasses import dataclass
from typing import Optional


class NotificationError(Exception):
    """Base exception for notification-related errors."""

    pass


class NotificationTemplateError(NotificationError):
    """Raised when template rendering fails due to configuration or missing variables."""

    pass


class EmailDeliveryError(NotificationError):
    """Raised by an EmailSender when it cannot hand a message off."""

    pass


@dataclass(frozen=True)
class RenderedEmail:
    """Subject and bodies of one rendered email."""

    subject: str
    html_body: str
    text_body: str


@dataclass
class NotificationResult:
    """Result of attempting to send one email.

    Registration never fails because of this result; callers log it and move
    on.

    Attributes:
        recipient: Address the email was meant for
        kind: What was sent, e.g. "verification"
        status: Outcome status ("sent" or "failed")
        error: Optional error message if delivery failed
    """

    recipient: str
    kind: str
    status: str  # "sent", "failed"
    error: Optional[str] = None

    def is_success(self) -> bool:
        """Check if the email was handed to the sender.

        Returns:
            True if status is "sent", False otherwise
        """
        return self.status == "sent"
