"""Email sender interface and the default logging sender.

Transport (SMTP, an HTTP email API, a queue) lives outside this package. The
application hands a fully built EmailMessage to whatever EmailSender it was
given.
"""

import logging
from email.message import EmailMessage
from email.utils import formataddr
from typing import Optional, Protocol

from email_validator import EmailNotValidError, validate_email

logger = logging.getLogger(__name__)

DEFAULT_SENDER_NAME = "Job Matching"


class EmailSender(Protocol):
    """Anything that can deliver an EmailMessage.

    Implementations raise EmailDeliveryError when they cannot deliver.
    """

    def send(self, message: EmailMessage) -> None:
        ...


class LoggingEmailSender:
    """EmailSender that logs messages instead of delivering them.

    Used when no transport is configured. Nothing is kept after send().
    """

    def send(self, message: EmailMessage) -> None:
        logger.info(
            f"Email to {message['To']} queued for delivery: {message['Subject']}",
            extra={"event": "email.logged", "recipient": message["To"]},
        )


def normalize_recipient(address: str) -> str:
    """Validate and normalize a single recipient address.

    Raises:
        ValueError: If the address is invalid
    """
    try:
        return validate_email(address.strip(), check_deliverability=False).normalized
    except EmailNotValidError as e:
        raise ValueError(f"Invalid email address: '{address}' - {e}") from e


def build_sender_address(sender_name: Optional[str], sender_email: Optional[str]) -> str:
    """Build the 'From' address for outgoing emails.

    Falls back to a noreply address when no sender email is configured.

    Returns:
        Formatted sender address (e.g., "Job Matching <noreply@example.com>")
    """
    name = sender_name or DEFAULT_SENDER_NAME
    email = sender_email or "noreply@localhost"
    return formataddr((name, email))
