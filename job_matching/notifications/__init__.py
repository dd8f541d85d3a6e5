"""Account email notifications.

This module provides:
- NotificationService: Renders and sends verification emails
- NotificationResult: Result data structure for notification outcomes
- TemplateRenderer: Jinja2-based email template rendering
- EmailSender / LoggingEmailSender: Delivery interface and its default

Transport is pluggable: the service only calls EmailSender.send().
"""

from .models import (
    EmailDeliveryError,
    NotificationError,
    NotificationResult,
    NotificationTemplateError,
    RenderedEmail,
)
from .sender import (
    EmailSender,
    LoggingEmailSender,
    build_sender_address,
    normalize_recipient,
)
from .service import NotificationService
from .templates import TemplateRenderer

__all__ = [
    # Main service
    "NotificationService",
    # Models and results
    "NotificationResult",
    "RenderedEmail",
    # Exceptions
    "NotificationError",
    "NotificationTemplateError",
    "EmailDeliveryError",
    # Components
    "TemplateRenderer",
    "EmailSender",
    "LoggingEmailSender",
    # Utilities
    "build_sender_address",
    "normalize_recipient",
]
