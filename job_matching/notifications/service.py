"""Notification service for account emails.

This module provides the NotificationService class that renders an email from
templates and hands it to the injected EmailSender. It never retries; a
failed send is logged and reported back as a NotificationResult.
"""

import logging
from datetime import timedelta
from email.message import EmailMessage
from typing import Optional

from job_matching.config.duration import seconds_to_human_readable
from job_matching.logging import get_logger
from job_matching.logging.context import log_context

from .models import EmailDeliveryError, NotificationResult, NotificationTemplateError
from .sender import (
    DEFAULT_SENDER_NAME,
    EmailSender,
    LoggingEmailSender,
    build_sender_address,
    normalize_recipient,
)
from .templates import TemplateRenderer

logger = get_logger(__name__, component="notification")

VERIFICATION_KIND = "verification"


class NotificationService:
    """Service for sending account emails.

    Flow for each email:
    1. Validate the recipient address
    2. Render subject, HTML and text templates
    3. Build an EmailMessage with a text body and HTML alternative
    4. Hand it to the EmailSender
    """

    def __init__(
        self,
        sender: Optional[EmailSender] = None,
        template_renderer: Optional[TemplateRenderer] = None,
        sender_name: str = DEFAULT_SENDER_NAME,
        sender_email: Optional[str] = None,
        code_ttl: timedelta = timedelta(minutes=10),
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize notification service.

        Args:
            sender: Email sender (defaults to LoggingEmailSender)
            template_renderer: Template renderer instance (creates default if None)
            sender_name: Display name in the From header
            sender_email: Address in the From header
            code_ttl: Verification code lifetime, quoted in the email
            logger_instance: Logger instance (uses module logger if None)
        """
        self.sender = sender or LoggingEmailSender()
        self.template_renderer = template_renderer or TemplateRenderer()
        self.sender_name = sender_name
        self.sender_email = sender_email
        self.code_ttl = code_ttl
        self.logger = logger_instance or logger

    def send_verification_email(self, email: str, name: str, code: str) -> NotificationResult:
        """Send the email verification code to a newly registered user.

        Args:
            email: Recipient address
            name: Recipient display name
            code: Verification code

        Returns:
            NotificationResult with status "sent" or "failed"
        """
        with log_context(notification_kind=VERIFICATION_KIND):
            try:
                recipient = normalize_recipient(email)
            except ValueError as e:
                self.logger.error(
                    f"Cannot send verification email: {e}",
                    extra={"event": "notification.send.failure", "error_type": "ValueError"},
                )
                return NotificationResult(
                    recipient=email, kind=VERIFICATION_KIND, status="failed", error=str(e)
                )

            context = {
                "app_name": self.sender_name,
                "name": name,
                "code": code,
                "expires_in": seconds_to_human_readable(int(self.code_ttl.total_seconds())),
            }

            try:
                rendered = self.template_renderer.render(VERIFICATION_KIND, context)
            except NotificationTemplateError as e:
                return NotificationResult(
                    recipient=recipient, kind=VERIFICATION_KIND, status="failed", error=str(e)
                )

            message = EmailMessage()
            message["Subject"] = rendered.subject
            message["From"] = build_sender_address(self.sender_name, self.sender_email)
            message["To"] = recipient
            message.set_content(rendered.text_body)
            message.add_alternative(rendered.html_body, subtype="html")

            try:
                self.sender.send(message)
            except EmailDeliveryError as e:
                self.logger.error(
                    f"Verification email to {recipient} failed: {e}",
                    exc_info=True,
                    extra={"event": "notification.send.failure", "error_type": type(e).__name__},
                )
                return NotificationResult(
                    recipient=recipient, kind=VERIFICATION_KIND, status="failed", error=str(e)
                )

            self.logger.info(
                f"Verification email sent to {recipient}",
                extra={"event": "notification.send.success", "recipient": recipient},
            )
            return NotificationResult(recipient=recipient, kind=VERIFICATION_KIND, status="sent")
