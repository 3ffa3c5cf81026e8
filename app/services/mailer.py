"""Verification-email notifiers: SMTP delivery, or log-only when mail is disabled."""

from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

VERIFICATION_SUBJECT = "Verify your email"


class MailDeliveryError(Exception):
    """Raised when the SMTP server cannot be reached or rejects the message."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class VerificationNotifier(Protocol):
    def send(self, recipient_email: str, recipient_name: str, token: str) -> bool: ...


def build_verification_message(
    sender: str, recipient_email: str, recipient_name: str, token: str
) -> EmailMessage:
    """Plain-text verification email carrying the token."""
    msg = EmailMessage()
    msg["From"] = sender
    msg["To"] = recipient_email
    msg["Subject"] = VERIFICATION_SUBJECT
    msg.set_content(f"Hi {recipient_name}, Your verification token is: {token}")
    return msg


class SmtpVerificationMailer:
    """Sends verification emails through the configured SMTP server."""

    def __init__(self, settings: Settings) -> None:
        self._server = settings.MAIL_SERVER
        self._port = settings.MAIL_PORT
        self._username = settings.MAIL_USERNAME
        self._password = (
            settings.MAIL_PASSWORD.get_secret_value() if settings.MAIL_PASSWORD else None
        )
        self._sender = settings.MAIL_SENDER
        self._use_tls = settings.MAIL_USE_TLS
        self._timeout = settings.MAIL_TIMEOUT_SEC

    def send(self, recipient_email: str, recipient_name: str, token: str) -> bool:
        msg = build_verification_message(self._sender, recipient_email, recipient_name, token)
        try:
            with smtplib.SMTP(self._server, self._port, timeout=self._timeout) as server:
                if self._use_tls:
                    server.starttls()
                if self._username and self._password:
                    server.login(self._username, self._password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            raise MailDeliveryError(f"Failed to send verification email: {e}", cause=e) from e
        logger.info("Verification email sent", extra={"recipient": recipient_email})
        return True


class LoggingVerificationMailer:
    """Development notifier: records the dispatch in the log instead of sending."""

    def send(self, recipient_email: str, recipient_name: str, token: str) -> bool:
        logger.info(
            "Verification email not sent (MAIL_ENABLED=false)",
            extra={"recipient": recipient_email},
        )
        # Token stays at DEBUG; INFO records never carry it.
        logger.debug("Verification token for %s (%s): %s", recipient_email, recipient_name, token)
        return True


def build_notifier(settings: Settings) -> VerificationNotifier:
    """Return the SMTP mailer when mail is enabled, otherwise the log-only notifier."""
    if settings.MAIL_ENABLED:
        return SmtpVerificationMailer(settings)
    return LoggingVerificationMailer()
