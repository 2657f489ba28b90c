"""
Contact Inquiry Notifications

Formats a submission as a plain-text inquiry email and hands it to Resend.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone as dt_timezone
from typing import Any, Optional

from django.conf import settings

from consulting_site.resend_service import resend_service
from .serializers import Submission

logger = logging.getLogger(__name__)


MISSING_EMAIL_ENV = 'missing_email_env'
RESEND_ERROR = 'resend_error'

REQUIRED_EMAIL_SETTINGS = ('RESEND_API_KEY', 'CONTACT_TO_EMAIL', 'CONTACT_FROM_EMAIL')


@dataclass(frozen=True)
class NotificationResult:
    delivered: bool
    provider_message_id: Optional[str] = None
    provider_error: Optional[Any] = None
    failure_reason: Optional[str] = None


def missing_email_settings():
    """Names of the email settings that are empty or unset."""
    return [name for name in REQUIRED_EMAIL_SETTINGS if not getattr(settings, name, '')]


def build_subject(submission: Submission) -> str:
    if submission.subject:
        return f"Website inquiry: {submission.subject} — {submission.name}"
    return f"Website inquiry: {submission.name}"


def format_timestamp(received_at: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision, e.g. 2026-01-26T09:15:02.120Z"""
    if received_at.tzinfo is not None:
        received_at = received_at.astimezone(dt_timezone.utc).replace(tzinfo=None)
    return received_at.isoformat(timespec='milliseconds') + 'Z'


def build_body(submission: Submission, client_ip: str, received_at: datetime) -> str:
    return "\n".join([
        "New website inquiry",
        "-------------------",
        f"Subject: {submission.subject or '-'}",
        f"Name: {submission.name}",
        f"Email: {submission.email}",
        "",
        "Message:",
        submission.message,
        "",
        f"IP: {client_ip}",
        f"Time: {format_timestamp(received_at)}",
    ])


class ContactNotificationDispatcher:
    """Sends one inquiry email per accepted submission. No retries."""

    def __init__(self, email_service=None):
        self.email_service = email_service or resend_service

    def send(self, submission: Submission, client_ip: str, received_at: datetime) -> NotificationResult:
        missing = missing_email_settings()
        if missing:
            logger.error(f"Contact email not configured, missing: {', '.join(missing)}")
            return NotificationResult(delivered=False, failure_reason=MISSING_EMAIL_ENV)

        result = self.email_service.send_email(
            from_email=settings.CONTACT_FROM_EMAIL,
            to=[settings.CONTACT_TO_EMAIL],
            subject=build_subject(submission),
            text=build_body(submission, client_ip, received_at),
            reply_to=submission.email,
        )

        if not result.success:
            logger.error(f"Resend rejected contact inquiry from {client_ip}: {result.error}")
            return NotificationResult(
                delivered=False,
                provider_error=result.error,
                failure_reason=RESEND_ERROR,
            )

        return NotificationResult(delivered=True, provider_message_id=result.message_id)


contact_notification_dispatcher = ContactNotificationDispatcher()
