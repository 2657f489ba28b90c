"""
Resend Transactional Email Service.

Sends plain-text emails through the Resend HTTP API and reports the
provider's delivery identifier.

Official Resend API Documentation:
https://resend.com/docs/api-reference/emails/send-email
"""
import logging
from dataclasses import dataclass
from typing import Any, List, Optional

import requests
from django.conf import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmailSendResult:
    """Outcome of a single Resend API call."""

    success: bool
    message_id: Optional[str] = None
    error: Optional[Any] = None
    status_code: Optional[int] = None


class ResendEmailService:
    """
    Service for sending email via the Resend API.

    The API key is read from settings on every call so configuration can be
    changed (or overridden in tests) without rebuilding the service.
    """

    API_URL = "https://api.resend.com/emails"

    @property
    def api_key(self) -> str:
        return getattr(settings, 'RESEND_API_KEY', '') or ''

    @property
    def timeout(self) -> float:
        return getattr(settings, 'RESEND_TIMEOUT_SECONDS', 10)

    def send_email(
        self,
        from_email: str,
        to: List[str],
        subject: str,
        text: str,
        reply_to: Optional[str] = None,
    ) -> EmailSendResult:
        """
        Send a plain-text email.

        Args:
            from_email: Sender address on a domain verified with Resend
            to: Recipient addresses
            subject: Subject line
            text: Plain-text body
            reply_to: Optional Reply-To address

        Returns:
            EmailSendResult with the Resend message id on success. Provider
            and network errors are captured in ``error``, never raised.
        """
        payload = {
            'from': from_email,
            'to': to,
            'subject': subject,
            'text': text,
        }

        if reply_to:
            payload['reply_to'] = reply_to

        try:
            response = requests.post(
                self.API_URL,
                json=payload,
                headers={'Authorization': f'Bearer {self.api_key}'},
                timeout=self.timeout
            )
        except requests.exceptions.Timeout:
            logger.error(f"Timeout sending email to {', '.join(to)}")
            return EmailSendResult(success=False, error='Request timeout')
        except requests.exceptions.RequestException as e:
            logger.error(f"Network error sending email to {', '.join(to)}: {str(e)}")
            return EmailSendResult(success=False, error=f'Network error: {str(e)}')

        try:
            data = response.json() if response.content else {}
        except ValueError:
            data = {}

        if response.ok:
            message_id = data.get('id') if isinstance(data, dict) else None
            logger.info(f"Email sent successfully to {', '.join(to)}. MessageId: {message_id}")
            return EmailSendResult(
                success=True,
                message_id=message_id,
                status_code=response.status_code,
            )

        error = data if data else response.text[:500]
        logger.error(
            f"Failed to send email to {', '.join(to)}. "
            f"Status: {response.status_code}, Error: {error}"
        )
        return EmailSendResult(
            success=False,
            error=error,
            status_code=response.status_code,
        )


# Singleton instance
resend_service = ResendEmailService()
