"""
Contact Submission Pipeline

Runs one contact submission through its checks in a fixed order and stops at
the first one that fails:

    rate limit -> payload -> honeypot -> token present -> Turnstile -> email

The resource-free checks come first so abusive traffic never reaches
Cloudflare or Resend. Every stage reports a value; only the outermost
``submit`` catches exceptions, and turns them into UNEXPECTED_ERROR.
"""
import enum
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from django.utils import timezone
from rest_framework.exceptions import ParseError, UnsupportedMediaType

from consulting_site.turnstile_service import turnstile_service
from .notifications import MISSING_EMAIL_ENV, contact_notification_dispatcher
from .rate_limiting import contact_rate_limiter
from .serializers import MISSING_FIELDS, ContactFormSubmitSerializer

logger = logging.getLogger(__name__)


class SubmissionState(enum.Enum):
    RATE_LIMITED = 'rate_limited'
    INVALID_PAYLOAD = 'invalid_payload'
    DROPPED = 'dropped'
    MISSING_TOKEN = 'missing_token'
    VERIFICATION_FAILED = 'verification_failed'
    MISCONFIGURED_SERVICE = 'misconfigured_service'
    DELIVERY_FAILED = 'delivery_failed'
    DELIVERED = 'delivered'
    UNEXPECTED_ERROR = 'unexpected_error'

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self]


STATUS_CODES = {
    SubmissionState.RATE_LIMITED: 429,
    SubmissionState.INVALID_PAYLOAD: 400,
    SubmissionState.DROPPED: 200,
    SubmissionState.MISSING_TOKEN: 400,
    SubmissionState.VERIFICATION_FAILED: 400,
    SubmissionState.MISCONFIGURED_SERVICE: 500,
    SubmissionState.DELIVERY_FAILED: 502,
    SubmissionState.DELIVERED: 200,
    SubmissionState.UNEXPECTED_ERROR: 500,
}


@dataclass(frozen=True)
class ContactOutcome:
    state: SubmissionState
    body: Dict[str, Any]
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def status_code(self) -> int:
        return self.state.status_code

    @classmethod
    def failure(cls, state, error, headers=None):
        return cls(state=state, body={'ok': False, 'error': error}, headers=headers or {})


class ContactSubmissionPipeline:
    """
    Orchestrates a single contact form submission.

    Collaborators are injected so tests can swap in spies; the defaults are
    the process-wide limiter and the configured Turnstile/Resend services.
    """

    def __init__(self, rate_limiter=None, verifier=None, dispatcher=None):
        self.rate_limiter = rate_limiter or contact_rate_limiter
        self.verifier = verifier or turnstile_service
        self.dispatcher = dispatcher or contact_notification_dispatcher

    def submit(self, client_ip: str, read_payload: Callable[[], Any]) -> ContactOutcome:
        """
        Process one submission.

        Args:
            client_ip: Resolved client IP ('unknown' when not available)
            read_payload: Returns the parsed request body; only called once
                the rate limit check has passed

        Returns:
            ContactOutcome describing the terminal state, status and body
        """
        try:
            return self._run(client_ip, read_payload)
        except Exception as exc:
            logger.exception(f"Unexpected error handling contact submission from {client_ip}")
            return ContactOutcome.failure(SubmissionState.UNEXPECTED_ERROR, f"server_error:{exc}")

    def _run(self, client_ip, read_payload) -> ContactOutcome:
        if self.rate_limiter.check_and_record(client_ip):
            retry_after = self.rate_limiter.retry_after(client_id=client_ip)
            logger.warning(f"Contact form rate limit exceeded for {client_ip}")
            return ContactOutcome.failure(
                SubmissionState.RATE_LIMITED,
                'rate_limited',
                headers={'Retry-After': str(retry_after)},
            )

        payload = self._load_payload(read_payload)
        if payload is None:
            return ContactOutcome.failure(SubmissionState.INVALID_PAYLOAD, 'invalid_json')

        serializer = ContactFormSubmitSerializer(data=payload)
        if not serializer.is_valid():
            logger.info(f"Rejected contact submission from {client_ip}: {serializer.errors}")
            return ContactOutcome.failure(SubmissionState.INVALID_PAYLOAD, MISSING_FIELDS)
        submission = serializer.save()

        # Honeypot hit: answer like a success so bots learn nothing
        if submission.is_spam:
            logger.info(f"Honeypot triggered by {client_ip}, dropping submission")
            return ContactOutcome(state=SubmissionState.DROPPED, body={'ok': True, 'dropped': True})

        if not submission.verification_token:
            return ContactOutcome.failure(SubmissionState.MISSING_TOKEN, 'missing_turnstile_token')

        verification = self.verifier.verify(submission.verification_token, client_ip)
        if not verification.accepted:
            return ContactOutcome.failure(
                SubmissionState.VERIFICATION_FAILED,
                verification.failure_reason,
            )

        notification = self.dispatcher.send(submission, client_ip, timezone.now())
        if not notification.delivered:
            if notification.failure_reason == MISSING_EMAIL_ENV:
                return ContactOutcome.failure(SubmissionState.MISCONFIGURED_SERVICE, MISSING_EMAIL_ENV)
            return ContactOutcome.failure(SubmissionState.DELIVERY_FAILED, notification.failure_reason)

        logger.info(
            f"Contact inquiry from {client_ip} delivered, "
            f"resend id {notification.provider_message_id}"
        )
        body = {'ok': True}
        if notification.provider_message_id is not None:
            body['resendId'] = notification.provider_message_id
        return ContactOutcome(state=SubmissionState.DELIVERED, body=body)

    @staticmethod
    def _load_payload(read_payload) -> Optional[Mapping]:
        try:
            payload = read_payload()
        except (ParseError, UnsupportedMediaType) as e:
            logger.info(f"Unparseable contact submission body: {e}")
            return None
        if not isinstance(payload, Mapping):
            return None
        return payload
