"""
Cloudflare Turnstile CAPTCHA Verification Service

Verifies Turnstile tokens from the contact form against the Cloudflare API.
Every call makes a single attempt; failures are reported as a
VerificationOutcome instead of being raised so the contact pipeline can map
them to response codes.

Documentation: https://developers.cloudflare.com/turnstile/get-started/server-side-validation/
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

import requests
from django.conf import settings

logger = logging.getLogger(__name__)


MISSING_SECRET = 'missing_turnstile_secret'
VERIFY_HTTP_ERROR = 'turnstile_verify_http_error'
REJECTED_PREFIX = 'turnstile_failed:'


@dataclass(frozen=True)
class VerificationOutcome:
    """Result of one siteverify round trip."""

    accepted: bool
    failure_reason: Optional[str] = None
    raw_provider_response: Optional[Any] = None


class TurnstileService:
    """
    Service for verifying Cloudflare Turnstile CAPTCHA tokens.

    Usage:
        outcome = turnstile_service.verify(token, client_ip='192.168.1.1')
        if not outcome.accepted:
            ...  # outcome.failure_reason is a client-safe error code
    """

    VERIFY_URL = 'https://challenges.cloudflare.com/turnstile/v0/siteverify'

    @property
    def secret_key(self) -> str:
        return getattr(settings, 'TURNSTILE_SECRET_KEY', '') or ''

    @property
    def timeout(self) -> float:
        return getattr(settings, 'TURNSTILE_TIMEOUT_SECONDS', 10)

    def is_configured(self) -> bool:
        return bool(self.secret_key)

    def verify(self, token: str, client_ip: Optional[str] = None) -> VerificationOutcome:
        """
        Verify a Turnstile token.

        Args:
            token: The Turnstile response token from the frontend widget
            client_ip: Client IP address; omitted from the request when unknown

        Returns:
            VerificationOutcome with ``accepted`` set, or a failure_reason of
            ``missing_turnstile_secret``, ``turnstile_verify_http_error`` or
            ``turnstile_failed:<codes>``
        """
        secret = self.secret_key
        if not secret:
            logger.error("TURNSTILE_SECRET_KEY not configured - cannot verify contact submissions")
            return VerificationOutcome(accepted=False, failure_reason=MISSING_SECRET)

        payload = {
            'secret': secret,
            'response': token,
        }

        # Include IP if known (recommended by Cloudflare)
        if client_ip and client_ip != 'unknown':
            payload['remoteip'] = client_ip

        try:
            response = requests.post(
                self.VERIFY_URL,
                data=payload,
                timeout=self.timeout
            )
        except requests.exceptions.Timeout:
            logger.error("Turnstile verification timeout")
            return VerificationOutcome(accepted=False, failure_reason=VERIFY_HTTP_ERROR)
        except requests.exceptions.RequestException as e:
            logger.error(f"Turnstile verification network error: {e}")
            return VerificationOutcome(accepted=False, failure_reason=VERIFY_HTTP_ERROR)

        if not response.ok:
            logger.error(
                f"Turnstile API returned status {response.status_code}: {response.text[:500]}"
            )
            return VerificationOutcome(accepted=False, failure_reason=VERIFY_HTTP_ERROR)

        try:
            result = response.json()
        except ValueError:
            logger.error(f"Turnstile API returned a non-JSON body: {response.text[:500]}")
            return VerificationOutcome(accepted=False, failure_reason=VERIFY_HTTP_ERROR)

        if not isinstance(result, dict):
            logger.error(f"Turnstile API returned unexpected payload: {result!r}")
            return VerificationOutcome(accepted=False, failure_reason=VERIFY_HTTP_ERROR)

        if result.get('success') is True:
            logger.info("Turnstile token verified successfully")
            return VerificationOutcome(accepted=True, raw_provider_response=result)

        error_codes = self.extract_error_codes(result)
        logger.warning(
            f"Turnstile verification failed: {error_codes} "
            f"({self.get_error_message(error_codes)})"
        )
        return VerificationOutcome(
            accepted=False,
            failure_reason=REJECTED_PREFIX + ','.join(error_codes),
            raw_provider_response=result,
        )

    @staticmethod
    def extract_error_codes(result: dict) -> list:
        """Return the provider's error codes, or ``['unknown']`` when absent or malformed."""
        codes = result.get('error-codes')
        if not isinstance(codes, list):
            return ['unknown']
        codes = [str(code) for code in codes if str(code).strip()]
        return codes or ['unknown']

    def get_error_message(self, error_codes: list) -> str:
        """
        Convert Turnstile error codes to human-readable messages for the logs.

        Common error codes:
        - missing-input-secret: Secret key missing
        - invalid-input-secret: Secret key invalid
        - missing-input-response: Token missing
        - invalid-input-response: Token invalid or expired
        - bad-request: Request was rejected as malformed
        - timeout-or-duplicate: Token already used or expired
        - internal-error: Cloudflare failed to validate the token
        """
        error_map = {
            'missing-input-secret': 'Server configuration error',
            'invalid-input-secret': 'Server configuration error',
            'missing-input-response': 'CAPTCHA token missing',
            'invalid-input-response': 'CAPTCHA token invalid or expired',
            'bad-request': 'Malformed verification request',
            'timeout-or-duplicate': 'CAPTCHA token expired or already used',
            'internal-error': 'Cloudflare internal error',
        }

        messages = [error_map.get(code, f'Unknown error: {code}') for code in error_codes]
        return '; '.join(messages)


# Singleton instance
turnstile_service = TurnstileService()
