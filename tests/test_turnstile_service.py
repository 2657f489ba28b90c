"""
Tests for Cloudflare Turnstile token verification.
"""
import pytest
import requests

from consulting_site.turnstile_service import (
    MISSING_SECRET,
    VERIFY_HTTP_ERROR,
    TurnstileService,
)
from tests.fakes import make_response


@pytest.fixture
def service():
    return TurnstileService()


class TestTurnstileVerify:

    def test_accepts_successful_token(self, service, contact_settings, providers):
        outcome = service.verify('token-1', '203.0.113.7')

        assert outcome.accepted is True
        assert outcome.failure_reason is None
        assert outcome.raw_provider_response['success'] is True

    def test_sends_form_encoded_secret_token_and_ip(self, service, contact_settings, providers):
        service.verify('token-1', '203.0.113.7')

        call = providers.turnstile_calls[0]
        assert call['data'] == {
            'secret': 'turnstile-secret',
            'response': 'token-1',
            'remoteip': '203.0.113.7',
        }
        assert call['timeout'] == contact_settings.TURNSTILE_TIMEOUT_SECONDS

    @pytest.mark.parametrize('client_ip', ['unknown', '', None])
    def test_omits_unknown_ip(self, service, contact_settings, providers, client_ip):
        service.verify('token-1', client_ip)

        assert 'remoteip' not in providers.turnstile_calls[0]['data']

    def test_missing_secret_fails_without_network_call(self, service, settings, providers):
        settings.TURNSTILE_SECRET_KEY = ''

        outcome = service.verify('token-1', '203.0.113.7')

        assert outcome.accepted is False
        assert outcome.failure_reason == MISSING_SECRET
        assert providers.turnstile_calls == []

    def test_rejection_carries_error_codes(self, service, contact_settings, providers):
        providers.turnstile = make_response(200, {
            'success': False,
            'error-codes': ['timeout-or-duplicate', 'invalid-input-response'],
        })

        outcome = service.verify('token-1', '203.0.113.7')

        assert outcome.accepted is False
        assert outcome.failure_reason == 'turnstile_failed:timeout-or-duplicate,invalid-input-response'

    @pytest.mark.parametrize('body', [
        {'success': False},
        {'success': False, 'error-codes': []},
        {'success': False, 'error-codes': 'not-a-list'},
        {'success': 'true'},
    ])
    def test_rejection_without_usable_codes_is_unknown(self, service, contact_settings, providers, body):
        providers.turnstile = make_response(200, body)

        outcome = service.verify('token-1', '203.0.113.7')

        assert outcome.accepted is False
        assert outcome.failure_reason == 'turnstile_failed:unknown'

    @pytest.mark.parametrize('status_code', [400, 500, 503])
    def test_non_2xx_is_http_error(self, service, contact_settings, providers, status_code):
        providers.turnstile = make_response(status_code, text='upstream failure')

        outcome = service.verify('token-1', '203.0.113.7')

        assert outcome.failure_reason == VERIFY_HTTP_ERROR

    def test_non_json_body_is_http_error(self, service, contact_settings, providers):
        providers.turnstile = make_response(200, text='<html>maintenance</html>')

        assert service.verify('token-1', 'ip').failure_reason == VERIFY_HTTP_ERROR

    @pytest.mark.parametrize('error', [
        requests.exceptions.Timeout('timed out'),
        requests.exceptions.ConnectionError('dns failure'),
    ])
    def test_network_errors_are_http_error(self, service, contact_settings, providers, error):
        providers.turnstile = error

        assert service.verify('token-1', 'ip').failure_reason == VERIFY_HTTP_ERROR


class TestErrorMessages:

    def test_known_and_unknown_codes(self):
        message = TurnstileService().get_error_message(['timeout-or-duplicate', 'weird-code'])

        assert message == 'CAPTCHA token expired or already used; Unknown error: weird-code'
