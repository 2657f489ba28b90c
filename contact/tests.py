"""
Tests for the public contact form endpoint (POST /api/contact).
"""
from unittest.mock import patch

import pytest
from rest_framework import status

from tests.fakes import make_response


CONTACT_URL = '/api/contact'
CLIENT_IP = '203.0.113.7'


def post_contact(api_client, payload, ip=CLIENT_IP):
    return api_client.post(CONTACT_URL, payload, format='json', HTTP_X_FORWARDED_FOR=ip)


class TestContactFormSubmission:
    """Test public contact form submission."""

    def test_submit_valid_contact_form(self, api_client, contact_settings, providers, valid_payload):
        response = post_contact(api_client, valid_payload)

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {'ok': True, 'resendId': 'abc123'}
        assert len(providers.turnstile_calls) == 1
        assert len(providers.resend_calls) == 1

    def test_trailing_slash_accepted(self, api_client, contact_settings, providers, valid_payload):
        response = api_client.post(CONTACT_URL + '/', valid_payload, format='json')

        assert response.status_code == status.HTTP_200_OK

    def test_forwarded_ip_reaches_turnstile_and_email(self, api_client, contact_settings, providers, valid_payload):
        post_contact(api_client, valid_payload, ip='198.51.100.23, 10.0.0.1')

        assert providers.turnstile_calls[0]['data']['remoteip'] == '198.51.100.23'
        assert 'IP: 198.51.100.23' in providers.resend_calls[0]['json']['text']

    def test_no_forwarded_header(self, api_client, contact_settings, providers, valid_payload):
        api_client.post(CONTACT_URL, valid_payload, format='json')

        assert 'remoteip' not in providers.turnstile_calls[0]['data']
        assert 'IP: unknown' in providers.resend_calls[0]['json']['text']

    @pytest.mark.parametrize('missing', ['name', 'email', 'message'])
    def test_submit_missing_required_fields(self, api_client, contact_settings, providers, valid_payload, missing):
        del valid_payload[missing]

        response = post_contact(api_client, valid_payload)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'ok': False, 'error': 'missing_fields'}
        assert providers.turnstile_calls == []

    def test_missing_fields_regardless_of_other_fields(self, api_client, providers):
        response = post_contact(api_client, {'name': 'Jane', 'turnstileToken': 'tok', 'company': ''})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'missing_fields'

    def test_invalid_json(self, api_client, providers):
        response = api_client.post(
            CONTACT_URL,
            data='{"name": "Jane",',
            content_type='application/json',
            HTTP_X_FORWARDED_FOR=CLIENT_IP,
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'ok': False, 'error': 'invalid_json'}

    def test_json_array_body(self, api_client, providers):
        response = post_contact(api_client, [{'name': 'Jane'}])

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'ok': False, 'error': 'invalid_json'}

    def test_honeypot_spam_detection(self, api_client, contact_settings, providers, valid_payload):
        valid_payload['company'] = 'Spam Corp'

        response = post_contact(api_client, valid_payload)

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {'ok': True, 'dropped': True}
        assert providers.turnstile_calls == []
        assert providers.resend_calls == []

    def test_honeypot_without_token_is_still_dropped(self, api_client, providers, valid_payload):
        valid_payload['company'] = 'Spam Corp'
        del valid_payload['turnstileToken']

        response = post_contact(api_client, valid_payload)

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {'ok': True, 'dropped': True}

    def test_missing_turnstile_token(self, api_client, contact_settings, providers, valid_payload):
        valid_payload['turnstileToken'] = ''

        response = post_contact(api_client, valid_payload)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'ok': False, 'error': 'missing_turnstile_token'}
        assert providers.turnstile_calls == []

    def test_turnstile_rejection(self, api_client, contact_settings, providers, valid_payload):
        providers.turnstile = make_response(200, {
            'success': False,
            'error-codes': ['timeout-or-duplicate'],
        })

        response = post_contact(api_client, valid_payload)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['ok'] is False
        assert response.data['error'].startswith('turnstile_failed:')
        assert 'timeout-or-duplicate' in response.data['error']
        assert providers.resend_calls == []

    def test_turnstile_http_error(self, api_client, contact_settings, providers, valid_payload):
        providers.turnstile = make_response(503, text='Service Unavailable')

        response = post_contact(api_client, valid_payload)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'ok': False, 'error': 'turnstile_verify_http_error'}
        assert providers.resend_calls == []

    def test_missing_turnstile_secret(self, api_client, contact_settings, providers, valid_payload):
        contact_settings.TURNSTILE_SECRET_KEY = ''

        response = post_contact(api_client, valid_payload)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'ok': False, 'error': 'missing_turnstile_secret'}
        assert providers.turnstile_calls == []

    def test_missing_email_api_key(self, api_client, contact_settings, providers, valid_payload):
        contact_settings.RESEND_API_KEY = ''

        response = post_contact(api_client, valid_payload)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data == {'ok': False, 'error': 'missing_email_env'}
        assert len(providers.turnstile_calls) == 1
        assert providers.resend_calls == []

    def test_resend_failure(self, api_client, contact_settings, providers, valid_payload):
        providers.resend = make_response(500, {'statusCode': 500, 'name': 'internal_server_error'})

        response = post_contact(api_client, valid_payload)

        assert response.status_code == status.HTTP_502_BAD_GATEWAY
        assert response.data == {'ok': False, 'error': 'resend_error'}

    def test_unexpected_error(self, api_client, contact_settings, providers, valid_payload):
        with patch(
            'contact.notifications.ContactNotificationDispatcher.send',
            side_effect=KeyError('id'),
        ):
            response = post_contact(api_client, valid_payload)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data['ok'] is False
        assert response.data['error'].startswith('server_error:')

    def test_identical_invalid_payload_gets_identical_error(self, api_client, providers):
        payload = {'name': '', 'email': 'jane@example.com', 'message': 'Hello'}

        first = post_contact(api_client, payload)
        second = post_contact(api_client, payload)

        assert first.status_code == second.status_code == status.HTTP_400_BAD_REQUEST
        assert first.data == second.data == {'ok': False, 'error': 'missing_fields'}


class TestRateLimiting:
    """Test rate limiting for contact form."""

    def test_rate_limit_per_window(self, api_client, contact_settings, providers, valid_payload):
        # Submit 5 times (should succeed)
        for _ in range(5):
            response = post_contact(api_client, valid_payload)
            assert response.status_code == status.HTTP_200_OK

        # 6th submission should be rate limited
        response = post_contact(api_client, valid_payload)
        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
        assert response.data == {'ok': False, 'error': 'rate_limited'}
        assert 0 < int(response['Retry-After']) <= 600
        assert len(providers.resend_calls) == 5

    def test_failed_submissions_count(self, api_client, providers):
        for _ in range(5):
            response = post_contact(api_client, {})
            assert response.status_code == status.HTTP_400_BAD_REQUEST

        response = post_contact(api_client, {})
        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS

    def test_limit_is_per_ip(self, api_client, providers):
        for _ in range(6):
            post_contact(api_client, {}, ip='203.0.113.7')

        response = post_contact(api_client, {}, ip='198.51.100.2')
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_rate_limited_before_parsing(self, api_client, providers):
        for _ in range(5):
            post_contact(api_client, {})

        response = api_client.post(
            CONTACT_URL,
            data='not json',
            content_type='application/json',
            HTTP_X_FORWARDED_FOR=CLIENT_IP,
        )
        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
