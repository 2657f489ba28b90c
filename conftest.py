"""
Shared pytest fixtures for the contact form tests.
"""
from unittest.mock import patch

import pytest
from rest_framework.test import APIClient

from contact.rate_limiting import contact_rate_limiter
from tests.fakes import FakeProviders


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    """Clear limiter windows before and after each test to prevent pollution."""
    contact_rate_limiter.reset()
    yield
    contact_rate_limiter.reset()


@pytest.fixture
def api_client():
    """API client for making requests."""
    return APIClient()


@pytest.fixture
def contact_settings(settings):
    """Fully configured Turnstile and Resend credentials."""
    settings.TURNSTILE_SECRET_KEY = 'turnstile-secret'
    settings.RESEND_API_KEY = 're_test_key'
    settings.CONTACT_TO_EMAIL = 'hello@consulting.example'
    settings.CONTACT_FROM_EMAIL = 'website@consulting.example'
    return settings


@pytest.fixture
def providers():
    """Patch outbound HTTP with FakeProviders."""
    fake = FakeProviders()
    with patch('requests.post', side_effect=fake):
        yield fake


@pytest.fixture
def valid_payload():
    return {
        'name': 'Jane Doe',
        'email': 'jane@example.com',
        'message': 'We would like an SEO audit for our online shop.',
        'subject': 'SEO Consulting',
        'company': '',
        'turnstileToken': 'XXXX.DUMMY.TOKEN.XXXX',
    }
