"""
Tests for the check_contact_config management command.
"""
from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError


class TestCheckContactConfig:

    def test_fully_configured(self, contact_settings):
        out = StringIO()

        call_command('check_contact_config', stdout=out)

        assert 'Contact form is fully configured' in out.getvalue()
        assert '5 submissions per 600s' in out.getvalue()

    def test_reports_every_missing_setting(self, settings):
        settings.TURNSTILE_SECRET_KEY = ''
        settings.RESEND_API_KEY = ''
        settings.CONTACT_TO_EMAIL = 'hello@consulting.example'
        settings.CONTACT_FROM_EMAIL = ''
        out = StringIO()

        with pytest.raises(CommandError, match='3 contact setting'):
            call_command('check_contact_config', stdout=out)

        output = out.getvalue()
        assert 'Missing: TURNSTILE_SECRET_KEY' in output
        assert 'Missing: RESEND_API_KEY' in output
        assert 'Missing: CONTACT_FROM_EMAIL' in output
        assert 'CONTACT_TO_EMAIL' not in output
