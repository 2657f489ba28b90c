"""
Settings for the pytest suite.

Provides a throwaway SECRET_KEY and clears every external credential so
tests opt into configuration explicitly with override_settings.
"""
import os

os.environ.setdefault('SECRET_KEY', 'test-only-secret-key')

from .settings import *  # noqa: E402,F401,F403

DEBUG = False
SECURE_SSL_REDIRECT = False
ALLOWED_HOSTS = ['testserver', 'localhost']

TURNSTILE_SECRET_KEY = ''
RESEND_API_KEY = ''
CONTACT_TO_EMAIL = ''
CONTACT_FROM_EMAIL = ''

CONTACT_RATE_LIMIT_MAX = 5
CONTACT_RATE_LIMIT_WINDOW_SECONDS = 600

LOGGING['root']['handlers'] = ['console']  # noqa: F405
