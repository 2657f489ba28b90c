"""
Management command to check that the contact form can deliver inquiries.

Usage:
    python manage.py check_contact_config
"""

from django.core.management.base import BaseCommand, CommandError

from consulting_site.turnstile_service import turnstile_service
from contact.notifications import missing_email_settings
from contact.rate_limiting import contact_rate_limiter


class Command(BaseCommand):
    help = 'Report contact form settings that are missing from the environment'

    def handle(self, *args, **options):
        missing = []

        if not turnstile_service.is_configured():
            missing.append('TURNSTILE_SECRET_KEY')
        missing.extend(missing_email_settings())

        self.stdout.write(
            f'Rate limit: {contact_rate_limiter.max_requests} submissions per '
            f'{contact_rate_limiter.window_seconds}s per client IP'
        )

        if missing:
            for name in missing:
                self.stdout.write(self.style.ERROR(f'  Missing: {name}'))
            raise CommandError(f'{len(missing)} contact setting(s) missing')

        self.stdout.write(self.style.SUCCESS('Contact form is fully configured'))
