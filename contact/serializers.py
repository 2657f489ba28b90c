"""
Contact Form Serializers

Turns the untrusted JSON body of a contact submission into a Submission.
"""
from dataclasses import dataclass

from rest_framework import serializers
from rest_framework.fields import empty


MISSING_FIELDS = 'missing_fields'


@dataclass(frozen=True)
class Submission:
    """A validated contact form submission. Lives for one request only."""

    name: str
    email: str
    message: str
    subject: str = ''
    honeypot: str = ''
    verification_token: str = ''

    @property
    def is_spam(self) -> bool:
        return bool(self.honeypot)


class CoercedStringField(serializers.Field):
    """
    Accepts any JSON value and returns it as a trimmed string.

    Missing keys and nulls become ''.
    """

    def __init__(self, **kwargs):
        kwargs.setdefault('required', False)
        kwargs.setdefault('default', '')
        super().__init__(**kwargs)

    def run_validation(self, data=empty):
        if data is None:
            data = ''
        return super().run_validation(data)

    def to_internal_value(self, data):
        if isinstance(data, bool):
            # JSON spelling, not Python's
            return 'true' if data else 'false'
        return str(data).strip()

    def to_representation(self, value):
        return value


class ContactFormSubmitSerializer(serializers.Serializer):
    """
    Public contact form submission serializer.

    Only name, email and message are required. Email format and field lengths
    are not checked; the message is forwarded to the site owner as typed.
    """

    name = CoercedStringField(help_text="Name of the person contacting us")
    email = CoercedStringField(help_text="Reply address for the inquiry")
    message = CoercedStringField(help_text="Message content")
    subject = CoercedStringField(help_text="Optional subject, prefilled by some pages")

    # Honeypot field for spam prevention (hidden in the form, should be empty)
    company = CoercedStringField(source='honeypot', help_text="Honeypot field - should be empty")

    turnstileToken = CoercedStringField(
        source='verification_token',
        help_text="Cloudflare Turnstile response token"
    )

    def validate(self, attrs):
        if not all(attrs.get(field) for field in ('name', 'email', 'message')):
            raise serializers.ValidationError(
                "Name, email and message are required.",
                code=MISSING_FIELDS
            )
        return attrs

    def create(self, validated_data):
        return Submission(**validated_data)
