"""
Tests for contact form payload validation.
"""
import pytest

from contact.serializers import ContactFormSubmitSerializer, MISSING_FIELDS, Submission


def validate(payload):
    serializer = ContactFormSubmitSerializer(data=payload)
    if serializer.is_valid():
        return serializer.save()
    return serializer.errors


class TestContactFormSubmitSerializer:

    def test_builds_trimmed_submission(self, valid_payload):
        valid_payload['name'] = '  Jane Doe \n'
        valid_payload['subject'] = ' SEO Consulting '

        submission = validate(valid_payload)

        assert isinstance(submission, Submission)
        assert submission.name == 'Jane Doe'
        assert submission.subject == 'SEO Consulting'
        assert submission.verification_token == 'XXXX.DUMMY.TOKEN.XXXX'
        assert submission.honeypot == ''
        assert submission.is_spam is False

    def test_optional_fields_default_to_empty(self):
        submission = validate({'name': 'Jane', 'email': 'jane@example.com', 'message': 'Hi'})

        assert submission.subject == ''
        assert submission.honeypot == ''
        assert submission.verification_token == ''

    def test_non_string_values_are_coerced(self):
        submission = validate({
            'name': 42,
            'email': 'jane@example.com',
            'message': 3.5,
            'subject': None,
            'turnstileToken': None,
        })

        assert submission.name == '42'
        assert submission.message == '3.5'
        assert submission.subject == ''
        assert submission.verification_token == ''

    @pytest.mark.parametrize('missing', ['name', 'email', 'message'])
    def test_required_field_missing(self, valid_payload, missing):
        del valid_payload[missing]

        errors = validate(valid_payload)

        assert errors['non_field_errors'][0].code == MISSING_FIELDS

    @pytest.mark.parametrize('blank', ['name', 'email', 'message'])
    def test_required_field_whitespace_only(self, valid_payload, blank):
        valid_payload[blank] = '   '

        errors = validate(valid_payload)

        assert errors['non_field_errors'][0].code == MISSING_FIELDS

    def test_email_format_not_checked(self, valid_payload):
        valid_payload['email'] = 'not-an-email'

        submission = validate(valid_payload)

        assert submission.email == 'not-an-email'

    def test_honeypot_marks_spam(self, valid_payload):
        valid_payload['company'] = ' ACME Bots Inc. '

        submission = validate(valid_payload)

        assert submission.honeypot == 'ACME Bots Inc.'
        assert submission.is_spam is True

    def test_unknown_keys_ignored(self, valid_payload):
        valid_payload['website'] = 'http://spam.example'

        submission = validate(valid_payload)

        assert not hasattr(submission, 'website')

    def test_booleans_use_json_spelling(self, valid_payload):
        valid_payload['subject'] = True
        valid_payload['company'] = False

        submission = validate(valid_payload)

        assert submission.subject == 'true'
        assert submission.honeypot == 'false'
        assert submission.is_spam is True
