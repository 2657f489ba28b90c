"""
Contact Form Views

Public API endpoint for contact form submissions.
"""
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import AllowAny
from rest_framework.parsers import JSONParser

from .pipeline import ContactSubmissionPipeline
from .rate_limiting import get_client_ip


class ContactFormSubmitView(APIView):
    """
    Public endpoint for contact form submissions.

    POST /api/contact

    No authentication required. Rate limited per client IP, protected by a
    honeypot field and Cloudflare Turnstile, delivered by email via Resend.
    Responses carry a short machine-readable ``error`` code on failure.
    """

    authentication_classes = []
    permission_classes = [AllowAny]
    parser_classes = [JSONParser]

    pipeline_class = ContactSubmissionPipeline

    def post(self, request):
        """Submit a contact form."""
        outcome = self.pipeline_class().submit(
            client_ip=get_client_ip(request),
            read_payload=lambda: request.data,
        )
        return Response(outcome.body, status=outcome.status_code, headers=outcome.headers)
