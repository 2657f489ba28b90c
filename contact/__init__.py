"""
Contact Form App

Handles contact form submissions from the consulting website:
- Per-IP sliding-window rate limiting
- Honeypot and Cloudflare Turnstile spam prevention
- Inquiry notification emails via Resend

Submissions are never stored; each one lives for a single request.
"""
