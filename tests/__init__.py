"""
Project-level tests for the consulting site backend.

Test Organization:
- test_turnstile_service.py / test_resend_service.py - outbound provider clients
- fakes.py - canned Turnstile and Resend responses shared with the app tests
- App-specific tests remain in their respective app directories (e.g., contact/tests.py)
"""
