"""
Integration tests for the form intake service.

These tests run the Lambda handler against a moto-mocked KV bucket and
fake Mailgun/Turnstile endpoints.
"""
