"""
FormSubmission Lambda

Receives website form submissions via API Gateway.
Validates, stores the raw submission, and sends user and admin emails.

Flow:
    Browser form POST
    → API Gateway
    → This Lambda
    → KV store (S3) + Mailgun
"""

from lambdas.form_submission.handler import handle_options, handle_post, lambda_handler
from lambdas.form_submission.request_parser import IntakeRequest, parse_event, parse_form

__all__ = [
    "IntakeRequest",
    "handle_options",
    "handle_post",
    "lambda_handler",
    "parse_event",
    "parse_form",
]
