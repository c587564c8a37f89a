# Shared Tools
"""
I/O wrappers for the form intake service.

Each tool performs a single external call: KV store get/put (S3),
Mailgun message send, or Turnstile token verification.
"""

from intake.shared.tools.form_config import load_form_config, parse_form_config
from intake.shared.tools.kv import get_json, put_json
from intake.shared.tools.mailgun import send_message
from intake.shared.tools.submissions import save_submission, submission_key
from intake.shared.tools.turnstile import BotCheckOutcome, verify

__all__ = [
    # KV tools
    "get_json",
    "put_json",
    # Form configuration tools
    "load_form_config",
    "parse_form_config",
    # Submission store tools
    "save_submission",
    "submission_key",
    # Mailgun tools
    "send_message",
    # Turnstile tools
    "BotCheckOutcome",
    "verify",
]
