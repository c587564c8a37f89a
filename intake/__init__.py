"""
Form intake service: validation and payload shaping for form submissions.
"""

from intake.payload_builder import build_admin_envelope, build_envelope, build_user_envelope
from intake.validator import ValidationOutcome, field_valid, validate

__all__ = [
    "ValidationOutcome",
    "build_admin_envelope",
    "build_envelope",
    "build_user_envelope",
    "field_valid",
    "validate",
]
