# Shared Models
"""
Form configuration, validation rules, and outbound message envelopes.
"""

from intake.shared.models.envelope import Audience, Envelope
from intake.shared.models.form_config import (
    DEFAULT_VALIDATIONS,
    WILDCARD,
    EmailTemplate,
    FormConfig,
    normalize_validations,
)
from intake.shared.models.rules import (
    BlankRule,
    EmailRule,
    FieldRule,
    NotBlankRule,
    OneOfRule,
    PhoneRule,
    RegexRule,
    RuleKind,
    parse_rule,
)

__all__ = [
    # Envelope
    "Audience",
    "Envelope",
    # Form configuration
    "DEFAULT_VALIDATIONS",
    "WILDCARD",
    "EmailTemplate",
    "FormConfig",
    "normalize_validations",
    # Rules
    "BlankRule",
    "EmailRule",
    "FieldRule",
    "NotBlankRule",
    "OneOfRule",
    "PhoneRule",
    "RegexRule",
    "RuleKind",
    "parse_rule",
]
