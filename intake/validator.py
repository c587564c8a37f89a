"""
Submission Validator

Applies a form configuration's policy to an untyped submission.

Gates run in a fixed order and the first failure wins:
1. Country allow-list (only when allowed_countries is configured)
2. Honeypot (only when honeypot is configured)
3. Per-field rules, in the configured field order
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import structlog

from intake.shared.models.form_config import FormConfig
from intake.shared.models.rules import FieldRule, parse_rule

log = structlog.get_logger()

COUNTRY_GATE = "country"
HONEYPOT_GATE = "honeypot"


@dataclass(frozen=True)
class ValidationOutcome:
    """Validation verdict plus the first rule that failed, if any."""

    valid: bool
    rule: str | None = None
    field: str | None = None

    def __bool__(self) -> bool:
        return self.valid


PASSED = ValidationOutcome(valid=True)


def field_valid(value: str | None, validator: FieldRule | Any) -> bool:
    """
    Check one value against a rule.

    Accepts a resolved FieldRule or a raw validator specifier. A specifier
    that cannot be resolved fails the value.
    """
    try:
        rule = parse_rule(validator)
    except ValueError as e:
        log.warning("unresolvable_validator", validator=validator, error=str(e))
        return False

    return rule.check(value)


def validate(
    config: FormConfig,
    country: str | None,
    submission: Mapping[str, str],
) -> ValidationOutcome:
    """
    Validate a submission against a form configuration.

    Args:
        config: Normalized form configuration
        country: ISO country code of the submitting client
        submission: Submitted field values

    Returns:
        ValidationOutcome, truthy only if every gate and field passed
    """
    if config.allowed_countries is not None and country not in config.allowed_countries:
        log.warning("submission_country_not_allowed", country=country)
        return ValidationOutcome(valid=False, rule=COUNTRY_GATE)

    if config.honeypot is not None:
        if config.honeypot not in submission:
            log.warning("honeypot_missing", honeypot=config.honeypot)
            return ValidationOutcome(valid=False, rule=HONEYPOT_GATE, field=config.honeypot)

        if submission[config.honeypot] != "":
            log.warning("honeypot_filled", honeypot=config.honeypot)
            return ValidationOutcome(valid=False, rule=HONEYPOT_GATE, field=config.honeypot)

    for field in config.field_names:
        value = submission.get(field)
        rule = config.rule_for(field)

        if not rule.check(value):
            log.warning("field_invalid", field=field, rule=rule.name)
            return ValidationOutcome(valid=False, rule=rule.name, field=field)

    return PASSED
