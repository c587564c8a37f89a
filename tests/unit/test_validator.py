"""
Unit tests for the submission validator.

Tests cover:
- Country gate
- Honeypot gate
- Per-field rules and wildcard resolution
- Gate ordering and short-circuiting
- field_valid with raw specifiers
"""

from typing import Any

import pytest

from intake.shared.models.form_config import FormConfig
from intake.validator import COUNTRY_GATE, HONEYPOT_GATE, ValidationOutcome, field_valid, validate


def _config(record: dict[str, Any], **overrides: Any) -> FormConfig:
    data = {**record, **overrides}
    return FormConfig.model_validate({k: v for k, v in data.items() if v is not None})


class TestCountryGate:
    """Tests for the allowed_countries gate."""

    def test_allowed_country_passes(self, form_config, valid_submission):
        assert validate(form_config, "AU", valid_submission)

    @pytest.mark.parametrize("country", ["US", "au", "", None])
    def test_other_country_fails(self, form_config, valid_submission, country):
        outcome = validate(form_config, country, valid_submission)
        assert not outcome
        assert outcome.rule == COUNTRY_GATE

    @pytest.mark.parametrize("country", ["US", "XX", None])
    def test_gate_skipped_without_allow_list(self, form_config_record, valid_submission, country):
        config = _config(form_config_record, allowed_countries=None)
        assert validate(config, country, valid_submission)


class TestHoneypotGate:
    """Tests for the honeypot gate."""

    def test_missing_honeypot_fails(self, form_config, valid_submission):
        del valid_submission["website"]
        outcome = validate(form_config, "AU", valid_submission)
        assert not outcome
        assert outcome.rule == HONEYPOT_GATE
        assert outcome.field == "website"

    def test_filled_honeypot_fails(self, form_config, valid_submission):
        valid_submission["website"] = "http://spam.example.com"
        outcome = validate(form_config, "AU", valid_submission)
        assert not outcome
        assert outcome.rule == HONEYPOT_GATE

    def test_empty_honeypot_passes(self, form_config, valid_submission):
        assert validate(form_config, "AU", valid_submission)

    def test_no_honeypot_configured(self, form_config_record, valid_submission):
        config = _config(form_config_record, honeypot=None)
        del valid_submission["website"]
        assert validate(config, "AU", valid_submission)


class TestFieldGate:
    """Tests for per-field validation."""

    def test_invalid_email_fails(self, form_config, valid_submission):
        valid_submission["email"] = "not-an-email"
        outcome = validate(form_config, "AU", valid_submission)
        assert outcome == ValidationOutcome(valid=False, rule="email", field="email")

    def test_invalid_phone_fails(self, form_config, valid_submission):
        valid_submission["phone"] = "12345"
        outcome = validate(form_config, "AU", valid_submission)
        assert outcome.field == "phone"
        assert outcome.rule == "phone"

    def test_value_outside_allowed_set_fails(self, form_config, valid_submission):
        valid_submission["topic"] = "billing"
        outcome = validate(form_config, "AU", valid_submission)
        assert outcome.field == "topic"

    def test_missing_field_uses_wildcard_notblank(self, form_config, valid_submission):
        del valid_submission["message"]
        outcome = validate(form_config, "AU", valid_submission)
        assert outcome.field == "message"
        assert outcome.rule == "notblank"

    def test_fields_outside_list_are_ignored(self, form_config, valid_submission):
        valid_submission["utm_source"] = ""
        assert validate(form_config, "AU", valid_submission)

    def test_blank_wildcard_with_overrides(self, form_config_record):
        config = _config(
            form_config_record,
            validations={"*": "blank", "email": "email"},
            honeypot=None,
        )
        submission = {"name": "", "email": "a@b.co", "phone": "", "topic": "", "message": ""}
        assert validate(config, "AU", submission)

        submission["name"] = "Jane"
        outcome = validate(config, "AU", submission)
        assert outcome.field == "name"
        assert outcome.rule == "blank"

    def test_default_validations(self, form_config_record):
        config = _config(form_config_record, validations=None, honeypot=None)
        submission = {
            "name": "Jane",
            "email": "jane@example.com",
            "phone": "anything",
            "topic": "anything",
            "message": "hi",
        }
        assert validate(config, "AU", submission)

        submission["email"] = "nope"
        assert validate(config, "AU", submission).field == "email"

    def test_regex_validator(self, form_config_record):
        config = _config(
            form_config_record,
            fields=["postcode"],
            validations={"postcode": "regex:[0-9]{4}"},
            honeypot=None,
        )
        assert validate(config, "AU", {"postcode": "2000"})
        assert not validate(config, "AU", {"postcode": "20000"})


class TestOrdering:
    """Gates run country, honeypot, then fields in order."""

    def test_country_checked_before_honeypot(self, form_config, valid_submission):
        valid_submission["website"] = "filled"
        assert validate(form_config, "US", valid_submission).rule == COUNTRY_GATE

    def test_honeypot_checked_before_fields(self, form_config, valid_submission):
        valid_submission["website"] = "filled"
        valid_submission["email"] = "bad"
        assert validate(form_config, "AU", valid_submission).rule == HONEYPOT_GATE

    def test_first_invalid_field_reported(self, form_config, valid_submission):
        valid_submission["email"] = "bad"
        valid_submission["message"] = ""
        assert validate(form_config, "AU", valid_submission).field == "email"


class TestFieldValid:
    """Tests for field_valid with raw specifiers."""

    def test_email(self):
        assert field_valid("a@b.co", "email") is True
        assert field_valid("not-an-email", "email") is False

    def test_notblank(self):
        assert field_valid("", "notblank") is False
        assert field_valid(None, "notblank") is False
        assert field_valid("x", "notblank") is True

    def test_phone(self):
        assert field_valid("0412-345-678", "phone") is True
        assert field_valid("12345", "phone") is False

    def test_allowed_values(self):
        assert field_valid("b", ["a", "b"]) is True
        assert field_valid("c", ["a", "b"]) is False

    @pytest.mark.parametrize("validator", ["unknown", 7, None, {"a": "b"}])
    def test_unresolvable_validator_fails(self, validator):
        assert field_valid("anything", validator) is False
