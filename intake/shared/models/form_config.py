"""
Form Configuration Model

Normalized, immutable view of a form configuration record stored in the
KV store. Records look like:

    {
        "prefix": "contact",
        "from": "noreply@example.com",
        "org": "Example Org",
        "admin_email": "admin@example.com",
        "mailgun_domain": "mg.example.com",
        "mailgun_key": "key-...",
        "honeypot": "website",
        "allowed_countries": ["AU", "NZ"],
        "fields": ["name", "email", "message"],
        "admin_template": {"name": "contact-admin", "subject": "New enquiry"},
        "user_template": {"name": "contact-user", "subject": "Thanks!"},
        "validations": {"*": "notblank", "email": "email"}
    }
"""

from collections.abc import Mapping
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

from intake.shared.models.rules import FieldRule, RuleKind, parse_rule

WILDCARD: Final[str] = "*"
DEFAULT_PREFIX: Final[str] = "submission"

# Applied when a record has no "validations" entry at all
DEFAULT_VALIDATIONS: Final[dict[str, str]] = {
    WILDCARD: RuleKind.NOTBLANK.value,
    "email": RuleKind.EMAIL.value,
}


def normalize_validations(raw: Mapping[str, Any] | None) -> dict[str, FieldRule]:
    """
    Resolve a raw "validations" mapping into rules.

    A missing mapping becomes DEFAULT_VALIDATIONS; a mapping without a
    wildcard entry gets a "notblank" wildcard.

    Raises:
        ValueError: If any specifier cannot be resolved
    """
    if raw is None:
        specifiers: dict[str, Any] = dict(DEFAULT_VALIDATIONS)
    elif isinstance(raw, Mapping):
        specifiers = dict(raw)
    else:
        raise ValueError(f"validations must be a mapping, got {type(raw).__name__}")

    specifiers.setdefault(WILDCARD, RuleKind.NOTBLANK.value)

    return {field: parse_rule(specifier) for field, specifier in specifiers.items()}


class EmailTemplate(BaseModel):
    """Provider-side template and subject line for one audience."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Mailgun template name")
    subject: str = Field(..., description="Subject line")


class FormConfig(BaseModel):
    """
    Fully resolved form configuration.

    Produced once per request from the stored record; every validator has
    already been resolved into a FieldRule and the wildcard always exists.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        arbitrary_types_allowed=True,
        extra="ignore",
    )

    prefix: str = Field(default=DEFAULT_PREFIX, description="Submission key namespace")
    from_address: str = Field(..., alias="from", description="Sender address")
    org: str = Field(..., description="Organisation display name")
    admin_email: str = Field(..., description="Administrator address")
    mailgun_domain: str = Field(..., description="Mailgun sending domain")
    mailgun_key: str = Field(..., description="Mailgun API key")
    honeypot: str | None = Field(default=None, description="Field that must be present and empty")
    allowed_countries: frozenset[str] | None = Field(
        default=None,
        description="ISO country codes allowed to submit",
    )
    field_names: tuple[str, ...] = Field(
        default=(),
        alias="fields",
        description="Validated fields, in validation order",
    )
    admin_template: EmailTemplate
    user_template: EmailTemplate
    validations: dict[str, FieldRule] = Field(default=None, validate_default=True)

    @field_validator("prefix", mode="before")
    @classmethod
    def _default_prefix(cls, value: Any) -> Any:
        return DEFAULT_PREFIX if value is None else value

    @field_validator("validations", mode="before")
    @classmethod
    def _resolve_validations(cls, value: Any) -> dict[str, FieldRule]:
        return normalize_validations(value)

    @property
    def sender(self) -> str:
        """From header: "<org> <<from>>"."""
        return f"{self.org} <{self.from_address}>"

    def rule_for(self, field: str) -> FieldRule:
        """Field-specific rule, falling back to the wildcard."""
        rule = self.validations.get(field)
        if rule is None:
            rule = self.validations[WILDCARD]
        return rule
