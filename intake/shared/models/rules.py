"""
Field Validation Rules

Validator specifiers from a form configuration are resolved once, when the
configuration is loaded, into one of the rule types below:

    "regex:<pattern>"   -> RegexRule
    "blank"             -> BlankRule
    "email"             -> EmailRule
    "notblank"          -> NotBlankRule
    "phone"             -> PhoneRule
    ["a", "b", ...]     -> OneOfRule

Any other specifier is rejected by parse_rule.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Final


class RuleKind(str, Enum):
    """Validator kinds understood by the rule engine."""

    REGEX = "regex"
    BLANK = "blank"
    EMAIL = "email"
    NOTBLANK = "notblank"
    PHONE = "phone"
    ONE_OF = "one_of"


REGEX_PREFIX: Final[str] = "regex:"

# Dotted or quoted local part; dotted domain with alphabetic TLD, or an IPv4 literal
EMAIL_PATTERN: Final[re.Pattern[str]] = re.compile(
    r'(([^<>()\[\]\\.,;:\s@"]+(\.[^<>()\[\]\\.,;:\s@"]+)*)|(".+"))'
    r"@((\[[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\])|(([a-zA-Z\-0-9]+\.)+[a-zA-Z]{2,}))"
)

# NNNN-NNN-NNN / NNNN NNN NNN, ten bare digits, or +<country><subscriber>
PHONE_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"[0-9]{4}([- ])[0-9]{3}\1[0-9]{3}|[0-9]{10}|\+[1-9][0-9]{10,14}"
)


@dataclass(frozen=True)
class FieldRule(ABC):
    """Base class for a resolved field validator."""

    kind: ClassVar[RuleKind]

    @property
    def name(self) -> str:
        return self.kind.value

    @abstractmethod
    def check(self, value: str | None) -> bool:
        """Whether the value satisfies this rule."""


@dataclass(frozen=True)
class RegexRule(FieldRule):
    """Value must fully match a configured pattern."""

    kind: ClassVar[RuleKind] = RuleKind.REGEX

    pattern: re.Pattern[str]

    @property
    def name(self) -> str:
        return f"{REGEX_PREFIX}{self.pattern.pattern}"

    def check(self, value: str | None) -> bool:
        return value is not None and self.pattern.fullmatch(value) is not None


@dataclass(frozen=True)
class BlankRule(FieldRule):
    kind: ClassVar[RuleKind] = RuleKind.BLANK

    def check(self, value: str | None) -> bool:
        return value == ""


@dataclass(frozen=True)
class EmailRule(FieldRule):
    kind: ClassVar[RuleKind] = RuleKind.EMAIL

    def check(self, value: str | None) -> bool:
        return value is not None and EMAIL_PATTERN.fullmatch(value) is not None


@dataclass(frozen=True)
class NotBlankRule(FieldRule):
    kind: ClassVar[RuleKind] = RuleKind.NOTBLANK

    def check(self, value: str | None) -> bool:
        return value is not None and value != ""


@dataclass(frozen=True)
class PhoneRule(FieldRule):
    kind: ClassVar[RuleKind] = RuleKind.PHONE

    def check(self, value: str | None) -> bool:
        return value is not None and PHONE_PATTERN.fullmatch(value) is not None


@dataclass(frozen=True)
class OneOfRule(FieldRule):
    """Value must be one of a fixed set of literals."""

    kind: ClassVar[RuleKind] = RuleKind.ONE_OF

    values: frozenset[str]

    @property
    def name(self) -> str:
        return f"{self.kind.value}{sorted(self.values)}"

    def check(self, value: str | None) -> bool:
        return value is not None and value in self.values


_NAMED_RULES: Final[dict[str, FieldRule]] = {
    RuleKind.BLANK.value: BlankRule(),
    RuleKind.EMAIL.value: EmailRule(),
    RuleKind.NOTBLANK.value: NotBlankRule(),
    RuleKind.PHONE.value: PhoneRule(),
}


def parse_rule(specifier: Any) -> FieldRule:
    """
    Resolve a validator specifier from a form configuration.

    Args:
        specifier: A validator name, a "regex:<pattern>" string, or a list of
            allowed literal values

    Returns:
        The resolved FieldRule

    Raises:
        ValueError: If the specifier is not understood
    """
    if isinstance(specifier, FieldRule):
        return specifier

    if isinstance(specifier, str):
        if specifier.startswith(REGEX_PREFIX):
            try:
                return RegexRule(re.compile(specifier[len(REGEX_PREFIX):]))
            except re.error as e:
                raise ValueError(f"Invalid regex validator {specifier!r}: {e}") from e

        rule = _NAMED_RULES.get(specifier)
        if rule is None:
            raise ValueError(
                f"Unknown validator {specifier!r}. "
                f"Valid values are: {sorted(_NAMED_RULES)} or '{REGEX_PREFIX}<pattern>'"
            )
        return rule

    if isinstance(specifier, (list, tuple, set, frozenset)):
        if not all(isinstance(item, str) for item in specifier):
            raise ValueError(f"Allowed-value validator must only contain strings: {specifier!r}")
        return OneOfRule(frozenset(specifier))

    raise ValueError(f"Unsupported validator specifier: {specifier!r}")
