"""
Custom Exceptions for the Form Intake Service

All exceptions follow the pattern of specific, actionable errors
with context needed for debugging and logging.
"""

from dataclasses import dataclass
from typing import Any


class FormIntakeError(Exception):
    """Base exception for the form intake service."""

    def __init__(self, message: str, **context: Any) -> None:
        self.message = message
        self.context = context
        super().__init__(message)

    def __str__(self) -> str:
        context = {k: v for k, v in self.context.items() if v is not None}
        if context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in context.items())
            return f"{self.message} ({context_str})"
        return self.message


@dataclass
class FormParseError(FormIntakeError):
    """Request body could not be parsed into form fields."""

    content_type: str | None = None

    def __init__(self, message: str, content_type: str | None = None) -> None:
        self.content_type = content_type
        super().__init__(message, content_type=content_type)


@dataclass
class BotCheckError(FormIntakeError):
    """Bot verification call failed before producing an outcome."""

    error_message: str | None = None

    def __init__(self, error_message: str | None = None) -> None:
        self.error_message = error_message
        super().__init__(
            f"Bot verification request failed: {error_message or 'Unknown error'}"
        )


class ConfigLoadError(FormIntakeError):
    """Form configuration could not be loaded."""


@dataclass
class ConfigNotFoundError(ConfigLoadError):
    """No form configuration record exists under the requested name."""

    config_name: str

    def __init__(self, config_name: str) -> None:
        self.config_name = config_name
        super().__init__(
            f"Form configuration '{config_name}' not found",
            config_name=config_name,
        )


@dataclass
class InvalidConfigError(ConfigLoadError):
    """Form configuration record exists but does not describe a usable form."""

    config_name: str
    errors: list[str]

    def __init__(self, config_name: str, errors: list[str]) -> None:
        self.config_name = config_name
        self.errors = errors
        super().__init__(
            f"Form configuration '{config_name}' is invalid: {'; '.join(errors)}",
        )


@dataclass
class StorageError(FormIntakeError):
    """Key-value store operation failed."""

    operation: str  # "get", "put"
    key: str

    def __init__(
        self,
        operation: str,
        key: str,
        error_message: str | None = None,
    ) -> None:
        self.operation = operation
        self.key = key
        super().__init__(
            f"KV {operation} failed for '{key}': {error_message or 'Unknown error'}",
            operation=operation,
            key=key,
        )


@dataclass
class MailgunError(FormIntakeError):
    """Mailgun rejected a message or could not be reached."""

    recipient: str | None = None
    status_code: int | None = None
    error_message: str | None = None

    def __init__(
        self,
        recipient: str | None = None,
        status_code: int | None = None,
        error_message: str | None = None,
    ) -> None:
        self.recipient = recipient
        self.status_code = status_code
        self.error_message = error_message
        super().__init__(
            f"Mailgun send failed{f' for {recipient}' if recipient else ''}: "
            f"{error_message or 'Unknown Mailgun error'}",
            status_code=status_code,
        )
