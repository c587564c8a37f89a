# Shared Infrastructure for the Form Intake Service
"""
Shared infrastructure components.

This package provides:
- Pydantic models for form configuration, validation rules and envelopes
- Tool implementations for the KV store (S3), Mailgun and Turnstile
- Configuration management
- Custom exceptions
"""

from intake.shared.config import Settings, get_settings
from intake.shared.exceptions import (
    BotCheckError,
    ConfigLoadError,
    ConfigNotFoundError,
    FormIntakeError,
    FormParseError,
    InvalidConfigError,
    MailgunError,
    StorageError,
)

__all__ = [
    # Exceptions
    "BotCheckError",
    "ConfigLoadError",
    "ConfigNotFoundError",
    "FormIntakeError",
    "FormParseError",
    "InvalidConfigError",
    "MailgunError",
    "StorageError",
    # Config
    "Settings",
    "get_settings",
]
