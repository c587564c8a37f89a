"""
Configuration Management

Pydantic-settings based configuration for the form intake service.
All settings can be overridden via environment variables.

Per-form policy (fields, validators, templates, Mailgun credentials) is not
configured here: it lives in the key-value store and is loaded per request.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment variables are prefixed with FORMINTAKE_ and are case-insensitive.
    Example: FORMINTAKE_KV_BUCKET_NAME=my-forms
    """

    model_config = SettingsConfigDict(
        env_prefix="FORMINTAKE_",
        env_file=[".env.local", ".env"],  # Try .env.local first
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Host Configuration
    project_name: str | None = Field(
        default=None,
        description="Project name, used to reject requests on the staging host",
    )
    staging_domain: str = Field(
        default="pages.dev",
        description="Domain under which the staging host <project_name>.<domain> lives",
    )

    # Form Configuration
    form_config_name: str = Field(
        default="form-config",
        description="Key of the form configuration record in the KV store",
    )

    # Turnstile Configuration
    turnstile_secret: str | None = Field(
        default=None,
        description="Turnstile secret key (bot check is disabled when unset)",
    )
    turnstile_verify_url: str = Field(
        default="https://challenges.cloudflare.com/turnstile/v0/siteverify",
        description="Turnstile siteverify endpoint",
    )
    turnstile_token_field: str = Field(
        default="cf-turnstile-response",
        description="Form field carrying the Turnstile token",
    )

    # Mailgun Configuration
    mailgun_api_base_url: str = Field(
        default="https://api.mailgun.net/v3",
        description="Mailgun API base URL (use https://api.eu.mailgun.net/v3 for EU)",
    )

    # KV Store Configuration
    kv_bucket_name: str = Field(
        default="form-intake-kv",
        description="S3 bucket used as the key-value store",
    )
    s3_endpoint_url: str | None = Field(
        default=None,
        description="S3 endpoint URL (for local development)",
    )

    # AWS Configuration
    aws_region: str = Field(
        default="us-west-2",
        description="AWS region",
    )

    # Application Configuration
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Deployment environment",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )

    @property
    def staging_host(self) -> str | None:
        """Host name that must never serve submissions."""
        if not self.project_name:
            return None
        return f"{self.project_name}.{self.staging_domain}"

    @property
    def bot_check_enabled(self) -> bool:
        return bool(self.turnstile_secret)

    @property
    def s3_config(self) -> dict:
        """S3 client configuration."""
        config = {"region_name": self.aws_region}
        if self.s3_endpoint_url and self.s3_endpoint_url != "mock":
            config["endpoint_url"] = self.s3_endpoint_url
        return config


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses lru_cache to ensure settings are loaded only once.
    Call get_settings.cache_clear() in tests after changing the environment.
    """
    return Settings()
