"""
Form Configuration Tools

Loads a named form configuration record from the KV store and normalizes it
into a FormConfig. Records are re-read on every call; nothing is cached.
"""

from pydantic import ValidationError
import structlog

from intake.shared.exceptions import ConfigNotFoundError, InvalidConfigError
from intake.shared.models.form_config import FormConfig
from intake.shared.tools.kv import get_json

log = structlog.get_logger()


def parse_form_config(config_name: str, record: object) -> FormConfig:
    """
    Normalize a raw configuration record.

    Args:
        config_name: Name the record was loaded under (for error reporting)
        record: Decoded JSON record

    Returns:
        Immutable FormConfig with all validators resolved

    Raises:
        InvalidConfigError: If the record does not describe a usable form
    """
    if not isinstance(record, dict):
        raise InvalidConfigError(
            config_name,
            [f"expected a JSON object, got {type(record).__name__}"],
        )

    try:
        return FormConfig.model_validate(record)
    except ValidationError as e:
        errors = [
            f"{'.'.join(str(part) for part in err['loc']) or 'record'}: {err['msg']}"
            for err in e.errors()
        ]
        log.error("invalid_form_config", config_name=config_name, errors=errors)
        raise InvalidConfigError(config_name, errors) from e


def load_form_config(config_name: str) -> FormConfig:
    """
    Load and normalize a form configuration.

    Raises:
        ConfigNotFoundError: If no record exists under config_name
        InvalidConfigError: If the record is malformed
        StorageError: If the KV store cannot be read
    """
    log.info("loading_form_config", config_name=config_name)

    record = get_json(config_name)
    if record is None:
        log.error("form_config_not_found", config_name=config_name)
        raise ConfigNotFoundError(config_name)

    config = parse_form_config(config_name, record)

    log.debug(
        "form_config_loaded",
        config_name=config_name,
        fields=list(config.field_names),
        honeypot=config.honeypot,
        country_gate=config.allowed_countries is not None,
    )

    return config
