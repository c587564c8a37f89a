"""
FormSubmission Lambda Handler

Main entry point for website form submissions.
Validates a submission against its form configuration, stores it, and sends
a confirmation to the submitter and a notification to the administrator.

Trigger: API Gateway (REST or HTTP API) proxy integration, POST and OPTIONS
Output: JSON {"message": ...} with CORS headers

Flow:
1. Reject requests addressed to the staging host (404)
2. Parse the form body (500 on malformed input)
3. Verify the Turnstile token, when a secret is configured (400)
4. Load the form configuration from the KV store (500)
5. Validate the submission (400)
6. Store the submission with ip, country and threat score (500)
7. Send the user email, then the admin email (500)
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any

import structlog

from intake.payload_builder import build_admin_envelope, build_user_envelope
from intake.shared.config import get_settings
from intake.shared.exceptions import (
    BotCheckError,
    ConfigLoadError,
    FormParseError,
    MailgunError,
    StorageError,
)
from intake.shared.tools.form_config import load_form_config
from intake.shared.tools.mailgun import send_message
from intake.shared.tools.submissions import save_submission, submission_key
from intake.shared.tools.turnstile import verify
from intake.validator import validate
from lambdas.form_submission.request_parser import IntakeRequest, parse_event, parse_form

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

log = structlog.get_logger()

ALLOWED_METHODS = "POST, OPTIONS"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": ALLOWED_METHODS,
    "Access-Control-Allow-Headers": "Content-Type",
}

PREFLIGHT_HEADERS = ("origin", "access-control-request-method", "access-control-request-headers")


def _json_response(
    message: str,
    status_code: int = 200,
    headers: dict[str, str] | None = None,
) -> dict[str, Any]:
    """API Gateway proxy response with a {"message": ...} body."""
    return {
        "statusCode": status_code,
        "headers": {
            "Content-Type": "application/json;charset=UTF-8",
            **CORS_HEADERS,
            **(headers or {}),
        },
        "body": json.dumps({"message": message}),
    }


def _augment_submission(
    form: dict[str, str],
    client_ip: str | None,
    country: str | None,
    threat_score: str | None,
) -> dict[str, str]:
    """Copy of the submission with request metadata added."""
    record = dict(form)
    record["ip"] = client_ip or ""
    record["country"] = country or ""
    if threat_score is not None:
        record["threat_score"] = threat_score
    return record


def handle_options(request: IntakeRequest) -> dict[str, Any]:
    """
    Answer an OPTIONS request.

    Full CORS preflights get the CORS headers; plain OPTIONS requests get
    the Allow header.
    """
    if all(request.header(name) is not None for name in PREFLIGHT_HEADERS):
        return {"statusCode": 200, "headers": dict(CORS_HEADERS), "body": ""}

    return {"statusCode": 200, "headers": {"Allow": ALLOWED_METHODS}, "body": ""}


def handle_post(
    request: IntakeRequest,
    *,
    received_at: datetime | None = None,
) -> dict[str, Any]:
    """
    Process one form submission.

    Args:
        request: Parsed HTTP request
        received_at: Receipt time used for the storage key (default: now)

    Returns:
        API Gateway proxy response
    """
    settings = get_settings()
    received_at = received_at or datetime.now(timezone.utc)

    host = request.header("host")
    if settings.staging_host and host == settings.staging_host:
        log.warning("staging_host_rejected", host=host)
        return _json_response("Not Found", 404)

    log.info("form_submission_received", host=host)

    # Parse form body
    try:
        form = parse_form(request)
    except FormParseError as e:
        message = f"There was a problem getting form data: {e}"
        log.error("form_parse_failed", error=str(e))
        return _json_response(message, 500)

    country = request.header("cf-ipcountry")
    client_ip = request.header("cf-connecting-ip")

    # Bot check
    if settings.bot_check_enabled:
        token = form.get(settings.turnstile_token_field, "")
        try:
            outcome = verify(settings.turnstile_secret, token, client_ip)
        except BotCheckError as e:
            message = f"There was a problem verifying the submission: {e}"
            log.error("bot_check_failed", error=str(e))
            return _json_response(message, 400)

        if not outcome:
            log.warning("bot_check_rejected", error_codes=outcome.error_codes)
            return _json_response("Bot verification failed", 400)

    # Load form configuration
    config_name = settings.form_config_name
    try:
        config = load_form_config(config_name)
    except (ConfigLoadError, StorageError) as e:
        message = f'There was a problem getting config ("{config_name}"): {e}'
        log.error("form_config_load_failed", config_name=config_name, error=str(e))
        return _json_response(message, 500)

    # Validate
    result = validate(config, country, form)
    if not result:
        log.warning(
            "validation_failed",
            rule=result.rule,
            field=result.field,
            country=country,
        )
        return _json_response("Data validation failed", 400)

    # Store before sending so the record survives delivery failures
    key = submission_key(config.prefix, received_at)
    record = _augment_submission(form, client_ip, country, request.header("x-threat-score"))
    try:
        save_submission(key, record)
    except StorageError as e:
        message = f"There was a problem saving the form data: {e}"
        log.error("submission_save_failed", key=key, error=str(e))
        return _json_response(message, 500)

    # Send user email
    try:
        send_message(config, build_user_envelope(config, form))
    except MailgunError as e:
        message = f"There was a problem sending user email: {e}"
        log.error("user_email_failed", key=key, error=str(e))
        return _json_response(message, 500)

    # Send admin email
    try:
        send_message(config, build_admin_envelope(config, form))
    except MailgunError as e:
        message = f"There was a problem sending admin email: {e}"
        log.error("admin_email_failed", key=key, error=str(e))
        return _json_response(message, 500)

    log.info("form_submission_processed", key=key)

    return _json_response("Form submission OK", 200)


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """
    AWS Lambda handler for form submissions.

    Args:
        event: API Gateway proxy event
        context: Lambda context

    Returns:
        API Gateway proxy response
    """
    settings = get_settings()
    logging.getLogger().setLevel(settings.log_level)
    request_id = getattr(context, "aws_request_id", "local")

    try:
        request = parse_event(event)

        log.info(
            "processing_form_request",
            request_id=request_id,
            method=request.method,
            environment=settings.environment,
        )

        if request.method == "OPTIONS":
            return handle_options(request)

        if request.method == "POST":
            return handle_post(request)

        log.warning("method_not_allowed", request_id=request_id, method=request.method)
        return _json_response("Method Not Allowed", 405, headers={"Allow": ALLOWED_METHODS})

    except Exception as e:
        log.error("lambda_handler_failed", request_id=request_id, error=str(e), exc_info=True)
        return _json_response(str(e), 500)
