"""
Mailgun Tools

Sends templated messages through the Mailgun messages API.
One authenticated, form-encoded POST per envelope; failures are not retried.
"""

import httpx
import structlog

from intake.shared.config import get_settings
from intake.shared.exceptions import MailgunError
from intake.shared.models.envelope import Envelope
from intake.shared.models.form_config import FormConfig

log = structlog.get_logger()

UNKNOWN_ERROR_MESSAGE = "Unknown Mailgun error"


def _get_http_client() -> httpx.Client:
    """Get HTTP client for Mailgun."""
    return httpx.Client()


def messages_url(domain: str) -> str:
    """Domain-scoped messages endpoint."""
    settings = get_settings()
    return f"{settings.mailgun_api_base_url.rstrip('/')}/{domain}/messages"


def _error_message(response: httpx.Response) -> str:
    """Pull the human-readable message out of a Mailgun error body."""
    try:
        body = response.json()
    except ValueError:
        return UNKNOWN_ERROR_MESSAGE

    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return UNKNOWN_ERROR_MESSAGE


def send_message(config: FormConfig, envelope: Envelope) -> str | None:
    """
    Send one message via Mailgun.

    Args:
        config: Form configuration holding the Mailgun domain and key
        envelope: Resolved message parameters

    Returns:
        Mailgun message ID, if the response carried one

    Raises:
        MailgunError: On transport failure or a non-success status
    """
    url = messages_url(config.mailgun_domain)

    log.info(
        "sending_mailgun_message",
        audience=envelope.audience.value,
        to=envelope.to,
        template=envelope.template,
        reply_to=envelope.reply_to,
    )

    try:
        with _get_http_client() as client:
            response = client.post(
                url,
                data=envelope.to_mailgun_form(),
                auth=("api", config.mailgun_key),
            )
    except httpx.HTTPError as e:
        log.error(
            "mailgun_request_failed",
            audience=envelope.audience.value,
            to=envelope.to,
            error=str(e),
        )
        raise MailgunError(recipient=envelope.to, error_message=str(e)) from e

    if not response.is_success:
        error_message = _error_message(response)
        log.error(
            "mailgun_send_failed",
            audience=envelope.audience.value,
            to=envelope.to,
            status_code=response.status_code,
            error_message=error_message,
        )
        raise MailgunError(
            recipient=envelope.to,
            status_code=response.status_code,
            error_message=error_message,
        )

    try:
        message_id = response.json().get("id")
    except (ValueError, AttributeError):
        message_id = None

    log.info(
        "mailgun_message_sent",
        audience=envelope.audience.value,
        message_id=message_id,
        to=envelope.to,
    )

    return message_id
