"""
Turnstile Tools

Bot-check gateway for Cloudflare Turnstile. Verifies the challenge token a
browser submitted alongside the form.
"""

from dataclasses import dataclass, field

import httpx
import structlog

from intake.shared.config import get_settings
from intake.shared.exceptions import BotCheckError

log = structlog.get_logger()


@dataclass(frozen=True)
class BotCheckOutcome:
    """Reduced siteverify response."""

    success: bool
    error_codes: list[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.success


def _get_http_client() -> httpx.Client:
    """Get HTTP client for siteverify."""
    return httpx.Client()


def verify(secret: str, token: str, client_ip: str | None) -> BotCheckOutcome:
    """
    Verify a challenge token.

    Args:
        secret: Turnstile secret key
        token: Token from the submitted form
        client_ip: Submitting client's IP address

    Returns:
        BotCheckOutcome with success flag and provider error codes

    Raises:
        BotCheckError: If the provider could not be reached or answered
            with something other than a JSON verdict
    """
    settings = get_settings()

    data = {"secret": secret, "response": token}
    if client_ip:
        data["remoteip"] = client_ip

    log.debug("verifying_bot_check", client_ip=client_ip, has_token=bool(token))

    try:
        with _get_http_client() as client:
            response = client.post(settings.turnstile_verify_url, data=data)
            response.raise_for_status()
            body = response.json()
    except httpx.HTTPError as e:
        log.error("bot_check_request_failed", error=str(e))
        raise BotCheckError(error_message=str(e)) from e
    except ValueError as e:
        log.error("bot_check_response_not_json", error=str(e))
        raise BotCheckError(error_message=f"Invalid siteverify response: {e}") from e

    if not isinstance(body, dict):
        raise BotCheckError(error_message=f"Unexpected siteverify response: {body!r}")

    codes = body.get("error-codes") or []
    if not isinstance(codes, list):
        raise BotCheckError(error_message=f"Unexpected siteverify error-codes: {codes!r}")

    outcome = BotCheckOutcome(
        success=body.get("success") is True,
        error_codes=[str(code) for code in codes],
    )

    log.info(
        "bot_check_verified",
        success=outcome.success,
        error_codes=outcome.error_codes,
        hostname=body.get("hostname"),
    )

    return outcome
