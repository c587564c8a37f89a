"""
Request Parser Module

Turns API Gateway proxy events (REST API v1 and HTTP API v2 payloads) into
an IntakeRequest: method, case-insensitive headers, and parsed form fields.

Supported bodies:
- application/x-www-form-urlencoded
- multipart/form-data (file parts are skipped)
"""

import base64
import binascii
from dataclasses import dataclass, field
from email.message import EmailMessage
from email.parser import BytesParser
from email.policy import HTTP
from typing import Any
from urllib.parse import parse_qsl

import structlog

from intake.shared.exceptions import FormParseError

log = structlog.get_logger()

FORM_URLENCODED = "application/x-www-form-urlencoded"
MULTIPART_FORM_DATA = "multipart/form-data"


@dataclass
class IntakeRequest:
    """HTTP request as seen by the form submission handler."""

    method: str
    headers: dict[str, str] = field(default_factory=dict)
    body: str | bytes = ""
    is_base64_encoded: bool = False

    def header(self, name: str) -> str | None:
        """Case-insensitive header lookup."""
        return self.headers.get(name.lower())

    @property
    def content_type(self) -> str:
        return self.header("content-type") or ""


def _normalize_headers(raw: dict[str, Any] | None) -> dict[str, str]:
    """Lower-case header names; first value wins for multi-value headers."""
    headers: dict[str, str] = {}
    for name, value in (raw or {}).items():
        if value is None:
            continue
        if isinstance(value, list):
            if not value:
                continue
            value = value[0]
        headers.setdefault(name.lower(), str(value))
    return headers


def _decode_body(request: IntakeRequest) -> bytes:
    body = request.body or ""

    if request.is_base64_encoded:
        try:
            return base64.b64decode(body, validate=True)
        except (binascii.Error, ValueError) as e:
            raise FormParseError(f"Body is not valid base64: {e}") from e

    if isinstance(body, bytes):
        return body
    return body.encode("utf-8")


def parse_event(event: dict[str, Any]) -> IntakeRequest:
    """
    Build an IntakeRequest from an API Gateway proxy event.

    The body is kept as received; see parse_form.
    """
    method = event.get("httpMethod")
    if method is None:
        method = event.get("requestContext", {}).get("http", {}).get("method", "")

    headers = _normalize_headers(event.get("headers"))
    if "host" not in headers and event.get("requestContext", {}).get("domainName"):
        headers["host"] = event["requestContext"]["domainName"]

    return IntakeRequest(
        method=str(method).upper(),
        headers=headers,
        body=event.get("body") or "",
        is_base64_encoded=bool(event.get("isBase64Encoded")),
    )


def _parse_urlencoded(body: bytes) -> dict[str, str]:
    if not body.strip():
        return {}

    try:
        text = body.decode("utf-8")
        pairs = parse_qsl(text, keep_blank_values=True, errors="strict")
    except (UnicodeDecodeError, ValueError) as e:
        raise FormParseError(f"Malformed form body: {e}", content_type=FORM_URLENCODED) from e

    fields: dict[str, str] = {}
    for name, value in pairs:
        fields.setdefault(name, value)
    return fields


def _parse_multipart(body: bytes, content_type: str) -> dict[str, str]:
    # Re-attach the Content-Type header so the email parser sees the boundary
    raw = b"Content-Type: " + content_type.encode("latin-1") + b"\r\n\r\n" + body
    message = BytesParser(policy=HTTP).parsebytes(raw)

    if not message.is_multipart() or message.defects:
        raise FormParseError(
            f"Malformed multipart body: {[type(d).__name__ for d in message.defects] or 'no parts'}",
            content_type=MULTIPART_FORM_DATA,
        )

    fields: dict[str, str] = {}
    for part in message.iter_parts():
        if not isinstance(part, EmailMessage):
            continue

        name = part.get_param("name", header="content-disposition")
        if not name:
            log.warning("multipart_part_without_name")
            continue

        if part.get_filename() is not None:
            log.info("skipping_file_upload", field=name, filename=part.get_filename())
            continue

        payload = part.get_payload(decode=True) or b""
        charset = part.get_content_charset() or "utf-8"
        try:
            value = payload.decode(charset)
        except (LookupError, UnicodeDecodeError) as e:
            raise FormParseError(
                f"Field {name!r} could not be decoded: {e}",
                content_type=MULTIPART_FORM_DATA,
            ) from e

        fields.setdefault(str(name), value)

    return fields


def parse_form(request: IntakeRequest) -> dict[str, str]:
    """
    Parse the request body into form fields.

    Duplicate field names keep their first value.

    Raises:
        FormParseError: If the body is malformed or the content type is
            not a form encoding
    """
    content_type = request.content_type
    mime_type = content_type.split(";", 1)[0].strip().lower()

    if mime_type == FORM_URLENCODED:
        fields = _parse_urlencoded(_decode_body(request))
    elif mime_type == MULTIPART_FORM_DATA:
        fields = _parse_multipart(_decode_body(request), content_type)
    else:
        raise FormParseError(
            f"Unsupported content type: {content_type or 'none'}",
            content_type=content_type or None,
        )

    log.debug("form_parsed", content_type=mime_type, field_names=sorted(fields))
    return fields
