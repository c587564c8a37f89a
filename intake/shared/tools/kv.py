"""
KV Store Tools

Key-value access on top of an S3 bucket. Each key maps to one JSON object.
Form configuration records and stored submissions share the bucket.
"""

import json
from typing import Any

import boto3
from botocore.exceptions import ClientError
import structlog

from intake.shared.config import get_settings
from intake.shared.exceptions import StorageError

log = structlog.get_logger()

_MISSING_KEY_CODES = frozenset({"NoSuchKey", "404", "NotFound"})


def _get_client():
    """Get S3 client."""
    settings = get_settings()
    return boto3.client("s3", **settings.s3_config)


def get_json(key: str) -> Any | None:
    """
    Read and decode the JSON value stored under a key.

    Args:
        key: KV key

    Returns:
        Decoded value, or None if the key does not exist

    Raises:
        StorageError: On S3 failure or if the stored value is not JSON
    """
    settings = get_settings()
    client = _get_client()

    log.debug("kv_get", bucket=settings.kv_bucket_name, key=key)

    try:
        response = client.get_object(Bucket=settings.kv_bucket_name, Key=key)
    except ClientError as e:
        if e.response.get("Error", {}).get("Code") in _MISSING_KEY_CODES:
            log.debug("kv_key_not_found", key=key)
            return None

        log.error("kv_get_failed", key=key, error=str(e))
        raise StorageError(operation="get", key=key, error_message=str(e)) from e

    body = response["Body"].read()

    try:
        return json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        log.error("kv_value_not_json", key=key, error=str(e))
        raise StorageError(
            operation="get",
            key=key,
            error_message=f"Stored value is not valid JSON: {e}",
        ) from e


def put_json(key: str, value: Any) -> None:
    """
    Encode a value as JSON and store it under a key.

    Raises:
        StorageError: On S3 failure
    """
    settings = get_settings()
    client = _get_client()

    log.debug("kv_put", bucket=settings.kv_bucket_name, key=key)

    try:
        client.put_object(
            Bucket=settings.kv_bucket_name,
            Key=key,
            Body=json.dumps(value).encode("utf-8"),
            ContentType="application/json",
        )
    except ClientError as e:
        log.error("kv_put_failed", key=key, error=str(e))
        raise StorageError(operation="put", key=key, error_message=str(e)) from e
