"""
Submission Store

Persists raw form submissions to the KV store under time-ordered keys:

    <prefix>:<ISO-8601 UTC timestamp>     e.g. contact:2025-02-06T00:00:00.000Z
"""

from collections.abc import Mapping
from datetime import datetime, timezone

import structlog

from intake.shared.tools.kv import put_json

log = structlog.get_logger()


def format_timestamp(moment: datetime) -> str:
    """UTC ISO-8601 with millisecond precision and a Z suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    utc = moment.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def submission_key(prefix: str, received_at: datetime) -> str:
    """Build the storage key for a submission received at received_at."""
    return f"{prefix}:{format_timestamp(received_at)}"


def save_submission(key: str, submission: Mapping[str, str]) -> None:
    """
    Store a submission as a flat JSON object of strings.

    Raises:
        StorageError: If the put fails (no retry)
    """
    record = {name: str(value) for name, value in submission.items()}

    log.info("saving_submission", key=key, field_count=len(record))

    put_json(key, record)

    log.info("submission_saved", key=key)
