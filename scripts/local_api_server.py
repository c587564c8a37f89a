"""
FastAPI Server for Local Development

Serves the form submission Lambda over HTTP against a moto-mocked KV bucket.
Requests are converted to API Gateway HTTP API (v2) events and passed to
lambda_handler unchanged.

Usage:
    python -m scripts.local_api_server --form-config scripts/form-config.example.json

Mailgun and Turnstile calls go to the real providers; leave
FORMINTAKE_TURNSTILE_SECRET unset to skip the bot check.
"""

import argparse
import base64
import json
import os
from pathlib import Path
from typing import Any

# Set environment for local mode BEFORE any other imports
os.environ.setdefault("FORMINTAKE_ENVIRONMENT", "development")
os.environ.setdefault("FORMINTAKE_KV_BUCKET_NAME", "form-intake-kv-local")
os.environ["FORMINTAKE_S3_ENDPOINT_URL"] = "mock"

from moto import mock_aws

mock = mock_aws()
mock.start()

import structlog

# Imported before configuring so the console renderer below wins
from lambdas.form_submission.handler import lambda_handler

# Configure logging
structlog.configure(
    processors=[
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

log = structlog.get_logger()

# Clear settings cache so new env vars take effect
from intake.shared.config import get_settings

get_settings.cache_clear()

import boto3
from fastapi import FastAPI, Request, Response

from intake.shared.tools.kv import get_json, put_json


def setup_local_bucket() -> None:
    """Create the KV bucket in the mocked S3 backend."""
    settings = get_settings()
    s3 = boto3.client("s3", region_name=settings.aws_region)
    params: dict[str, Any] = {"Bucket": settings.kv_bucket_name}
    if settings.aws_region != "us-east-1":
        params["CreateBucketConfiguration"] = {"LocationConstraint": settings.aws_region}
    s3.create_bucket(**params)
    log.info("local_bucket_created", bucket=settings.kv_bucket_name)


def seed_form_config(path: Path) -> None:
    """Store a form configuration record from a local JSON file."""
    settings = get_settings()
    record = json.loads(path.read_text(encoding="utf-8"))
    put_json(settings.form_config_name, record)
    log.info("form_config_seeded", config_name=settings.form_config_name, path=str(path))


async def _to_lambda_event(request: Request) -> dict[str, Any]:
    body = await request.body()
    return {
        "version": "2.0",
        "rawPath": request.url.path,
        "headers": dict(request.headers),
        "requestContext": {
            "domainName": request.url.hostname,
            "http": {
                "method": request.method,
                "path": request.url.path,
                "sourceIp": request.client.host if request.client else None,
            },
        },
        "body": base64.b64encode(body).decode("ascii"),
        "isBase64Encoded": True,
    }


app = FastAPI(title="Form Intake (local)")


@app.api_route("/submit", methods=["POST", "OPTIONS"])
async def submit(request: Request) -> Response:
    """Invoke the Lambda handler with an API Gateway style event."""
    event = await _to_lambda_event(request)
    result = lambda_handler(event, None)
    return Response(
        content=result.get("body") or "",
        status_code=result["statusCode"],
        headers=result.get("headers", {}),
    )


@app.get("/submissions/{key:path}")
async def get_submission(key: str) -> Response:
    """Read back a stored submission by key."""
    value = get_json(key)
    if value is None:
        return Response(status_code=404)
    return Response(content=json.dumps(value), media_type="application/json")


def main() -> None:
    import uvicorn

    parser = argparse.ArgumentParser(description="Run the form intake Lambda locally")
    parser.add_argument("--form-config", type=Path, help="JSON form configuration to seed")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    args = parser.parse_args()

    setup_local_bucket()
    if args.form_config:
        seed_form_config(args.form_config)

    uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
