"""
Pytest Configuration and Shared Fixtures

Provides moto S3 mocking, fake Mailgun/Turnstile endpoints, sample form
configurations, and test utilities.
"""

import json
import os
from datetime import datetime, timezone
from typing import Any
from unittest.mock import patch

import boto3
import pytest
from moto import mock_aws

# Set test environment before importing application modules
os.environ["FORMINTAKE_KV_BUCKET_NAME"] = "test-form-intake-kv"
os.environ["FORMINTAKE_FORM_CONFIG_NAME"] = "test-form-config"
os.environ["FORMINTAKE_AWS_REGION"] = "us-west-2"
os.environ.pop("FORMINTAKE_TURNSTILE_SECRET", None)
os.environ.pop("FORMINTAKE_PROJECT_NAME", None)
os.environ.pop("FORMINTAKE_S3_ENDPOINT_URL", None)
os.environ["AWS_DEFAULT_REGION"] = "us-west-2"
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"

from intake.shared.config import get_settings
from intake.shared.models.form_config import FormConfig
from tests.mocks.mock_http import MockHTTPProvider
from tests.utils.event_generator import MockEventGenerator


# --- Settings Fixtures ---


@pytest.fixture(autouse=True)
def fresh_settings():
    """Re-read settings from the environment for every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# --- Time Fixtures ---


@pytest.fixture
def frozen_datetime() -> datetime:
    """Fixed receipt time for deterministic storage keys."""
    return datetime(2025, 2, 6, 0, 0, 0, 123000, tzinfo=timezone.utc)


# --- AWS Mocking Fixtures ---


@pytest.fixture
def aws_credentials():
    """Mock AWS credentials for moto."""
    return {
        "aws_access_key_id": "testing",
        "aws_secret_access_key": "testing",
        "region_name": "us-west-2",
    }


@pytest.fixture
def mock_s3(aws_credentials):
    """Create a mocked KV bucket."""
    with mock_aws():
        s3 = boto3.client("s3", **aws_credentials)
        s3.create_bucket(
            Bucket="test-form-intake-kv",
            CreateBucketConfiguration={"LocationConstraint": "us-west-2"},
        )
        yield s3


@pytest.fixture
def stored_form_config(mock_s3, form_config_record: dict[str, Any]) -> dict[str, Any]:
    """Form configuration record written to the mocked KV bucket."""
    mock_s3.put_object(
        Bucket="test-form-intake-kv",
        Key="test-form-config",
        Body=json.dumps(form_config_record).encode("utf-8"),
    )
    return form_config_record


# --- HTTP Provider Fixtures ---


@pytest.fixture
def mailgun_api():
    """Fake Mailgun messages endpoint."""
    provider = MockHTTPProvider(
        default_json={"id": "<20250206000000.1@mg.example.com>", "message": "Queued. Thank you."},
    )
    with patch("intake.shared.tools.mailgun._get_http_client", side_effect=provider.client):
        yield provider


@pytest.fixture
def turnstile_api():
    """Fake Turnstile siteverify endpoint."""
    provider = MockHTTPProvider(
        default_json={"success": True, "error-codes": [], "hostname": "www.example.com"},
    )
    with patch("intake.shared.tools.turnstile._get_http_client", side_effect=provider.client):
        yield provider


# --- Form Fixtures ---


@pytest.fixture
def form_config_record() -> dict[str, Any]:
    """Raw form configuration as stored in the KV store."""
    return {
        "prefix": "contact",
        "from": "noreply@example.com",
        "org": "Example Org",
        "admin_email": "Example Admin <admin@example.com>",
        "mailgun_domain": "mg.example.com",
        "mailgun_key": "key-test",
        "honeypot": "website",
        "allowed_countries": ["AU", "NZ"],
        "fields": ["name", "email", "phone", "topic", "message"],
        "admin_template": {"name": "contact-admin", "subject": "New website enquiry"},
        "user_template": {"name": "contact-user", "subject": "Thanks for getting in touch"},
        "validations": {
            "*": "notblank",
            "email": "email",
            "phone": "phone",
            "topic": ["sales", "support", "other"],
        },
    }


@pytest.fixture
def form_config(form_config_record: dict[str, Any]) -> FormConfig:
    """Normalized form configuration."""
    return FormConfig.model_validate(form_config_record)


@pytest.fixture
def valid_submission() -> dict[str, str]:
    """Submission that passes form_config."""
    return {
        "name": "Jane Citizen",
        "email": "jane@example.com",
        "phone": "0412-345-678",
        "topic": "support",
        "message": "Hello there",
        "website": "",
    }


@pytest.fixture
def event_generator() -> MockEventGenerator:
    """Seeded event generator."""
    return MockEventGenerator(seed=42)
