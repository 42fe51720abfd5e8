"""Shared pytest fixtures for the custom email sender tests."""

import json
from pathlib import Path

import pytest

from utils.aws_clients import clear_client_cache
from utils.crypto import reset_decryptor

EVENTS_DIR = Path(__file__).parent / "events"

KMS_KEY_ARN = "arn:aws:kms:eu-west-1:111122223333:key/1234abcd-12ab-34cd-56ef-1234567890ab"
PARAMETER_NAME = "/acme/sendGrid/apiKey/test"


def load_event(name):
    with open(EVENTS_DIR / name, "r", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture(autouse=True)
def _reset_shared_clients():
    clear_client_cache()
    reset_decryptor()
    yield
    clear_client_cache()
    reset_decryptor()


@pytest.fixture
def aws_credentials(monkeypatch):
    """Mock AWS credentials for testing."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "eu-west-1")


@pytest.fixture
def sender_env(monkeypatch, aws_credentials):
    """Environment the Lambda is deployed with."""
    monkeypatch.setenv("KMS_KEY_ARN", KMS_KEY_ARN)
    monkeypatch.setenv("SENDGRID_API_KEY_PARAMETER", PARAMETER_NAME)
    monkeypatch.setenv("EMAIL_NO_REPLY_ADDRESS", "no-reply@acme.test")
    monkeypatch.setenv("EMAIL_USER_VERIFICATION_SUBJECT", "User verification from ACME")
    monkeypatch.setenv("EMAIL_USER_INVITE_SUBJECT", "Invite from ACME")
    monkeypatch.setenv("AWS_REGION", "eu-west-1")
    monkeypatch.delenv("ABORT_INVITE_ON_RESET_FAILURE", raising=False)
    monkeypatch.delenv("TEMPLATES_DIR", raising=False)
