"""
Cognito Custom Email Sender Utilities
=====================================

Shared helper modules for the custom email sender Lambda:

- logger.py           → structured JSON logging
- config.py           → environment configuration (fails fast on cold start)
- exceptions.py       → error taxonomy raised by the helpers below
- aws_clients.py      → cached boto3 clients (SSM, Cognito)
- events.py           → Cognito event model and trigger classification
- crypto.py           → decrypt-only AWS Encryption SDK wrapper (KMS)
- passwords.py        → random password generation
- cognito.py          → AdminSetUserPassword for invited users
- secrets.py          → SSM Parameter Store reads
- templates.py        → bundled HTML email templates
- sendgrid_client.py  → SendGrid mail delivery

Clients are created once per container and only read afterwards, so the
helpers are safe to share between invocations.
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
