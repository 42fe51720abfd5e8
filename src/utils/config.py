import os
from dataclasses import dataclass
from typing import Optional

from utils.exceptions import ConfigurationError
from utils.logger import get_logger

logger = get_logger("config")

DEFAULT_NO_REPLY_ADDRESS = "noreply@email.com"
DEFAULT_VERIFICATION_SUBJECT = "Your Verification Code"
DEFAULT_INVITE_SUBJECT = "Your ACME Hub registration details"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    kms_key_arn: str
    sendgrid_api_key_parameter: str
    no_reply_address: str = DEFAULT_NO_REPLY_ADDRESS
    verification_subject: str = DEFAULT_VERIFICATION_SUBJECT
    invite_subject: str = DEFAULT_INVITE_SUBJECT
    region: str = "us-east-1"
    abort_invite_on_reset_failure: bool = True
    templates_dir: Optional[str] = None


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    msg = f"Invalid {name}='{raw}'. Must be one of true/false."
    logger.error(msg)
    raise ConfigurationError([name], message=msg)


def load_settings() -> Settings:
    """
    Load the sender configuration from environment variables.

    KMS_KEY_ARN: key the Cognito pool encrypts codes with (required, non-empty)
    SENDGRID_API_KEY_PARAMETER: SSM SecureString holding the SendGrid API key
    EMAIL_NO_REPLY_ADDRESS, EMAIL_USER_VERIFICATION_SUBJECT,
    EMAIL_USER_INVITE_SUBJECT: independent sender/subject overrides
    ABORT_INVITE_ON_RESET_FAILURE: skip the invite email when the password
                                   reset fails (default true)

    Raises ConfigurationError with a clear message if something is missing/invalid.
    """
    kms_key_arn = (os.getenv("KMS_KEY_ARN") or "").strip()
    parameter_name = (os.getenv("SENDGRID_API_KEY_PARAMETER") or "").strip()

    missing = []
    if not kms_key_arn:
        missing.append("KMS_KEY_ARN")
    if not parameter_name:
        missing.append("SENDGRID_API_KEY_PARAMETER")

    if missing:
        error = ConfigurationError(missing)
        logger.error(error.message)
        raise error

    return Settings(
        kms_key_arn=kms_key_arn,
        sendgrid_api_key_parameter=parameter_name,
        no_reply_address=os.getenv("EMAIL_NO_REPLY_ADDRESS") or DEFAULT_NO_REPLY_ADDRESS,
        verification_subject=(
            os.getenv("EMAIL_USER_VERIFICATION_SUBJECT") or DEFAULT_VERIFICATION_SUBJECT
        ),
        invite_subject=os.getenv("EMAIL_USER_INVITE_SUBJECT") or DEFAULT_INVITE_SUBJECT,
        region=os.getenv("AWS_REGION", "us-east-1"),
        abort_invite_on_reset_failure=_parse_bool(
            "ABORT_INVITE_ON_RESET_FAILURE",
            os.getenv("ABORT_INVITE_ON_RESET_FAILURE", "true"),
        ),
        templates_dir=os.getenv("TEMPLATES_DIR") or None,
    )
