"""
Cognito Custom Email Sender trigger.

Cognito invokes this function instead of sending its own emails. Depending on
the trigger source it either emails the (KMS-encrypted) verification code, or
prepares a freshly invited user's account and emails them an invitation.
Mail goes out through SendGrid; the API key lives in SSM Parameter Store.

Trigger sources handled:
  • CustomEmailSender_SignUp / _ResendCode / _ForgotPassword → verification email
  • CustomEmailSender_AdminCreateUser                       → invite email
  • anything else                                           → no-op

Environment variables expected (see utils/config.py):
  • KMS_KEY_ARN                      - key Cognito encrypts codes with (required)
  • SENDGRID_API_KEY_PARAMETER       - SSM SecureString holding the API key (required)
  • EMAIL_NO_REPLY_ADDRESS           - sender address
  • EMAIL_USER_VERIFICATION_SUBJECT  - subject of verification emails
  • EMAIL_USER_INVITE_SUBJECT        - subject of invite emails
  • ABORT_INVITE_ON_RESET_FAILURE    - skip the invite if the password reset fails
  • LOG_LEVEL                        - log verbosity (default: INFO)

On success the event is returned unchanged; on failure the exception is
raised so Lambda reports the invocation as failed (and the on-failure
destination is notified).
"""

from typing import Any, Dict, Mapping, Optional

from utils.cognito import reset_credentials
from utils.config import load_settings
from utils.crypto import decrypt_code
from utils.events import LifecycleEvent, Workflow, is_known_trigger, redact
from utils.exceptions import CredentialResetError, EmailSenderError, InvalidEventError
from utils.logger import get_logger
from utils.secrets import get_parameter_value
from utils.sendgrid_client import build_client, send_email
from utils.templates import INVITE_TEMPLATE, VERIFICATION_TEMPLATE, render_template

logger = get_logger("custom_email_sender")

# Fails the cold start when KMS_KEY_ARN / SENDGRID_API_KEY_PARAMETER are missing
settings = load_settings()

CODE_PLACEHOLDER = "Error - Contact Administrator"


def _require_email(evt: LifecycleEvent) -> str:
    email = evt.email
    if not email:
        raise InvalidEventError("request.userAttributes.email", evt.trigger_source)
    return email


def _deliver(to: str, subject: str, template: str, context: Mapping[str, Any]) -> None:
    """Fetch the SendGrid key, render the template and send it."""
    api_key = get_parameter_value(settings.sendgrid_api_key_parameter, settings.region)
    body = render_template(template, context, settings.templates_dir)
    client = build_client(api_key)
    send_email(
        client,
        to=to,
        sender=settings.no_reply_address,
        subject=subject,
        html=body,
    )


def format_code(plaintext: Optional[bytes]) -> str:
    if plaintext is None:
        return CODE_PLACEHOLDER
    try:
        return plaintext.decode("utf-8")
    except UnicodeDecodeError:
        logger.error("sender.code_not_utf8", extra={"length": len(plaintext)})
        return CODE_PLACEHOLDER


def handle_verification(evt: LifecycleEvent) -> None:
    email = _require_email(evt)

    # 1) Decrypt the code; a failure degrades to the placeholder text
    plaintext = decrypt_code(evt.code, settings.kms_key_arn)
    if evt.code and plaintext is None:
        logger.warning(
            "sender.code_fallback",
            extra={"email": email, "trigger_source": evt.trigger_source},
        )

    # 2) Render + send
    _deliver(
        email,
        settings.verification_subject,
        VERIFICATION_TEMPLATE,
        {"verification_code": format_code(plaintext)},
    )
    logger.info(
        "sender.verification_sent",
        extra={"email": email, "trigger_source": evt.trigger_source},
    )


def handle_invite(evt: LifecycleEvent) -> None:
    email = _require_email(evt)

    # 1) Pre-set a throwaway permanent password so "forgot password" works
    try:
        reset_credentials(email, evt.user_pool_id, settings.region)
    except CredentialResetError as e:
        logger.error(
            "sender.credential_reset_failed",
            extra={
                "email": email,
                "user_pool_id": evt.user_pool_id,
                "error": e.message,
                "abort": settings.abort_invite_on_reset_failure,
            },
        )
        if settings.abort_invite_on_reset_failure:
            raise

    # 2) Render + send
    _deliver(
        email,
        settings.invite_subject,
        INVITE_TEMPLATE,
        {"user_identifier": email},
    )
    logger.info("sender.invite_sent", extra={"email": email})


WORKFLOW_HANDLERS = {
    Workflow.VERIFICATION: handle_verification,
    Workflow.INVITE: handle_invite,
}


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    logger.info(
        "sender.lambda_start",
        extra={
            "request_id": getattr(context, "aws_request_id", None),
            "event": redact(event),
        },
    )

    evt = LifecycleEvent.from_dict(event)
    workflow = evt.workflow

    handler = WORKFLOW_HANDLERS.get(workflow)
    if handler is None:
        if is_known_trigger(evt.trigger_source):
            logger.info(
                "sender.noop: trigger source not handled",
                extra={"trigger_source": evt.trigger_source},
            )
        else:
            logger.warning(
                "sender.noop: unknown trigger source",
                extra={"trigger_source": evt.trigger_source},
            )
        return event

    try:
        handler(evt)
    except EmailSenderError as e:
        logger.error(
            "sender.failed",
            extra={
                "workflow": workflow.value,
                "trigger_source": evt.trigger_source,
                "error_code": e.code,
                "error": e.message,
            },
        )
        raise
    except Exception:
        logger.exception(
            "sender.unexpected_error",
            extra={"workflow": workflow.value, "trigger_source": evt.trigger_source},
        )
        raise

    return event
