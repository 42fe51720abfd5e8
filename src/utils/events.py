from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

TRIGGER_PREFIX = "CustomEmailSender_"

SIGN_UP = "SignUp"
RESEND_CODE = "ResendCode"
FORGOT_PASSWORD = "ForgotPassword"
UPDATE_USER_ATTRIBUTE = "UpdateUserAttribute"
VERIFY_USER_ATTRIBUTE = "VerifyUserAttribute"
ADMIN_CREATE_USER = "AdminCreateUser"
ACCOUNT_TAKE_OVER_NOTIFICATION = "AccountTakeOverNotification"

KNOWN_TRIGGERS = frozenset(
    {
        SIGN_UP,
        RESEND_CODE,
        FORGOT_PASSWORD,
        UPDATE_USER_ATTRIBUTE,
        VERIFY_USER_ATTRIBUTE,
        ADMIN_CREATE_USER,
        ACCOUNT_TAKE_OVER_NOTIFICATION,
    }
)


class Workflow(str, Enum):
    VERIFICATION = "verification"
    INVITE = "invite"
    NOOP = "noop"


# Everything not listed here falls through to Workflow.NOOP
WORKFLOWS = {
    SIGN_UP: Workflow.VERIFICATION,
    FORGOT_PASSWORD: Workflow.VERIFICATION,
    RESEND_CODE: Workflow.VERIFICATION,
    ADMIN_CREATE_USER: Workflow.INVITE,
}


def normalize_trigger(trigger_source: Optional[str]) -> Optional[str]:
    """Strip the Cognito `CustomEmailSender_` prefix, if present."""
    if not isinstance(trigger_source, str):
        return None
    if trigger_source.startswith(TRIGGER_PREFIX):
        return trigger_source[len(TRIGGER_PREFIX):]
    return trigger_source


def is_known_trigger(trigger_source: Optional[str]) -> bool:
    """True for any custom email sender trigger Cognito documents, handled or not."""
    return normalize_trigger(trigger_source) in KNOWN_TRIGGERS


def classify(trigger_source: Optional[str]) -> Workflow:
    """Map a trigger source (prefixed or bare) to the workflow that handles it."""
    return WORKFLOWS.get(normalize_trigger(trigger_source), Workflow.NOOP)


@dataclass(frozen=True)
class LifecycleEvent:
    """
    The fields of a Cognito custom email sender event that the handler uses.

    `raw` keeps the original payload so it can be handed back untouched.
    """

    trigger_source: Optional[str]
    user_pool_id: Optional[str] = None
    user_name: Optional[str] = None
    user_attributes: Dict[str, str] = field(default_factory=dict)
    code: Optional[str] = None
    version: Optional[str] = None
    region: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, event: Dict[str, Any]) -> "LifecycleEvent":
        request = event.get("request") or {}
        return cls(
            trigger_source=event.get("triggerSource"),
            user_pool_id=event.get("userPoolId"),
            user_name=event.get("userName"),
            user_attributes=dict(request.get("userAttributes") or {}),
            code=request.get("code") or None,
            version=event.get("version"),
            region=event.get("region"),
            raw=event,
        )

    @property
    def email(self) -> Optional[str]:
        return self.user_attributes.get("email")

    @property
    def workflow(self) -> Workflow:
        return classify(self.trigger_source)


def redact(event: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of the event that is safe to log (ciphertext code removed)."""
    request = event.get("request")
    if not isinstance(request, dict) or not request.get("code"):
        return event
    return {**event, "request": {**request, "code": "<redacted>"}}
