"""Email sender exceptions.

All exceptions inherit from EmailSenderError so the handler can log them
uniformly before letting them reach the Lambda runtime.
"""

from __future__ import annotations


class EmailSenderError(Exception):
    """Base exception for custom email sender errors."""

    def __init__(self, message: str, code: str):
        self.message = message
        self.code = code
        super().__init__(message)


class ConfigurationError(EmailSenderError):
    """Raised at startup when required configuration is missing or invalid."""

    def __init__(self, names: list[str], message: str | None = None):
        super().__init__(
            message=message
            or f"Missing required environment variables: {', '.join(names)}",
            code="CONFIGURATION_ERROR",
        )
        self.names = names


class InvalidEventError(EmailSenderError):
    """Raised when a routed event lacks a field its workflow needs."""

    def __init__(self, field: str, trigger_source: str | None):
        super().__init__(
            message=f"Event for trigger '{trigger_source}' is missing '{field}'",
            code="INVALID_EVENT",
        )
        self.field = field
        self.trigger_source = trigger_source


class DecryptError(EmailSenderError):
    """Raised when the verification code cannot be decrypted."""

    def __init__(self, message: str = "Unable to decrypt verification code"):
        super().__init__(message=message, code="DECRYPT_ERROR")


class CredentialResetError(EmailSenderError):
    """Raised when assigning the permanent password fails."""

    def __init__(self, username: str, user_pool_id: str, reason: str):
        super().__init__(
            message=(
                f"Failed to set permanent password for '{username}' "
                f"in pool '{user_pool_id}': {reason}"
            ),
            code="CREDENTIAL_RESET_ERROR",
        )
        self.username = username
        self.user_pool_id = user_pool_id


class SecretRetrievalError(EmailSenderError):
    """Raised when the parameter store call itself fails."""

    def __init__(self, parameter_name: str, reason: str, code: str = "SECRET_RETRIEVAL_ERROR"):
        super().__init__(
            message=f"Error retrieving SSM parameter '{parameter_name}': {reason}",
            code=code,
        )
        self.parameter_name = parameter_name


class SecretNotFoundError(SecretRetrievalError):
    """Raised when the parameter does not exist or has no value."""

    def __init__(self, parameter_name: str):
        super().__init__(
            parameter_name=parameter_name,
            reason="parameter is empty or not found",
            code="SECRET_NOT_FOUND",
        )


class RenderError(EmailSenderError):
    """Raised when an email template cannot be loaded or rendered."""

    def __init__(self, template_name: str, reason: str):
        super().__init__(
            message=f"Error rendering template '{template_name}': {reason}",
            code="RENDER_ERROR",
        )
        self.template_name = template_name


class MailDeliveryError(EmailSenderError):
    """Raised when SendGrid rejects or fails to accept a message."""

    def __init__(self, recipient: str, reason: str, status_code: int | None = None):
        super().__init__(
            message=f"Error sending email to '{recipient}': {reason}",
            code="MAIL_DELIVERY_ERROR",
        )
        self.recipient = recipient
        self.status_code = status_code
