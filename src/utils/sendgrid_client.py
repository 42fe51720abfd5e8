# utils/sendgrid_client.py

from python_http_client.exceptions import HTTPError
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from utils.exceptions import MailDeliveryError
from utils.logger import get_logger

logger = get_logger("sendgrid_client")


def build_client(api_key: str) -> SendGridAPIClient:
    """
    Build a SendGrid client from the API key fetched from SSM.

    Built per invocation: the key is read fresh each time, so there is
    nothing to cache across invocations.
    """
    if not api_key:
        logger.error("Missing SendGrid API key")
        raise MailDeliveryError("<unknown>", "SendGrid API key is empty")

    client = SendGridAPIClient(api_key)
    logger.info("SendGrid client initialized successfully")
    return client


def send_email(
    client: SendGridAPIClient,
    to: str,
    sender: str,
    subject: str,
    html: str,
) -> int:
    """
    Send a single HTML email. Returns the SendGrid HTTP status code.

    Raises MailDeliveryError for HTTP errors, transport errors or any
    non-2xx/3xx response.
    """
    message = Mail(
        from_email=sender,
        to_emails=to,
        subject=subject,
        html_content=html,
    )

    try:
        resp = client.send(message)
    except HTTPError as e:
        logger.error(
            "sendgrid.http_error",
            extra={"to": to, "status_code": e.status_code, "body": str(e.body)[:500]},
        )
        raise MailDeliveryError(to, f"SendGrid returned {e.status_code}", e.status_code) from e
    except OSError as e:
        logger.error("sendgrid.transport_error", extra={"to": to, "error": str(e)})
        raise MailDeliveryError(to, str(e)) from e

    status_code = getattr(resp, "status_code", None)
    if status_code is None or status_code >= 400:
        logger.error("sendgrid.rejected", extra={"to": to, "status_code": status_code})
        raise MailDeliveryError(to, f"SendGrid returned {status_code}", status_code)

    logger.info(
        "sendgrid.sent",
        extra={"to": to, "subject": subject, "status_code": status_code},
    )
    return status_code
