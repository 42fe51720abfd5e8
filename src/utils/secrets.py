from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError

from utils.aws_clients import get_ssm_client
from utils.exceptions import SecretNotFoundError, SecretRetrievalError
from utils.logger import get_logger

logger = get_logger("secrets")


def get_parameter_value(parameter_name: str, region_name: Optional[str] = None) -> str:
    """
    Fetch a SecureString parameter from SSM Parameter Store, decrypted.

    Nothing is cached: every call goes to SSM, so a rotated key is picked up
    on the next invocation.
    """
    logger.info(
        "Fetching parameter from SSM",
        extra={"parameter_name": parameter_name, "region": region_name},
    )

    client = get_ssm_client(region_name)

    try:
        resp = client.get_parameter(Name=parameter_name, WithDecryption=True)
    except ClientError as e:
        error_code = e.response.get("Error", {}).get("Code")
        if error_code == "ParameterNotFound":
            logger.error("SSM parameter not found", extra={"parameter_name": parameter_name})
            raise SecretNotFoundError(parameter_name) from e
        logger.error(
            "SSM get_parameter failed",
            extra={"parameter_name": parameter_name, "error": str(e)},
        )
        raise SecretRetrievalError(parameter_name, error_code or str(e)) from e
    except BotoCoreError as e:
        logger.error(
            "SSM get_parameter failed",
            extra={"parameter_name": parameter_name, "error": str(e)},
        )
        raise SecretRetrievalError(parameter_name, str(e)) from e

    value = (resp.get("Parameter") or {}).get("Value")
    if not value:
        logger.error("SSM parameter is empty", extra={"parameter_name": parameter_name})
        raise SecretNotFoundError(parameter_name)

    return value
