"""
Cognito admin operations used by the invite workflow.

Custom email sending never sees the temporary password Cognito generates for
a new user. Setting a throwaway permanent password instead lets the invitee
activate their account through the normal "forgot password" flow.
"""

from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError

from utils.aws_clients import get_cognito_idp_client
from utils.exceptions import CredentialResetError
from utils.logger import get_logger
from utils.passwords import generate_password

logger = get_logger("cognito")


def set_permanent_password(
    username: str,
    user_pool_id: str,
    password: str,
    region_name: Optional[str] = None,
) -> None:
    """Assign `password` to the user as a permanent (no forced change) credential."""
    client = get_cognito_idp_client(region_name)

    try:
        client.admin_set_user_password(
            UserPoolId=user_pool_id,
            Username=username,
            Password=password,
            Permanent=True,
        )
    except ClientError as e:
        reason = e.response.get("Error", {}).get("Code", str(e))
        raise CredentialResetError(username, user_pool_id, reason) from e
    except BotoCoreError as e:
        raise CredentialResetError(username, user_pool_id, str(e)) from e

    logger.info(
        "cognito.permanent_password_set",
        extra={"username": username, "user_pool_id": user_pool_id},
    )


def reset_credentials(
    username: str,
    user_pool_id: str,
    region_name: Optional[str] = None,
) -> None:
    """Generate a fresh password and set it permanently. The password is discarded."""
    set_permanent_password(username, user_pool_id, generate_password(), region_name)
