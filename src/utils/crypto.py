"""
Decrypt-only wrapper around the AWS Encryption SDK.

Cognito encrypts the verification code with the pool's custom sender KMS key
before invoking the trigger. This module can only decrypt: the SDK client is
built with FORBID_ENCRYPT_ALLOW_DECRYPT and no encrypt method is exposed.
"""

import base64
import binascii
import threading
from typing import Optional

import aws_encryption_sdk
from aws_encryption_sdk import CommitmentPolicy
from aws_encryption_sdk.exceptions import AWSEncryptionSDKClientError
from botocore.exceptions import BotoCoreError, ClientError
from cryptography.exceptions import InvalidSignature, InvalidTag

from utils.exceptions import ConfigurationError, DecryptError
from utils.logger import get_logger

logger = get_logger("crypto")

_decryptor: Optional["CodeDecryptor"] = None
_decryptor_key: Optional[str] = None
_lock = threading.Lock()


class CodeDecryptor:
    """Envelope decryption bound to a single KMS key."""

    def __init__(self, key_arn: str):
        if not isinstance(key_arn, str) or not key_arn.strip():
            raise ConfigurationError(["KMS_KEY_ARN"], message=f"Invalid KMS key ARN {key_arn!r}")

        self.key_arn = key_arn
        self._client = aws_encryption_sdk.EncryptionSDKClient(
            commitment_policy=CommitmentPolicy.FORBID_ENCRYPT_ALLOW_DECRYPT
        )
        self._key_provider = aws_encryption_sdk.StrictAwsKmsMasterKeyProvider(
            key_ids=[key_arn]
        )

    def decrypt(self, ciphertext: bytes) -> bytes:
        try:
            plaintext, _header = self._client.decrypt(
                source=ciphertext, key_provider=self._key_provider
            )
        # Footer signature and AES-GCM tag failures surface unwrapped from cryptography
        except (
            AWSEncryptionSDKClientError,
            InvalidSignature,
            InvalidTag,
            BotoCoreError,
            ClientError,
        ) as e:
            raise DecryptError(f"Unable to decrypt verification code: {e}") from e
        return plaintext


def get_decryptor(key_arn: str) -> CodeDecryptor:
    """Return the process-wide decryptor, building it on first use."""
    global _decryptor, _decryptor_key

    with _lock:
        if _decryptor is None or _decryptor_key != key_arn:
            _decryptor = CodeDecryptor(key_arn)
            _decryptor_key = key_arn
        return _decryptor


def reset_decryptor() -> None:
    """Drop the cached decryptor (useful in tests)."""
    global _decryptor, _decryptor_key

    with _lock:
        _decryptor = None
        _decryptor_key = None


def decode_ciphertext(code: str) -> bytes:
    try:
        return base64.b64decode(code, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecryptError(f"Code is not valid base64: {e}") from e


def decrypt_code(code: Optional[str], key_arn: str) -> Optional[bytes]:
    """
    Decrypt the base64 code from a Cognito event.

    Returns None when there is no code, or when decryption fails for any
    reason; failures are logged, never raised.
    """
    if not code:
        return None

    try:
        ciphertext = decode_ciphertext(code)
        return get_decryptor(key_arn).decrypt(ciphertext)
    except DecryptError as e:
        logger.error(
            "crypto.decrypt_failed",
            extra={"error": e.message, "key_arn": key_arn},
        )
        return None
