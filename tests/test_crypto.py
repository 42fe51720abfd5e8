import base64

import aws_encryption_sdk
import boto3
import pytest
from aws_encryption_sdk import CommitmentPolicy
from aws_encryption_sdk.exceptions import DecryptKeyError
from moto import mock_aws

from conftest import KMS_KEY_ARN
from utils import crypto
from utils.exceptions import ConfigurationError, DecryptError

# The AWS Encryption SDK talks to KMS as soon as it decrypts, so the SDK
# client and key provider are swapped for stubs that record how they were built.


class StubSDKClient:
    instances = []

    def __init__(self, commitment_policy):
        self.commitment_policy = commitment_policy
        self.plaintext = b"424242"
        self.error = None
        self.calls = []
        StubSDKClient.instances.append(self)

    def decrypt(self, source, key_provider):
        self.calls.append((source, key_provider))
        if self.error:
            raise self.error
        return self.plaintext, object()


class StubKeyProvider:
    def __init__(self, key_ids):
        self.key_ids = key_ids


@pytest.fixture
def sdk(monkeypatch):
    StubSDKClient.instances = []
    monkeypatch.setattr(crypto.aws_encryption_sdk, "EncryptionSDKClient", StubSDKClient)
    monkeypatch.setattr(crypto.aws_encryption_sdk, "StrictAwsKmsMasterKeyProvider", StubKeyProvider)
    return StubSDKClient


def _encoded(raw=b"ciphertext"):
    return base64.b64encode(raw).decode("ascii")


def test_decryptor_is_decrypt_only(sdk):
    decryptor = crypto.CodeDecryptor(KMS_KEY_ARN)

    client = sdk.instances[0]
    assert client.commitment_policy is CommitmentPolicy.FORBID_ENCRYPT_ALLOW_DECRYPT
    assert decryptor._key_provider.key_ids == [KMS_KEY_ARN]
    assert not hasattr(decryptor, "encrypt")


@pytest.mark.parametrize("key_arn", ["", "  ", None])
def test_decryptor_requires_key(sdk, key_arn):
    with pytest.raises(ConfigurationError):
        crypto.CodeDecryptor(key_arn)


def test_decrypt_code(sdk):
    assert crypto.decrypt_code(_encoded(b"blob"), KMS_KEY_ARN) == b"424242"

    source, provider = sdk.instances[0].calls[0]
    assert source == b"blob"
    assert provider.key_ids == [KMS_KEY_ARN]


@pytest.mark.parametrize("code", [None, ""])
def test_no_code_skips_decryption(sdk, code):
    assert crypto.decrypt_code(code, KMS_KEY_ARN) is None
    assert sdk.instances == []


def test_bad_base64_returns_none(sdk):
    assert crypto.decrypt_code("not base64!", KMS_KEY_ARN) is None
    assert sdk.instances == []


def test_sdk_error_returns_none(sdk):
    decryptor = crypto.get_decryptor(KMS_KEY_ARN)
    decryptor._client.error = DecryptKeyError("Unable to decrypt any data key")

    assert crypto.decrypt_code(_encoded(), KMS_KEY_ARN) is None


def test_decrypt_raises_decrypt_error(sdk):
    decryptor = crypto.CodeDecryptor(KMS_KEY_ARN)
    decryptor._client.error = DecryptKeyError("AccessDenied")

    with pytest.raises(DecryptError):
        decryptor.decrypt(b"ciphertext")


def test_decryptor_is_shared(sdk):
    first = crypto.get_decryptor(KMS_KEY_ARN)
    second = crypto.get_decryptor(KMS_KEY_ARN)

    assert first is second
    assert len(sdk.instances) == 1


# Round trip through the real SDK against a moto KMS key, encrypting the way
# Cognito does before it invokes the trigger.


@pytest.fixture
def kms_key_arn(aws_credentials):
    with mock_aws():
        client = boto3.client("kms", region_name="eu-west-1")
        yield client.create_key(Description="cognito custom sender")["KeyMetadata"]["Arn"]


def encrypt_like_cognito(key_arn, plaintext):
    client = aws_encryption_sdk.EncryptionSDKClient(
        commitment_policy=CommitmentPolicy.FORBID_ENCRYPT_ALLOW_DECRYPT
    )
    provider = aws_encryption_sdk.StrictAwsKmsMasterKeyProvider(key_ids=[key_arn])
    ciphertext, _header = client.encrypt(source=plaintext, key_provider=provider)
    return base64.b64encode(ciphertext).decode("ascii")


def test_real_sdk_round_trip(kms_key_arn):
    code = encrypt_like_cognito(kms_key_arn, b"123456")

    assert crypto.CodeDecryptor(kms_key_arn).decrypt(base64.b64decode(code)) == b"123456"
    assert crypto.decrypt_code(code, kms_key_arn) == b"123456"


def test_real_sdk_tampered_ciphertext(kms_key_arn):
    ciphertext = bytearray(base64.b64decode(encrypt_like_cognito(kms_key_arn, b"123456")))
    ciphertext[-40] ^= 0xFF

    assert crypto.decrypt_code(base64.b64encode(bytes(ciphertext)).decode("ascii"), kms_key_arn) is None


def test_real_sdk_wrong_key(kms_key_arn):
    other_key_arn = boto3.client("kms", region_name="eu-west-1").create_key()["KeyMetadata"]["Arn"]
    code = encrypt_like_cognito(kms_key_arn, b"123456")

    assert crypto.decrypt_code(code, other_key_arn) is None
