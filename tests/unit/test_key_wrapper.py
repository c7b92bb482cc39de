from __future__ import annotations

import base64
import secrets

import pytest

from pykeywrap import (
    InternalCryptoFailureError,
    InvalidArgumentError,
    InvalidConfigurationError,
    KeyWrapper,
    SecretKey,
    StoredKeyPair,
    WrappedKey,
    new_secret_key,
    salt,
)
from pykeywrap.core import KeyPair, ProviderRegistry, generate_secret_key
from pykeywrap.utils import from_base64
from tests.helpers import FAST_KDF, PASSWORD, private_der, public_der


def test_secret_key_round_trip(wrapper: KeyWrapper) -> None:
    key = new_secret_key()
    unwrapped = wrapper.unwrap_secret_key(wrapper.wrap_secret_key(key))
    assert unwrapped == key
    assert unwrapped.algorithm == "AES"
    assert unwrapped.encoded == key.encoded


def test_private_key_round_trip(wrapper: KeyWrapper, key_pair: KeyPair) -> None:
    wrapped = wrapper.wrap_private_key(key_pair.private_key)
    unwrapped = wrapper.unwrap_private_key(wrapped)
    assert private_der(unwrapped) == private_der(key_pair.private_key)


def test_public_key_round_trip(wrapper: KeyWrapper, key_pair: KeyPair) -> None:
    encoded = KeyWrapper.encode_public_key(key_pair.public_key)
    decoded = wrapper.decode_public_key(encoded)
    assert public_der(decoded) == public_der(key_pair.public_key)


def test_public_key_encoding_is_plain_der(key_pair: KeyPair) -> None:
    encoded = KeyWrapper.encode_public_key(key_pair.public_key)
    assert base64.b64decode(encoded) == public_der(key_pair.public_key)


def test_encode_public_key_rejects_private_key(key_pair: KeyPair) -> None:
    with pytest.raises(InvalidArgumentError):
        KeyWrapper.encode_public_key(key_pair.private_key)  # type: ignore[arg-type]


def test_unwrap_key_pair(wrapper: KeyWrapper, key_pair: KeyPair) -> None:
    restored = wrapper.unwrap_key_pair(
        wrapper.wrap_private_key(key_pair.private_key),
        KeyWrapper.encode_public_key(key_pair.public_key),
    )
    assert private_der(restored.private_key) == private_der(key_pair.private_key)
    assert public_der(restored.public_key) == public_der(key_pair.public_key)


def test_stored_key_pair_round_trip(wrapper: KeyWrapper, key_pair: KeyPair) -> None:
    record = wrapper.wrap_key_pair(key_pair)
    assert isinstance(record, StoredKeyPair)

    restored = wrapper.unwrap_stored_key_pair(StoredKeyPair(**record.model_dump()))
    assert private_der(restored.private_key) == private_der(key_pair.private_key)
    assert public_der(restored.public_key) == public_der(key_pair.public_key)


def test_tagged_wrap_dispatches_by_key_kind(
    wrapper: KeyWrapper,
    key_pair: KeyPair,
) -> None:
    secret = new_secret_key()
    wrapped_secret = wrapper.wrap(secret)
    wrapped_private = wrapper.wrap(key_pair.private_key)

    assert wrapped_secret.kind == "secret"
    assert wrapped_private.kind == "private"
    assert wrapper.unwrap(wrapped_secret) == secret
    assert private_der(wrapper.unwrap(wrapped_private)) == private_der(
        key_pair.private_key,
    )


def test_tagged_value_matches_untagged_output(wrapper: KeyWrapper) -> None:
    key = new_secret_key()
    # AES key wrap is deterministic, so both paths produce the same text
    assert wrapper.wrap(key).value == wrapper.wrap_secret_key(key)


def test_same_password_and_salt_interoperate(
    registry: ProviderRegistry,
    salt_value: str,
    key_pair: KeyPair,
) -> None:
    first = KeyWrapper.from_password(PASSWORD, salt_value, kdf=FAST_KDF, registry=registry)
    second = KeyWrapper.from_password(PASSWORD, salt_value, kdf=FAST_KDF, registry=registry)
    key = new_secret_key()

    assert second.unwrap_secret_key(first.wrap_secret_key(key)) == key
    assert first.unwrap_secret_key(second.wrap_secret_key(key)) == key
    restored = second.unwrap_private_key(first.wrap_private_key(key_pair.private_key))
    assert private_der(restored) == private_der(key_pair.private_key)


def test_different_salts_isolate_wrap_keys(
    registry: ProviderRegistry,
    key_pair: KeyPair,
) -> None:
    salt_a, salt_b = salt(), salt()
    assert generate_secret_key(PASSWORD, salt_a, FAST_KDF) != generate_secret_key(
        PASSWORD, salt_b, FAST_KDF
    )

    first = KeyWrapper.from_password(PASSWORD, salt_a, kdf=FAST_KDF, registry=registry)
    second = KeyWrapper.from_password(PASSWORD, salt_b, kdf=FAST_KDF, registry=registry)

    with pytest.raises(InvalidArgumentError):
        second.unwrap_secret_key(first.wrap_secret_key(new_secret_key()))
    with pytest.raises((InvalidArgumentError, InternalCryptoFailureError)):
        second.unwrap_private_key(first.wrap_private_key(key_pair.private_key))


def test_non_aes_wrap_key_is_rejected_before_any_cipher_work() -> None:
    class RecordingRegistry:
        def find_cipher(self, transformation: str) -> None:
            pytest.fail(f"cipher lookup attempted for {transformation}")

    def registrar() -> bool:
        pytest.fail("registrar called")

    with pytest.raises(InvalidConfigurationError):
        KeyWrapper(
            SecretKey("DES", secrets.token_bytes(8)),
            registry=RecordingRegistry(),  # type: ignore[arg-type]
            registrar=registrar,
        )


def test_wrap_output_is_valid_base64(wrapper: KeyWrapper, key_pair: KeyPair) -> None:
    outputs = {
        "secret": wrapper.wrap_secret_key(new_secret_key()),
        "private": wrapper.wrap_private_key(key_pair.private_key),
    }
    for kind, text in outputs.items():
        assert from_base64(text)
        assert WrappedKey(kind=kind, value=text).value == text


def test_correct_horse_scenario(registry: ProviderRegistry) -> None:
    salt_value = base64.b64encode(secrets.token_bytes(16)).decode("ascii")
    wrapper = KeyWrapper.from_password("correct horse", salt_value, registry=registry)
    key = new_secret_key()
    assert len(key.encoded) == 32

    unwrapped = wrapper.unwrap_secret_key(wrapper.wrap_secret_key(key))
    assert unwrapped.encoded == key.encoded


def test_private_blob_does_not_unwrap_as_secret_key(
    wrapper: KeyWrapper,
    key_pair: KeyPair,
) -> None:
    blob = wrapper.wrap_private_key(key_pair.private_key)
    with pytest.raises((InvalidArgumentError, InternalCryptoFailureError)):
        wrapper.unwrap_secret_key(blob)


def test_secret_blob_does_not_unwrap_as_private_key(wrapper: KeyWrapper) -> None:
    blob = wrapper.wrap_secret_key(new_secret_key())
    with pytest.raises((InvalidArgumentError, InternalCryptoFailureError)):
        wrapper.unwrap_private_key(blob)


def test_wrap_rejects_wrong_key_kinds(wrapper: KeyWrapper, key_pair: KeyPair) -> None:
    with pytest.raises(InvalidArgumentError):
        wrapper.wrap_secret_key(key_pair.private_key)  # type: ignore[arg-type]
    with pytest.raises(InvalidArgumentError):
        wrapper.wrap_private_key(new_secret_key())  # type: ignore[arg-type]


def test_unwrap_rejects_non_base64_text(wrapper: KeyWrapper) -> None:
    with pytest.raises(InvalidArgumentError):
        wrapper.unwrap_secret_key("not base64!")
    with pytest.raises(InvalidArgumentError):
        wrapper.decode_public_key("%%%")


def test_decode_public_key_rejects_garbage(wrapper: KeyWrapper) -> None:
    garbage = base64.b64encode(b"definitely not a key").decode("ascii")
    with pytest.raises(InvalidArgumentError):
        wrapper.decode_public_key(garbage)


def test_truncated_blob_is_an_invalid_argument(
    wrapper: KeyWrapper,
    key_pair: KeyPair,
) -> None:
    blob = from_base64(wrapper.wrap_secret_key(new_secret_key()))
    truncated = base64.b64encode(blob[:-3]).decode("ascii")
    with pytest.raises(InvalidArgumentError):
        wrapper.unwrap_secret_key(truncated)

    blob = from_base64(wrapper.wrap_private_key(key_pair.private_key))
    truncated = base64.b64encode(blob[:-5]).decode("ascii")
    with pytest.raises(InvalidArgumentError):
        wrapper.unwrap_private_key(truncated)


def test_empty_blob_is_an_invalid_argument(wrapper: KeyWrapper) -> None:
    with pytest.raises(ValueError):
        wrapper.unwrap_secret_key("")
    with pytest.raises(InvalidArgumentError):
        wrapper.unwrap_private_key("")


def test_direct_wrap_key_with_invalid_length(registry: ProviderRegistry) -> None:
    wrapper = KeyWrapper(SecretKey("AES", secrets.token_bytes(10)), registry=registry)
    with pytest.raises(InvalidArgumentError):
        wrapper.wrap_secret_key(new_secret_key())
