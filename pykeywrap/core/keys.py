from __future__ import annotations

import secrets
from dataclasses import dataclass, field
from enum import Enum
from typing import Final, TypeAlias, final

from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.asymmetric.types import (
    PrivateKeyTypes,
    PublicKeyTypes,
)
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from pykeywrap.exceptions import InvalidArgumentError
from pykeywrap.models.config import KdfConfig
from pykeywrap.utils.codec import from_base64

__all__ = [
    "ASYMMETRIC_ALGORITHM",
    "ASYMMETRIC_KEY_SIZE",
    "SYMMETRIC_ALGORITHM",
    "SYMMETRIC_KEY_SIZE",
    "Key",
    "KeyPair",
    "KeyType",
    "SecretKey",
    "encode_key",
    "generate_secret_key",
    "new_key_pair",
    "new_secret_key",
]

SYMMETRIC_ALGORITHM: Final[str] = "AES"
SYMMETRIC_KEY_SIZE: Final[int] = 32  # AES-256
ASYMMETRIC_ALGORITHM: Final[str] = "RSA"
ASYMMETRIC_KEY_SIZE: Final[int] = 2048
_PUBLIC_EXPONENT: Final[int] = 65537

_HASHES: Final[dict[str, type[hashes.HashAlgorithm]]] = {
    "SHA1": hashes.SHA1,
    "SHA256": hashes.SHA256,
    "SHA512": hashes.SHA512,
}


class KeyType(Enum):
    """Kind of key reconstituted by an unwrap operation."""

    SECRET_KEY = "secret"
    PRIVATE_KEY = "private"


@final
@dataclass(frozen=True, slots=True)
class SecretKey:
    """Symmetric key material tagged with its algorithm identity."""

    algorithm: str
    encoded: bytes = field(repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.encoded, bytes):
            msg = f"Secret key material must be bytes, got {type(self.encoded).__name__}"
            raise InvalidArgumentError(msg)
        if not self.encoded:
            msg = "Secret key material must not be empty"
            raise InvalidArgumentError(msg)


@final
@dataclass(frozen=True, slots=True)
class KeyPair:
    """Public key and private key held together. Pairing is not verified."""

    public_key: PublicKeyTypes
    private_key: PrivateKeyTypes = field(repr=False)


Key: TypeAlias = SecretKey | PrivateKeyTypes


def encode_key(key: SecretKey | PrivateKeyTypes | PublicKeyTypes) -> bytes:
    """Raw encoding of a key: key bytes, PKCS#8 DER or SubjectPublicKeyInfo DER."""
    if isinstance(key, SecretKey):
        return key.encoded
    if isinstance(key, PrivateKeyTypes):
        return key.private_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
    if isinstance(key, PublicKeyTypes):
        return key.public_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
    msg = f"Unsupported key object: {type(key).__name__}"
    raise InvalidArgumentError(msg)


def new_secret_key() -> SecretKey:
    """Generate a random AES-256 key."""
    return SecretKey(SYMMETRIC_ALGORITHM, secrets.token_bytes(SYMMETRIC_KEY_SIZE))


def new_key_pair() -> KeyPair:
    """Generate an RSA key pair."""
    private_key = rsa.generate_private_key(
        public_exponent=_PUBLIC_EXPONENT,
        key_size=ASYMMETRIC_KEY_SIZE,
        backend=default_backend(),
    )
    return KeyPair(public_key=private_key.public_key(), private_key=private_key)


def generate_secret_key(
    password: str,
    salt: str,
    config: KdfConfig | None = None,
) -> SecretKey:
    """Derive an AES key from a password and a base64 salt with PBKDF2.

    The same password, salt and config always produce the same key, which is
    what lets a wrap key be regenerated instead of stored.
    """
    cfg = config or KdfConfig()
    kdf = PBKDF2HMAC(
        algorithm=_HASHES[cfg.hash_algorithm](),
        length=cfg.key_length,
        salt=from_base64(salt),
        iterations=cfg.iterations,
        backend=default_backend(),
    )
    return SecretKey(SYMMETRIC_ALGORITHM, kdf.derive(password.encode("utf-8")))
