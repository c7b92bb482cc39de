from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, final

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.serialization import (
    load_der_private_key,
    load_der_public_key,
)

from pykeywrap.core.keys import ASYMMETRIC_ALGORITHM
from pykeywrap.exceptions import InvalidArgumentError

if TYPE_CHECKING:
    from cryptography.hazmat.primitives.asymmetric.types import (
        PrivateKeyTypes,
        PublicKeyTypes,
    )

__all__ = ["RSA_KEY_FACTORY", "KeyFactory"]


@final
@dataclass(frozen=True, slots=True)
class KeyFactory:
    """Loads DER encoded keys and checks they belong to one algorithm."""

    algorithm: str
    private_type: type
    public_type: type

    def generate_private(self, encoded: bytes) -> PrivateKeyTypes:
        try:
            key = load_der_private_key(encoded, password=None, backend=default_backend())
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            msg = f"Unable to convert wrapped data to a valid {self.algorithm} private key"
            raise InvalidArgumentError(msg) from e
        if not isinstance(key, self.private_type):
            msg = f"{self.algorithm} private key required"
            raise InvalidArgumentError(msg)
        return key

    def generate_public(self, encoded: bytes) -> PublicKeyTypes:
        try:
            key = load_der_public_key(encoded, backend=default_backend())
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            msg = f"Unable to convert data to a valid {self.algorithm} public key"
            raise InvalidArgumentError(msg) from e
        if not isinstance(key, self.public_type):
            msg = f"{self.algorithm} public key required"
            raise InvalidArgumentError(msg)
        return key


RSA_KEY_FACTORY = KeyFactory(
    algorithm=ASYMMETRIC_ALGORITHM,
    private_type=rsa.RSAPrivateKey,
    public_type=rsa.RSAPublicKey,
)
