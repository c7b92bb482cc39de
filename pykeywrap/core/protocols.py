from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from secrets import SystemRandom

    from cryptography.hazmat.primitives.asymmetric.types import (
        PrivateKeyTypes,
        PublicKeyTypes,
    )

    from .ciphers import CipherMode
    from .keys import Key, SecretKey

__all__ = (
    "KeyFactoryProtocol",
    "ProviderRegistrarProtocol",
    "WrapCipherFactory",
    "WrapCipherProtocol",
)


@runtime_checkable
class WrapCipherProtocol(Protocol):
    """Protocol for an initialised key wrapping cipher."""

    @property
    def algorithm(self) -> str:
        """Transformation name the cipher was created for."""
        ...

    def wrap(self, key: Key) -> bytes:
        """Encrypt the raw encoding of a key."""
        ...

    def unwrap(self, wrapped: bytes) -> bytes:
        """Recover the raw encoding of a wrapped key."""
        ...


class WrapCipherFactory(Protocol):
    """Callable producing a cipher initialised for one mode."""

    def __call__(
        self,
        mode: CipherMode,
        wrap_key: SecretKey,
        random: SystemRandom,
    ) -> WrapCipherProtocol: ...


@runtime_checkable
class KeyFactoryProtocol(Protocol):
    """Protocol for rebuilding asymmetric keys from their standard encodings."""

    @property
    def algorithm(self) -> str:
        """Key algorithm handled by this factory."""
        ...

    def generate_private(self, encoded: bytes) -> PrivateKeyTypes:
        """Load a PKCS#8 DER private key."""
        ...

    def generate_public(self, encoded: bytes) -> PublicKeyTypes:
        """Load a SubjectPublicKeyInfo DER public key."""
        ...


class ProviderRegistrarProtocol(Protocol):
    """Makes a missing algorithm provider available process-wide."""

    def __call__(self) -> bool: ...
