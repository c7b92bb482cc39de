from __future__ import annotations

import logging
from functools import partial
from typing import TYPE_CHECKING, Final, NoReturn, cast, final

from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.asymmetric.types import PublicKeyTypes

from pykeywrap.core.ciphers import CipherMode
from pykeywrap.core.keys import (
    ASYMMETRIC_ALGORITHM,
    SYMMETRIC_ALGORITHM,
    KeyPair,
    KeyType,
    SecretKey,
    encode_key,
    generate_secret_key,
)
from pykeywrap.core.providers import add_provider, default_registry
from pykeywrap.exceptions import (
    CryptoUnavailableError,
    InvalidArgumentError,
    InvalidConfigurationError,
)
from pykeywrap.models.records import StoredKeyPair, WrappedKey
from pykeywrap.utils.codec import from_base64, to_base64
from pykeywrap.utils.entropy import entropy_source

if TYPE_CHECKING:
    from pykeywrap.core.keys import Key
    from pykeywrap.core.protocols import (
        KeyFactoryProtocol,
        ProviderRegistrarProtocol,
        WrapCipherFactory,
    )
    from pykeywrap.core.providers import ProviderRegistry
    from pykeywrap.models.config import KdfConfig

__all__ = ["KeyWrapper"]

logger = logging.getLogger(__name__)


@final
class KeyWrapper:
    """Wraps secret and private keys for storage under an AES wrap key.

    A raw key must not be stored as-is, so it is encrypted ("wrapped") first.
    The wrap key itself is normally derived from a password and a salt with
    PBKDF2, so only the salt needs storing; a different salt per password
    keeps identical passwords from producing identical wrap keys.

    The wrap algorithm is fixed by the kind of key: secret keys use AES Key
    Wrap (RFC 3394) and private keys use AES/ECB with PKCS#7 padding over
    their PKCS#8 encoding. Outputs are plain base64 strings with no format
    tag, so callers must unwrap with the operation matching the one that
    wrapped. ``wrap`` and ``unwrap`` carry the path in a ``WrappedKey``
    instead.

    Missing algorithms trigger one provider registration followed by a
    single re-run of the operation; a second miss raises
    ``CryptoUnavailableError``.
    """

    __slots__ = ("_registrar", "_registry", "_wrap_key")

    WRAP_KEY_ALGORITHM: Final[str] = "AES"
    WRAP_ALGORITHM_SYMMETRIC: Final[str] = "AESWrap"
    WRAP_ALGORITHM_ASYMMETRIC: Final[str] = "AES/ECB/PKCS7Padding"

    def __init__(
        self,
        wrap_key: SecretKey,
        *,
        registry: ProviderRegistry | None = None,
        registrar: ProviderRegistrarProtocol | None = None,
    ) -> None:
        """Use ``wrap_key`` directly.

        Raises:
            InvalidConfigurationError: the key is not an AES key.
        """
        if wrap_key.algorithm != self.WRAP_KEY_ALGORITHM:
            msg = f"The wrapping key algorithm needs to be {self.WRAP_KEY_ALGORITHM}"
            raise InvalidConfigurationError(msg)

        self._wrap_key = wrap_key
        self._registry = registry if registry is not None else default_registry()
        self._registrar = registrar or partial(add_provider, self._registry)

    @classmethod
    def from_password(
        cls,
        password: str,
        salt: str,
        *,
        kdf: KdfConfig | None = None,
        registry: ProviderRegistry | None = None,
        registrar: ProviderRegistrarProtocol | None = None,
    ) -> KeyWrapper:
        """Derive the wrap key from a password and a base64 salt.

        Store the salt with the wrapped keys and pass the same one every time,
        otherwise the wrap key cannot be regenerated.
        """
        return cls(
            generate_secret_key(password, salt, kdf),
            registry=registry,
            registrar=registrar,
        )

    def wrap_secret_key(self, key: SecretKey) -> str:
        """Wrap a secret key with AESWrap. Returns base64 text."""
        if not isinstance(key, SecretKey):
            self._reject(key, "SecretKey")
        return self._wrap(key, self.WRAP_ALGORITHM_SYMMETRIC)

    def wrap_private_key(self, key: rsa.RSAPrivateKey) -> str:
        """Wrap a private key with AES/ECB/PKCS7Padding. Returns base64 text."""
        if not isinstance(key, rsa.RSAPrivateKey):
            self._reject(key, f"{ASYMMETRIC_ALGORITHM} private key")
        return self._wrap(key, self.WRAP_ALGORITHM_ASYMMETRIC)

    @staticmethod
    def encode_public_key(key: PublicKeyTypes) -> str:
        """Encode a public key *without* wrapping, as base64 DER.

        Public keys carry no confidentiality requirement, so this is only a
        conversion to text for storage.
        """
        if not isinstance(key, PublicKeyTypes):
            KeyWrapper._reject(key, "public key")
        return to_base64(encode_key(key))

    def unwrap_secret_key(self, wrapped_key: str) -> SecretKey:
        """Reverse ``wrap_secret_key``."""
        key = self._unwrap(
            wrapped_key,
            SYMMETRIC_ALGORITHM,
            KeyType.SECRET_KEY,
            self.WRAP_ALGORITHM_SYMMETRIC,
        )
        return cast("SecretKey", key)

    def unwrap_private_key(self, wrapped_key: str) -> rsa.RSAPrivateKey:
        """Reverse ``wrap_private_key``."""
        key = self._unwrap(
            wrapped_key,
            ASYMMETRIC_ALGORITHM,
            KeyType.PRIVATE_KEY,
            self.WRAP_ALGORITHM_ASYMMETRIC,
        )
        return cast("rsa.RSAPrivateKey", key)

    def decode_public_key(self, encoded_key: str) -> rsa.RSAPublicKey:
        """Reverse ``encode_public_key``."""
        return self._decode_public(encoded_key)

    def unwrap_key_pair(
        self,
        wrapped_private_key: str,
        encoded_public_key: str,
    ) -> KeyPair:
        """Unwrap a private key and decode its public key in one call.

        The two halves are not checked against each other.
        """
        private_key = self.unwrap_private_key(wrapped_private_key)
        public_key = self.decode_public_key(encoded_public_key)
        return KeyPair(public_key=public_key, private_key=private_key)

    def wrap_key_pair(self, key_pair: KeyPair) -> StoredKeyPair:
        """Wrap the private half and encode the public half of a key pair."""
        return StoredKeyPair(
            wrapped_private_key=self.wrap_private_key(key_pair.private_key),
            public_key=self.encode_public_key(key_pair.public_key),
        )

    def unwrap_stored_key_pair(self, record: StoredKeyPair) -> KeyPair:
        return self.unwrap_key_pair(record.wrapped_private_key, record.public_key)

    def wrap(self, key: SecretKey | rsa.RSAPrivateKey) -> WrappedKey:
        """Wrap a key and tag the result with the path used."""
        if isinstance(key, SecretKey):
            return WrappedKey(kind="secret", value=self.wrap_secret_key(key))
        return WrappedKey(kind="private", value=self.wrap_private_key(key))

    def unwrap(self, wrapped: WrappedKey) -> SecretKey | rsa.RSAPrivateKey:
        """Unwrap a tagged key along the path recorded in its ``kind``."""
        if wrapped.kind == "secret":
            return self.unwrap_secret_key(wrapped.value)
        return self.unwrap_private_key(wrapped.value)

    def _wrap(self, key: Key, wrap_algorithm: str, *, retried: bool = False) -> str:
        """Wrap ``key`` with the named transformation and encode as base64."""
        cipher_factory = self._cipher_factory(wrap_algorithm)
        if cipher_factory is None:
            self._recover(wrap_algorithm, retried=retried)
            return self._wrap(key, wrap_algorithm, retried=True)

        cipher = cipher_factory(CipherMode.WRAP, self._wrap_key, entropy_source())
        return to_base64(cipher.wrap(key))

    def _unwrap(
        self,
        wrapped_key: str,
        key_algorithm: str,
        key_type: KeyType,
        wrap_algorithm: str,
        *,
        retried: bool = False,
    ) -> Key:
        """Decode, unwrap and rebuild a key of ``key_type`` for ``key_algorithm``."""
        wrapped = from_base64(wrapped_key)
        cipher_factory = self._cipher_factory(wrap_algorithm)
        if cipher_factory is None:
            self._recover(wrap_algorithm, retried=retried)
            return self._unwrap(
                wrapped_key, key_algorithm, key_type, wrap_algorithm, retried=True
            )

        cipher = cipher_factory(CipherMode.UNWRAP, self._wrap_key, entropy_source())
        encoded = cipher.unwrap(wrapped)
        if key_type is KeyType.SECRET_KEY:
            return SecretKey(key_algorithm, encoded)

        key_factory = self._key_factory(key_algorithm)
        if key_factory is None:
            self._recover(key_algorithm, retried=retried)
            return self._unwrap(
                wrapped_key, key_algorithm, key_type, wrap_algorithm, retried=True
            )
        return key_factory.generate_private(encoded)

    def _decode_public(
        self,
        encoded_key: str,
        *,
        retried: bool = False,
    ) -> rsa.RSAPublicKey:
        encoded = from_base64(encoded_key)
        factory = self._key_factory(ASYMMETRIC_ALGORITHM)
        if factory is None:
            self._recover(ASYMMETRIC_ALGORITHM, retried=retried)
            return self._decode_public(encoded_key, retried=True)
        return cast("rsa.RSAPublicKey", factory.generate_public(encoded))

    def _cipher_factory(self, wrap_algorithm: str) -> WrapCipherFactory | None:
        return self._registry.find_cipher(wrap_algorithm)

    def _key_factory(self, key_algorithm: str) -> KeyFactoryProtocol | None:
        return self._registry.find_key_factory(key_algorithm)

    def _recover(self, algorithm: str, *, retried: bool) -> None:
        """Register a provider so the caller can re-run, or raise."""
        if not retried and self._registrar():
            logger.debug("Provider registered after %s was unavailable", algorithm)
            return

        logger.warning("Algorithm unavailable: %s", algorithm)
        msg = f"Algorithm unavailable: {algorithm}"
        raise CryptoUnavailableError(msg, algorithm)

    @staticmethod
    def _reject(key: object, expected: str) -> NoReturn:
        msg = f"Expected a {expected}, got {type(key).__name__}"
        raise InvalidArgumentError(msg)
