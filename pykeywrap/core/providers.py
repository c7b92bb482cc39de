from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from functools import cache, partial
from typing import TYPE_CHECKING, Final, final

from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives.ciphers import algorithms, modes

from pykeywrap.core.ciphers import PADDINGS, AesEcbCipher, AesKeyWrapCipher
from pykeywrap.core.key_factories import RSA_KEY_FACTORY
from pykeywrap.exceptions import CryptoUnavailableError

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from .protocols import KeyFactoryProtocol, WrapCipherFactory

__all__ = [
    "DEFAULT_PROVIDER_NAME",
    "Provider",
    "ProviderRegistry",
    "add_provider",
    "default_provider",
    "default_registry",
]

logger = logging.getLogger(__name__)

DEFAULT_PROVIDER_NAME: Final[str] = "pyca"


@final
@dataclass(frozen=True, slots=True, eq=False)
class Provider:
    """Named bundle of wrap ciphers, paddings and key factories.

    Cipher names are either a single algorithm (``AESWrap``) or
    ``<algorithm>/<mode>``; the padding of a three-part transformation is
    looked up separately in ``paddings``.
    """

    name: str
    ciphers: Mapping[str, WrapCipherFactory]
    paddings: frozenset[str]
    key_factories: Mapping[str, KeyFactoryProtocol]


def _split_transformation(transformation: str) -> tuple[str, str | None]:
    parts = transformation.split("/")
    if len(parts) == 3:  # noqa: PLR2004
        return f"{parts[0]}/{parts[1]}", parts[2]
    return transformation, None


@final
class ProviderRegistry:
    """Ordered, thread-safe set of providers consulted by algorithm lookups.

    Lookups report a missing algorithm by returning ``None`` rather than
    raising, so callers decide whether to register a provider and retry.
    """

    __slots__ = ("_lock", "_providers")

    def __init__(self, providers: Iterable[Provider] = ()) -> None:
        self._lock = threading.Lock()
        self._providers: tuple[Provider, ...] = ()
        for provider in providers:
            self.add(provider)

    def add(self, provider: Provider) -> bool:
        """Append a provider. Returns False if one with that name is present."""
        with self._lock:
            if any(p.name == provider.name for p in self._providers):
                return False
            self._providers = (*self._providers, provider)
            return True

    def has(self, name: str) -> bool:
        return any(p.name == name for p in self._providers)

    @property
    def providers(self) -> tuple[Provider, ...]:
        return self._providers

    def find_cipher(self, transformation: str) -> WrapCipherFactory | None:
        """Resolve a transformation to a cipher factory.

        Raises:
            CryptoUnavailableError: a provider has the cipher mode but none
                supplies the requested padding.
        """
        base, padding_name = _split_transformation(transformation)
        padding_missing = False
        for provider in self._providers:
            factory = provider.ciphers.get(base)
            if factory is None:
                continue
            if padding_name is None:
                return factory
            if padding_name not in provider.paddings:
                padding_missing = True
                continue
            return partial(factory, padding_name=padding_name)

        if padding_missing:
            msg = f"Padding unavailable: {transformation}"
            raise CryptoUnavailableError(msg, transformation)
        return None

    def find_key_factory(self, algorithm: str) -> KeyFactoryProtocol | None:
        for provider in self._providers:
            factory = provider.key_factories.get(algorithm)
            if factory is not None:
                return factory
        return None


_DEFAULT_REGISTRY: Final[ProviderRegistry] = ProviderRegistry()


def default_registry() -> ProviderRegistry:
    """Process-wide registry. Starts empty until ``add_provider`` runs."""
    return _DEFAULT_REGISTRY


def default_provider() -> Provider:
    return Provider(
        name=DEFAULT_PROVIDER_NAME,
        ciphers={
            "AESWrap": AesKeyWrapCipher,
            "AES/ECB": AesEcbCipher,
        },
        paddings=PADDINGS,
        key_factories={RSA_KEY_FACTORY.algorithm: RSA_KEY_FACTORY},
    )


@cache
def _backend_supports_aes() -> bool:
    return default_backend().cipher_supported(
        algorithms.AES(bytes(32)),
        modes.ECB(),  # noqa: S305
    )


def add_provider(registry: ProviderRegistry | None = None) -> bool:
    """Register the ``cryptography`` backed provider.

    Idempotent: once the provider is present further calls return True
    without doing any work. Call it at start-up to avoid the lazy
    registration the wrap operations otherwise perform on first use.

    Returns:
        True if the provider is registered, False if the OpenSSL backend
        cannot supply AES.
    """
    target = _DEFAULT_REGISTRY if registry is None else registry
    if target.has(DEFAULT_PROVIDER_NAME):
        return True

    if not _backend_supports_aes():
        logger.warning(
            "Backend does not support AES, provider %s not registered",
            DEFAULT_PROVIDER_NAME,
        )
        return False

    if target.add(default_provider()):
        logger.debug("Registered security provider %s", DEFAULT_PROVIDER_NAME)
    return True
