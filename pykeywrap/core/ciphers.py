from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Final, NoReturn, final

from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.keywrap import (
    InvalidUnwrap,
    aes_key_unwrap,
    aes_key_wrap,
)

from pykeywrap.core.keys import encode_key
from pykeywrap.exceptions import (
    InternalCryptoFailureError,
    InvalidArgumentError,
    KeyWrapError,
)

if TYPE_CHECKING:
    from secrets import SystemRandom

    from .keys import Key, SecretKey

__all__ = [
    "AES_BLOCK_SIZE",
    "PADDINGS",
    "AesEcbCipher",
    "AesKeyWrapCipher",
    "CipherMode",
]

AES_BLOCK_SIZE: Final[int] = 16
VALID_KEY_SIZES: Final[tuple[int, ...]] = (16, 24, 32)

# JCE names both as PKCS#7 for a 16-byte block
PADDINGS: Final[frozenset[str]] = frozenset({"PKCS5Padding", "PKCS7Padding"})


class CipherMode(Enum):
    WRAP = "wrap"
    UNWRAP = "unwrap"


def _fail(
    message: str,
    exception_type: type[KeyWrapError] = InternalCryptoFailureError,
    cause: Exception | None = None,
) -> NoReturn:
    """Uniform error handling for cipher operations."""
    if cause:
        raise exception_type(message) from cause
    raise exception_type(message)


class _AesWrapCipher:
    """Shared setup for the AES based wrap ciphers."""

    __slots__ = ("_algorithm", "_mode", "_random", "_wrap_key")

    def __init__(
        self,
        algorithm: str,
        mode: CipherMode,
        wrap_key: SecretKey,
        random: SystemRandom,
    ) -> None:
        if len(wrap_key.encoded) not in VALID_KEY_SIZES:
            _fail(f"Invalid key for {algorithm}", InvalidArgumentError)
        self._algorithm = algorithm
        self._mode = mode
        self._wrap_key = wrap_key.encoded
        # unused by AES-KW and ECB, both deterministic; kept for IV-based modes
        self._random = random

    @property
    def algorithm(self) -> str:
        return self._algorithm

    def _require(self, mode: CipherMode) -> None:
        if self._mode is not mode:
            _fail(f"{self._algorithm} cipher not initialised for {mode.value}")

    def _encoded(self, key: Key) -> bytes:
        try:
            return encode_key(key)
        except (ValueError, TypeError) as e:
            _fail(f"Invalid key for {self._algorithm}", InvalidArgumentError, e)


@final
class AesKeyWrapCipher(_AesWrapCipher):
    """AES Key Wrap (RFC 3394). Deterministic, no IV, integrity checked."""

    __slots__ = ()

    _MIN_KEY_DATA: Final[int] = 16
    _SEMIBLOCK: Final[int] = 8

    def __init__(
        self,
        mode: CipherMode,
        wrap_key: SecretKey,
        random: SystemRandom,
    ) -> None:
        super().__init__("AESWrap", mode, wrap_key, random)

    def wrap(self, key: Key) -> bytes:
        self._require(CipherMode.WRAP)
        data = self._encoded(key)
        if len(data) < self._MIN_KEY_DATA or len(data) % self._SEMIBLOCK:
            _fail(f"Error in block size for algorithm {self._algorithm}")
        try:
            return aes_key_wrap(self._wrap_key, data, backend=default_backend())
        except (ValueError, TypeError) as e:
            _fail(f"Invalid key for algorithm {self._algorithm}", InvalidArgumentError, e)

    def unwrap(self, wrapped: bytes) -> bytes:
        self._require(CipherMode.UNWRAP)
        if len(wrapped) < self._MIN_KEY_DATA + self._SEMIBLOCK or (
            len(wrapped) % self._SEMIBLOCK
        ):
            _fail(
                f"Invalid wrapped key length for algorithm {self._algorithm}",
                InvalidArgumentError,
            )
        try:
            return aes_key_unwrap(self._wrap_key, wrapped, backend=default_backend())
        except InvalidUnwrap as e:
            _fail(f"Invalid key for algorithm {self._algorithm}", InvalidArgumentError, e)


@final
class AesEcbCipher(_AesWrapCipher):
    """AES in ECB mode with block padding, for variable length key encodings."""

    __slots__ = ("_padding",)

    def __init__(
        self,
        mode: CipherMode,
        wrap_key: SecretKey,
        random: SystemRandom,
        *,
        padding_name: str = "PKCS7Padding",
    ) -> None:
        super().__init__(f"AES/ECB/{padding_name}", mode, wrap_key, random)
        self._padding = padding.PKCS7(AES_BLOCK_SIZE * 8)

    def _cipher(self) -> Cipher[modes.ECB]:
        return Cipher(
            algorithms.AES(self._wrap_key),
            modes.ECB(),  # noqa: S305
            backend=default_backend(),
        )

    def wrap(self, key: Key) -> bytes:
        self._require(CipherMode.WRAP)
        data = self._encoded(key)
        try:
            padder = self._padding.padder()
            padded = padder.update(data) + padder.finalize()
            encryptor = self._cipher().encryptor()
            return encryptor.update(padded) + encryptor.finalize()
        except (ValueError, TypeError) as e:
            _fail(f"Invalid key for algorithm {self._algorithm}", InvalidArgumentError, e)

    def unwrap(self, wrapped: bytes) -> bytes:
        self._require(CipherMode.UNWRAP)
        if not wrapped or len(wrapped) % AES_BLOCK_SIZE:
            _fail(
                f"Invalid wrapped key length for algorithm {self._algorithm}",
                InvalidArgumentError,
            )

        decryptor = self._cipher().decryptor()
        padded = decryptor.update(wrapped) + decryptor.finalize()
        try:
            unpadder = self._padding.unpadder()
            return unpadder.update(padded) + unpadder.finalize()
        except ValueError as e:
            _fail(f"Invalid key for algorithm {self._algorithm}", InvalidArgumentError, e)
