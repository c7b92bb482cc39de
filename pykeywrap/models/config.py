from __future__ import annotations

from typing import Final, Literal

from pydantic import BaseModel, ConfigDict, Field

PBKD_ITERATIONS: Final[int] = 1024  # PBKDF2 rounds used when deriving wrap keys
DEFAULT_KEY_LENGTH: Final[int] = 32  # AES-256


class KdfConfig(BaseModel):
    """Password-based key derivation parameters.

    Attributes:
        hash_algorithm: HMAC digest used by PBKDF2
        iterations: Number of PBKDF2 rounds
        key_length: Derived key size in bytes (AES-128, AES-192 or AES-256)
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
    )

    hash_algorithm: Literal["SHA1", "SHA256", "SHA512"] = Field(
        default="SHA256",
        description="HMAC digest used by PBKDF2",
    )
    iterations: int = Field(
        default=PBKD_ITERATIONS,
        ge=1,
        description="Number of PBKDF2 rounds",
    )
    key_length: Literal[16, 24, 32] = Field(
        default=DEFAULT_KEY_LENGTH,
        description="Derived key size in bytes",
    )
