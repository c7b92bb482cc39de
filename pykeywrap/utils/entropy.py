import secrets
from typing import Final

from pykeywrap.utils.codec import to_base64

__all__ = ["SALT_SIZE", "entropy_source", "salt"]

SALT_SIZE: Final[int] = 16

_SYSTEM_RANDOM: Final[secrets.SystemRandom] = secrets.SystemRandom()


def entropy_source() -> secrets.SystemRandom:
    """Process-wide cryptographically secure generator."""
    return _SYSTEM_RANDOM


def salt() -> str:
    """Generate a random salt for password-based key derivation.

    The value is not sensitive, but it must be stored alongside whatever the
    derived key protects so the same key can be regenerated later.
    """
    return to_base64(secrets.token_bytes(SALT_SIZE))
