from .config import DEFAULT_KEY_LENGTH, PBKD_ITERATIONS, KdfConfig
from .records import Base64Text, StoredKeyPair, WrappedKey

__all__ = [
    "DEFAULT_KEY_LENGTH",
    "PBKD_ITERATIONS",
    "Base64Text",
    "KdfConfig",
    "StoredKeyPair",
    "WrappedKey",
]
