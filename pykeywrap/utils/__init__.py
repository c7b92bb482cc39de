from .codec import from_base64, to_base64
from .entropy import SALT_SIZE, entropy_source, salt

__all__ = [
    "SALT_SIZE",
    "entropy_source",
    "from_base64",
    "salt",
    "to_base64",
]
