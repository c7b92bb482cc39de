import base64
import binascii

from pykeywrap.exceptions import InvalidArgumentError

__all__ = ["from_base64", "to_base64"]


def to_base64(data: bytes) -> str:
    """Standard base64 encode with padding."""
    return base64.b64encode(data).decode("ascii")


def from_base64(value: str) -> bytes:
    """Strict standard base64 decode."""
    if not isinstance(value, str):
        msg = f"Expected base64 text, got {type(value).__name__}"
        raise InvalidArgumentError(msg)
    try:
        return base64.b64decode(value.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as e:
        msg = "Value is not valid base64 text"
        raise InvalidArgumentError(msg) from e
