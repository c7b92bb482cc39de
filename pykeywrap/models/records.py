from __future__ import annotations

import base64
import binascii
from typing import Annotated, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    field_validator,
)

Base64Text = Annotated[
    str,
    StringConstraints(min_length=4, pattern=r"^[A-Za-z0-9+/]+={0,2}$"),
]


def _check_decodes(value: str) -> str:
    try:
        base64.b64decode(value, validate=True)
    except binascii.Error as e:
        msg = "Value is not valid base64 text"
        raise ValueError(msg) from e
    return value


class WrappedKey(BaseModel):
    """Wrapped key tagged with the path that produced it.

    The ``value`` is exactly the string the untagged wrap operations return,
    so records can be migrated either way without re-wrapping.

    Attributes:
        kind: Wrap path used (``secret`` for AESWrap, ``private`` for padded ECB)
        value: Base64 encoded wrapped key
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        str_strip_whitespace=True,
    )

    kind: Literal["secret", "private"] = Field(..., description="Wrap path used")
    value: Base64Text = Field(..., description="Base64 encoded wrapped key")

    @field_validator("value")
    @classmethod
    def validate_value(cls, value: str) -> str:
        """Reject text with a valid alphabet but broken padding."""
        return _check_decodes(value)


class StoredKeyPair(BaseModel):
    """Storage record for a key pair: wrapped private key plus plain public key."""

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        str_strip_whitespace=True,
    )

    wrapped_private_key: Base64Text = Field(
        ...,
        description="Private key wrapped with AES/ECB/PKCS7Padding",
    )
    public_key: Base64Text = Field(
        ...,
        description="Unencrypted DER SubjectPublicKeyInfo",
    )

    @field_validator("wrapped_private_key", "public_key")
    @classmethod
    def validate_encoding(cls, value: str) -> str:
        """Ensure both fields decode as base64."""
        return _check_decodes(value)
