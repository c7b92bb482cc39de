from __future__ import annotations

from typing import Final

from cryptography.hazmat.primitives import serialization

from pykeywrap.models import KdfConfig

PASSWORD: Final[str] = "correct horse"

# Low iteration count keeps the suite fast; derivation stays deterministic.
FAST_KDF: Final[KdfConfig] = KdfConfig(iterations=2)


def private_der(key: object) -> bytes:
    return key.private_bytes(  # type: ignore[attr-defined]
        encoding=serialization.Encoding.DER,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )


def public_der(key: object) -> bytes:
    return key.public_bytes(  # type: ignore[attr-defined]
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
