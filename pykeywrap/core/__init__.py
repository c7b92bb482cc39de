from .ciphers import AES_BLOCK_SIZE, AesEcbCipher, AesKeyWrapCipher, CipherMode
from .key_factories import RSA_KEY_FACTORY, KeyFactory
from .key_wrapper import KeyWrapper
from .keys import (
    ASYMMETRIC_ALGORITHM,
    SYMMETRIC_ALGORITHM,
    KeyPair,
    KeyType,
    SecretKey,
    generate_secret_key,
    new_key_pair,
    new_secret_key,
)
from .providers import (
    Provider,
    ProviderRegistry,
    add_provider,
    default_provider,
    default_registry,
)

__all__ = [
    "AES_BLOCK_SIZE",
    "ASYMMETRIC_ALGORITHM",
    "RSA_KEY_FACTORY",
    "SYMMETRIC_ALGORITHM",
    "AesEcbCipher",
    "AesKeyWrapCipher",
    "CipherMode",
    "KeyFactory",
    "KeyPair",
    "KeyType",
    "KeyWrapper",
    "Provider",
    "ProviderRegistry",
    "SecretKey",
    "add_provider",
    "default_provider",
    "default_registry",
    "generate_secret_key",
    "new_key_pair",
    "new_secret_key",
]
