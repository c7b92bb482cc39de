__version__ = "1.0.0"
__author__ = "Brian Alegre"
__license__ = "MIT"
__copyright__ = "Copyright 2025-present balegre0"

import logging

from .core import (
    KeyPair,
    KeyWrapper,
    SecretKey,
    add_provider,
    generate_secret_key,
    new_key_pair,
    new_secret_key,
)
from .exceptions import (
    CryptoUnavailableError,
    InternalCryptoFailureError,
    InvalidArgumentError,
    InvalidConfigurationError,
    KeyWrapError,
)
from .models import KdfConfig, StoredKeyPair, WrappedKey
from .utils import salt

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "CryptoUnavailableError",
    "InternalCryptoFailureError",
    "InvalidArgumentError",
    "InvalidConfigurationError",
    "KdfConfig",
    "KeyPair",
    "KeyWrapError",
    "KeyWrapper",
    "SecretKey",
    "StoredKeyPair",
    "WrappedKey",
    "add_provider",
    "generate_secret_key",
    "new_key_pair",
    "new_secret_key",
    "salt",
]
