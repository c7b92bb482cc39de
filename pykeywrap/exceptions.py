class KeyWrapError(Exception):
    """Base class for all key wrapping exceptions"""


class InvalidConfigurationError(KeyWrapError):
    """Wrap key does not match the required algorithm"""


class CryptoUnavailableError(KeyWrapError):
    """Algorithm or padding not available from any registered provider"""

    def __init__(self, message: str, algorithm: str) -> None:
        super().__init__(message)
        self.algorithm = algorithm


class InvalidArgumentError(KeyWrapError, ValueError):
    """Key or encoded text rejected as structurally invalid"""


class InternalCryptoFailureError(KeyWrapError):
    """Cipher setup or block accounting failure"""
