"""
Error kinds for the hybrid encryption protocol.

Every failure raised by this package is a HybridCryptoError subclass with a
`kind` taken from the closed ErrorKind enumeration, so callers can branch on
the kind instead of parsing messages. Messages and context never carry key
material or plaintext.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    RANDOMNESS_UNAVAILABLE = "RandomnessUnavailable"
    ENCRYPTION_FAILURE = "EncryptionFailure"
    AUTHENTICATION_FAILURE = "AuthenticationFailure"
    WRAP_FAILURE = "WrapFailure"
    UNWRAP_FAILURE = "UnwrapFailure"
    ENCODING_ERROR = "EncodingError"
    DECODE_ERROR = "DecodeError"
    UNSUPPORTED_ALGORITHM = "UnsupportedAlgorithm"
    INVALID_KEY_LENGTH = "InvalidKeyLength"
    INVALID_PLAINTEXT_ENCODING = "InvalidPlaintextEncoding"
    NO_SESSION_KEY = "NoSessionKey"
    SESSION_EXPIRED = "SessionExpired"
    PRIVATE_KEY_UNAVAILABLE = "PrivateKeyUnavailable"


class HybridCryptoError(Exception):
    """Base class for all protocol errors."""

    kind: ErrorKind

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = dict(context or {})

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "error": self.message, **self.context}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


class RandomnessUnavailable(HybridCryptoError):
    kind = ErrorKind.RANDOMNESS_UNAVAILABLE


class EncryptionFailure(HybridCryptoError):
    kind = ErrorKind.ENCRYPTION_FAILURE


class AuthenticationFailure(HybridCryptoError):
    kind = ErrorKind.AUTHENTICATION_FAILURE


class WrapFailure(HybridCryptoError):
    kind = ErrorKind.WRAP_FAILURE


class UnwrapFailure(HybridCryptoError):
    kind = ErrorKind.UNWRAP_FAILURE


class EncodingError(HybridCryptoError):
    kind = ErrorKind.ENCODING_ERROR


class DecodeError(HybridCryptoError):
    kind = ErrorKind.DECODE_ERROR


class UnsupportedAlgorithm(HybridCryptoError):
    kind = ErrorKind.UNSUPPORTED_ALGORITHM


class InvalidKeyLength(HybridCryptoError):
    kind = ErrorKind.INVALID_KEY_LENGTH


class InvalidPlaintextEncoding(HybridCryptoError):
    kind = ErrorKind.INVALID_PLAINTEXT_ENCODING


class NoSessionKey(HybridCryptoError):
    kind = ErrorKind.NO_SESSION_KEY


class SessionExpired(HybridCryptoError):
    kind = ErrorKind.SESSION_EXPIRED


class PrivateKeyUnavailable(HybridCryptoError):
    kind = ErrorKind.PRIVATE_KEY_UNAVAILABLE
