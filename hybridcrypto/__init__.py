"""Hybrid RSA-OAEP / AES-256-GCM encryption with cached session keys."""

from .errors import (
    ErrorKind,
    HybridCryptoError,
    RandomnessUnavailable,
    EncryptionFailure,
    AuthenticationFailure,
    WrapFailure,
    UnwrapFailure,
    EncodingError,
    DecodeError,
    UnsupportedAlgorithm,
    InvalidKeyLength,
    InvalidPlaintextEncoding,
    NoSessionKey,
    SessionExpired,
    PrivateKeyUnavailable,
)

from .primitive import (
    b64url_encode,
    b64url_decode,
    secure_random,
    aead_encrypt,
    aead_decrypt,
    rsa_oaep_wrap,
    rsa_oaep_unwrap,
)

from .packets import (
    PACKET_VERSION,
    ALG_RSA_OAEP_256,
    SYM_ALG_AES_256_GCM,
    HybridPacket,
    SessionPacket,
    encode_hybrid,
    decode_hybrid,
    encode_session,
    decode_session,
)

from .keys import (
    normalize_pem,
    SecretProvider,
    EnvSecretProvider,
    StaticSecretProvider,
    generate_rsa_keypair,
    public_pem_from_private,
)

from .session import (
    SESSION_TTL_MS,
    SessionStatus,
    SessionKeyInfo,
    SessionStore,
)

from .protocol import (
    encrypt_hybrid,
    decrypt_hybrid,
    encrypt_with_session,
    decrypt_with_session,
    server_decrypt_with_wrapped,
    server_encrypt_with_wrapped,
)

__all__ = [
    # Errors
    "ErrorKind",
    "HybridCryptoError",
    "RandomnessUnavailable",
    "EncryptionFailure",
    "AuthenticationFailure",
    "WrapFailure",
    "UnwrapFailure",
    "EncodingError",
    "DecodeError",
    "UnsupportedAlgorithm",
    "InvalidKeyLength",
    "InvalidPlaintextEncoding",
    "NoSessionKey",
    "SessionExpired",
    "PrivateKeyUnavailable",
    # Primitives
    "b64url_encode",
    "b64url_decode",
    "secure_random",
    "aead_encrypt",
    "aead_decrypt",
    "rsa_oaep_wrap",
    "rsa_oaep_unwrap",
    # Packets
    "PACKET_VERSION",
    "ALG_RSA_OAEP_256",
    "SYM_ALG_AES_256_GCM",
    "HybridPacket",
    "SessionPacket",
    "encode_hybrid",
    "decode_hybrid",
    "encode_session",
    "decode_session",
    # Keys
    "normalize_pem",
    "SecretProvider",
    "EnvSecretProvider",
    "StaticSecretProvider",
    "generate_rsa_keypair",
    "public_pem_from_private",
    # Session
    "SESSION_TTL_MS",
    "SessionStatus",
    "SessionKeyInfo",
    "SessionStore",
    # Protocol (typed values; JSON strings live in hybridcrypto.api)
    "encrypt_hybrid",
    "decrypt_hybrid",
    "encrypt_with_session",
    "decrypt_with_session",
    "server_decrypt_with_wrapped",
    "server_encrypt_with_wrapped",
]
