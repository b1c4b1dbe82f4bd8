import base64
import binascii
import os
import re
from typing import Tuple, Union

from cryptography.exceptions import InvalidTag, UnsupportedAlgorithm as _LibUnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .errors import (
    AuthenticationFailure,
    EncodingError,
    EncryptionFailure,
    RandomnessUnavailable,
    UnwrapFailure,
    WrapFailure,
)

KEY_LEN = 32
NONCE_LEN = 12
TAG_LEN = 16

_B64URL_RE = re.compile(r"[A-Za-z0-9_-]*")


def _oaep() -> padding.OAEP:
    return padding.OAEP(
        mgf=padding.MGF1(algorithm=hashes.SHA256()),
        algorithm=hashes.SHA256(),
        label=None,
    )


def b64url_encode(b: bytes) -> str:
    return base64.urlsafe_b64encode(b).rstrip(b"=").decode("ascii")


def b64url_decode(s: str) -> bytes:
    if not isinstance(s, str) or not _B64URL_RE.fullmatch(s):
        raise EncodingError("base64 decode error: invalid character or padding")
    try:
        data = base64.b64decode(s + "=" * (-len(s) % 4), altchars=b"-_", validate=True)
    except (binascii.Error, ValueError) as e:
        raise EncodingError(f"base64 decode error: {e}") from e
    # non-zero trailing bits would let two strings decode to the same bytes
    if b64url_encode(data) != s:
        raise EncodingError("base64 decode error: non-canonical trailing bits")
    return data


def secure_random(n: int) -> bytes:
    try:
        return os.urandom(n)
    except (OSError, NotImplementedError) as e:
        raise RandomnessUnavailable(f"random error: {e}") from e


def aead_encrypt(key32: bytes, plaintext: bytes) -> Tuple[bytes, bytes]:
    """AES-256-GCM with empty associated data. Returns (nonce, ciphertext || tag)."""
    if len(key32) != KEY_LEN:
        raise EncryptionFailure("aes-gcm encrypt error: key must be 32 bytes")
    nonce = secure_random(NONCE_LEN)
    try:
        ct = AESGCM(bytes(key32)).encrypt(nonce, plaintext, None)
    except (ValueError, OverflowError, TypeError) as e:
        raise EncryptionFailure(f"aes-gcm encrypt error: {e}") from e
    return nonce, ct


def aead_decrypt(key32: bytes, nonce: bytes, ciphertext: bytes) -> bytes:
    # Every failure cause maps to the same message.
    if len(key32) != KEY_LEN or len(nonce) != NONCE_LEN or len(ciphertext) < TAG_LEN:
        raise AuthenticationFailure("aes-gcm decrypt error")
    try:
        return AESGCM(bytes(key32)).decrypt(nonce, ciphertext, None)
    except (InvalidTag, ValueError) as e:
        raise AuthenticationFailure("aes-gcm decrypt error") from e


def load_public_key(pem: Union[str, bytes]) -> rsa.RSAPublicKey:
    data = pem.encode("utf-8") if isinstance(pem, str) else pem
    try:
        pub = serialization.load_pem_public_key(data)
    except (ValueError, TypeError, _LibUnsupportedAlgorithm) as e:
        raise WrapFailure(f"invalid public key: {e}") from e
    if not isinstance(pub, rsa.RSAPublicKey):
        raise WrapFailure("invalid public key: RSA key required for OAEP wrapping")
    return pub


def load_private_key(pem: Union[str, bytes]) -> rsa.RSAPrivateKey:
    """Parse an unencrypted PKCS#8 or PKCS#1 RSA private key. Raises ValueError."""
    data = pem.encode("utf-8") if isinstance(pem, str) else pem
    try:
        priv = serialization.load_pem_private_key(data, password=None)
    except (TypeError, _LibUnsupportedAlgorithm) as e:
        raise ValueError(str(e)) from e
    if not isinstance(priv, rsa.RSAPrivateKey):
        raise ValueError("RSA key required for OAEP unwrapping")
    return priv


def rsa_oaep_wrap(public_key: Union[str, rsa.RSAPublicKey], sym_key: bytes) -> bytes:
    """Wrap a symmetric key with RSA-OAEP (SHA-256)."""
    if not isinstance(public_key, rsa.RSAPublicKey):
        public_key = load_public_key(public_key)
    try:
        return public_key.encrypt(bytes(sym_key), _oaep())
    except ValueError as e:
        raise WrapFailure(f"rsa wrap error: {e}") from e


def rsa_oaep_unwrap(private_key: rsa.RSAPrivateKey, wrapped: bytes) -> bytes:
    """Unwrap with RSA-OAEP (SHA-256). Padding and length errors are reported alike."""
    try:
        return private_key.decrypt(wrapped, _oaep())
    except ValueError as e:
        raise UnwrapFailure("rsa unwrap error") from e
