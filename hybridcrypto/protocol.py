"""
Hybrid Protocol Operations

One-shot hybrid encryption (RSA-OAEP wrapped key + AES-256-GCM in one
packet) and session-based encryption for both roles:

- client: uses the raw key cached in a SessionStore
- server: has no cache; receives the wrapped key with every packet and
  unwraps it with the private key each time

encrypt_with_session refuses an expired key. decrypt_with_session only
requires that a key is resident, so responses to requests sent just before
expiry can still be read.
"""

from cryptography.hazmat.primitives.asymmetric import rsa

from .errors import InvalidKeyLength, InvalidPlaintextEncoding, NoSessionKey
from .keys import SecretProvider, normalize_pem, require_private_key
from .packets import HybridPacket, SessionPacket
from .primitive import (
    KEY_LEN,
    aead_decrypt,
    aead_encrypt,
    b64url_decode,
    rsa_oaep_unwrap,
    rsa_oaep_wrap,
    secure_random,
)
from .session import SessionStore


def _utf8(data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidPlaintextEncoding("plaintext is not valid UTF-8") from e


def _unwrap_session_key(private_key: rsa.RSAPrivateKey, wrapped: bytes) -> bytes:
    key = rsa_oaep_unwrap(private_key, wrapped)
    if len(key) != KEY_LEN:
        raise InvalidKeyLength(
            f"unwrapped key must be {KEY_LEN} bytes",
            {"expected": KEY_LEN, "actual": len(key)},
        )
    return key


# ---- one-shot hybrid ----

def encrypt_hybrid(public_key_pem: str, plaintext: str) -> HybridPacket:
    key = secure_random(KEY_LEN)
    nonce, ct = aead_encrypt(key, plaintext.encode("utf-8"))
    wrapped = rsa_oaep_wrap(normalize_pem(public_key_pem), key)
    return HybridPacket(nonce=nonce, wrapped_key=wrapped, ciphertext=ct)


def decrypt_hybrid(packet: HybridPacket, secrets: SecretProvider) -> str:
    private_key = require_private_key(secrets)
    key = _unwrap_session_key(private_key, packet.wrapped_key)
    return _utf8(aead_decrypt(key, packet.nonce, packet.ciphertext))


# ---- client session ----

def encrypt_with_session(store: SessionStore, plaintext: str) -> SessionPacket:
    key = store.live_raw_key()
    nonce, ct = aead_encrypt(key, plaintext.encode("utf-8"))
    return SessionPacket(nonce=nonce, ciphertext=ct)


def decrypt_with_session(store: SessionStore, packet: SessionPacket) -> str:
    key = store.current_raw_key()
    if key is None:
        raise NoSessionKey("no session key; call ensure_session_key first")
    return _utf8(aead_decrypt(key, packet.nonce, packet.ciphertext))


# ---- server session (no cache) ----

def server_decrypt_with_wrapped(secrets: SecretProvider, wrapped_key_b64: str, packet: SessionPacket) -> str:
    private_key = require_private_key(secrets)
    key = _unwrap_session_key(private_key, b64url_decode(wrapped_key_b64))
    return _utf8(aead_decrypt(key, packet.nonce, packet.ciphertext))


def server_encrypt_with_wrapped(secrets: SecretProvider, wrapped_key_b64: str, plaintext: str) -> SessionPacket:
    private_key = require_private_key(secrets)
    key = _unwrap_session_key(private_key, b64url_decode(wrapped_key_b64))
    nonce, ct = aead_encrypt(key, plaintext.encode("utf-8"))
    return SessionPacket(nonce=nonce, ciphertext=ct)
