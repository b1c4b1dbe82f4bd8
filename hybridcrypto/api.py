"""
String-in / string-out surface of the protocol.

Mirrors the operations exposed to the browser and to the server route: all
arguments and results are JSON strings. Without an explicit `store` the
process-wide `default_store` slot is used; without explicit `secrets` the
private key is read from the PRIVATE_KEY_PEM environment variable.
"""

import json
from typing import Optional

from . import protocol
from .keys import EnvSecretProvider, SecretProvider
from .packets import decode_hybrid, decode_session, encode_hybrid, encode_session
from .session import SessionStore

default_store = SessionStore()
default_secrets: SecretProvider = EnvSecretProvider()


def encrypt_hybrid(public_key_pem: str, plaintext: str) -> str:
    return encode_hybrid(protocol.encrypt_hybrid(public_key_pem, plaintext))


def decrypt_hybrid(packet_json: str, secrets: Optional[SecretProvider] = None) -> str:
    return protocol.decrypt_hybrid(decode_hybrid(packet_json), secrets or default_secrets)


def ensure_session_key(public_key_pem: str, store: Optional[SessionStore] = None) -> str:
    info = (store or default_store).ensure_session_key(public_key_pem)
    return json.dumps(info.to_dict(), separators=(",", ":"))


def encrypt_with_session(plaintext_json: str, store: Optional[SessionStore] = None) -> str:
    return encode_session(protocol.encrypt_with_session(store or default_store, plaintext_json))


def decrypt_with_session(packet_json: str, store: Optional[SessionStore] = None) -> str:
    return protocol.decrypt_with_session(store or default_store, decode_session(packet_json))


def server_decrypt_with_wrapped(
    wrapped_key_b64: str,
    packet_json: str,
    secrets: Optional[SecretProvider] = None,
) -> str:
    packet = decode_session(packet_json)
    return protocol.server_decrypt_with_wrapped(secrets or default_secrets, wrapped_key_b64, packet)


def server_encrypt_with_wrapped(
    wrapped_key_b64: str,
    plaintext_json: str,
    secrets: Optional[SecretProvider] = None,
) -> str:
    packet = protocol.server_encrypt_with_wrapped(secrets or default_secrets, wrapped_key_b64, plaintext_json)
    return encode_session(packet)
