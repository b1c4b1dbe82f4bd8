"""
JSON Boundary Tests

The string-in / string-out operations used by the browser client and the
server route, including the full client -> server -> client exchange.
"""

import json

import pytest

from hybridcrypto import api
from hybridcrypto.errors import DecodeError, NoSessionKey, PrivateKeyUnavailable, UnsupportedAlgorithm
from hybridcrypto.keys import StaticSecretProvider


class TestEndToEnd:
    """Full client -> server -> client exchange through JSON strings."""

    def test_client_server_exchange(self, store, public_pem, secrets):
        """A session packet from the client decrypts on the server and back."""
        sess = json.loads(api.ensure_session_key(public_pem, store=store))
        assert sess["fresh"] is True
        wrapped = sess["wrapped_key_b64"]

        request_packet = api.encrypt_with_session('{"a":1}', store=store)
        assert api.server_decrypt_with_wrapped(wrapped, request_packet, secrets=secrets) == '{"a":1}'

        reply = api.server_encrypt_with_wrapped(wrapped, '{"ok":true}', secrets=secrets)
        assert api.decrypt_with_session(reply, store=store) == '{"ok":true}'

    def test_second_exchange_reuses_key(self, store, public_pem):
        """A second ensure within the TTL reuses the wrapped key."""
        first = json.loads(api.ensure_session_key(public_pem, store=store))
        second = json.loads(api.ensure_session_key(public_pem, store=store))
        assert second["fresh"] is False
        assert second["wrapped_key_b64"] == first["wrapped_key_b64"]
        assert second["created_ms"] == first["created_ms"]

    def test_hybrid_strings(self, public_pem, secrets):
        """One-shot packets round-trip as JSON."""
        packet_json = api.encrypt_hybrid(public_pem, "one shot")
        assert json.loads(packet_json)["alg"] == "RSA-OAEP-256"
        assert api.decrypt_hybrid(packet_json, secrets=secrets) == "one shot"


class TestBoundaryErrors:
    """Errors surface unchanged through the string API."""

    def test_decrypt_hybrid_without_key_on_client(self, public_pem, monkeypatch):
        """Without PRIVATE_KEY_PEM decryption raises PrivateKeyUnavailable."""
        monkeypatch.delenv("PRIVATE_KEY_PEM", raising=False)
        packet_json = api.encrypt_hybrid(public_pem, "x")
        with pytest.raises(PrivateKeyUnavailable):
            api.decrypt_hybrid(packet_json)

    def test_decrypt_hybrid_reads_environment(self, public_pem, private_pem, monkeypatch):
        """The default secrets come from PRIVATE_KEY_PEM."""
        monkeypatch.setenv("PRIVATE_KEY_PEM", private_pem.replace("\n", "\\n"))
        assert api.decrypt_hybrid(api.encrypt_hybrid(public_pem, "env")) == "env"

    def test_session_packet_with_foreign_alg(self, store, public_pem):
        """A rewritten sym_alg is rejected."""
        api.ensure_session_key(public_pem, store=store)
        packet = json.loads(api.encrypt_with_session("{}", store=store))
        packet["sym_alg"] = "AES-128-GCM"
        with pytest.raises(UnsupportedAlgorithm):
            api.decrypt_with_session(json.dumps(packet), store=store)

    def test_garbage_packet(self, secrets):
        """Non-JSON payloads raise DecodeError."""
        with pytest.raises(DecodeError):
            api.server_decrypt_with_wrapped("AAAA", "not json", secrets=secrets)

    def test_empty_store(self, store):
        """Encrypting with an empty store raises NoSessionKey."""
        with pytest.raises(NoSessionKey):
            api.encrypt_with_session("{}", store=store)

    def test_explicit_secrets_override_default(self, store, public_pem):
        """An explicit provider replaces the environment lookup."""
        info = json.loads(api.ensure_session_key(public_pem, store=store))
        packet = api.encrypt_with_session("{}", store=store)
        with pytest.raises(PrivateKeyUnavailable):
            api.server_decrypt_with_wrapped(info["wrapped_key_b64"], packet, secrets=StaticSecretProvider(""))
