"""
Packet Codec Tests

1. Encoded JSON has the documented shape
2. Decoding validates fields, version and algorithm identifiers
3. Unknown fields are ignored
"""

import json

import pytest

from hybridcrypto.errors import DecodeError, EncodingError, UnsupportedAlgorithm
from hybridcrypto.packets import (
    HybridPacket,
    SessionPacket,
    decode_hybrid,
    decode_session,
    encode_hybrid,
    encode_session,
)


def _hybrid_dict(**overrides):
    d = HybridPacket(nonce=b"n" * 12, wrapped_key=b"w" * 256, ciphertext=b"c" * 20).to_dict()
    d.update(overrides)
    return d


def _session_dict(**overrides):
    d = SessionPacket(nonce=b"n" * 12, ciphertext=b"c" * 20).to_dict()
    d.update(overrides)
    return d


class TestEncoding:
    """Serialization of typed packets to wire JSON."""

    def test_hybrid_shape(self):
        """Hybrid packets carry all six fields in order, compact."""
        text = encode_hybrid(HybridPacket(nonce=b"\x00" * 12, wrapped_key=b"\x01", ciphertext=b"\x02"))
        d = json.loads(text)
        assert list(d) == ["v", "alg", "sym_alg", "nonce_b64", "wrapped_key_b64", "ciphertext_b64"]
        assert d["v"] == 1
        assert d["alg"] == "RSA-OAEP-256"
        assert d["sym_alg"] == "AES-256-GCM"
        assert d["nonce_b64"] == "AAAAAAAAAAAAAAAA"
        assert " " not in text

    def test_session_shape(self):
        """Session packets carry no key material."""
        d = json.loads(encode_session(SessionPacket(nonce=b"\x00" * 12, ciphertext=b"\xff")))
        assert list(d) == ["v", "sym_alg", "nonce_b64", "ciphertext_b64"]
        assert d["ciphertext_b64"] == "_w"

    def test_decode_returns_typed_values(self):
        """Decoding yields an equal SessionPacket."""
        packet = SessionPacket(nonce=b"n" * 12, ciphertext=b"payload")
        assert decode_session(encode_session(packet)) == packet


class TestDecodeValidation:
    """Structural validation on decode."""

    def test_invalid_json_carries_parser_message(self):
        """Parser errors surface as DecodeError with the parser's message."""
        with pytest.raises(DecodeError) as exc_info:
            decode_session("{not json")
        assert "json decode error" in str(exc_info.value)

    def test_non_object(self):
        """A JSON array is not a packet."""
        with pytest.raises(DecodeError):
            decode_hybrid("[1, 2, 3]")

    def test_missing_field(self):
        """Missing fields are named in the error context."""
        d = _hybrid_dict()
        del d["wrapped_key_b64"]
        with pytest.raises(DecodeError) as exc_info:
            decode_hybrid(json.dumps(d))
        assert exc_info.value.context["missing"] == ["wrapped_key_b64"]

    def test_wrong_version(self):
        """Only version 1 is accepted."""
        with pytest.raises(DecodeError):
            decode_session(json.dumps(_session_dict(v=2)))

    def test_boolean_version_rejected(self):
        """true is not the integer 1."""
        with pytest.raises(DecodeError):
            decode_session(json.dumps(_session_dict(v=True)))

    def test_non_string_field(self):
        """Binary fields must be base64url strings."""
        with pytest.raises(DecodeError):
            decode_session(json.dumps(_session_dict(nonce_b64=123)))

    def test_bad_base64(self):
        """Padded base64 is an EncodingError."""
        with pytest.raises(EncodingError):
            decode_session(json.dumps(_session_dict(ciphertext_b64="abc=")))

    def test_unknown_fields_ignored(self):
        """Extra fields from newer senders do not break decoding."""
        packet = decode_hybrid(json.dumps(_hybrid_dict(extra="future", aad_b64="")))
        assert packet.wrapped_key == b"w" * 256


class TestAlgorithmPinning:
    """Algorithm identifiers must match exactly; there is no fallback."""

    @pytest.mark.parametrize("alg", ["RSA-OAEP", "RSA-OAEP-512", "rsa-oaep-256", ""])
    def test_hybrid_alg_mismatch(self, alg):
        """Any asymmetric identifier other than RSA-OAEP-256 is rejected."""
        with pytest.raises(UnsupportedAlgorithm):
            decode_hybrid(json.dumps(_hybrid_dict(alg=alg)))

    @pytest.mark.parametrize("sym_alg", ["AES-128-GCM", "CHACHA20-POLY1305", "aes-256-gcm"])
    def test_hybrid_sym_alg_mismatch(self, sym_alg):
        """Any symmetric identifier other than AES-256-GCM is rejected."""
        with pytest.raises(UnsupportedAlgorithm):
            decode_hybrid(json.dumps(_hybrid_dict(sym_alg=sym_alg)))

    def test_session_sym_alg_mismatch(self):
        """Session packets are pinned the same way."""
        with pytest.raises(UnsupportedAlgorithm) as exc_info:
            decode_session(json.dumps(_session_dict(sym_alg="AES-128-GCM")))
        assert exc_info.value.kind.value == "UnsupportedAlgorithm"
