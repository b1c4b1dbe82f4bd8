"""
Wire packets for the hybrid protocol.

Two envelopes, both JSON objects with base64url (unpadded) binary fields:

    HybridPacket:  {v, alg, sym_alg, nonce_b64, wrapped_key_b64, ciphertext_b64}
    SessionPacket: {v, sym_alg, nonce_b64, ciphertext_b64}

Packets are typed values inside the package; JSON is produced and parsed
only by the encode_* / decode_* functions. Unknown extra fields are ignored
on decode.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, Tuple

from .errors import DecodeError, UnsupportedAlgorithm
from .primitive import b64url_decode, b64url_encode

PACKET_VERSION = 1
ALG_RSA_OAEP_256 = "RSA-OAEP-256"
SYM_ALG_AES_256_GCM = "AES-256-GCM"


def _canonical_json(obj: dict) -> str:
    """Compact JSON, keys kept in field order."""
    return json.dumps(obj, separators=(",", ":"))


def _parse_object(text: str) -> Dict[str, Any]:
    try:
        obj = json.loads(text)
    except (TypeError, ValueError) as e:
        raise DecodeError(f"json decode error: {e}") from e
    if not isinstance(obj, dict):
        raise DecodeError("json decode error: packet must be a JSON object")
    return obj


def _require(d: Dict[str, Any], fields: Tuple[str, ...]) -> None:
    missing = [f for f in fields if f not in d]
    if missing:
        raise DecodeError(f"missing field(s): {', '.join(missing)}", {"missing": missing})
    for f in fields:
        if f == "v":
            # bool is an int subclass; reject it explicitly
            if not isinstance(d[f], int) or isinstance(d[f], bool):
                raise DecodeError("field 'v' must be an integer")
        elif not isinstance(d[f], str):
            raise DecodeError(f"field '{f}' must be a string")


def _check_version(v: int) -> None:
    if v != PACKET_VERSION:
        raise DecodeError(f"unsupported packet version: {v}", {"version": v})


def _check_sym_alg(sym_alg: str) -> None:
    if sym_alg != SYM_ALG_AES_256_GCM:
        raise UnsupportedAlgorithm(f"unsupported sym_alg: {sym_alg}", {"sym_alg": sym_alg})


@dataclass(frozen=True)
class HybridPacket:
    """Self-contained envelope: wrapped one-shot key plus ciphertext."""
    nonce: bytes
    wrapped_key: bytes
    ciphertext: bytes
    v: int = PACKET_VERSION
    alg: str = ALG_RSA_OAEP_256
    sym_alg: str = SYM_ALG_AES_256_GCM

    def to_dict(self) -> dict:
        return {
            "v": self.v,
            "alg": self.alg,
            "sym_alg": self.sym_alg,
            "nonce_b64": b64url_encode(self.nonce),
            "wrapped_key_b64": b64url_encode(self.wrapped_key),
            "ciphertext_b64": b64url_encode(self.ciphertext),
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "HybridPacket":
        _require(d, ("v", "alg", "sym_alg", "nonce_b64", "wrapped_key_b64", "ciphertext_b64"))
        _check_version(d["v"])
        if d["alg"] != ALG_RSA_OAEP_256:
            raise UnsupportedAlgorithm(f"unsupported alg: {d['alg']}", {"alg": d["alg"]})
        _check_sym_alg(d["sym_alg"])
        return HybridPacket(
            nonce=b64url_decode(d["nonce_b64"]),
            wrapped_key=b64url_decode(d["wrapped_key_b64"]),
            ciphertext=b64url_decode(d["ciphertext_b64"]),
            v=d["v"],
            alg=d["alg"],
            sym_alg=d["sym_alg"],
        )


@dataclass(frozen=True)
class SessionPacket:
    """Ciphertext-only envelope; the key is implied by the session."""
    nonce: bytes
    ciphertext: bytes
    v: int = PACKET_VERSION
    sym_alg: str = SYM_ALG_AES_256_GCM

    def to_dict(self) -> dict:
        return {
            "v": self.v,
            "sym_alg": self.sym_alg,
            "nonce_b64": b64url_encode(self.nonce),
            "ciphertext_b64": b64url_encode(self.ciphertext),
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "SessionPacket":
        _require(d, ("v", "sym_alg", "nonce_b64", "ciphertext_b64"))
        _check_version(d["v"])
        _check_sym_alg(d["sym_alg"])
        return SessionPacket(
            nonce=b64url_decode(d["nonce_b64"]),
            ciphertext=b64url_decode(d["ciphertext_b64"]),
            v=d["v"],
            sym_alg=d["sym_alg"],
        )


def encode_hybrid(packet: HybridPacket) -> str:
    return _canonical_json(packet.to_dict())


def decode_hybrid(text: str) -> HybridPacket:
    return HybridPacket.from_dict(_parse_object(text))


def encode_session(packet: SessionPacket) -> str:
    return _canonical_json(packet.to_dict())


def decode_session(text: str) -> SessionPacket:
    return SessionPacket.from_dict(_parse_object(text))
