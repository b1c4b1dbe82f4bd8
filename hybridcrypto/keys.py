from __future__ import annotations

import os
import re
from typing import Optional, Protocol, Tuple

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from .errors import PrivateKeyUnavailable
from .primitive import load_private_key

PRIVATE_KEY_ENV = "PRIVATE_KEY_PEM"

_BEGIN_RE = re.compile(r"^-----BEGIN [A-Z0-9 ]+-----$")
_END_RE = re.compile(r"^-----END [A-Z0-9 ]+-----$")


def normalize_pem(text: Optional[str]) -> str:
    """
    Normalize PEM text pasted into .env files or environment variables.

    Handles a leading BOM, wrapping quotes, escaped "\\n" / "\\r" sequences,
    CRLF line endings and indented lines. When BEGIN/END delimiters are
    present only the bounded region is kept. The result ends with a newline,
    or is "" for empty input.
    """
    s = (text or "").lstrip("\ufeff").strip()
    if not s:
        return ""

    if len(s) >= 2 and s[0] == s[-1] and s[0] in ("'", '"'):
        s = s[1:-1]

    s = s.replace("\\r\\n", "\n").replace("\\n", "\n").replace("\\r", "\n")
    s = s.replace("\r\n", "\n").replace("\r", "\n")

    raw_lines = [line.strip() for line in s.split("\n")]

    begin = next((i for i, line in enumerate(raw_lines) if _BEGIN_RE.match(line)), -1)
    end = -1
    if begin >= 0:
        end = next(
            (i for i in range(begin + 1, len(raw_lines)) if _END_RE.match(raw_lines[i])),
            -1,
        )

    if begin >= 0 and end > begin:
        raw_lines = raw_lines[begin:end + 1]
    lines = [line for line in raw_lines if line]
    if not lines:
        return ""
    return "\n".join(lines) + "\n"


class SecretProvider(Protocol):
    """Source of the server's private key PEM. Returns None where no key exists (client side)."""

    def get_private_key_pem(self) -> Optional[str]:
        ...


class EnvSecretProvider:
    """Reads the private key from an environment variable on every call."""

    def __init__(self, var_name: str = PRIVATE_KEY_ENV):
        self.var_name = var_name

    def get_private_key_pem(self) -> Optional[str]:
        pem = normalize_pem(os.getenv(self.var_name))
        return pem or None


class StaticSecretProvider:
    def __init__(self, pem: Optional[str]):
        self._pem = normalize_pem(pem) or None

    def get_private_key_pem(self) -> Optional[str]:
        return self._pem


def require_private_key(secrets: SecretProvider) -> rsa.RSAPrivateKey:
    pem = secrets.get_private_key_pem()
    if not pem:
        raise PrivateKeyUnavailable("private key not available in this environment")
    try:
        return load_private_key(pem)
    except ValueError as e:
        raise PrivateKeyUnavailable(f"invalid private key: {e}") from e


def public_key_to_pem(pub: rsa.RSAPublicKey) -> str:
    return pub.public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("ascii")


def private_key_to_pem(priv: rsa.RSAPrivateKey) -> str:
    return priv.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")


def public_pem_from_private(private_pem: str) -> str:
    try:
        priv = load_private_key(normalize_pem(private_pem))
    except ValueError as e:
        raise PrivateKeyUnavailable(f"invalid private key: {e}") from e
    return public_key_to_pem(priv.public_key())


def generate_rsa_keypair(bits: int = 2048) -> Tuple[str, str]:
    """Returns (private_pem, public_pem): PKCS#8 private key, SPKI public key."""
    priv = rsa.generate_private_key(public_exponent=65537, key_size=bits)
    return private_key_to_pem(priv), public_key_to_pem(priv.public_key())
