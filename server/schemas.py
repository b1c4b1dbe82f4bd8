from pydantic import BaseModel
from typing import Any, Optional

# request body for POST /api/decrypt; fields are validated by the route so
# a missing value yields the protocol's own 400 response
class DecryptIn(BaseModel):
    wrapped_key_b64: Optional[Any] = None
    payload: Optional[Any] = None

class Timings(BaseModel):
    server_decrypt_ms: int
    server_encrypt_ms: int

class DebugOut(BaseModel):
    server_decrypted_plaintext: str
    server_response_plaintext: str

class DecryptOut(BaseModel):
    ok: bool = True
    payload: str  # SessionPacket JSON
    timings: Timings
    debug: Optional[DebugOut] = None

class ErrorOut(BaseModel):
    ok: bool = False
    error: str
    kind: Optional[str] = None

class PublicKeyOut(BaseModel):
    public_key_pem: str
