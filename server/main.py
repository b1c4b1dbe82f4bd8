import json
import logging
import time
from fastapi import FastAPI, Depends, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from hybridcrypto import api as hybrid
from hybridcrypto.errors import ErrorKind, HybridCryptoError
from hybridcrypto.keys import SecretProvider, normalize_pem, public_pem_from_private, require_private_key

from .config import CORS_ORIGINS, HYBRID_DEBUG, PUBLIC_KEY_PEM
from .deps import get_secret_provider
from .schemas import DecryptIn, DecryptOut, DebugOut, ErrorOut, PublicKeyOut, Timings

logger = logging.getLogger(__name__)

app = FastAPI(title="Hybrid Encryption Session Server")

# ---- CORS ----
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---- ERRORS ----

@app.exception_handler(HybridCryptoError)
async def hybrid_error_handler(request: Request, exc: HybridCryptoError):
    # a missing private key is a server misconfiguration, everything else is a bad request
    status = 500 if exc.kind == ErrorKind.PRIVATE_KEY_UNAVAILABLE else 400
    logger.warning("%s %s failed: %s", request.method, request.url.path, exc.kind.value)
    return JSONResponse(status_code=status, content={"ok": False, **exc.to_dict()})

MISSING_FIELDS = "missing wrapped_key_b64 or payload"

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # a body that is not a JSON object counts as missing fields on the decrypt route
    if request.url.path == "/api/decrypt":
        return JSONResponse(status_code=400, content=ErrorOut(error=MISSING_FIELDS).model_dump())
    return await request_validation_exception_handler(request, exc)

def _elapsed_ms(t0: float) -> int:
    return int((time.perf_counter() - t0) * 1000)

# ---- ROUTES ----

@app.get("/health")
async def health():
    return {"status": "ok"}

@app.get("/api/public-key", response_model=PublicKeyOut)
def public_key(secrets: SecretProvider = Depends(get_secret_provider)):
    pem = normalize_pem(PUBLIC_KEY_PEM)
    if not pem:
        require_private_key(secrets)
        pem = public_pem_from_private(secrets.get_private_key_pem())
    return PublicKeyOut(public_key_pem=pem)

@app.post(
    "/api/decrypt",
    response_model=DecryptOut,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorOut}, 500: {"model": ErrorOut}},
)
def decrypt(data: DecryptIn, secrets: SecretProvider = Depends(get_secret_provider)):
    """
    Decrypt a client session packet with the wrapped session key, then
    answer with an echo encrypted under the same key.
    """
    wrapped_key_b64, payload = data.wrapped_key_b64, data.payload
    if not isinstance(wrapped_key_b64, str) or not isinstance(payload, str):
        return JSONResponse(
            status_code=400,
            content=ErrorOut(error=MISSING_FIELDS).model_dump(),
        )

    t0 = time.perf_counter()
    incoming = hybrid.server_decrypt_with_wrapped(wrapped_key_b64, payload, secrets=secrets)
    server_decrypt_ms = _elapsed_ms(t0)

    try:
        client_obj = json.loads(incoming)
    except (ValueError, RecursionError):
        client_obj = None
    response_json = json.dumps({
        "echo": client_obj if client_obj is not None else incoming,
        "serverTime": int(time.time() * 1000),
        "msg": "server encrypted response",
    }, separators=(",", ":"))

    t1 = time.perf_counter()
    out_packet = hybrid.server_encrypt_with_wrapped(wrapped_key_b64, response_json, secrets=secrets)
    server_encrypt_ms = _elapsed_ms(t1)

    debug = None
    if HYBRID_DEBUG:
        debug = DebugOut(server_decrypted_plaintext=incoming, server_response_plaintext=response_json)

    return DecryptOut(
        payload=out_packet,
        timings=Timings(server_decrypt_ms=server_decrypt_ms, server_encrypt_ms=server_encrypt_ms),
        debug=debug,
    )
