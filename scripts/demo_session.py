#!/usr/bin/env python3
"""
Session Encryption Demonstration

Plays the client role against a running server:
1. Fetch the server public key
2. Ensure a session key (wrapped under the public key)
3. Encrypt a JSON payload with the session key
4. POST it to /api/decrypt together with the wrapped key
5. Decrypt the server's encrypted response

Start the server first:
    uvicorn server.main:app --port 8000
"""

import argparse
import json
import time

import httpx

from hybridcrypto import api
from hybridcrypto.session import SessionStore


def timed(fn, *args):
    t0 = time.perf_counter()
    result = fn(*args)
    return result, (time.perf_counter() - t0) * 1000


def demo(base_url: str, rounds: int):
    store = SessionStore()

    with httpx.Client(base_url=base_url, timeout=10.0) as client:
        resp = client.get("/api/public-key")
        resp.raise_for_status()
        public_key_pem = resp.json()["public_key_pem"]

        for i in range(1, rounds + 1):
            print("=" * 70)
            print(f"ROUND {i}")
            print("=" * 70)

            sess_json, ms = timed(api.ensure_session_key, public_key_pem, store)
            sess = json.loads(sess_json)
            print(f"   session key: {ms:.2f} ms ({'new' if sess['fresh'] else 'reused'})")

            plaintext = json.dumps({"hello": "session aes", "clientTime": int(time.time() * 1000)})
            request_cipher, ms = timed(api.encrypt_with_session, plaintext, store)
            print(f"   client encrypt: {ms:.2f} ms")

            resp = client.post("/api/decrypt", json={
                "wrapped_key_b64": sess["wrapped_key_b64"],
                "payload": request_cipher,
            })
            data = resp.json()
            if not data.get("ok"):
                print(f"   server error: {data.get('error')}")
                return
            timings = data["timings"]
            print(f"   server decrypt: {timings['server_decrypt_ms']} ms, "
                  f"server encrypt: {timings['server_encrypt_ms']} ms")

            response_plain, ms = timed(api.decrypt_with_session, data["payload"], store)
            print(f"   client decrypt: {ms:.2f} ms")
            print(f"   response: {response_plain}")
            print()


def main():
    parser = argparse.ArgumentParser(description="Hybrid session encryption demo client")
    parser.add_argument("--url", default="http://localhost:8000")
    parser.add_argument("--rounds", type=int, default=2)
    args = parser.parse_args()
    demo(args.url, args.rounds)


if __name__ == "__main__":
    main()
