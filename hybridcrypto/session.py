"""
Session Key Manager

Holds a single cached AES-256 session key together with its RSA-OAEP
wrapped form, so that clients only pay for the asymmetric wrap once per
TTL window.

Lifecycle of the slot:
    EMPTY -> FRESH -> CACHED -> EXPIRED -> (ensure_session_key) -> FRESH

- EMPTY/EXPIRED -> FRESH happens only inside ensure_session_key
- FRESH -> CACHED once the slot is read again before the TTL elapses
- CACHED -> EXPIRED is purely a function of elapsed time, checked lazily

The raw key lives in a bytearray that is zeroed when the slot is replaced.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from .errors import NoSessionKey, SessionExpired
from .keys import normalize_pem
from .packets import ALG_RSA_OAEP_256, PACKET_VERSION, SYM_ALG_AES_256_GCM
from .primitive import KEY_LEN, b64url_encode, rsa_oaep_wrap, secure_random

logger = logging.getLogger(__name__)

SESSION_TTL_MS = 15 * 60 * 1000


def now_ms() -> int:
    return int(time.time() * 1000)


class SessionStatus(str, Enum):
    EMPTY = "empty"
    FRESH = "fresh"
    CACHED = "cached"
    EXPIRED = "expired"


@dataclass
class SessionKeyState:
    """
    Cached session key.

    Attributes:
        raw_key: 32-byte AES key, memory only
        wrapped_key_b64: raw_key wrapped under public_key_pem (safe to transmit)
        created_ms: creation time, epoch milliseconds
        public_key_pem: normalized PEM the key is bound to
    """
    raw_key: bytearray = field(repr=False)
    wrapped_key_b64: str
    created_ms: int
    public_key_pem: str = field(repr=False)
    served: bool = False

    def age_ms(self, now: int) -> int:
        return now - self.created_ms

    def wipe(self) -> None:
        for i in range(len(self.raw_key)):
            self.raw_key[i] = 0


@dataclass(frozen=True)
class SessionKeyInfo:
    """Result of ensure_session_key."""
    wrapped_key_b64: str
    fresh: bool
    created_ms: int

    def to_dict(self) -> dict:
        return {
            "v": PACKET_VERSION,
            "alg": ALG_RSA_OAEP_256,
            "sym_alg": SYM_ALG_AES_256_GCM,
            "wrapped_key_b64": self.wrapped_key_b64,
            "fresh": self.fresh,
            "created_ms": self.created_ms,
        }


class SessionStore:
    """
    Single-slot session key cache guarded by a lock.

    Args:
        clock: callable returning epoch milliseconds (injectable for tests)
        ttl_ms: maximum key age; a key is reusable while now - created <= ttl_ms
    """

    def __init__(self, clock: Optional[Callable[[], int]] = None, ttl_ms: int = SESSION_TTL_MS):
        self._clock = clock or now_ms
        self.ttl_ms = ttl_ms
        self._lock = threading.Lock()
        self._state: Optional[SessionKeyState] = None

    def _expired(self, state: SessionKeyState, now: int) -> bool:
        # A backwards clock jump makes the age negative and extends validity.
        return state.age_ms(now) > self.ttl_ms

    def ensure_session_key(self, public_key_pem: str) -> SessionKeyInfo:
        """
        Return the cached wrapped key if it is still valid for this public key,
        otherwise generate, wrap and install a new one.

        The slot is replaced only after the new key has been wrapped, so a
        WrapFailure leaves the previous state in place.
        """
        pem = normalize_pem(public_key_pem)
        with self._lock:
            now = self._clock()
            state = self._state
            if state is not None and state.public_key_pem == pem and not self._expired(state, now):
                state.served = True
                logger.debug("Reusing session key (age %d ms)", state.age_ms(now))
                return SessionKeyInfo(state.wrapped_key_b64, False, state.created_ms)

            raw_key = bytearray(secure_random(KEY_LEN))
            try:
                wrapped = rsa_oaep_wrap(pem, raw_key)
            except Exception:
                for i in range(len(raw_key)):
                    raw_key[i] = 0
                raise

            new_state = SessionKeyState(
                raw_key=raw_key,
                wrapped_key_b64=b64url_encode(wrapped),
                created_ms=now,
                public_key_pem=pem,
            )
            if state is not None:
                reason = "public key changed" if state.public_key_pem != pem else "expired"
                logger.debug("Replacing session key (%s)", reason)
                state.wipe()
            else:
                logger.debug("Generating first session key")
            self._state = new_state
            return SessionKeyInfo(new_state.wrapped_key_b64, True, new_state.created_ms)

    def current_raw_key(self) -> Optional[bytes]:
        """Raw key regardless of binding or expiry, or None if the slot is empty."""
        with self._lock:
            if self._state is None:
                return None
            self._state.served = True
            return bytes(self._state.raw_key)

    def live_raw_key(self) -> bytes:
        """Raw key for outbound traffic: NoSessionKey if empty, SessionExpired past the TTL."""
        with self._lock:
            state = self._state
            if state is None:
                raise NoSessionKey("no session key; call ensure_session_key first")
            if self._expired(state, self._clock()):
                raise SessionExpired(
                    "session key expired; call ensure_session_key again",
                    {"created_ms": state.created_ms},
                )
            state.served = True
            return bytes(state.raw_key)

    def status(self) -> SessionStatus:
        with self._lock:
            state = self._state
            if state is None:
                return SessionStatus.EMPTY
            if self._expired(state, self._clock()):
                return SessionStatus.EXPIRED
            return SessionStatus.CACHED if state.served else SessionStatus.FRESH

    @property
    def created_ms(self) -> Optional[int]:
        with self._lock:
            return self._state.created_ms if self._state else None

    def is_expired(self) -> bool:
        return self.status() == SessionStatus.EXPIRED
