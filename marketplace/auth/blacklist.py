"""
In-memory token invalidation store.

Holds revoked tokens until their natural expiry. The store is process-local
and not persisted: a restart forgets every revocation, so only tokens with a
short remaining lifetime should rely on it. Swap in a shared store through
``get_token_blacklist`` when running more than one process.
"""

import threading
import time
from typing import Callable

from marketplace.utils import Logger

logger = Logger("auth.blacklist")


class TokenBlacklist:
    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._expiry_ms: dict[str, float] = {}
        self._lock = threading.Lock()

    def _now_ms(self) -> float:
        return self._clock() * 1000

    def add(self, token: str, ttl_ms: int) -> None:
        """Revoke ``token`` for ``ttl_ms`` milliseconds, then sweep."""
        with self._lock:
            now = self._now_ms()
            self._expiry_ms[token] = now + ttl_ms
            self._sweep(now)

    def has(self, token: str) -> bool:
        with self._lock:
            expiry = self._expiry_ms.get(token)
            if expiry is None:
                return False
            if self._now_ms() > expiry:
                del self._expiry_ms[token]
                return False
            return True

    def _sweep(self, now: float) -> None:
        # Caller holds the lock.
        expired = [t for t, expiry in self._expiry_ms.items() if now > expiry]
        for token in expired:
            del self._expiry_ms[token]
        if expired:
            logger.debug(f"Swept {len(expired)} expired revocation(s)")

    def __len__(self) -> int:
        with self._lock:
            return len(self._expiry_ms)

    def clear(self) -> None:
        with self._lock:
            self._expiry_ms.clear()


# ── Module-level singleton ──────────────────────────────────────
token_blacklist = TokenBlacklist()


def get_token_blacklist() -> TokenBlacklist:
    """FastAPI dependency — override it to inject a different store."""
    return token_blacklist
