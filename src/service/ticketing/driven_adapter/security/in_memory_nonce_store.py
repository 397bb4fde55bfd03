import asyncio
import secrets
import time
from typing import Callable, Dict

from src.service.ticketing.app.interface.i_nonce_store import INonceStore


NONCE_UPPER_BOUND = 1_000_000


class InMemoryNonceStore(INonceStore):
    """Nonces live in process memory and are pruned lazily on every call."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._expires_at: Dict[int, float] = {}
        self._lock = asyncio.Lock()

    async def issue(self, *, ttl_seconds: int) -> int:
        async with self._lock:
            self._prune()
            nonce = secrets.randbelow(NONCE_UPPER_BOUND)
            self._expires_at[nonce] = self._clock() + ttl_seconds
            return nonce

    async def consume(self, nonce: int) -> bool:
        async with self._lock:
            self._prune()
            return self._expires_at.pop(nonce, None) is not None

    def _prune(self) -> None:
        now = self._clock()
        for nonce in [n for n, expires_at in self._expires_at.items() if expires_at <= now]:
            del self._expires_at[nonce]
