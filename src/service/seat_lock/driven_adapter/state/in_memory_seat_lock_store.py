import asyncio
from typing import Dict, List, Optional

import attrs

from src.service.seat_lock.app.interface.i_seat_lock_store import ISeatLockStore
from src.service.seat_lock.domain.seat_lock_entity import LockType, SeatLock


class InMemorySeatLockStore(ISeatLockStore):
    """Process-local lock store. One asyncio.Lock serializes every mutation."""

    def __init__(self) -> None:
        self._locks: Dict[str, SeatLock] = {}
        self._mutex = asyncio.Lock()

    async def acquire(self, lock: SeatLock, *, now_ms: int) -> Optional[SeatLock]:
        async with self._mutex:
            existing = self._locks.get(lock.seat_key)
            if existing is not None and not existing.can_be_replaced_by(lock, now_ms):
                return attrs.evolve(existing)
            self._locks[lock.seat_key] = attrs.evolve(lock)
            return None

    async def get(self, seat_key: str, *, now_ms: int) -> Optional[SeatLock]:
        lock = self._locks.get(seat_key)
        if lock is None or lock.is_expired(now_ms):
            return None
        return attrs.evolve(lock)

    async def release(
        self, seat_key: str, *, user_id: int, lock_type: Optional[LockType] = None
    ) -> Optional[SeatLock]:
        async with self._mutex:
            lock = self._locks.get(seat_key)
            if lock is None or lock.user_id != user_id:
                return None
            if lock_type is not None and lock.lock_type != lock_type:
                return None
            return self._locks.pop(seat_key)

    async def list_concert(self, concert_id: int, *, now_ms: int) -> List[SeatLock]:
        return [
            attrs.evolve(lock)
            for lock in self._locks.values()
            if lock.concert_id == concert_id and not lock.is_expired(now_ms)
        ]

    async def list_all(self, *, now_ms: int) -> List[SeatLock]:
        return [attrs.evolve(lock) for lock in self._locks.values() if not lock.is_expired(now_ms)]

    async def mark_warned(self, seat_key: str) -> None:
        async with self._mutex:
            if seat_key in self._locks:
                self._locks[seat_key].warned = True

    async def pop_expired(self, *, now_ms: int) -> List[SeatLock]:
        async with self._mutex:
            expired_keys = [key for key, lock in self._locks.items() if lock.is_expired(now_ms)]
            return [self._locks.pop(key) for key in expired_keys]
