"""
Kvrocks-backed seat lock store

Layout (all keys share KVROCKS_KEY_PREFIX):
    seat_lock:{seat_key}              hash with the SeatLock record
    seat_lock:concert:{concert_id}    set of seat keys locked in a concert
    seat_lock:concerts                set of concert ids with locks

Acquire and release run as Lua scripts so check-and-set is atomic across
API workers. Hashes outlive expires_at by a grace period, which lets the
expiry sweep still tell the owner that the lock lapsed.
"""

from typing import Any, Callable, Dict, List, Optional

from redis.asyncio import Redis

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger
from src.platform.state.kvrocks_client import kvrocks_client
from src.service.seat_lock.app.interface.i_seat_lock_store import ISeatLockStore
from src.service.seat_lock.driven_adapter.state.lua_script import (
    ACQUIRE_SEAT_LOCK_SCRIPT,
    RELEASE_SEAT_LOCK_SCRIPT,
)
from src.service.seat_lock.domain.seat_lock_entity import LockType, SeatLock


def _pairs_to_dict(fields: List[Any]) -> Dict[str, str]:
    return {str(fields[i]): str(fields[i + 1]) for i in range(0, len(fields), 2)}


class KvrocksSeatLockStore(ISeatLockStore):
    def __init__(
        self,
        *,
        client_factory: Callable[[], Redis] = kvrocks_client.get_client,
        key_prefix: str = settings.KVROCKS_KEY_PREFIX,
        expiry_grace_ms: int = 60_000,
    ) -> None:
        self._client_factory = client_factory
        self._prefix = f'{key_prefix}seat_lock'
        self._expiry_grace_ms = expiry_grace_ms
        self._scripts: Dict[str, Any] = {}

    # ========== Keys ==========

    def _lock_key(self, seat_key: str) -> str:
        return f'{self._prefix}:{seat_key}'

    def _concert_index_key(self, concert_id: int) -> str:
        return f'{self._prefix}:concert:{concert_id}'

    @property
    def _concerts_key(self) -> str:
        return f'{self._prefix}:concerts'

    def _script(self, source: str) -> Any:
        # Script objects are called with the current client, which differs per event loop
        if source not in self._scripts:
            self._scripts[source] = self._client_factory().register_script(source)
        return self._scripts[source]

    # ========== ISeatLockStore ==========

    @Logger.io
    async def acquire(self, lock: SeatLock, *, now_ms: int) -> Optional[SeatLock]:
        record = lock.to_record()
        flat_fields = [item for pair in record.items() for item in pair]
        stored = await self._script(ACQUIRE_SEAT_LOCK_SCRIPT)(
            client=self._client_factory(),
            keys=[
                self._lock_key(lock.seat_key),
                self._concert_index_key(lock.concert_id),
                self._concerts_key,
            ],
            args=[
                now_ms,
                lock.user_id,
                lock.lock_type.value,
                lock.expires_at,
                self._expiry_grace_ms,
                lock.seat_key,
                lock.concert_id,
                *flat_fields,
            ],
        )
        if int(stored) == 1:
            return None
        return await self._load(lock.seat_key)

    async def get(self, seat_key: str, *, now_ms: int) -> Optional[SeatLock]:
        lock = await self._load(seat_key)
        if lock is None or lock.is_expired(now_ms):
            return None
        return lock

    @Logger.io
    async def release(
        self, seat_key: str, *, user_id: int, lock_type: Optional[LockType] = None
    ) -> Optional[SeatLock]:
        concert_id = int(seat_key.split('-', 1)[0])
        return await self._compare_and_delete(
            seat_key,
            concert_id=concert_id,
            user_id=str(user_id),
            lock_type=lock_type.value if lock_type else '',
        )

    async def list_concert(self, concert_id: int, *, now_ms: int) -> List[SeatLock]:
        return [
            lock for lock in await self._load_concert(concert_id) if not lock.is_expired(now_ms)
        ]

    async def list_all(self, *, now_ms: int) -> List[SeatLock]:
        locks: List[SeatLock] = []
        for concert_id in await self._concert_ids():
            locks.extend(await self.list_concert(concert_id, now_ms=now_ms))
        return locks

    async def mark_warned(self, seat_key: str) -> None:
        client = self._client_factory()
        key = self._lock_key(seat_key)
        if await client.exists(key):
            await client.hset(key, 'warned', '1')

    @Logger.io
    async def pop_expired(self, *, now_ms: int) -> List[SeatLock]:
        client = self._client_factory()
        expired: List[SeatLock] = []
        for concert_id in await self._concert_ids():
            locks = await self._load_concert(concert_id)
            for lock in locks:
                if not lock.is_expired(now_ms):
                    continue
                # expires_at guard: skip if the seat was re-locked meanwhile
                removed = await self._compare_and_delete(
                    lock.seat_key,
                    concert_id=concert_id,
                    expires_at=str(lock.expires_at),
                )
                if removed is not None:
                    expired.append(removed)
            if not await client.scard(self._concert_index_key(concert_id)):
                await client.srem(self._concerts_key, concert_id)
        return expired

    # ========== Internals ==========

    async def _compare_and_delete(
        self,
        seat_key: str,
        *,
        concert_id: int,
        user_id: str = '',
        lock_type: str = '',
        expires_at: str = '',
    ) -> Optional[SeatLock]:
        fields = await self._script(RELEASE_SEAT_LOCK_SCRIPT)(
            client=self._client_factory(),
            keys=[self._lock_key(seat_key), self._concert_index_key(concert_id)],
            args=[user_id, lock_type, seat_key, expires_at],
        )
        if not fields:
            return None
        return SeatLock.from_record(_pairs_to_dict(fields))

    async def _load(self, seat_key: str) -> Optional[SeatLock]:
        record = await self._client_factory().hgetall(self._lock_key(seat_key))
        if not record:
            return None
        return SeatLock.from_record(record)

    async def _load_concert(self, concert_id: int) -> List[SeatLock]:
        client = self._client_factory()
        index_key = self._concert_index_key(concert_id)
        seat_keys = sorted(await client.smembers(index_key))
        if not seat_keys:
            return []

        async with client.pipeline(transaction=False) as pipe:
            for seat_key in seat_keys:
                pipe.hgetall(self._lock_key(seat_key))
            records = await pipe.execute()

        locks: List[SeatLock] = []
        stale: List[str] = []
        for seat_key, record in zip(seat_keys, records, strict=True):
            if record:
                locks.append(SeatLock.from_record(record))
            else:
                stale.append(seat_key)
        if stale:
            await client.srem(index_key, *stale)
        return locks

    async def _concert_ids(self) -> List[int]:
        members = await self._client_factory().smembers(self._concerts_key)
        return sorted(int(member) for member in members)
