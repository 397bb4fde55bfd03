"""
Seat lock store fixtures

pytest-asyncio runs every test function on a fresh event loop, so the
production Kvrocks singleton (one client per process) cannot be shared. The
test client keeps one connection per loop. Each kvrocks-backed test writes
under its own key prefix and removes its keys afterwards.

Kvrocks tests are skipped when no server answers at KVROCKS_HOST:KVROCKS_PORT.
"""

import asyncio
from collections.abc import AsyncGenerator
import uuid

import pytest
from redis.asyncio import ConnectionPool as AsyncConnectionPool, Redis as AsyncRedis
from redis.exceptions import ConnectionError as RedisConnectionError, TimeoutError

from src.platform.config.core_setting import settings
from src.platform.state.kvrocks_client import KvrocksClient
from src.service.seat_lock.app.interface.i_seat_lock_store import ISeatLockStore
from src.service.seat_lock.driven_adapter.state.in_memory_seat_lock_store import (
    InMemorySeatLockStore,
)
from src.service.seat_lock.driven_adapter.state.kvrocks_seat_lock_store import (
    KvrocksSeatLockStore,
)


class KvrocksTestClientAsync(KvrocksClient):
    """Kvrocks client with one connection per event loop."""

    def __init__(self) -> None:
        super().__init__()
        self._clients: dict[int, AsyncRedis] = {}

    async def initialize(self) -> AsyncRedis:
        loop_id = id(asyncio.get_running_loop())
        if loop_id in self._clients:
            return self._clients[loop_id]

        pool = AsyncConnectionPool.from_url(
            settings.KVROCKS_URL,
            password=settings.KVROCKS_PASSWORD or None,
            decode_responses=True,
            socket_timeout=2,
            socket_connect_timeout=2,
        )
        client = AsyncRedis.from_pool(pool)
        try:
            await client.ping()
        except (RedisConnectionError, TimeoutError, OSError):
            await client.aclose()
            raise
        self._clients[loop_id] = client
        return client

    def get_client(self) -> AsyncRedis:
        loop_id = id(asyncio.get_running_loop())
        if loop_id not in self._clients:
            raise RuntimeError(
                f'Kvrocks test client not initialized for event loop {loop_id}. '
                'Await initialize() inside the test loop first.'
            )
        return self._clients[loop_id]

    @property
    def is_initialized(self) -> bool:
        return bool(self._clients)

    async def disconnect(self) -> None:
        loop_id = id(asyncio.get_running_loop())
        if client := self._clients.pop(loop_id, None):
            await client.aclose()


kvrocks_test_client_async = KvrocksTestClientAsync()


@pytest.fixture
async def kvrocks_store() -> AsyncGenerator[KvrocksSeatLockStore, None]:
    try:
        client = await kvrocks_test_client_async.initialize()
    except (RedisConnectionError, TimeoutError, OSError) as e:
        pytest.skip(f'Kvrocks not reachable at {settings.KVROCKS_URL}: {e}')

    prefix = f'test_{uuid.uuid4().hex[:8]}:'
    yield KvrocksSeatLockStore(
        client_factory=kvrocks_test_client_async.get_client, key_prefix=prefix
    )

    keys = [key async for key in client.scan_iter(match=f'{prefix}*')]
    if keys:
        await client.delete(*keys)
    await kvrocks_test_client_async.disconnect()


@pytest.fixture(params=['memory', pytest.param('kvrocks', marks=pytest.mark.kvrocks)])
def seat_lock_store(request: pytest.FixtureRequest) -> ISeatLockStore:
    """Every ISeatLockStore adapter, so the contract runs against each of them."""
    if request.param == 'memory':
        return InMemorySeatLockStore()
    return request.getfixturevalue('kvrocks_store')
