"""
Unit test configuration for the seat lock service.

The service runs against the real in-memory store with a controllable clock;
broadcaster and minted-seat checker are mocks so tests can assert on events.
"""

from unittest.mock import AsyncMock

import pytest

from src.service.seat_lock.app.seat_locking_service import SeatLockingService
from src.service.seat_lock.driven_adapter.state.in_memory_seat_lock_store import (
    InMemorySeatLockStore,
)


class FakeClock:
    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def lock_store() -> InMemorySeatLockStore:
    return InMemorySeatLockStore()


@pytest.fixture
def broadcaster() -> AsyncMock:
    broadcaster = AsyncMock()
    broadcaster.broadcast_seat_update = AsyncMock()
    broadcaster.notify_user = AsyncMock()
    return broadcaster


@pytest.fixture
def minted_seat_checker() -> AsyncMock:
    checker = AsyncMock()
    checker.is_minted = AsyncMock(return_value=False)
    return checker


@pytest.fixture
def service(lock_store, broadcaster, minted_seat_checker, clock) -> SeatLockingService:
    return SeatLockingService(
        lock_store=lock_store,
        broadcaster=broadcaster,
        minted_seat_checker=minted_seat_checker,
        clock=clock,
        temporary_lock_seconds=300,
        processing_lock_seconds=120,
        warning_seconds=30,
    )
