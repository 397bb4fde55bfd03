import asyncio
import time
from unittest.mock import AsyncMock, Mock

import orjson
import pytest

from src.service.seat_lock.driving_adapter.client import seat_socket_client
from src.service.seat_lock.driving_adapter.client.seat_socket_client import SeatSocketClient


class FakeConnection:
    """Queue-backed stand-in for a websockets client connection."""

    def __init__(self) -> None:
        self.sent: list = []
        self.closed = False
        self._inbox: asyncio.Queue = asyncio.Queue()

    def push(self, message: dict) -> None:
        self._inbox.put_nowait(orjson.dumps(message).decode())

    def drop(self) -> None:
        self._inbox.put_nowait(None)

    async def send(self, frame) -> None:
        self.sent.append(orjson.loads(frame))

    async def close(self) -> None:
        self.closed = True
        self.drop()

    def __aiter__(self):
        return self

    async def __anext__(self):
        frame = await self._inbox.get()
        if frame is None:
            raise StopAsyncIteration
        return frame


@pytest.fixture
def recorded_delays(monkeypatch) -> list[float]:
    delays: list[float] = []
    real_sleep = asyncio.sleep

    async def fake_sleep(seconds: float, *args, **kwargs):
        delays.append(seconds)
        await real_sleep(0)

    monkeypatch.setattr(seat_socket_client.asyncio, 'sleep', fake_sleep)
    return delays


@pytest.mark.unit
@pytest.mark.asyncio
class TestReconnect:
    async def test_reconnects_with_backoff_and_reauthenticates(self, recorded_delays):
        # Given
        first, second = FakeConnection(), FakeConnection()
        connector = AsyncMock(side_effect=[first, OSError('refused'), second])
        client = SeatSocketClient('ws://test/ws/seats', token='tok', connector=connector)
        disconnected = Mock()
        client.on('disconnected', disconnected)
        await client.connect()
        assert await client.authenticate('wallet-5', 1) is True
        first_loop = client._receive_task

        # When the server drops the socket
        first.drop()
        await first_loop

        # Then
        assert recorded_delays == [1.0, 2.0]
        disconnected.assert_called_once_with({'reason': 'connection lost'})
        assert client.is_connected is True
        assert client.reconnect_attempts == 0
        assert second.sent == [
            {
                'action': 'authenticate',
                'data': {'token': 'tok', 'wallet_address': 'wallet-5', 'concert_id': 1},
            }
        ]

        await client.disconnect()
        assert second.closed is True

    async def test_gives_up_after_max_attempts(self, recorded_delays):
        connection = FakeConnection()
        connector = AsyncMock(side_effect=[connection] + [OSError('refused')] * 5)
        client = SeatSocketClient('ws://test/ws/seats', connector=connector)
        failed = Mock()
        client.on('reconnectFailed', failed)
        await client.connect()
        loop = client._receive_task

        connection.drop()
        await loop

        assert recorded_delays == [1.0, 2.0, 4.0, 8.0, 10.0]
        failed.assert_called_once_with({'attempts': 5})
        assert client.is_connected is False

    async def test_client_disconnect_does_not_reconnect(self, recorded_delays):
        connection = FakeConnection()
        connector = AsyncMock(return_value=connection)
        client = SeatSocketClient('ws://test/ws/seats', connector=connector)
        await client.connect()

        await client.disconnect()
        await asyncio.sleep(0)

        assert connector.await_count == 1
        assert recorded_delays == []
        assert client.get_status()['connected'] is False


@pytest.mark.unit
@pytest.mark.asyncio
class TestEvents:
    async def test_pong_reports_connection_health(self):
        connection = FakeConnection()
        connector = AsyncMock(return_value=connection)
        client = SeatSocketClient('ws://test/ws/seats', connector=connector)
        health = asyncio.Event()
        received: dict = {}

        def on_health(data):
            received.update(data)
            health.set()

        client.on('connectionHealth', on_health)
        await client.connect()

        sent_at = int(time.time() * 1000) - 50
        connection.push({'event': 'pong', 'data': {'timestamp': sent_at, 'server_time': 1}})
        await asyncio.wait_for(health.wait(), timeout=1)

        assert received['latency'] >= 50
        assert received['server_time'] == 1
        await client.disconnect()

    async def test_server_events_reach_async_listeners(self):
        connection = FakeConnection()
        connector = AsyncMock(return_value=connection)
        client = SeatSocketClient('ws://test/ws/seats', connector=connector)
        locked = asyncio.Event()

        async def on_locked(data):
            assert data['seat_key'] == '1-VIP-A1'
            locked.set()

        client.on('seatLocked', on_locked)
        await client.connect()
        connection.push({'event': 'seatLocked', 'data': {'seat_key': '1-VIP-A1'}})

        await asyncio.wait_for(locked.wait(), timeout=1)
        await client.disconnect()

    async def test_failing_listener_does_not_stop_others(self):
        client = SeatSocketClient('ws://test/ws/seats')
        good = Mock()
        client.on('seatStatusUpdate', Mock(side_effect=RuntimeError('boom')))
        client.on('seatStatusUpdate', good)

        await client.emit('seatStatusUpdate', {'action': 'locked'})

        good.assert_called_once_with({'action': 'locked'})

    async def test_off_removes_listeners(self):
        client = SeatSocketClient('ws://test/ws/seats')
        first, second = Mock(), Mock()
        client.on('pong', first)
        client.on('pong', second)

        client.off('pong', first)
        await client.emit('pong', {})
        client.off('pong')
        await client.emit('pong', {})

        first.assert_not_called()
        second.assert_called_once_with({})

    async def test_actions_are_dropped_while_disconnected(self):
        client = SeatSocketClient('ws://test/ws/seats')

        assert await client.select_seat(1, 'VIP', 'A1') is False
        assert await client.ping() is False
