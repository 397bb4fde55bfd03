"""
Seat channel client

Python counterpart of the browser socket service: connects to /ws/seats,
sends {action, data} frames and fans server events out to listeners.

Reconnect policy: after an unexpected drop, retry with
min(1000 * 2**attempt, 10000) ms delays, then emit reconnectFailed.
"""

import asyncio
import inspect
import time
from typing import Any, Callable, Dict, List, Optional

from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import ConnectionClosed, WebSocketException

from src.platform.logging.loguru_io import Logger
from src.platform.websocket.message_codec import MessageCodec
from src.platform.websocket.websocket_config import WebSocketConfig


Listener = Callable[[Any], Any]


class SeatSocketClient:
    def __init__(
        self,
        url: str,
        token: Optional[str] = None,
        *,
        max_reconnect_attempts: int = 5,
        use_binary: bool = False,
        connector: Callable[..., Any] = connect,
    ) -> None:
        self.url = url
        self.token = token
        self.max_reconnect_attempts = max_reconnect_attempts
        self.use_binary = use_binary
        self.codec = MessageCodec()
        self.is_connected = False
        self.reconnect_attempts = 0
        self.wallet_address: Optional[str] = None
        self.concert_id: Optional[int] = None
        self._connector = connector
        self._ws: Optional[ClientConnection] = None
        self._receive_task: Optional[asyncio.Task[None]] = None
        self._listeners: Dict[str, List[Listener]] = {}
        self._closing = False

    # ========== Connection ==========

    async def connect(self) -> None:
        self._closing = False
        self._ws = await self._connector(self.url)
        self.is_connected = True
        self.reconnect_attempts = 0
        Logger.base.info(f'🔌 [SEAT_SOCKET] Connected to {self.url}')
        await self.emit('connected', {'url': self.url})
        self._receive_task = asyncio.create_task(self._receive_loop(self._ws))

    async def disconnect(self) -> None:
        self._closing = True
        self.is_connected = False
        if self._ws is not None:
            await self._ws.close()
            self._ws = None
        if self._receive_task is not None and self._receive_task is not asyncio.current_task():
            self._receive_task.cancel()
            self._receive_task = None
        await self.emit('disconnected', {'reason': 'client disconnect'})

    def get_status(self) -> Dict[str, Any]:
        return {
            'connected': self.is_connected,
            'url': self.url,
            'reconnect_attempts': self.reconnect_attempts,
            'wallet_address': self.wallet_address,
            'concert_id': self.concert_id,
        }

    # ========== Actions ==========

    async def authenticate(self, wallet_address: str, concert_id: Optional[int] = None) -> bool:
        self.wallet_address = wallet_address
        self.concert_id = concert_id
        return await self._send(
            WebSocketConfig.ActionType.AUTHENTICATE,
            {'token': self.token, 'wallet_address': wallet_address, 'concert_id': concert_id},
        )

    async def select_seat(self, concert_id: int, section_name: str, seat_number: str) -> bool:
        return await self._send(
            WebSocketConfig.ActionType.SELECT_SEAT,
            {'concert_id': concert_id, 'section_name': section_name, 'seat_number': seat_number},
        )

    async def release_seat(self, concert_id: int, section_name: str, seat_number: str) -> bool:
        return await self._send(
            WebSocketConfig.ActionType.RELEASE_SEAT,
            {'concert_id': concert_id, 'section_name': section_name, 'seat_number': seat_number},
        )

    async def get_seat_status(self, concert_id: int, section_name: str, seat_number: str) -> bool:
        return await self._send(
            WebSocketConfig.ActionType.GET_SEAT_STATUS,
            {'concert_id': concert_id, 'section_name': section_name, 'seat_number': seat_number},
        )

    async def get_concert_locks(self, concert_id: int) -> bool:
        return await self._send(
            WebSocketConfig.ActionType.GET_CONCERT_LOCKS, {'concert_id': concert_id}
        )

    async def request_seat_update(
        self, concert_id: int, action: str, seat_data: Dict[str, Any]
    ) -> bool:
        return await self._send(
            WebSocketConfig.ActionType.REQUEST_SEAT_UPDATE,
            {'concert_id': concert_id, 'action': action, 'seat_data': seat_data},
        )

    async def ping(self) -> bool:
        return await self._send(WebSocketConfig.ActionType.PING, {'timestamp': _now_ms()})

    # ========== Listeners ==========

    def on(self, event: str, callback: Listener) -> None:
        self._listeners.setdefault(event, []).append(callback)

    def off(self, event: str, callback: Optional[Listener] = None) -> None:
        if callback is None:
            self._listeners.pop(event, None)
            return
        listeners = self._listeners.get(event, [])
        if callback in listeners:
            listeners.remove(callback)

    async def emit(self, event: str, data: Any = None) -> None:
        """Run every listener for event; one failing listener never stops the rest."""
        for callback in list(self._listeners.get(event, [])):
            try:
                result = callback(data)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                Logger.base.exception(f'❌ [SEAT_SOCKET] Listener for {event} failed: {e}')

    # ========== Internals ==========

    async def _send(self, action: str, data: Dict[str, Any]) -> bool:
        if not self.is_connected or self._ws is None:
            Logger.base.warning(f'⚠️ [SEAT_SOCKET] Not connected, dropping {action}')
            return False
        frame = self.codec.encode_message(
            data={'action': action, 'data': data}, use_binary=self.use_binary
        )
        try:
            await self._ws.send(frame)
        except ConnectionClosed:
            return False
        return True

    async def _receive_loop(self, ws: ClientConnection) -> None:
        try:
            async for raw in ws:
                try:
                    message = self.codec.decode_message(raw_data=raw)
                except ValueError as e:
                    Logger.base.warning(f'⚠️ [SEAT_SOCKET] Bad frame: {e}')
                    continue
                await self._dispatch(message)
        except ConnectionClosed as e:
            Logger.base.warning(f'🔌 [SEAT_SOCKET] Connection closed: {e}')

        if self._closing or ws is not self._ws:
            return
        self.is_connected = False
        await self.emit('disconnected', {'reason': 'connection lost'})
        await self._reconnect()

    async def _dispatch(self, message: Dict[str, Any]) -> None:
        event = message.get('event')
        data = message.get('data')
        if not isinstance(event, str):
            return
        if event == WebSocketConfig.MessageType.PONG and isinstance(data, dict):
            sent_at = data.get('timestamp')
            if isinstance(sent_at, int):
                await self.emit(
                    'connectionHealth',
                    {'latency': _now_ms() - sent_at, 'server_time': data.get('server_time')},
                )
        await self.emit(event, data)

    async def _reconnect(self) -> None:
        while self.reconnect_attempts < self.max_reconnect_attempts:
            delay_ms = min(1000 * 2**self.reconnect_attempts, 10000)
            self.reconnect_attempts += 1
            Logger.base.info(
                f'🔄 [SEAT_SOCKET] Reconnect {self.reconnect_attempts}/'
                f'{self.max_reconnect_attempts} in {delay_ms}ms'
            )
            await asyncio.sleep(delay_ms / 1000)
            if self._closing:
                return
            try:
                await self.connect()
            except (OSError, WebSocketException) as e:
                Logger.base.warning(f'⚠️ [SEAT_SOCKET] Reconnect failed: {e}')
                continue
            if self.wallet_address is not None:
                await self.authenticate(self.wallet_address, self.concert_id)
            return

        Logger.base.error('❌ [SEAT_SOCKET] Giving up after reconnect attempts')
        await self.emit('reconnectFailed', {'attempts': self.reconnect_attempts})


def _now_ms() -> int:
    return int(time.time() * 1000)
