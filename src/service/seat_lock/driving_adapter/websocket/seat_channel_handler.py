"""
Seat channel: one WebSocket per browser tab, rooms keyed by concert.

Frames are {action, data} in, {event, data} out. Replies reuse the frame
type of the last client frame (msgpack for binary, JSON for text).

A socket that authenticates without a token joins the room as an observer:
it receives seat updates and may query, but cannot lock seats.
"""

from typing import Any, Awaitable, Callable, Dict, Optional

import anyio
from fastapi import WebSocket

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import (
    AuthenticationError,
    CustomBaseError,
    SeatUnavailableError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.websocket.connection_manager import WebSocketConnectionManager
from src.platform.websocket.websocket_config import (
    WebSocketConfig,
    WebSocketErrorMessages,
    room_id,
)
from src.service.seat_lock.app.seat_locking_service import SeatLockingService
from src.service.seat_lock.domain.seat_lock_entity import build_seat_key
from src.service.ticketing.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


_Action = Callable[[WebSocket, Dict[str, Any]], Awaitable[None]]

_SEAT_FIELDS = ('concert_id', 'section_name', 'seat_number')


class SeatChannelHandler:
    def __init__(
        self,
        *,
        connection_manager: WebSocketConnectionManager,
        seat_locking_service: SeatLockingService,
        jwt_auth: JwtAuth,
        ping_interval: float = settings.WS_PING_INTERVAL_SECONDS,
    ) -> None:
        self.connection_manager = connection_manager
        self.seat_locking_service = seat_locking_service
        self.jwt_auth = jwt_auth
        self.ping_interval = ping_interval
        self._actions: Dict[str, _Action] = {
            WebSocketConfig.ActionType.AUTHENTICATE: self._handle_authenticate,
            WebSocketConfig.ActionType.SELECT_SEAT: self._handle_select_seat,
            WebSocketConfig.ActionType.RELEASE_SEAT: self._handle_release_seat,
            WebSocketConfig.ActionType.GET_SEAT_STATUS: self._handle_get_seat_status,
            WebSocketConfig.ActionType.GET_CONCERT_LOCKS: self._handle_get_concert_locks,
            WebSocketConfig.ActionType.REQUEST_SEAT_UPDATE: self._handle_request_seat_update,
            WebSocketConfig.ActionType.PING: self._handle_ping,
        }

    async def handle_connection(self, websocket: WebSocket) -> None:
        await self.connection_manager.connect(
            websocket,
            metadata={
                'authenticated': False,
                'user_id': None,
                'wallet_address': None,
                'concert_id': None,
                'use_binary': False,
            },
        )
        Logger.base.info('🔌 [WS] Seat channel connected')

        try:
            async with anyio.create_task_group() as tg:
                tg.start_soon(self._ping_loop, websocket)
                await self._receive_loop(websocket)
                tg.cancel_scope.cancel()
        finally:
            with anyio.CancelScope(shield=True):
                await self._release_held_seats(websocket)
                await self.connection_manager.disconnect(websocket)
            Logger.base.info('🔌 [WS] Seat channel disconnected')

    async def _receive_loop(self, websocket: WebSocket) -> None:
        while True:
            raw_message = await websocket.receive()
            if raw_message['type'] == 'websocket.disconnect':
                return
            if raw_message['type'] != 'websocket.receive':
                continue

            raw = raw_message.get('bytes')
            if raw is None:
                raw = raw_message.get('text')
            if raw is None:
                continue
            self.connection_manager.update_connection_metadata(
                websocket, {'use_binary': isinstance(raw, bytes)}
            )

            try:
                message = self.connection_manager.codec.decode_message(raw_data=raw)
            except ValueError as e:
                await self._send_error(
                    websocket, f'{WebSocketErrorMessages.INVALID_MESSAGE_FORMAT}: {e}'
                )
                continue

            await self.dispatch(websocket, message)

    async def dispatch(self, websocket: WebSocket, message: Dict[str, Any]) -> None:
        action = message.get('action')
        data = message.get('data') or {}
        if not isinstance(data, dict):
            await self._send_error(
                websocket,
                f'{WebSocketErrorMessages.INVALID_MESSAGE_FORMAT}: data must be an object',
            )
            return
        handler = self._actions.get(action) if isinstance(action, str) else None
        if handler is None:
            await self._send_error(websocket, f'{WebSocketErrorMessages.UNKNOWN_ACTION}: {action}')
            return

        open_actions = (WebSocketConfig.ActionType.AUTHENTICATE, WebSocketConfig.ActionType.PING)
        if action not in open_actions and not self._metadata(websocket).get('authenticated'):
            await self._send_error(websocket, WebSocketErrorMessages.NOT_AUTHENTICATED)
            return

        try:
            await handler(websocket, data)
        except SeatUnavailableError as e:
            await self._send(
                websocket,
                WebSocketConfig.MessageType.SEAT_UNAVAILABLE,
                {'reason': e.reason, 'message': e.message, 'seat_key': e.seat_key},
            )
        except CustomBaseError as e:
            await self._send_error(websocket, e.message)
        except (TypeError, ValueError) as e:
            await self._send_error(
                websocket, f'{WebSocketErrorMessages.INVALID_MESSAGE_FORMAT}: {e}'
            )

    # ========== Actions ==========

    async def _handle_authenticate(self, websocket: WebSocket, data: Dict[str, Any]) -> None:
        wallet_address = data.get('wallet_address')
        concert_id = data.get('concert_id')
        if not wallet_address or concert_id is None:
            await self._send(
                websocket,
                WebSocketConfig.MessageType.AUTH_ERROR,
                {'message': WebSocketErrorMessages.MISSING_FIELDS},
            )
            return

        user_id: Optional[int] = None
        token = data.get('token')
        if token:
            try:
                user = self.jwt_auth.get_current_user_info_from_jwt(token)
            except AuthenticationError as e:
                await self._send(
                    websocket, WebSocketConfig.MessageType.AUTH_ERROR, {'message': e.message}
                )
                return
            if user.wallet_address != wallet_address:
                await self._send(
                    websocket,
                    WebSocketConfig.MessageType.AUTH_ERROR,
                    {'message': WebSocketErrorMessages.WALLET_MISMATCH},
                )
                return
            user_id = user.id

        # Re-authenticating into another concert drops the old selection
        await self._release_held_seats(websocket)

        concert_id = int(concert_id)
        self.connection_manager.update_connection_metadata(
            websocket,
            {
                'authenticated': True,
                'user_id': user_id,
                'wallet_address': wallet_address,
                'concert_id': concert_id,
            },
        )
        self.connection_manager.join_room(websocket, room_id(concert_id))
        Logger.base.info(f'🔐 [WS] {wallet_address} joined {room_id(concert_id)}')
        await self._send(
            websocket,
            WebSocketConfig.MessageType.AUTHENTICATED,
            {
                'wallet_address': wallet_address,
                'concert_id': concert_id,
                'user_id': user_id,
                'can_lock': user_id is not None,
            },
        )

    async def _handle_select_seat(self, websocket: WebSocket, data: Dict[str, Any]) -> None:
        seat = self._seat_fields(data)
        user_id = self._metadata(websocket).get('user_id')
        if seat is None or user_id is None:
            await self._send_error(
                websocket,
                WebSocketErrorMessages.MISSING_FIELDS
                if seat is None
                else WebSocketErrorMessages.NOT_AUTHENTICATED,
            )
            return

        result = await self.seat_locking_service.lock_seat_temporarily(**seat, user_id=user_id)
        await self._send(
            websocket, WebSocketConfig.MessageType.SEAT_LOCKED, seat | result.to_dict()
        )

    async def _handle_release_seat(self, websocket: WebSocket, data: Dict[str, Any]) -> None:
        seat = self._seat_fields(data)
        user_id = self._metadata(websocket).get('user_id')
        if seat is None or user_id is None:
            await self._send_error(websocket, WebSocketErrorMessages.RELEASE_FAILED)
            return

        if await self.seat_locking_service.unlock_seat(**seat, user_id=user_id):
            await self._send(
                websocket,
                WebSocketConfig.MessageType.SEAT_RELEASED,
                seat | {'seat_key': build_seat_key(**seat)},
            )
        else:
            await self._send_error(websocket, WebSocketErrorMessages.RELEASE_FAILED)

    async def _handle_get_seat_status(self, websocket: WebSocket, data: Dict[str, Any]) -> None:
        seat = self._seat_fields(data)
        if seat is None:
            await self._send_error(websocket, WebSocketErrorMessages.MISSING_FIELDS)
            return

        status = await self.seat_locking_service.check_seat_availability(
            **seat, user_id=self._metadata(websocket).get('user_id')
        )
        await self._send(websocket, WebSocketConfig.MessageType.SEAT_STATUS, seat | status)

    async def _handle_get_concert_locks(self, websocket: WebSocket, data: Dict[str, Any]) -> None:
        concert_id = data.get('concert_id', self._metadata(websocket).get('concert_id'))
        if concert_id is None:
            await self._send_error(websocket, WebSocketErrorMessages.MISSING_FIELDS)
            return

        locks = await self.seat_locking_service.get_locks_for_concert(int(concert_id))
        await self._send(websocket, WebSocketConfig.MessageType.CONCERT_LOCKS, locks)

    async def _handle_request_seat_update(
        self, websocket: WebSocket, data: Dict[str, Any]
    ) -> None:
        metadata = self._metadata(websocket)
        concert_id = metadata.get('concert_id')
        if concert_id is None or not data.get('action'):
            await self._send_error(websocket, WebSocketErrorMessages.MISSING_FIELDS)
            return
        # Updates only go to the room this socket joined
        if int(data.get('concert_id', concert_id)) != concert_id:
            await self._send_error(websocket, WebSocketErrorMessages.WRONG_ROOM)
            return

        await self.connection_manager.broadcast_to_room(
            room_id(concert_id),
            {
                'event': WebSocketConfig.MessageType.SEAT_STATUS_UPDATE,
                'data': {
                    'concert_id': int(concert_id),
                    'action': data['action'],
                    'seat_data': data.get('seat_data') or {},
                    'user_id': metadata.get('user_id'),
                    'wallet_address': metadata.get('wallet_address'),
                    'timestamp': self.seat_locking_service.now_ms(),
                },
            },
            exclude=websocket,
        )

    async def _handle_ping(self, websocket: WebSocket, data: Dict[str, Any]) -> None:
        await self._send(
            websocket,
            WebSocketConfig.MessageType.PONG,
            {
                'timestamp': data.get('timestamp'),
                'server_time': self.seat_locking_service.now_ms(),
            },
        )

    # ========== Internals ==========

    async def _ping_loop(self, websocket: WebSocket) -> None:
        while True:
            await anyio.sleep(self.ping_interval)
            sent = await self._send(
                websocket,
                WebSocketConfig.MessageType.PING,
                {'timestamp': self.seat_locking_service.now_ms()},
            )
            if not sent:
                return

    async def _release_held_seats(self, websocket: WebSocket) -> None:
        metadata = self._metadata(websocket)
        user_id = metadata.get('user_id')
        concert_id = metadata.get('concert_id')
        if user_id is None or concert_id is None:
            return
        released = await self.seat_locking_service.release_user_locks(
            concert_id=concert_id, user_id=user_id
        )
        if released:
            Logger.base.info(f'🔓 [WS] Released {released} seats held by user {user_id}')

    def _metadata(self, websocket: WebSocket) -> Dict[str, Any]:
        return self.connection_manager.get_connection_metadata(websocket) or {}

    @staticmethod
    def _seat_fields(data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        if any(data.get(field) in (None, '') for field in _SEAT_FIELDS):
            return None
        return {
            'concert_id': int(data['concert_id']),
            'section_name': str(data['section_name']),
            'seat_number': str(data['seat_number']),
        }

    async def _send(self, websocket: WebSocket, event: str, data: Dict[str, Any]) -> bool:
        return await self.connection_manager.send(websocket, {'event': event, 'data': data})

    async def _send_error(self, websocket: WebSocket, message: str) -> bool:
        return await self._send(websocket, WebSocketConfig.MessageType.ERROR, {'message': message})

