"""
Seat Event Broadcaster Implementation

Driven adapter implementing ISeatEventBroadcaster on top of the in-process
WebSocketConnectionManager. Every concert is one room (concert_{id}).

Limitations:
- Single-instance only, sockets connected to another worker do not see events
"""

import time
from typing import Any, Optional

from src.platform.logging.loguru_io import Logger
from src.platform.websocket.connection_manager import WebSocketConnectionManager
from src.platform.websocket.websocket_config import WebSocketConfig, room_id
from src.service.seat_lock.app.interface.i_seat_event_broadcaster import ISeatEventBroadcaster
from src.service.seat_lock.domain.seat_lock_entity import build_seat_key


class SeatEventBroadcasterImpl(ISeatEventBroadcaster):
    def __init__(self, *, connection_manager: WebSocketConnectionManager) -> None:
        self.connection_manager = connection_manager

    async def broadcast_seat_update(
        self,
        *,
        concert_id: int,
        section_name: str,
        seat_number: str,
        action: str,
        user_id: Optional[int] = None,
        extra: Optional[dict[str, Any]] = None,
    ) -> None:
        data: dict[str, Any] = {
            'concert_id': concert_id,
            'section_name': section_name,
            'seat_number': seat_number,
            'seat_key': build_seat_key(concert_id, section_name, seat_number),
            'action': action,
            'user_id': user_id,
            'timestamp': int(time.time() * 1000),
        }
        if extra:
            data.update(extra)

        delivered = await self.connection_manager.broadcast_to_room(
            room_id(concert_id),
            {'event': WebSocketConfig.MessageType.SEAT_STATUS_UPDATE, 'data': data},
        )
        Logger.base.debug(
            f'📢 [SEAT_EVENT] {action} {data["seat_key"]} delivered to {delivered} sockets'
        )

    async def notify_user(
        self, *, concert_id: int, user_id: int, event: str, data: dict[str, Any]
    ) -> None:
        delivered = await self.connection_manager.send_to_user(
            room_id(concert_id), user_id, {'event': event, 'data': data}
        )
        if not delivered:
            Logger.base.debug(f'📢 [SEAT_EVENT] {event} for user {user_id}: no open socket')
