from typing import Any, Callable, Dict, Optional, Set

from fastapi import WebSocket, WebSocketDisconnect

from src.platform.logging.loguru_io import Logger
from src.platform.metrics.ticketing_metrics import metrics
from src.platform.websocket.message_codec import MessageCodec


class WebSocketConnectionManager:
    """Tracks open sockets, their metadata and the concert room each one joined."""

    def __init__(self, codec: Optional[MessageCodec] = None) -> None:
        self.codec = codec or MessageCodec()
        self.room_connections: Dict[str, Set[WebSocket]] = {}
        self.connection_info: Dict[WebSocket, Dict[str, Any]] = {}

    async def connect(
        self, websocket: WebSocket, metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        await websocket.accept()
        self.connection_info[websocket] = {'room_id': None, 'metadata': metadata or {}}
        metrics.websocket_connections_active.set(len(self.connection_info))

    async def disconnect(self, websocket: WebSocket) -> None:
        if websocket not in self.connection_info:
            return
        self.leave_room(websocket)
        del self.connection_info[websocket]
        metrics.websocket_connections_active.set(len(self.connection_info))

    def join_room(self, websocket: WebSocket, room_id: str) -> None:
        if websocket not in self.connection_info:
            return
        self.leave_room(websocket)
        self.room_connections.setdefault(room_id, set()).add(websocket)
        self.connection_info[websocket]['room_id'] = room_id

    def leave_room(self, websocket: WebSocket) -> None:
        info = self.connection_info.get(websocket)
        if not info or info['room_id'] is None:
            return
        room_id = info['room_id']
        members = self.room_connections.get(room_id)
        if members is not None:
            members.discard(websocket)
            # Clean up empty rooms
            if not members:
                del self.room_connections[room_id]
        info['room_id'] = None

    def get_room(self, websocket: WebSocket) -> Optional[str]:
        return self.connection_info.get(websocket, {}).get('room_id')

    def get_connection_metadata(self, websocket: WebSocket) -> Optional[Dict[str, Any]]:
        return self.connection_info.get(websocket, {}).get('metadata')

    def update_connection_metadata(self, websocket: WebSocket, metadata: Dict[str, Any]) -> None:
        if websocket in self.connection_info:
            self.connection_info[websocket]['metadata'].update(metadata)

    async def send(self, websocket: WebSocket, message: Dict[str, Any]) -> bool:
        """Send one message using the frame type the client last used."""
        metadata = self.get_connection_metadata(websocket) or {}
        use_binary = metadata.get('use_binary', False)
        try:
            encoded = self.codec.encode_message(data=message, use_binary=use_binary)
            if isinstance(encoded, bytes):
                await websocket.send_bytes(encoded)
            else:
                await websocket.send_text(encoded)
            return True
        except (WebSocketDisconnect, ConnectionError, RuntimeError):
            # RuntimeError: starlette refuses sends after close
            return False

    async def broadcast_to_room(
        self,
        room_id: str,
        message: Dict[str, Any],
        *,
        filter_func: Optional[Callable[[Dict[str, Any]], bool]] = None,
        exclude: Optional[WebSocket] = None,
    ) -> int:
        """Send to every room member matching filter_func; returns delivered count."""
        delivered = 0
        disconnected = []
        for websocket in list(self.room_connections.get(room_id, ())):
            if websocket is exclude:
                continue
            metadata = self.connection_info.get(websocket, {}).get('metadata', {})
            if filter_func is not None and not filter_func(metadata):
                continue
            if await self.send(websocket, message):
                delivered += 1
            else:
                disconnected.append(websocket)

        # The socket's own handler still owns its metadata and removes it on disconnect
        for ws in disconnected:
            Logger.base.debug(f'🔌 [WS] Dropping dead socket from {room_id}')
            self.leave_room(ws)
        return delivered

    async def send_to_user(self, room_id: str, user_id: int, message: Dict[str, Any]) -> int:
        return await self.broadcast_to_room(
            room_id, message, filter_func=lambda metadata: metadata.get('user_id') == user_id
        )

    def get_room_size(self, room_id: str) -> int:
        return len(self.room_connections.get(room_id, set()))

    def get_stats(self) -> Dict[str, int]:
        user_ids = {
            info['metadata'].get('user_id')
            for info in self.connection_info.values()
            if info['metadata'].get('user_id') is not None
        }
        return {
            'connected_users': len(user_ids),
            'concert_rooms': len(self.room_connections),
            'total_room_users': sum(len(members) for members in self.room_connections.values()),
            'total_connections': len(self.connection_info),
        }
