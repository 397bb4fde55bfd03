from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, WebSocket

from src.platform.config.di import Container
from src.service.seat_lock.driving_adapter.websocket.seat_channel_handler import (
    SeatChannelHandler,
)


router = APIRouter()


@router.websocket('/ws/seats')
@inject
async def seat_channel(
    websocket: WebSocket,
    handler: SeatChannelHandler = Depends(Provide[Container.seat_channel_handler]),
) -> None:
    """
    Real-time seat selection channel
    Usage: ws://localhost:8000/ws/seats, then send {"action": "authenticate", ...}
    """
    await handler.handle_connection(websocket)
