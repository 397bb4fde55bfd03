from datetime import datetime, timezone

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, status

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.websocket.connection_manager import WebSocketConnectionManager
from src.platform.websocket.websocket_config import WebSocketErrorMessages
from src.service.seat_lock.app.seat_locking_service import SeatLockingService
from src.service.seat_lock.domain.seat_lock_entity import UnavailableReason
from src.service.seat_lock.driving_adapter.schema.seat_lock_schema import (
    ReleaseSeatResponse,
    ReserveSeatResponse,
    SeatAvailabilityResponse,
    SeatRequest,
)
from src.service.ticketing.domain.entity.user_entity import UserEntity
from src.service.ticketing.driving_adapter.http_controller.auth.role_auth import (
    get_current_user,
    require_admin,
)


router = APIRouter()
system_router = APIRouter()


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.post('/check-seat-availability', status_code=status.HTTP_200_OK)
@Logger.io
@inject
async def check_seat_availability(
    request: SeatRequest,
    current_user: UserEntity = Depends(get_current_user),
    service: SeatLockingService = Depends(Provide[Container.seat_locking_service]),
) -> SeatAvailabilityResponse:
    result = await service.check_seat_availability(
        concert_id=request.concert_id,
        section_name=request.section_name,
        seat_number=request.seat_number,
        user_id=current_user.id,
    )
    if result['available']:
        seat_status = 'available'
    elif result['reason'] == UnavailableReason.ALREADY_MINTED.value:
        seat_status = 'minted'
    else:
        seat_status = 'locked'
    return SeatAvailabilityResponse(status=seat_status, **result)


@router.post('/reserve-seat', status_code=status.HTTP_200_OK)
@Logger.io
@inject
async def reserve_seat(
    request: SeatRequest,
    current_user: UserEntity = Depends(get_current_user),
    service: SeatLockingService = Depends(Provide[Container.seat_locking_service]),
) -> ReserveSeatResponse:
    # SeatUnavailableError becomes 409 with reason
    result = await service.lock_seat_temporarily(
        concert_id=request.concert_id,
        section_name=request.section_name,
        seat_number=request.seat_number,
        user_id=current_user.id or 0,
    )
    return ReserveSeatResponse(msg='Seat reserved successfully', **result.to_dict())


@router.delete('/reserve-seat', status_code=status.HTTP_200_OK)
@Logger.io
@inject
async def release_seat(
    request: SeatRequest,
    current_user: UserEntity = Depends(get_current_user),
    service: SeatLockingService = Depends(Provide[Container.seat_locking_service]),
) -> ReleaseSeatResponse:
    released = await service.unlock_seat(
        concert_id=request.concert_id,
        section_name=request.section_name,
        seat_number=request.seat_number,
        user_id=current_user.id or 0,
    )
    if not released:
        raise NotFoundError(WebSocketErrorMessages.RELEASE_FAILED)
    return ReleaseSeatResponse(msg='Seat reservation released successfully')


@router.get('/concerts/{concert_id}/locks', status_code=status.HTTP_200_OK)
@Logger.io
@inject
async def get_concert_locks(
    concert_id: int,
    current_user: UserEntity = Depends(get_current_user),
    service: SeatLockingService = Depends(Provide[Container.seat_locking_service]),
) -> dict:
    return {
        'success': True,
        'concert_id': concert_id,
        'locks': await service.get_locks_for_concert(concert_id),
        'timestamp': _timestamp(),
    }


@router.get('/system/locks', status_code=status.HTTP_200_OK)
@Logger.io
@inject
async def get_system_locks(
    current_user: UserEntity = Depends(get_current_user),
    service: SeatLockingService = Depends(Provide[Container.seat_locking_service]),
) -> dict:
    return {
        'success': True,
        'locks': await service.get_system_stats(),
        'by_concert': await service.get_all_locks(),
        'timestamp': _timestamp(),
    }


@router.post('/system/cleanup', status_code=status.HTTP_200_OK)
@Logger.io
@inject
async def cleanup_locks(
    admin: UserEntity = Depends(require_admin),
    service: SeatLockingService = Depends(Provide[Container.seat_locking_service]),
) -> dict:
    cleaned = await service.cleanup_expired_locks()
    return {
        'success': True,
        'message': f'Cleaned up {cleaned} expired locks',
        'cleaned_count': cleaned,
        'timestamp': _timestamp(),
    }


@router.get('/ping', status_code=status.HTTP_200_OK)
@inject
async def ping(
    service: SeatLockingService = Depends(Provide[Container.seat_locking_service]),
) -> dict:
    return {
        'success': True,
        'msg': 'Ticket service is running',
        'status': 'healthy',
        'locks': await service.get_system_stats(),
        'time': _timestamp(),
    }


# ========== /api/system ==========


@system_router.get('/status', status_code=status.HTTP_200_OK)
@Logger.io
@inject
async def get_system_status(
    service: SeatLockingService = Depends(Provide[Container.seat_locking_service]),
    connection_manager: WebSocketConnectionManager = Depends(
        Provide[Container.connection_manager]
    ),
) -> dict:
    ws_stats = connection_manager.get_stats()
    return {
        'success': True,
        'websocket': {
            'connected_users': ws_stats['connected_users'],
            'concert_rooms': ws_stats['concert_rooms'],
            'total_room_users': ws_stats['total_room_users'],
        },
        'seat_locking': await service.get_system_stats(),
        'timestamp': _timestamp(),
    }


@system_router.get('/locks/{concert_id}', status_code=status.HTTP_200_OK)
@Logger.io
@inject
async def get_system_concert_locks(
    concert_id: int,
    service: SeatLockingService = Depends(Provide[Container.seat_locking_service]),
) -> dict:
    return {'success': True, **await service.get_locks_for_concert(concert_id)}


@system_router.post('/cleanup', status_code=status.HTTP_200_OK)
@Logger.io
@inject
async def system_cleanup(
    admin: UserEntity = Depends(require_admin),
    service: SeatLockingService = Depends(Provide[Container.seat_locking_service]),
) -> dict:
    result = await service.sweep()
    return {'success': True, 'cleaned_count': result['expired'], 'warned_count': result['warned']}
