from typing import List

from fastapi import APIRouter, Depends, status

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.command.review_concert_use_case import ReviewConcertUseCase
from src.service.ticketing.app.query.list_concerts_use_case import ListConcertsUseCase
from src.service.ticketing.app.query.user_query_use_case import UserQueryUseCase
from src.service.ticketing.domain.entity.user_entity import UserEntity
from src.service.ticketing.domain.enum.concert_status import ConcertStatus
from src.service.ticketing.driving_adapter.http_controller.auth.role_auth import require_admin
from src.service.ticketing.driving_adapter.schema.auth_schema import UserResponse
from src.service.ticketing.driving_adapter.schema.concert_schema import (
    ConcertListResponse,
    ConcertResponse,
    ReviewRequest,
)


router = APIRouter(dependencies=[Depends(require_admin)])


def _concert_list(concerts: list) -> ConcertListResponse:
    return ConcertListResponse(
        concerts=[ConcertResponse.from_entity(concert) for concert in concerts],
        count=len(concerts),
    )


@router.get('/concerts/pending', status_code=status.HTTP_200_OK)
@Logger.io
async def list_pending_concerts(
    use_case: ListConcertsUseCase = Depends(ListConcertsUseCase.depends),
) -> ConcertListResponse:
    return _concert_list(await use_case.list_awaiting_review())


@router.get('/concerts/approved', status_code=status.HTTP_200_OK)
@Logger.io
async def list_approved_concerts(
    use_case: ListConcertsUseCase = Depends(ListConcertsUseCase.depends),
) -> ConcertListResponse:
    return _concert_list(await use_case.list_by_status([ConcertStatus.APPROVED]))


@router.get('/concerts/rejected', status_code=status.HTTP_200_OK)
@Logger.io
async def list_rejected_concerts(
    use_case: ListConcertsUseCase = Depends(ListConcertsUseCase.depends),
) -> ConcertListResponse:
    return _concert_list(await use_case.list_by_status([ConcertStatus.REJECTED]))


@router.put('/concerts/{concert_id}/approve', status_code=status.HTTP_200_OK)
@Logger.io
async def approve_concert(
    concert_id: int,
    request: ReviewRequest,
    admin: UserEntity = Depends(require_admin),
    use_case: ReviewConcertUseCase = Depends(ReviewConcertUseCase.depends),
) -> ConcertResponse:
    concert = await use_case.approve(concert_id=concert_id, admin=admin, feedback=request.feedback)
    return ConcertResponse.from_entity(concert)


@router.put('/concerts/{concert_id}/reject', status_code=status.HTTP_200_OK)
@Logger.io
async def reject_concert(
    concert_id: int,
    request: ReviewRequest,
    admin: UserEntity = Depends(require_admin),
    use_case: ReviewConcertUseCase = Depends(ReviewConcertUseCase.depends),
) -> ConcertResponse:
    concert = await use_case.reject(
        concert_id=concert_id, admin=admin, feedback=request.feedback or ''
    )
    return ConcertResponse.from_entity(concert)


@router.put('/concerts/{concert_id}/request-info', status_code=status.HTTP_200_OK)
@Logger.io
async def request_concert_info(
    concert_id: int,
    request: ReviewRequest,
    admin: UserEntity = Depends(require_admin),
    use_case: ReviewConcertUseCase = Depends(ReviewConcertUseCase.depends),
) -> ConcertResponse:
    concert = await use_case.request_info(
        concert_id=concert_id, admin=admin, feedback=request.feedback or ''
    )
    return ConcertResponse.from_entity(concert)


@router.get('/users', status_code=status.HTTP_200_OK)
@Logger.io
async def list_users(
    use_case: UserQueryUseCase = Depends(UserQueryUseCase.depends),
) -> List[UserResponse]:
    return [UserResponse.from_entity(user) for user in await use_case.list_users()]
