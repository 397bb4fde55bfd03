from typing import Optional

from fastapi import APIRouter, Depends, status

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.command.create_concert_use_case import CreateConcertUseCase
from src.service.ticketing.app.command.submit_additional_info_use_case import (
    SubmitAdditionalInfoUseCase,
)
from src.service.ticketing.app.query.get_concert_use_case import GetConcertUseCase
from src.service.ticketing.app.query.get_seat_map_use_case import GetSeatMapUseCase
from src.service.ticketing.app.query.list_concerts_use_case import ListConcertsUseCase
from src.service.ticketing.domain.entity.user_entity import UserEntity
from src.service.ticketing.driving_adapter.http_controller.auth.role_auth import (
    get_current_user,
    get_optional_user,
)
from src.service.ticketing.driving_adapter.schema.concert_schema import (
    AdditionalInfoRequest,
    ConcertCreateRequest,
    ConcertListResponse,
    ConcertResponse,
)


router = APIRouter()


@router.get('', status_code=status.HTTP_200_OK)
@Logger.io
async def list_concerts(
    use_case: ListConcertsUseCase = Depends(ListConcertsUseCase.depends),
) -> ConcertListResponse:
    concerts = await use_case.list_approved()
    return ConcertListResponse(
        concerts=[ConcertResponse.from_entity(concert) for concert in concerts],
        count=len(concerts),
    )


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_concert(
    request: ConcertCreateRequest,
    current_user: UserEntity = Depends(get_current_user),
    use_case: CreateConcertUseCase = Depends(CreateConcertUseCase.depends),
) -> ConcertResponse:
    concert = await use_case.create(
        creator=current_user,
        name=request.name,
        venue=request.venue,
        date=request.date,
        description=request.description,
        sections=[section.model_dump() for section in request.sections],
    )
    return ConcertResponse.from_entity(concert)


# /me routes must stay above /{concert_id}


@router.get('/me/pending', status_code=status.HTTP_200_OK)
@Logger.io
async def list_my_pending_concerts(
    current_user: UserEntity = Depends(get_current_user),
    use_case: ListConcertsUseCase = Depends(ListConcertsUseCase.depends),
) -> ConcertListResponse:
    concerts = await use_case.list_for_creator(current_user.id or 0, awaiting_review_only=True)
    return ConcertListResponse(
        concerts=[ConcertResponse.from_entity(concert) for concert in concerts],
        count=len(concerts),
    )


@router.get('/me', status_code=status.HTTP_200_OK)
@Logger.io
async def list_my_concerts(
    current_user: UserEntity = Depends(get_current_user),
    use_case: ListConcertsUseCase = Depends(ListConcertsUseCase.depends),
) -> ConcertListResponse:
    concerts = await use_case.list_for_creator(current_user.id or 0)
    return ConcertListResponse(
        concerts=[ConcertResponse.from_entity(concert) for concert in concerts],
        count=len(concerts),
    )


@router.get('/{concert_id}', status_code=status.HTTP_200_OK)
@Logger.io
async def get_concert(
    concert_id: int,
    use_case: GetConcertUseCase = Depends(GetConcertUseCase.depends),
) -> ConcertResponse:
    return ConcertResponse.from_entity(await use_case.get_by_id(concert_id=concert_id))


@router.put('/{concert_id}/additional-info', status_code=status.HTTP_200_OK)
@Logger.io
async def submit_additional_info(
    concert_id: int,
    request: AdditionalInfoRequest,
    current_user: UserEntity = Depends(get_current_user),
    use_case: SubmitAdditionalInfoUseCase = Depends(SubmitAdditionalInfoUseCase.depends),
) -> ConcertResponse:
    concert = await use_case.submit(
        concert_id=concert_id, user_id=current_user.id or 0, message=request.additional_info
    )
    return ConcertResponse.from_entity(concert)


@router.get('/{concert_id}/availability', status_code=status.HTTP_200_OK)
@Logger.io
async def get_availability(
    concert_id: int,
    use_case: GetConcertUseCase = Depends(GetConcertUseCase.depends),
) -> dict:
    return {'success': True, **await use_case.get_availability(concert_id=concert_id)}


@router.get('/{concert_id}/sections/{section_name}/seat-map', status_code=status.HTTP_200_OK)
@Logger.io
async def get_seat_map(
    concert_id: int,
    section_name: str,
    viewer: Optional[UserEntity] = Depends(get_optional_user),
    use_case: GetSeatMapUseCase = Depends(GetSeatMapUseCase.depends),
) -> dict:
    seat_map = await use_case.get_seat_map(
        concert_id=concert_id,
        section_name=section_name,
        viewer_id=viewer.id if viewer else None,
    )
    return {'success': True, **seat_map}
