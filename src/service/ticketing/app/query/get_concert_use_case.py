from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_concert_query_repo import IConcertQueryRepo
from src.service.ticketing.domain.entity.concert_entity import ConcertEntity
from src.service.ticketing.domain.seat_map import availability_summary


class GetConcertUseCase:
    def __init__(self, concert_query_repo: IConcertQueryRepo) -> None:
        self.concert_query_repo = concert_query_repo

    @classmethod
    @inject
    def depends(
        cls,
        concert_query_repo: IConcertQueryRepo = Depends(Provide[Container.concert_query_repo]),
    ) -> Self:
        return cls(concert_query_repo=concert_query_repo)

    @Logger.io
    async def get_by_id(self, *, concert_id: int) -> ConcertEntity:
        concert = await self.concert_query_repo.get_by_id(concert_id)
        if concert is None:
            Logger.base.warning(f'⚠️ [GET_CONCERT] Concert {concert_id} not found')
            raise NotFoundError('Concert not found')
        return concert

    @Logger.io
    async def get_availability(self, *, concert_id: int) -> dict:
        concert = await self.get_by_id(concert_id=concert_id)
        return {'concert_id': concert_id, **availability_summary(concert)}
