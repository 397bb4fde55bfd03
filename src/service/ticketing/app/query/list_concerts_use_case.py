from typing import List, Self, Sequence

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_concert_query_repo import IConcertQueryRepo
from src.service.ticketing.domain.entity.concert_entity import ConcertEntity
from src.service.ticketing.domain.enum.concert_status import ConcertStatus


AWAITING_REVIEW = (ConcertStatus.PENDING, ConcertStatus.INFO_REQUESTED)


class ListConcertsUseCase:
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
    async def list_approved(self) -> List[ConcertEntity]:
        return await self.concert_query_repo.list_by_status([ConcertStatus.APPROVED])

    @Logger.io
    async def list_by_status(self, statuses: Sequence[ConcertStatus]) -> List[ConcertEntity]:
        return await self.concert_query_repo.list_by_status(statuses)

    @Logger.io
    async def list_awaiting_review(self) -> List[ConcertEntity]:
        return await self.concert_query_repo.list_by_status(AWAITING_REVIEW)

    @Logger.io
    async def list_for_creator(
        self, creator_id: int, *, awaiting_review_only: bool = False
    ) -> List[ConcertEntity]:
        return await self.concert_query_repo.list_by_creator(
            creator_id, AWAITING_REVIEW if awaiting_review_only else None
        )
