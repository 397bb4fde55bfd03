from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_concert_command_repo import IConcertCommandRepo
from src.service.ticketing.app.interface.i_concert_query_repo import IConcertQueryRepo
from src.service.ticketing.domain.entity.concert_entity import ConcertEntity


class SubmitAdditionalInfoUseCase:
    def __init__(
        self, concert_query_repo: IConcertQueryRepo, concert_command_repo: IConcertCommandRepo
    ) -> None:
        self.concert_query_repo = concert_query_repo
        self.concert_command_repo = concert_command_repo

    @classmethod
    @inject
    def depends(
        cls,
        concert_query_repo: IConcertQueryRepo = Depends(Provide[Container.concert_query_repo]),
        concert_command_repo: IConcertCommandRepo = Depends(
            Provide[Container.concert_command_repo]
        ),
    ) -> Self:
        return cls(concert_query_repo=concert_query_repo, concert_command_repo=concert_command_repo)

    @Logger.io
    async def submit(self, *, concert_id: int, user_id: int, message: str) -> ConcertEntity:
        concert = await self.concert_query_repo.get_by_id(concert_id)
        if concert is None:
            raise NotFoundError('Concert not found')

        # back to the review queue
        concert.submit_additional_info(user_id=user_id, message=message)
        return await self.concert_command_repo.update(concert)
