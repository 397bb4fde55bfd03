from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_concert_command_repo import IConcertCommandRepo
from src.service.ticketing.app.interface.i_concert_query_repo import IConcertQueryRepo
from src.service.ticketing.domain.entity.concert_entity import ConcertEntity
from src.service.ticketing.domain.entity.user_entity import UserEntity


class ReviewConcertUseCase:
    """Admin decisions on submitted concerts."""

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
    async def approve(
        self, *, concert_id: int, admin: UserEntity, feedback: Optional[str] = None
    ) -> ConcertEntity:
        concert = await self._load(concert_id)
        concert.approve(admin_wallet=admin.wallet_address, feedback=feedback)
        return await self._save(concert, admin)

    @Logger.io
    async def reject(self, *, concert_id: int, admin: UserEntity, feedback: str) -> ConcertEntity:
        concert = await self._load(concert_id)
        concert.reject(admin_wallet=admin.wallet_address, feedback=feedback)
        return await self._save(concert, admin)

    @Logger.io
    async def request_info(
        self, *, concert_id: int, admin: UserEntity, feedback: str
    ) -> ConcertEntity:
        concert = await self._load(concert_id)
        concert.request_info(admin_wallet=admin.wallet_address, feedback=feedback)
        return await self._save(concert, admin)

    async def _load(self, concert_id: int) -> ConcertEntity:
        concert = await self.concert_query_repo.get_by_id(concert_id)
        if concert is None:
            raise NotFoundError('Concert not found')
        return concert

    async def _save(self, concert: ConcertEntity, admin: UserEntity) -> ConcertEntity:
        saved = await self.concert_command_repo.update(concert)
        Logger.base.info(
            f'🛂 [REVIEW] Concert {saved.id} is now {saved.status.value} '
            f'(by {admin.wallet_address})'
        )
        return saved
