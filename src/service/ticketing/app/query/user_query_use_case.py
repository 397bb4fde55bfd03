from typing import List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_user_query_repo import IUserQueryRepo
from src.service.ticketing.domain.entity.user_entity import UserEntity


class UserQueryUseCase:
    def __init__(self, user_query_repo: IUserQueryRepo) -> None:
        self.user_query_repo = user_query_repo

    @classmethod
    @inject
    def depends(
        cls, user_query_repo: IUserQueryRepo = Depends(Provide[Container.user_query_repo])
    ) -> Self:
        return cls(user_query_repo=user_query_repo)

    @Logger.io
    async def get_user(self, user_id: int) -> UserEntity:
        user = await self.user_query_repo.get_by_id(user_id)
        return UserEntity.validate_user_exists(user)

    @Logger.io
    async def list_users(self) -> List[UserEntity]:
        return await self.user_query_repo.list_all()
