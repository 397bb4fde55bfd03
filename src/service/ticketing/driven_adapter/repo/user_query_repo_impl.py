from typing import AsyncContextManager, Callable, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_user_query_repo import IUserQueryRepo
from src.service.ticketing.domain.entity.user_entity import UserEntity
from src.service.ticketing.driven_adapter.model.user_model import UserModel
from src.service.ticketing.driven_adapter.repo.orm_mapper import user_model_to_entity


class UserQueryRepoImpl(IUserQueryRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]) -> None:
        self.session_factory = session_factory

    @Logger.io
    async def get_by_id(self, user_id: int) -> Optional[UserEntity]:
        async with self.session_factory() as session:
            user_model = await session.get(UserModel, user_id)
            if not user_model:
                return None
            return user_model_to_entity(user_model)

    @Logger.io
    async def get_by_wallet_address(self, wallet_address: str) -> Optional[UserEntity]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(UserModel).where(UserModel.wallet_address == wallet_address)
            )
            user_model = result.scalar_one_or_none()
            if not user_model:
                return None
            return user_model_to_entity(user_model)

    @Logger.io
    async def list_all(self) -> List[UserEntity]:
        async with self.session_factory() as session:
            result = await session.execute(select(UserModel).order_by(UserModel.id))
            return [user_model_to_entity(model) for model in result.scalars().all()]
