from typing import AsyncContextManager, Callable

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import ConflictError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_user_command_repo import IUserCommandRepo
from src.service.ticketing.domain.entity.user_entity import UserEntity
from src.service.ticketing.driven_adapter.model.user_model import UserModel
from src.service.ticketing.driven_adapter.repo.orm_mapper import user_model_to_entity


class UserCommandRepoImpl(IUserCommandRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @Logger.io
    async def create(self, user_entity: UserEntity) -> UserEntity:
        async with self.session_factory() as session:
            user_model = UserModel(
                wallet_address=user_entity.wallet_address,
                is_admin=user_entity.is_admin,
                email=user_entity.email,
                last_login=user_entity.last_login,
            )
            session.add(user_model)
            try:
                await session.commit()
            except IntegrityError as e:
                raise ConflictError('Wallet address already registered') from e
            await session.refresh(user_model)

            return user_model_to_entity(user_model)

    @Logger.io
    async def update(self, user_entity: UserEntity) -> UserEntity:
        async with self.session_factory() as session:
            user_model = await session.get(UserModel, user_entity.id)
            if user_model is None:
                raise NotFoundError('User not found')

            user_model.is_admin = user_entity.is_admin
            user_model.email = user_entity.email
            user_model.last_login = user_entity.last_login
            await session.commit()
            await session.refresh(user_model)

            return user_model_to_entity(user_model)
