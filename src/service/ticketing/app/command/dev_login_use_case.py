"""Signature-less login for local development and automated tests.

Disabled unless ALLOW_TEST_LOGIN is set. Every user logged in this way is an admin.
"""

from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.exception.exceptions import DomainError, ForbiddenError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.command.wallet_login_use_case import login_or_register
from src.service.ticketing.app.interface.i_user_command_repo import IUserCommandRepo
from src.service.ticketing.app.interface.i_user_query_repo import IUserQueryRepo
from src.service.ticketing.domain.entity.user_entity import UserEntity


class DevLoginUseCase:
    def __init__(self, user_query_repo: IUserQueryRepo, user_command_repo: IUserCommandRepo):
        self.user_query_repo = user_query_repo
        self.user_command_repo = user_command_repo

    @classmethod
    @inject
    def depends(
        cls,
        user_query_repo: IUserQueryRepo = Depends(Provide[Container.user_query_repo]),
        user_command_repo: IUserCommandRepo = Depends(Provide[Container.user_command_repo]),
    ) -> Self:
        return cls(user_query_repo=user_query_repo, user_command_repo=user_command_repo)

    @Logger.io
    async def login(
        self, *, wallet_address: Optional[str] = None, email: Optional[str] = None
    ) -> UserEntity:
        if not settings.ALLOW_TEST_LOGIN:
            raise ForbiddenError('Test login is disabled')

        if not wallet_address and not email:
            raise DomainError('Wallet address or email is required')
        wallet = wallet_address or UserEntity.test_wallet_for_email(email or '')

        return await login_or_register(
            user_query_repo=self.user_query_repo,
            user_command_repo=self.user_command_repo,
            wallet_address=wallet,
            is_admin=True,
            email=email,
        )
