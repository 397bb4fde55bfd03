from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.exception.exceptions import AuthenticationError, DomainError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_nonce_store import INonceStore
from src.service.ticketing.app.interface.i_user_command_repo import IUserCommandRepo
from src.service.ticketing.app.interface.i_user_query_repo import IUserQueryRepo
from src.service.ticketing.app.interface.i_wallet_signature_verifier import (
    IWalletSignatureVerifier,
)
from src.service.ticketing.domain.entity.user_entity import UserEntity
from src.service.ticketing.domain.wallet_login import extract_nonce


class WalletLoginUseCase:
    def __init__(
        self,
        user_query_repo: IUserQueryRepo,
        user_command_repo: IUserCommandRepo,
        signature_verifier: IWalletSignatureVerifier,
        nonce_store: INonceStore,
    ) -> None:
        self.user_query_repo = user_query_repo
        self.user_command_repo = user_command_repo
        self.signature_verifier = signature_verifier
        self.nonce_store = nonce_store

    @classmethod
    @inject
    def depends(
        cls,
        user_query_repo: IUserQueryRepo = Depends(Provide[Container.user_query_repo]),
        user_command_repo: IUserCommandRepo = Depends(Provide[Container.user_command_repo]),
        signature_verifier: IWalletSignatureVerifier = Depends(
            Provide[Container.wallet_signature_verifier]
        ),
        nonce_store: INonceStore = Depends(Provide[Container.nonce_store]),
    ) -> Self:
        return cls(
            user_query_repo=user_query_repo,
            user_command_repo=user_command_repo,
            signature_verifier=signature_verifier,
            nonce_store=nonce_store,
        )

    @Logger.io
    async def login(self, *, wallet_address: str, signature: str, message: str) -> UserEntity:
        if not wallet_address or not signature or not message:
            raise DomainError('Wallet address, signature and message are required')

        if not self.signature_verifier.verify(
            wallet_address=wallet_address, message=message, signature=signature
        ):
            Logger.base.warning(f'🔐 [LOGIN] Invalid signature from {wallet_address}')
            raise AuthenticationError('Invalid signature')

        if settings.REQUIRE_LOGIN_NONCE:
            nonce = extract_nonce(message)
            if nonce is None or not await self.nonce_store.consume(nonce):
                raise AuthenticationError('Invalid or expired nonce')

        return await login_or_register(
            user_query_repo=self.user_query_repo,
            user_command_repo=self.user_command_repo,
            wallet_address=wallet_address,
            is_admin=wallet_address in settings.ADMIN_WALLET_ADDRESSES,
        )


async def login_or_register(
    *,
    user_query_repo: IUserQueryRepo,
    user_command_repo: IUserCommandRepo,
    wallet_address: str,
    is_admin: bool = False,
    email: str | None = None,
) -> UserEntity:
    """Find the wallet's user (creating it on first login) and stamp last_login."""
    user = await user_query_repo.get_by_wallet_address(wallet_address)
    if user is None:
        user = UserEntity.register(wallet_address=wallet_address, is_admin=is_admin, email=email)
        user.record_login()
        user = await user_command_repo.create(user)
        Logger.base.info(f'👤 [LOGIN] Registered wallet {wallet_address} (admin={is_admin})')
        return user

    if is_admin:
        user.promote_to_admin()
    if email and not user.email:
        user.email = email
    user.record_login()
    return await user_command_repo.update(user)
