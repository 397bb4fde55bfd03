from typing import Optional

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Query, status

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.command.dev_login_use_case import DevLoginUseCase
from src.service.ticketing.app.command.issue_nonce_use_case import IssueNonceUseCase
from src.service.ticketing.app.command.wallet_login_use_case import WalletLoginUseCase
from src.service.ticketing.app.query.user_query_use_case import UserQueryUseCase
from src.service.ticketing.domain.entity.user_entity import UserEntity
from src.service.ticketing.driving_adapter.http_controller.auth.jwt_auth import JwtAuth
from src.service.ticketing.driving_adapter.http_controller.auth.role_auth import (
    RoleAuthStrategy,
    get_current_user,
)
from src.service.ticketing.driving_adapter.schema.auth_schema import (
    AdminCheckResponse,
    DevLoginRequest,
    LoginResponse,
    NonceResponse,
    UserResponse,
    WalletLoginRequest,
)


router = APIRouter()


@router.get('/nonce', status_code=status.HTTP_200_OK)
@Logger.io
async def get_nonce(
    wallet_address: Optional[str] = Query(None),
    use_case: IssueNonceUseCase = Depends(IssueNonceUseCase.depends),
) -> NonceResponse:
    # wallet_address is informational, any wallet may redeem the nonce
    return NonceResponse(**await use_case.issue())


@router.post('/login', status_code=status.HTTP_200_OK)
@Logger.io
@inject
async def login_with_wallet(
    request: WalletLoginRequest,
    use_case: WalletLoginUseCase = Depends(WalletLoginUseCase.depends),
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
) -> LoginResponse:
    user = await use_case.login(
        wallet_address=request.wallet_address,
        signature=request.signature,
        message=request.message,
    )
    return LoginResponse(
        msg='Login successful',
        token=jwt_auth.create_jwt_token(user),
        user=UserResponse.from_entity(user),
    )


@router.post('/login-test', status_code=status.HTTP_200_OK)
@Logger.io
@inject
async def login_test(
    request: DevLoginRequest,
    use_case: DevLoginUseCase = Depends(DevLoginUseCase.depends),
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
) -> LoginResponse:
    user = await use_case.login(wallet_address=request.wallet_address, email=request.email)
    return LoginResponse(
        msg='Test login successful',
        token=jwt_auth.create_jwt_token(user),
        user=UserResponse.from_entity(user),
    )


@router.get('/admin-check', status_code=status.HTTP_200_OK)
@Logger.io
async def admin_check(
    current_user: UserEntity = Depends(get_current_user),
    use_case: UserQueryUseCase = Depends(UserQueryUseCase.depends),
) -> AdminCheckResponse:
    user = await use_case.get_user(current_user.id or 0)
    return AdminCheckResponse(
        is_admin=RoleAuthStrategy.is_admin(user), wallet_address=user.wallet_address
    )


@router.get('/me', status_code=status.HTTP_200_OK)
@Logger.io
async def get_me(
    current_user: UserEntity = Depends(get_current_user),
    use_case: UserQueryUseCase = Depends(UserQueryUseCase.depends),
) -> UserResponse:
    return UserResponse.from_entity(await use_case.get_user(current_user.id or 0))
