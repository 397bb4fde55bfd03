from typing import Optional

from dependency_injector.wiring import Provide, inject
from fastapi import Depends, Header

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.exception.exceptions import AuthenticationError, ForbiddenError
from src.service.ticketing.domain.entity.user_entity import UserEntity
from src.service.ticketing.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


class RoleAuthStrategy:
    @staticmethod
    def is_admin(user: UserEntity) -> bool:
        return user.is_admin or user.wallet_address in settings.ADMIN_WALLET_ADDRESSES


@inject
async def get_current_user(
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
    auth_header: Optional[str] = Header(None, alias=settings.AUTH_HEADER_NAME),
    authorization: Optional[str] = Header(None),
) -> UserEntity:
    token = jwt_auth.extract_token(auth_header=auth_header, authorization=authorization)
    return jwt_auth.get_current_user_info_from_jwt(token)


@inject
async def get_optional_user(
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
    auth_header: Optional[str] = Header(None, alias=settings.AUTH_HEADER_NAME),
    authorization: Optional[str] = Header(None),
) -> Optional[UserEntity]:
    """Like get_current_user, but anonymous or broken tokens just mean no viewer."""
    token = jwt_auth.extract_token(auth_header=auth_header, authorization=authorization)
    if not token:
        return None
    try:
        return jwt_auth.get_current_user_info_from_jwt(token)
    except AuthenticationError:
        return None


async def require_admin(current_user: UserEntity = Depends(get_current_user)) -> UserEntity:
    if not RoleAuthStrategy.is_admin(current_user):
        raise ForbiddenError('Admin access required')
    return current_user
