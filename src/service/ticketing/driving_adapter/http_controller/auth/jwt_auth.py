"""
Wallet JWT issuing and verification

Tokens carry the user under a ``user`` claim:
    {'user': {'id', 'wallet_address', 'is_admin', 'email'}, 'exp', 'iat', 'sub'}
Older clients sent the same keys at the top level, both shapes are accepted.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import AuthenticationError
from src.service.ticketing.domain.entity.user_entity import UserEntity


class AuthErrorMessages:
    NO_TOKEN = 'No token, authorization denied'
    EXPIRED = 'Token has expired'
    BAD_SIGNATURE = 'Invalid token signature'
    MALFORMED = 'Malformed token'
    INVALID = 'Token is not valid'


class JwtAuth:
    def __init__(self) -> None:
        self.secret = settings.SECRET_KEY.get_secret_value()
        self.algorithm = settings.ALGORITHM
        self.token_expire_hours = settings.ACCESS_TOKEN_EXPIRE_HOURS

    def create_jwt_token(self, user_entity: UserEntity) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            'sub': str(user_entity.id),
            'exp': now + timedelta(hours=self.token_expire_hours),
            'iat': now,
            'user': {
                'id': user_entity.id,
                'wallet_address': user_entity.wallet_address,
                'is_admin': user_entity.is_admin,
                'email': user_entity.email,
            },
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode_jwt_token(self, token: str) -> Dict[str, Any]:
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError as e:
            raise AuthenticationError(AuthErrorMessages.EXPIRED) from e
        # InvalidSignatureError subclasses DecodeError, keep it first
        except jwt.InvalidSignatureError as e:
            raise AuthenticationError(AuthErrorMessages.BAD_SIGNATURE) from e
        except jwt.DecodeError as e:
            raise AuthenticationError(AuthErrorMessages.MALFORMED) from e
        except jwt.PyJWTError as e:
            raise AuthenticationError(AuthErrorMessages.INVALID) from e

    def get_current_user_info_from_jwt(self, token: Optional[str]) -> UserEntity:
        """Rebuild the caller from the token claims (no DB query)."""
        if not token:
            raise AuthenticationError(AuthErrorMessages.NO_TOKEN)

        payload = self.decode_jwt_token(token)
        claims = payload.get('user') if isinstance(payload.get('user'), dict) else payload

        user_id = claims.get('id')
        wallet_address = claims.get('wallet_address')
        if not isinstance(user_id, int) or not wallet_address:
            raise AuthenticationError(AuthErrorMessages.INVALID)

        return UserEntity(
            id=user_id,
            wallet_address=wallet_address,
            is_admin=bool(claims.get('is_admin', False)),
            email=claims.get('email'),
        )

    @staticmethod
    def extract_token(
        *, auth_header: Optional[str], authorization: Optional[str]
    ) -> Optional[str]:
        """x-auth-token wins; otherwise fall back to ``Authorization: Bearer``."""
        if auth_header:
            return auth_header.strip()
        if authorization:
            scheme, _, credentials = authorization.partition(' ')
            if scheme.lower() == 'bearer' and credentials.strip():
                return credentials.strip()
        return None
