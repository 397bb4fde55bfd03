from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from src.service.ticketing.domain.entity.user_entity import UserEntity


class NonceResponse(BaseModel):
    nonce: int
    message: str


class WalletLoginRequest(BaseModel):
    # Missing fields are reported by the login use case as 400
    wallet_address: str = ''
    signature: str = ''  # base58 ed25519 signature of message
    message: str = ''

    class Config:
        json_schema_extra = {
            'example': {
                'wallet_address': '7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU',
                'signature': '5VERv8NMvzbJMEkV8xnrLkEaWRtSz9CosKDYjCJjBRnb...',
                'message': 'Sign this message to authenticate with Concert NFT Tickets: 123456',
            }
        }


class DevLoginRequest(BaseModel):
    wallet_address: Optional[str] = None
    email: Optional[str] = None


class UserResponse(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'id': 1,
                'wallet_address': '7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU',
                'is_admin': False,
                'email': None,
                'created_at': '2025-01-10T10:30:00',
                'last_login': '2025-01-10T10:30:00',
            }
        }
    )

    id: int
    wallet_address: str
    is_admin: bool
    email: Optional[str] = None
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None

    @classmethod
    def from_entity(cls, user: UserEntity) -> 'UserResponse':
        return cls(
            id=user.id or 0,
            wallet_address=user.wallet_address,
            is_admin=user.is_admin,
            email=user.email,
            created_at=user.created_at,
            last_login=user.last_login,
        )


class LoginResponse(BaseModel):
    success: bool = True
    msg: str
    token: str
    user: UserResponse


class AdminCheckResponse(BaseModel):
    success: bool = True
    is_admin: bool
    wallet_address: str
