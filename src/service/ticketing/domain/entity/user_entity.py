from datetime import datetime, timezone
from typing import Optional

import attrs

from src.platform.exception.exceptions import DomainError, NotFoundError


TEST_WALLET_PREFIX = 'test-wallet-'


@attrs.define
class UserEntity:
    wallet_address: str
    id: Optional[int] = None
    is_admin: bool = False
    email: Optional[str] = None
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None

    @classmethod
    def register(
        cls, *, wallet_address: str, is_admin: bool = False, email: Optional[str] = None
    ) -> 'UserEntity':
        if not wallet_address or not wallet_address.strip():
            raise DomainError('Wallet address is required')
        return cls(wallet_address=wallet_address.strip(), is_admin=is_admin, email=email)

    def record_login(self, now: Optional[datetime] = None) -> None:
        self.last_login = now or datetime.now(timezone.utc)

    def promote_to_admin(self) -> None:
        self.is_admin = True

    @staticmethod
    def validate_user_exists(user_entity: Optional['UserEntity']) -> 'UserEntity':
        if not user_entity:
            raise NotFoundError('User not found')
        return user_entity

    @staticmethod
    def test_wallet_for_email(email: str) -> str:
        """Derive the placeholder wallet used by test logins that only know an email."""
        return f'{TEST_WALLET_PREFIX}{email.replace("@", "-", 1).replace(".", "-", 1)}'
