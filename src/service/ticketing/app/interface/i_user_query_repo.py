from abc import ABC, abstractmethod
from typing import List, Optional

from src.service.ticketing.domain.entity.user_entity import UserEntity


class IUserQueryRepo(ABC):
    """User Query Repository Abstract Interface - Handles read operations"""

    @abstractmethod
    async def get_by_id(self, user_id: int) -> Optional[UserEntity]:
        pass

    @abstractmethod
    async def get_by_wallet_address(self, wallet_address: str) -> Optional[UserEntity]:
        pass

    @abstractmethod
    async def list_all(self) -> List[UserEntity]:
        pass
