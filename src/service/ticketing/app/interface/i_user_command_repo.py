from abc import ABC, abstractmethod

from src.service.ticketing.domain.entity.user_entity import UserEntity


class IUserCommandRepo(ABC):
    """User Command Repository Abstract Interface - Handles write operations"""

    @abstractmethod
    async def create(self, user_entity: UserEntity) -> UserEntity:
        pass

    @abstractmethod
    async def update(self, user_entity: UserEntity) -> UserEntity:
        pass
