from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from src.service.ticketing.domain.entity.concert_entity import ConcertEntity
from src.service.ticketing.domain.enum.concert_status import ConcertStatus


class IConcertQueryRepo(ABC):
    @abstractmethod
    async def get_by_id(self, concert_id: int) -> Optional[ConcertEntity]:
        pass

    @abstractmethod
    async def get_by_ids(self, concert_ids: Sequence[int]) -> dict[int, ConcertEntity]:
        pass

    @abstractmethod
    async def list_by_status(self, statuses: Sequence[ConcertStatus]) -> List[ConcertEntity]:
        pass

    @abstractmethod
    async def list_by_creator(
        self, creator_id: int, statuses: Optional[Sequence[ConcertStatus]] = None
    ) -> List[ConcertEntity]:
        pass
