from abc import ABC, abstractmethod

from src.service.ticketing.domain.entity.concert_entity import ConcertEntity


class IConcertCommandRepo(ABC):
    @abstractmethod
    async def create(self, concert: ConcertEntity) -> ConcertEntity:
        pass

    @abstractmethod
    async def update(self, concert: ConcertEntity) -> ConcertEntity:
        """Persist status, feedback, additional info and section availability."""
        pass
