from abc import ABC, abstractmethod
from typing import List, Optional

from src.service.ticketing.domain.entity.ticket_entity import TicketEntity


class ITicketQueryRepo(ABC):
    @abstractmethod
    async def get_by_id(self, ticket_id: int) -> Optional[TicketEntity]:
        pass

    @abstractmethod
    async def get_by_seat(
        self, *, concert_id: int, section_name: str, seat_number: str
    ) -> Optional[TicketEntity]:
        pass

    @abstractmethod
    async def list_by_owner(self, owner_id: int) -> List[TicketEntity]:
        pass

    @abstractmethod
    async def list_by_concert(self, concert_id: int) -> List[TicketEntity]:
        pass

    @abstractmethod
    async def list_listed(self) -> List[TicketEntity]:
        pass

    @abstractmethod
    async def count_by_section(self, concert_id: int) -> dict[str, int]:
        pass

    @abstractmethod
    async def count_all(self) -> int:
        pass

    @abstractmethod
    async def count_listed(self) -> int:
        pass
