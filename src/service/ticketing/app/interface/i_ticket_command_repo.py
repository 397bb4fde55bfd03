from abc import ABC, abstractmethod

from src.service.ticketing.domain.entity.ticket_entity import TicketEntity


class ITicketCommandRepo(ABC):
    @abstractmethod
    async def create(self, ticket: TicketEntity) -> TicketEntity:
        """Insert a ticket. Raises ConflictError when the seat already has one."""
        pass

    @abstractmethod
    async def update(self, ticket: TicketEntity) -> TicketEntity:
        pass

    @abstractmethod
    async def delete(self, ticket_id: int) -> bool:
        pass
