from typing import List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_concert_query_repo import IConcertQueryRepo
from src.service.ticketing.app.interface.i_ticket_query_repo import ITicketQueryRepo
from src.service.ticketing.domain.entity.concert_entity import ConcertEntity
from src.service.ticketing.domain.entity.ticket_entity import TicketEntity


class MarketplaceQueryUseCase:
    def __init__(
        self, ticket_query_repo: ITicketQueryRepo, concert_query_repo: IConcertQueryRepo
    ) -> None:
        self.ticket_query_repo = ticket_query_repo
        self.concert_query_repo = concert_query_repo

    @classmethod
    @inject
    def depends(
        cls,
        ticket_query_repo: ITicketQueryRepo = Depends(Provide[Container.ticket_query_repo]),
        concert_query_repo: IConcertQueryRepo = Depends(Provide[Container.concert_query_repo]),
    ) -> Self:
        return cls(ticket_query_repo=ticket_query_repo, concert_query_repo=concert_query_repo)

    @Logger.io
    async def list_listings(self) -> List[tuple[TicketEntity, Optional[ConcertEntity]]]:
        """Listed tickets with a positive price, newest listing first."""
        tickets = await self.ticket_query_repo.list_listed()
        concerts = await self.concert_query_repo.get_by_ids([t.concert_id for t in tickets])
        return [(ticket, concerts.get(ticket.concert_id)) for ticket in tickets]

    @Logger.io
    async def get_stats(self) -> dict:
        total = await self.ticket_query_repo.count_all()
        listed = await self.ticket_query_repo.count_listed()
        return {
            'total_tickets': total,
            'listed_tickets': listed,
            'available_rate': round(listed / total * 100, 2) if total else 0,
        }

    @Logger.io
    async def list_minted_seats(self, concert_id: int) -> List[str]:
        tickets = await self.ticket_query_repo.list_by_concert(concert_id)
        return sorted({ticket.seat_code for ticket in tickets if ticket.counts_as_minted()})
