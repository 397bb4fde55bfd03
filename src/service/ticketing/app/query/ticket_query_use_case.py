from typing import List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import ForbiddenError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_concert_query_repo import IConcertQueryRepo
from src.service.ticketing.app.interface.i_ticket_query_repo import ITicketQueryRepo
from src.service.ticketing.domain.entity.concert_entity import ConcertEntity
from src.service.ticketing.domain.entity.ticket_entity import TicketEntity, TicketHistoryEntry
from src.service.ticketing.domain.entity.user_entity import UserEntity


class TicketQueryUseCase:
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
    async def list_my_tickets(
        self, owner: UserEntity
    ) -> List[tuple[TicketEntity, Optional[ConcertEntity]]]:
        tickets = await self.ticket_query_repo.list_by_owner(owner.id or 0)
        concerts = await self.concert_query_repo.get_by_ids([t.concert_id for t in tickets])
        return [(ticket, concerts.get(ticket.concert_id)) for ticket in tickets]

    @Logger.io
    async def get_ticket(
        self, *, ticket_id: int, viewer: UserEntity, viewer_is_admin: bool = False
    ) -> tuple[TicketEntity, Optional[ConcertEntity]]:
        ticket = await self.ticket_query_repo.get_by_id(ticket_id)
        if ticket is None:
            raise NotFoundError('Ticket not found')

        concert = await self.concert_query_repo.get_by_id(ticket.concert_id)
        viewer_id = viewer.id or 0
        can_view = (
            viewer_is_admin
            or ticket.is_owned_by(viewer_id)
            or (concert is not None and concert.is_creator(viewer_id))
        )
        if not can_view:
            raise ForbiddenError('Not authorized to view this ticket')
        return ticket, concert

    @Logger.io
    async def get_history(
        self, *, ticket_id: int, viewer: UserEntity, viewer_is_admin: bool = False
    ) -> List[TicketHistoryEntry]:
        ticket, _ = await self.get_ticket(
            ticket_id=ticket_id, viewer=viewer, viewer_is_admin=viewer_is_admin
        )
        return sorted(ticket.transaction_history, key=lambda entry: entry.timestamp)
