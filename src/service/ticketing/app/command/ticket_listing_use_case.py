from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_ticket_command_repo import ITicketCommandRepo
from src.service.ticketing.app.interface.i_ticket_query_repo import ITicketQueryRepo
from src.service.ticketing.domain.entity.ticket_entity import TicketEntity
from src.service.ticketing.domain.entity.user_entity import UserEntity


class TicketListingUseCase:
    """Owner-side marketplace actions: list a ticket for resale or take it back."""

    def __init__(
        self, ticket_query_repo: ITicketQueryRepo, ticket_command_repo: ITicketCommandRepo
    ) -> None:
        self.ticket_query_repo = ticket_query_repo
        self.ticket_command_repo = ticket_command_repo

    @classmethod
    @inject
    def depends(
        cls,
        ticket_query_repo: ITicketQueryRepo = Depends(Provide[Container.ticket_query_repo]),
        ticket_command_repo: ITicketCommandRepo = Depends(Provide[Container.ticket_command_repo]),
    ) -> Self:
        return cls(ticket_query_repo=ticket_query_repo, ticket_command_repo=ticket_command_repo)

    @Logger.io
    async def list_for_sale(
        self, *, ticket_id: int, owner: UserEntity, price: float
    ) -> TicketEntity:
        ticket = await self._load_owned(ticket_id, owner)
        ticket.list_for_sale(price=price)
        return await self.ticket_command_repo.update(ticket)

    @Logger.io
    async def cancel_listing(self, *, ticket_id: int, owner: UserEntity) -> TicketEntity:
        ticket = await self._load_owned(ticket_id, owner)
        ticket.cancel_listing()
        return await self.ticket_command_repo.update(ticket)

    async def _load_owned(self, ticket_id: int, owner: UserEntity) -> TicketEntity:
        ticket = await self.ticket_query_repo.get_by_id(ticket_id)
        if ticket is None:
            raise NotFoundError('Ticket not found')
        ticket.ensure_owned_by(owner.id or 0)
        return ticket
