from typing import AsyncContextManager, Callable

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import ConflictError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_ticket_command_repo import ITicketCommandRepo
from src.service.ticketing.domain.entity.ticket_entity import TicketEntity
from src.service.ticketing.driven_adapter.model.ticket_model import TicketModel
from src.service.ticketing.driven_adapter.repo.orm_mapper import (
    dump_history,
    ticket_model_to_entity,
)


class TicketCommandRepoImpl(ITicketCommandRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @Logger.io
    async def create(self, ticket: TicketEntity) -> TicketEntity:
        async with self.session_factory() as session:
            ticket_model = TicketModel(
                concert_id=ticket.concert_id,
                owner_id=ticket.owner_id,
                owner_wallet=ticket.owner_wallet,
                section_name=ticket.section_name,
                seat_number=ticket.seat_number,
                price=ticket.price,
                transaction_signature=ticket.transaction_signature,
                mint_address=ticket.mint_address,
                status=ticket.status.value,
                is_used=ticket.is_used,
                is_listed=ticket.is_listed,
                listing_price=ticket.listing_price,
                listing_date=ticket.listing_date,
                transaction_history=dump_history(ticket.transaction_history),
            )
            session.add(ticket_model)
            try:
                await session.commit()
            except IntegrityError as e:
                # uq_ticket_seat: a concurrent mint won the seat
                raise ConflictError('This seat has already been minted') from e
            await session.refresh(ticket_model)

            return ticket_model_to_entity(ticket_model)

    @Logger.io
    async def update(self, ticket: TicketEntity) -> TicketEntity:
        async with self.session_factory() as session:
            ticket_model = await session.get(TicketModel, ticket.id)
            if ticket_model is None:
                raise NotFoundError('Ticket not found')

            ticket_model.owner_id = ticket.owner_id
            ticket_model.owner_wallet = ticket.owner_wallet
            ticket_model.status = ticket.status.value
            ticket_model.is_used = ticket.is_used
            ticket_model.is_listed = ticket.is_listed
            ticket_model.listing_price = ticket.listing_price
            ticket_model.listing_date = ticket.listing_date
            ticket_model.transaction_history = dump_history(ticket.transaction_history)
            await session.commit()
            await session.refresh(ticket_model)

            return ticket_model_to_entity(ticket_model)

    @Logger.io
    async def delete(self, ticket_id: int) -> bool:
        async with self.session_factory() as session:
            ticket_model = await session.get(TicketModel, ticket_id)
            if ticket_model is None:
                return False
            await session.delete(ticket_model)
            await session.commit()
            return True
