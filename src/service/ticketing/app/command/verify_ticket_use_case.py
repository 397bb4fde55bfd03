from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import ForbiddenError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_concert_query_repo import IConcertQueryRepo
from src.service.ticketing.app.interface.i_ticket_command_repo import ITicketCommandRepo
from src.service.ticketing.app.interface.i_ticket_query_repo import ITicketQueryRepo
from src.service.ticketing.domain.entity.ticket_entity import TicketEntity
from src.service.ticketing.domain.entity.user_entity import UserEntity
from src.service.ticketing.domain.ticket_validator import TicketValidation, validate_ticket


class VerifyTicketUseCase:
    def __init__(
        self,
        ticket_query_repo: ITicketQueryRepo,
        ticket_command_repo: ITicketCommandRepo,
        concert_query_repo: IConcertQueryRepo,
    ) -> None:
        self.ticket_query_repo = ticket_query_repo
        self.ticket_command_repo = ticket_command_repo
        self.concert_query_repo = concert_query_repo

    @classmethod
    @inject
    def depends(
        cls,
        ticket_query_repo: ITicketQueryRepo = Depends(Provide[Container.ticket_query_repo]),
        ticket_command_repo: ITicketCommandRepo = Depends(Provide[Container.ticket_command_repo]),
        concert_query_repo: IConcertQueryRepo = Depends(Provide[Container.concert_query_repo]),
    ) -> Self:
        return cls(
            ticket_query_repo=ticket_query_repo,
            ticket_command_repo=ticket_command_repo,
            concert_query_repo=concert_query_repo,
        )

    @Logger.io
    async def verify(
        self, *, ticket_id: int, verifier: UserEntity, verifier_is_admin: bool
    ) -> TicketEntity:
        """Mark the ticket used at the door (owner, concert creator or admin)."""
        ticket = await self._load(ticket_id)
        concert = await self.concert_query_repo.get_by_id(ticket.concert_id)

        allowed = verifier_is_admin or ticket.is_owned_by(verifier.id or 0)
        if concert is not None and concert.is_creator(verifier.id or 0):
            allowed = True
        if not allowed:
            raise ForbiddenError('Not authorized to verify this ticket')

        ticket.mark_used(verifier_wallet=verifier.wallet_address)
        updated = await self.ticket_command_repo.update(ticket)
        Logger.base.info(
            f'✅ [VERIFY] Ticket {ticket_id} used, checked by {verifier.wallet_address}'
        )
        return updated

    @Logger.io
    async def verify_blockchain(
        self, *, ticket_id: int, owner: UserEntity
    ) -> tuple[TicketEntity, TicketValidation]:
        ticket = await self._load(ticket_id)
        if not ticket.is_owned_by(owner.id or 0):
            raise ForbiddenError('Not authorized to verify this ticket')

        concert = await self.concert_query_repo.get_by_id(ticket.concert_id)
        validation = validate_ticket(ticket, concert)
        ticket.record_blockchain_verification(verifier_wallet=owner.wallet_address)
        return await self.ticket_command_repo.update(ticket), validation

    async def _load(self, ticket_id: int) -> TicketEntity:
        ticket = await self.ticket_query_repo.get_by_id(ticket_id)
        if ticket is None:
            raise NotFoundError('Ticket not found')
        return ticket
