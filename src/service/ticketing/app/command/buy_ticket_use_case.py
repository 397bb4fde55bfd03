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


class BuyTicketUseCase:
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
    async def buy(
        self, *, ticket_id: int, buyer: UserEntity, transaction_signature: str
    ) -> TicketEntity:
        ticket = await self.ticket_query_repo.get_by_id(ticket_id)
        if ticket is None:
            raise NotFoundError('Ticket not found')

        seller_wallet = ticket.owner_wallet
        ticket.transfer_to(
            buyer_id=buyer.id or 0,
            buyer_wallet=buyer.wallet_address,
            transaction_signature=transaction_signature,
        )
        updated = await self.ticket_command_repo.update(ticket)
        Logger.base.info(
            f'💸 [MARKET] Ticket {ticket_id} sold {seller_wallet} -> {buyer.wallet_address}'
        )
        return updated
