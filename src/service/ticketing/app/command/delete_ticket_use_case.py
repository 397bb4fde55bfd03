from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_concert_command_repo import IConcertCommandRepo
from src.service.ticketing.app.interface.i_concert_query_repo import IConcertQueryRepo
from src.service.ticketing.app.interface.i_ticket_command_repo import ITicketCommandRepo
from src.service.ticketing.app.interface.i_ticket_query_repo import ITicketQueryRepo
from src.service.ticketing.domain.entity.user_entity import UserEntity


class DeleteTicketUseCase:
    def __init__(
        self,
        ticket_query_repo: ITicketQueryRepo,
        ticket_command_repo: ITicketCommandRepo,
        concert_query_repo: IConcertQueryRepo,
        concert_command_repo: IConcertCommandRepo,
    ) -> None:
        self.ticket_query_repo = ticket_query_repo
        self.ticket_command_repo = ticket_command_repo
        self.concert_query_repo = concert_query_repo
        self.concert_command_repo = concert_command_repo

    @classmethod
    @inject
    def depends(
        cls,
        ticket_query_repo: ITicketQueryRepo = Depends(Provide[Container.ticket_query_repo]),
        ticket_command_repo: ITicketCommandRepo = Depends(Provide[Container.ticket_command_repo]),
        concert_query_repo: IConcertQueryRepo = Depends(Provide[Container.concert_query_repo]),
        concert_command_repo: IConcertCommandRepo = Depends(
            Provide[Container.concert_command_repo]
        ),
    ) -> Self:
        return cls(
            ticket_query_repo=ticket_query_repo,
            ticket_command_repo=ticket_command_repo,
            concert_query_repo=concert_query_repo,
            concert_command_repo=concert_command_repo,
        )

    @Logger.io
    async def delete(self, *, ticket_id: int, owner: UserEntity) -> None:
        ticket = await self.ticket_query_repo.get_by_id(ticket_id)
        if ticket is None:
            raise NotFoundError('Ticket not found')
        ticket.ensure_owned_by(owner.id or 0)
        ticket.ensure_deletable()

        await self.ticket_command_repo.delete(ticket_id)

        # The seat frees up again
        concert = await self.concert_query_repo.get_by_id(ticket.concert_id)
        if concert is not None:
            concert.apply_minted_counts(
                await self.ticket_query_repo.count_by_section(ticket.concert_id)
            )
            await self.concert_command_repo.update(concert)
