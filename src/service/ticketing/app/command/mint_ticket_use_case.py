"""
Mint Ticket Use Case

Records a ticket whose NFT the client just minted on chain. The seat is
guarded twice: a processing lock while the record is written, and the
unique (concert_id, section_name, seat_number) constraint underneath.
"""

from typing import Any, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import DomainError, NotFoundError, SeatUnavailableError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.ticketing_metrics import metrics
from src.service.seat_lock.app.seat_locking_service import SeatLockingService
from src.service.seat_lock.domain.seat_lock_entity import (
    UnavailableReason,
    build_seat_key,
    unavailable_message,
)
from src.service.ticketing.app.interface.i_concert_command_repo import IConcertCommandRepo
from src.service.ticketing.app.interface.i_concert_query_repo import IConcertQueryRepo
from src.service.ticketing.app.interface.i_ticket_command_repo import ITicketCommandRepo
from src.service.ticketing.app.interface.i_ticket_query_repo import ITicketQueryRepo
from src.service.ticketing.domain.entity.ticket_entity import TicketEntity
from src.service.ticketing.domain.entity.user_entity import UserEntity
from src.service.ticketing.domain.seat_map import is_valid_seat


class MintTicketUseCase:
    def __init__(
        self,
        concert_query_repo: IConcertQueryRepo,
        concert_command_repo: IConcertCommandRepo,
        ticket_query_repo: ITicketQueryRepo,
        ticket_command_repo: ITicketCommandRepo,
        seat_locking_service: SeatLockingService,
    ) -> None:
        self.concert_query_repo = concert_query_repo
        self.concert_command_repo = concert_command_repo
        self.ticket_query_repo = ticket_query_repo
        self.ticket_command_repo = ticket_command_repo
        self.seat_locking_service = seat_locking_service

    @classmethod
    @inject
    def depends(
        cls,
        concert_query_repo: IConcertQueryRepo = Depends(Provide[Container.concert_query_repo]),
        concert_command_repo: IConcertCommandRepo = Depends(
            Provide[Container.concert_command_repo]
        ),
        ticket_query_repo: ITicketQueryRepo = Depends(Provide[Container.ticket_query_repo]),
        ticket_command_repo: ITicketCommandRepo = Depends(Provide[Container.ticket_command_repo]),
        seat_locking_service: SeatLockingService = Depends(
            Provide[Container.seat_locking_service]
        ),
    ) -> Self:
        return cls(
            concert_query_repo=concert_query_repo,
            concert_command_repo=concert_command_repo,
            ticket_query_repo=ticket_query_repo,
            ticket_command_repo=ticket_command_repo,
            seat_locking_service=seat_locking_service,
        )

    @Logger.io
    async def mint(
        self,
        *,
        buyer: UserEntity,
        concert_id: int,
        section_name: str,
        seat_number: str,
        transaction_signature: str,
        mint_address: str = '',
    ) -> dict[str, Any]:
        concert = await self.concert_query_repo.get_by_id(concert_id)
        if concert is None:
            raise NotFoundError('Concert not found')
        concert.ensure_mintable()
        section = concert.get_section(section_name)

        # Accept both 'A3' and 'VIP-A3'
        seat_number = seat_number.removeprefix(f'{section_name}-')
        if not is_valid_seat(section.total_seats, seat_number):
            raise DomainError(f'Invalid seat {seat_number} for section {section_name}')

        seat_key = build_seat_key(concert_id, section_name, seat_number)
        if await self.ticket_query_repo.get_by_seat(
            concert_id=concert_id, section_name=section_name, seat_number=seat_number
        ):
            reason = UnavailableReason.ALREADY_MINTED.value
            raise SeatUnavailableError(
                unavailable_message(reason), reason=reason, seat_key=seat_key
            )

        ticket = TicketEntity.mint(
            concert_id=concert_id,
            owner_id=buyer.id or 0,
            owner_wallet=buyer.wallet_address,
            section_name=section_name,
            seat_number=seat_number,
            price=section.price,
            transaction_signature=transaction_signature,
            mint_address=mint_address,
        )

        await self.seat_locking_service.lock_seat_for_processing(
            concert_id=concert_id,
            section_name=section_name,
            seat_number=seat_number,
            user_id=buyer.id or 0,
            operation='mint',
        )
        try:
            created = await self.ticket_command_repo.create(ticket)
        except Exception:
            await self.seat_locking_service.complete_processing(
                concert_id=concert_id,
                section_name=section_name,
                seat_number=seat_number,
                user_id=buyer.id or 0,
                success=False,
            )
            raise
        metrics.record_ticket_minted(concert_id=concert_id)

        # The ticket row is committed: the seat is minted even if the recount fails
        try:
            concert.apply_minted_counts(
                await self.ticket_query_repo.count_by_section(concert_id)
            )
            await self.concert_command_repo.update(concert)
        finally:
            await self.seat_locking_service.complete_processing(
                concert_id=concert_id,
                section_name=section_name,
                seat_number=seat_number,
                user_id=buyer.id or 0,
                success=True,
            )
        Logger.base.info(f'🎫 [MINT] {seat_key} minted by {buyer.wallet_address}')
        return {'ticket': created, 'seat_key': seat_key}
