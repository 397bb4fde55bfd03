from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.seat_lock.app.seat_locking_service import SeatLockingService
from src.service.ticketing.app.interface.i_concert_query_repo import IConcertQueryRepo
from src.service.ticketing.app.interface.i_ticket_query_repo import ITicketQueryRepo
from src.service.ticketing.domain.seat_map import (
    SeatLockView,
    build_section_seat_map,
    normalize_seat_code,
)


class GetSeatMapUseCase:
    """Seat grid of one section, coloured for the viewer (owned/selected are per user)."""

    def __init__(
        self,
        concert_query_repo: IConcertQueryRepo,
        ticket_query_repo: ITicketQueryRepo,
        seat_locking_service: SeatLockingService,
    ) -> None:
        self.concert_query_repo = concert_query_repo
        self.ticket_query_repo = ticket_query_repo
        self.seat_locking_service = seat_locking_service

    @classmethod
    @inject
    def depends(
        cls,
        concert_query_repo: IConcertQueryRepo = Depends(Provide[Container.concert_query_repo]),
        ticket_query_repo: ITicketQueryRepo = Depends(Provide[Container.ticket_query_repo]),
        seat_locking_service: SeatLockingService = Depends(
            Provide[Container.seat_locking_service]
        ),
    ) -> Self:
        return cls(
            concert_query_repo=concert_query_repo,
            ticket_query_repo=ticket_query_repo,
            seat_locking_service=seat_locking_service,
        )

    @Logger.io
    async def get_seat_map(
        self, *, concert_id: int, section_name: str, viewer_id: Optional[int] = None
    ) -> dict:
        concert = await self.concert_query_repo.get_by_id(concert_id)
        if concert is None:
            raise NotFoundError('Concert not found')
        section = concert.get_section(section_name)

        owned_codes: set[str] = set()
        minted_codes: set[str] = set()
        for ticket in await self.ticket_query_repo.list_by_concert(concert_id):
            # Any ticket row holds its seat (uq_ticket_seat), used tickets included
            if ticket.section_name != section_name:
                continue
            if viewer_id is not None and ticket.is_owned_by(viewer_id):
                owned_codes.add(ticket.seat_code)
            else:
                minted_codes.add(ticket.seat_code)

        locks = {
            normalize_seat_code(lock.section_name, lock.seat_number): SeatLockView(
                lock_type=lock.lock_type.value, user_id=lock.user_id
            )
            for lock in await self.seat_locking_service.list_locks(concert_id)
            if lock.section_name == section_name
        }

        seat_map = build_section_seat_map(
            section_name,
            section.total_seats,
            owned_codes=owned_codes,
            minted_codes=minted_codes,
            locks=locks,
            viewer_id=viewer_id,
        )
        return {'concert_id': concert_id, 'price': section.price, **seat_map}
