from src.service.seat_lock.app.interface.i_minted_seat_checker import IMintedSeatChecker
from src.service.ticketing.app.interface.i_ticket_query_repo import ITicketQueryRepo


class MintedSeatCheckerImpl(IMintedSeatChecker):
    """A seat is taken as soon as any ticket row exists for it (uq_ticket_seat)."""

    def __init__(self, *, ticket_query_repo: ITicketQueryRepo) -> None:
        self.ticket_query_repo = ticket_query_repo

    async def is_minted(self, *, concert_id: int, section_name: str, seat_number: str) -> bool:
        ticket = await self.ticket_query_repo.get_by_seat(
            concert_id=concert_id, section_name=section_name, seat_number=seat_number
        )
        return ticket is not None
