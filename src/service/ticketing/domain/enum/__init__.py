"""Ticketing Domain Enums"""

from src.service.ticketing.domain.enum.concert_status import ConcertStatus
from src.service.ticketing.domain.enum.ticket_status import TicketStatus

__all__ = ['ConcertStatus', 'TicketStatus']
