"""Decide whether a stored ticket can be trusted at the door."""

from typing import Optional

import attrs

from src.service.ticketing.domain.entity.concert_entity import ConcertEntity
from src.service.ticketing.domain.entity.ticket_entity import TicketEntity
from src.service.ticketing.domain.enum.ticket_status import TicketStatus


class TicketDisplayStatus:
    USED = 'used'
    VALID = 'valid'
    INVALID = 'invalid'


@attrs.define(frozen=True)
class TicketValidation:
    is_valid: bool
    status: str
    has_transaction_signature: bool
    has_mint_address: bool
    concert_found: bool


def is_ticket_valid(ticket: TicketEntity, concert: Optional[ConcertEntity]) -> bool:
    return bool(ticket.transaction_signature or ticket.mint_address or concert is not None)


def get_ticket_display_status(ticket: TicketEntity, concert: Optional[ConcertEntity]) -> str:
    if ticket.is_used or ticket.status == TicketStatus.USED:
        return TicketDisplayStatus.USED
    if is_ticket_valid(ticket, concert):
        return TicketDisplayStatus.VALID
    return TicketDisplayStatus.INVALID


def validate_ticket(ticket: TicketEntity, concert: Optional[ConcertEntity]) -> TicketValidation:
    return TicketValidation(
        is_valid=is_ticket_valid(ticket, concert),
        status=get_ticket_display_status(ticket, concert),
        has_transaction_signature=bool(ticket.transaction_signature),
        has_mint_address=bool(ticket.mint_address),
        concert_found=concert is not None,
    )
