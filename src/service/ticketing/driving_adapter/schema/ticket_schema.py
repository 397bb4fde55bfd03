from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from src.service.ticketing.domain.entity.concert_entity import ConcertEntity
from src.service.ticketing.domain.entity.ticket_entity import TicketEntity, TicketHistoryEntry
from src.service.ticketing.domain.ticket_validator import get_ticket_display_status


class MintTicketRequest(BaseModel):
    concert_id: int
    section_name: str
    seat_number: str  # 'A3' or 'VIP-A3'
    transaction_signature: str = ''
    mint_address: str = ''

    class Config:
        json_schema_extra = {
            'example': {
                'concert_id': 1,
                'section_name': 'VIP',
                'seat_number': 'A3',
                'transaction_signature': '3sLk1xw9WmgkqQd1qn9ob3e4jmZ9gQbdLXHt8PXb2AeU',
                'mint_address': 'So11111111111111111111111111111111111111112',
            }
        }


class ListTicketRequest(BaseModel):
    price: float


class BuyTicketRequest(BaseModel):
    transaction_signature: str = ''


class TicketHistoryResponse(BaseModel):
    action: str
    from_wallet: Optional[str] = None
    to_wallet: Optional[str] = None
    price: Optional[float] = None
    transaction_signature: Optional[str] = None
    timestamp: Optional[datetime] = None

    @classmethod
    def from_entry(cls, entry: TicketHistoryEntry) -> 'TicketHistoryResponse':
        return cls(
            action=entry.action,
            from_wallet=entry.from_wallet,
            to_wallet=entry.to_wallet,
            price=entry.price,
            transaction_signature=entry.transaction_signature,
            timestamp=entry.timestamp,
        )


class TicketResponse(BaseModel):
    id: int
    concert_id: int
    owner_id: int
    owner_wallet: str
    section_name: str
    seat_number: str
    seat_code: str
    price: float
    transaction_signature: str
    mint_address: str
    status: str
    display_status: str
    is_used: bool
    is_listed: bool
    listing_price: Optional[float] = None
    listing_date: Optional[datetime] = None
    transaction_history: List[TicketHistoryResponse] = []
    created_at: Optional[datetime] = None
    # Concert details, filled where the endpoint joins them
    concert_name: Optional[str] = None
    concert_venue: Optional[str] = None
    concert_date: Optional[datetime] = None
    concert_exists: Optional[bool] = None

    @classmethod
    def from_entity(
        cls, ticket: TicketEntity, concert: Optional[ConcertEntity] = None, *, joined: bool = False
    ) -> 'TicketResponse':
        response = cls(
            id=ticket.id or 0,
            concert_id=ticket.concert_id,
            owner_id=ticket.owner_id,
            owner_wallet=ticket.owner_wallet,
            section_name=ticket.section_name,
            seat_number=ticket.seat_number,
            seat_code=ticket.seat_code,
            price=ticket.price,
            transaction_signature=ticket.transaction_signature,
            mint_address=ticket.mint_address,
            status=ticket.status.value,
            display_status=get_ticket_display_status(ticket, concert),
            is_used=ticket.is_used,
            is_listed=ticket.is_listed,
            listing_price=ticket.listing_price,
            listing_date=ticket.listing_date,
            transaction_history=[
                TicketHistoryResponse.from_entry(entry) for entry in ticket.transaction_history
            ],
            created_at=ticket.created_at,
        )
        if joined:
            response.concert_name = concert.name if concert else 'Unknown Concert'
            response.concert_venue = concert.venue if concert else 'Unknown Venue'
            response.concert_date = concert.date if concert else None
            response.concert_exists = concert is not None
        return response


class TicketListResponse(BaseModel):
    success: bool = True
    tickets: List[TicketResponse]
    count: int


class TicketEnvelope(BaseModel):
    success: bool = True
    msg: Optional[str] = None
    ticket: TicketResponse


class MintTicketResponse(TicketEnvelope):
    seat_key: str


class TicketHistoryListResponse(BaseModel):
    success: bool = True
    ticket_id: int
    history: List[TicketHistoryResponse]


class VerificationResponse(BaseModel):
    is_valid: bool
    status: str
    has_transaction_signature: bool
    has_mint_address: bool
    concert_found: bool
    verified_by: str
    timestamp: datetime


class BlockchainVerifyResponse(BaseModel):
    success: bool = True
    verification: VerificationResponse
    ticket: TicketResponse


class MarketplaceStatsResponse(BaseModel):
    success: bool = True
    total_tickets: int
    listed_tickets: int
    available_rate: float


class MintedSeatsResponse(BaseModel):
    success: bool = True
    concert_id: int
    seats: List[str]
    count: int
