"""Conversions between ORM rows and domain entities.

Nested lists (sections, feedback, history) live in JSON columns, datetimes
inside them are stored as ISO-8601 strings.
"""

from datetime import datetime
from typing import Any, Optional

import attrs

from src.service.ticketing.domain.entity.concert_entity import (
    AdditionalInfo,
    AdminFeedback,
    ConcertEntity,
    SectionEntity,
)
from src.service.ticketing.domain.entity.ticket_entity import TicketEntity, TicketHistoryEntry
from src.service.ticketing.domain.entity.user_entity import UserEntity
from src.service.ticketing.domain.enum.concert_status import ConcertStatus
from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.driven_adapter.model.concert_model import ConcertModel
from src.service.ticketing.driven_adapter.model.ticket_model import TicketModel
from src.service.ticketing.driven_adapter.model.user_model import UserModel


def _dump_datetime(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _load_datetime(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


# ========== User ==========


def user_model_to_entity(user_model: UserModel) -> UserEntity:
    return UserEntity(
        id=user_model.id,
        wallet_address=user_model.wallet_address,
        is_admin=user_model.is_admin,
        email=user_model.email,
        created_at=user_model.created_at,
        last_login=user_model.last_login,
    )


# ========== Concert ==========


def dump_sections(sections: list[SectionEntity]) -> list[dict[str, Any]]:
    return [attrs.asdict(section) for section in sections]


def dump_admin_feedback(feedback: list[AdminFeedback]) -> list[dict[str, Any]]:
    return [
        {
            'message': entry.message,
            'status': entry.status.value,
            'admin_wallet': entry.admin_wallet,
            'created_at': _dump_datetime(entry.created_at),
        }
        for entry in feedback
    ]


def dump_additional_info(info: list[AdditionalInfo]) -> list[dict[str, Any]]:
    return [
        {'message': entry.message, 'created_at': _dump_datetime(entry.created_at)}
        for entry in info
    ]


def concert_model_to_entity(concert_model: ConcertModel) -> ConcertEntity:
    return ConcertEntity(
        id=concert_model.id,
        name=concert_model.name,
        venue=concert_model.venue,
        date=concert_model.date,
        description=concert_model.description,
        status=ConcertStatus(concert_model.status),
        creator_id=concert_model.creator_id,
        creator_wallet=concert_model.creator_wallet,
        sections=[SectionEntity(**section) for section in concert_model.sections or []],
        admin_feedback=[
            AdminFeedback(
                message=entry['message'],
                status=ConcertStatus(entry['status']),
                admin_wallet=entry.get('admin_wallet', ''),
                created_at=_load_datetime(entry.get('created_at')),
            )
            for entry in concert_model.admin_feedback or []
        ],
        additional_info=[
            AdditionalInfo(
                message=entry['message'], created_at=_load_datetime(entry.get('created_at'))
            )
            for entry in concert_model.additional_info or []
        ],
        created_at=concert_model.created_at,
        updated_at=concert_model.updated_at,
    )


# ========== Ticket ==========


def dump_history(history: list[TicketHistoryEntry]) -> list[dict[str, Any]]:
    return [
        {**attrs.asdict(entry), 'timestamp': _dump_datetime(entry.timestamp)} for entry in history
    ]


def ticket_model_to_entity(ticket_model: TicketModel) -> TicketEntity:
    return TicketEntity(
        id=ticket_model.id,
        concert_id=ticket_model.concert_id,
        owner_id=ticket_model.owner_id,
        owner_wallet=ticket_model.owner_wallet,
        section_name=ticket_model.section_name,
        seat_number=ticket_model.seat_number,
        price=ticket_model.price,
        transaction_signature=ticket_model.transaction_signature,
        mint_address=ticket_model.mint_address,
        status=TicketStatus(ticket_model.status),
        is_used=ticket_model.is_used,
        is_listed=ticket_model.is_listed,
        listing_price=ticket_model.listing_price,
        listing_date=ticket_model.listing_date,
        transaction_history=[
            TicketHistoryEntry(
                **{key: value for key, value in entry.items() if key != 'timestamp'},
                timestamp=_load_datetime(entry.get('timestamp')),
            )
            for entry in ticket_model.transaction_history or []
        ],
        created_at=ticket_model.created_at,
    )
