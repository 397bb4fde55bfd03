"""
Unit test configuration for ticketing service.

Entity builders and a container of AsyncMock repositories, exposed as fixtures
so use case tests never touch the database.
"""

from datetime import datetime, timezone
from typing import List, Optional
from unittest.mock import AsyncMock

import pytest

from src.service.ticketing.domain.entity.concert_entity import ConcertEntity, SectionEntity
from src.service.ticketing.domain.entity.ticket_entity import TicketEntity
from src.service.ticketing.domain.entity.user_entity import UserEntity
from src.service.ticketing.domain.enum.concert_status import ConcertStatus


CONCERT_DATE = datetime(2030, 8, 17, 19, 0, tzinfo=timezone.utc)


def build_user(
    user_id: int = 1, wallet: str = 'wallet-1', *, is_admin: bool = False
) -> UserEntity:
    return UserEntity(id=user_id, wallet_address=wallet, is_admin=is_admin)


def build_concert(
    *,
    concert_id: int = 1,
    creator_id: int = 1,
    status: ConcertStatus = ConcertStatus.PENDING,
    sections: Optional[List[SectionEntity]] = None,
) -> ConcertEntity:
    concert = ConcertEntity.create(
        name='Summer Night Live',
        venue='Jakarta International Stadium',
        date=CONCERT_DATE,
        creator_id=creator_id,
        creator_wallet=f'wallet-{creator_id}',
        sections=sections
        or [
            SectionEntity(name='VIP', price=1.5, total_seats=10),
            SectionEntity(name='Regular', price=0.5, total_seats=50),
        ],
    )
    concert.id = concert_id
    concert.status = status
    return concert


def build_ticket(
    *,
    ticket_id: int = 1,
    concert_id: int = 1,
    owner_id: int = 2,
    section_name: str = 'VIP',
    seat_number: str = 'A1',
) -> TicketEntity:
    ticket = TicketEntity.mint(
        concert_id=concert_id,
        owner_id=owner_id,
        owner_wallet=f'wallet-{owner_id}',
        section_name=section_name,
        seat_number=seat_number,
        price=1.5,
        transaction_signature='sig-mint',
    )
    ticket.id = ticket_id
    return ticket


async def _echo(entity):
    """Mock: return the entity as-is (simulates successful persistence)"""
    return entity


class RepositoryMocks:
    """
    Mock repositories container for testing use cases

    This is NOT a UoW - just a container for organizing mocks.
    """

    def __init__(
        self,
        *,
        concert: Optional[ConcertEntity] = None,
        ticket: Optional[TicketEntity] = None,
        user: Optional[UserEntity] = None,
    ):
        self.concert_query_repo = AsyncMock()
        self.concert_query_repo.get_by_id = AsyncMock(return_value=concert)
        self.concert_query_repo.get_by_ids = AsyncMock(
            return_value={concert.id: concert} if concert else {}
        )
        self.concert_command_repo = AsyncMock()
        self.concert_command_repo.create = AsyncMock(side_effect=self._create_concert)
        self.concert_command_repo.update = AsyncMock(side_effect=_echo)

        self.ticket_query_repo = AsyncMock()
        self.ticket_query_repo.get_by_id = AsyncMock(return_value=ticket)
        self.ticket_query_repo.get_by_seat = AsyncMock(return_value=None)
        self.ticket_query_repo.count_by_section = AsyncMock(return_value={})
        self.ticket_query_repo.list_by_concert = AsyncMock(return_value=[ticket] if ticket else [])
        self.ticket_command_repo = AsyncMock()
        self.ticket_command_repo.create = AsyncMock(side_effect=self._create_ticket)
        self.ticket_command_repo.update = AsyncMock(side_effect=_echo)
        self.ticket_command_repo.delete = AsyncMock()

        self.user_query_repo = AsyncMock()
        self.user_query_repo.get_by_wallet_address = AsyncMock(return_value=user)
        self.user_query_repo.get_by_id = AsyncMock(return_value=user)
        self.user_command_repo = AsyncMock()
        self.user_command_repo.create = AsyncMock(side_effect=self._create_user)
        self.user_command_repo.update = AsyncMock(side_effect=_echo)

    @staticmethod
    async def _create_concert(concert: ConcertEntity) -> ConcertEntity:
        concert.id = 42
        return concert

    @staticmethod
    async def _create_ticket(ticket: TicketEntity) -> TicketEntity:
        ticket.id = 7
        return ticket

    @staticmethod
    async def _create_user(user: UserEntity) -> UserEntity:
        user.id = 100
        return user


@pytest.fixture
def make_user():
    return build_user


@pytest.fixture
def make_concert():
    return build_concert


@pytest.fixture
def make_ticket():
    return build_ticket


@pytest.fixture
def repository_mocks():
    return RepositoryMocks
