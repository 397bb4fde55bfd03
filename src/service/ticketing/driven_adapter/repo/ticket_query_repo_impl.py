from typing import AsyncContextManager, Callable, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_ticket_query_repo import ITicketQueryRepo
from src.service.ticketing.domain.entity.ticket_entity import TicketEntity
from src.service.ticketing.driven_adapter.model.ticket_model import TicketModel
from src.service.ticketing.driven_adapter.repo.orm_mapper import ticket_model_to_entity


class TicketQueryRepoImpl(ITicketQueryRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]) -> None:
        self.session_factory = session_factory

    @Logger.io
    async def get_by_id(self, ticket_id: int) -> Optional[TicketEntity]:
        async with self.session_factory() as session:
            ticket_model = await session.get(TicketModel, ticket_id)
            if not ticket_model:
                return None
            return ticket_model_to_entity(ticket_model)

    @Logger.io
    async def get_by_seat(
        self, *, concert_id: int, section_name: str, seat_number: str
    ) -> Optional[TicketEntity]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(TicketModel).where(
                    TicketModel.concert_id == concert_id,
                    TicketModel.section_name == section_name,
                    TicketModel.seat_number == seat_number,
                )
            )
            ticket_model = result.scalar_one_or_none()
            if not ticket_model:
                return None
            return ticket_model_to_entity(ticket_model)

    @Logger.io
    async def list_by_owner(self, owner_id: int) -> List[TicketEntity]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(TicketModel)
                .where(TicketModel.owner_id == owner_id)
                .order_by(TicketModel.created_at.desc(), TicketModel.id.desc())
            )
            return [ticket_model_to_entity(model) for model in result.scalars().all()]

    @Logger.io
    async def list_by_concert(self, concert_id: int) -> List[TicketEntity]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(TicketModel)
                .where(TicketModel.concert_id == concert_id)
                .order_by(TicketModel.id)
            )
            return [ticket_model_to_entity(model) for model in result.scalars().all()]

    @Logger.io
    async def list_listed(self) -> List[TicketEntity]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(TicketModel)
                .where(TicketModel.is_listed.is_(True), TicketModel.listing_price > 0)
                .order_by(TicketModel.listing_date.desc(), TicketModel.id.desc())
            )
            return [ticket_model_to_entity(model) for model in result.scalars().all()]

    async def count_by_section(self, concert_id: int) -> dict[str, int]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(TicketModel.section_name, func.count(TicketModel.id))
                .where(TicketModel.concert_id == concert_id)
                .group_by(TicketModel.section_name)
            )
            return {section_name: count for section_name, count in result.all()}

    async def count_all(self) -> int:
        async with self.session_factory() as session:
            result = await session.execute(select(func.count(TicketModel.id)))
            return result.scalar_one()

    async def count_listed(self) -> int:
        async with self.session_factory() as session:
            result = await session.execute(
                select(func.count(TicketModel.id)).where(TicketModel.is_listed.is_(True))
            )
            return result.scalar_one()
