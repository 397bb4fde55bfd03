from typing import AsyncContextManager, Callable, List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_concert_query_repo import IConcertQueryRepo
from src.service.ticketing.domain.entity.concert_entity import ConcertEntity
from src.service.ticketing.domain.enum.concert_status import ConcertStatus
from src.service.ticketing.driven_adapter.model.concert_model import ConcertModel
from src.service.ticketing.driven_adapter.repo.orm_mapper import concert_model_to_entity


class ConcertQueryRepoImpl(IConcertQueryRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]) -> None:
        self.session_factory = session_factory

    @Logger.io
    async def get_by_id(self, concert_id: int) -> Optional[ConcertEntity]:
        async with self.session_factory() as session:
            concert_model = await session.get(ConcertModel, concert_id)
            if not concert_model:
                return None
            return concert_model_to_entity(concert_model)

    @Logger.io
    async def get_by_ids(self, concert_ids: Sequence[int]) -> dict[int, ConcertEntity]:
        if not concert_ids:
            return {}
        async with self.session_factory() as session:
            result = await session.execute(
                select(ConcertModel).where(ConcertModel.id.in_(set(concert_ids)))
            )
            return {
                model.id: concert_model_to_entity(model) for model in result.scalars().all()
            }

    @Logger.io
    async def list_by_status(self, statuses: Sequence[ConcertStatus]) -> List[ConcertEntity]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(ConcertModel)
                .where(ConcertModel.status.in_([status.value for status in statuses]))
                .order_by(ConcertModel.date, ConcertModel.id)
            )
            return [concert_model_to_entity(model) for model in result.scalars().all()]

    @Logger.io
    async def list_by_creator(
        self, creator_id: int, statuses: Optional[Sequence[ConcertStatus]] = None
    ) -> List[ConcertEntity]:
        stmt = select(ConcertModel).where(ConcertModel.creator_id == creator_id)
        if statuses is not None:
            stmt = stmt.where(ConcertModel.status.in_([status.value for status in statuses]))

        async with self.session_factory() as session:
            result = await session.execute(stmt.order_by(ConcertModel.created_at.desc()))
            return [concert_model_to_entity(model) for model in result.scalars().all()]
