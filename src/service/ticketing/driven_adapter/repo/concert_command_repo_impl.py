from typing import AsyncContextManager, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_concert_command_repo import IConcertCommandRepo
from src.service.ticketing.domain.entity.concert_entity import ConcertEntity
from src.service.ticketing.driven_adapter.model.concert_model import ConcertModel
from src.service.ticketing.driven_adapter.repo.orm_mapper import (
    concert_model_to_entity,
    dump_additional_info,
    dump_admin_feedback,
    dump_sections,
)


class ConcertCommandRepoImpl(IConcertCommandRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @Logger.io
    async def create(self, concert: ConcertEntity) -> ConcertEntity:
        async with self.session_factory() as session:
            concert_model = ConcertModel(
                name=concert.name,
                venue=concert.venue,
                date=concert.date,
                description=concert.description,
                status=concert.status.value,
                creator_id=concert.creator_id,
                creator_wallet=concert.creator_wallet,
                sections=dump_sections(concert.sections),
                admin_feedback=dump_admin_feedback(concert.admin_feedback),
                additional_info=dump_additional_info(concert.additional_info),
            )
            session.add(concert_model)
            await session.commit()
            await session.refresh(concert_model)

            return concert_model_to_entity(concert_model)

    @Logger.io
    async def update(self, concert: ConcertEntity) -> ConcertEntity:
        async with self.session_factory() as session:
            concert_model = await session.get(ConcertModel, concert.id)
            if concert_model is None:
                raise NotFoundError('Concert not found')

            # JSON columns are replaced wholesale so SQLAlchemy sees the change
            concert_model.status = concert.status.value
            concert_model.sections = dump_sections(concert.sections)
            concert_model.admin_feedback = dump_admin_feedback(concert.admin_feedback)
            concert_model.additional_info = dump_additional_info(concert.additional_info)
            await session.commit()
            await session.refresh(concert_model)

            return concert_model_to_entity(concert_model)
