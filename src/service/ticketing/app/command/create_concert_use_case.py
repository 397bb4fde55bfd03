from datetime import datetime
from typing import Any, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_concert_command_repo import IConcertCommandRepo
from src.service.ticketing.domain.entity.concert_entity import ConcertEntity, SectionEntity
from src.service.ticketing.domain.entity.user_entity import UserEntity


class CreateConcertUseCase:
    def __init__(self, concert_command_repo: IConcertCommandRepo) -> None:
        self.concert_command_repo = concert_command_repo

    @classmethod
    @inject
    def depends(
        cls,
        concert_command_repo: IConcertCommandRepo = Depends(
            Provide[Container.concert_command_repo]
        ),
    ) -> Self:
        return cls(concert_command_repo=concert_command_repo)

    @Logger.io
    async def create(
        self,
        *,
        creator: UserEntity,
        name: str,
        venue: str,
        date: Optional[datetime],
        sections: list[dict[str, Any]],
        description: str = '',
    ) -> ConcertEntity:
        if date is None:
            raise DomainError('Concert date is required')

        concert = ConcertEntity.create(
            name=name,
            venue=venue,
            date=date,
            creator_id=creator.id or 0,
            creator_wallet=creator.wallet_address,
            description=description,
            sections=[
                SectionEntity(
                    name=(section.get('name') or '').strip(),
                    price=float(section.get('price') or 0),
                    total_seats=int(section.get('total_seats') or 0),
                )
                for section in sections
            ],
        )
        created = await self.concert_command_repo.create(concert)
        Logger.base.info(
            f'🎤 [CONCERT] {creator.wallet_address} submitted concert {created.id} '
            f'({created.total_seats} seats) for review'
        )
        return created
