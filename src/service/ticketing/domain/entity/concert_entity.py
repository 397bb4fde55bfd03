from datetime import datetime, timezone
from typing import Optional

import attrs

from src.platform.exception.exceptions import DomainError, ForbiddenError, NotFoundError
from src.service.ticketing.domain.enum.concert_status import ConcertStatus


def _now() -> datetime:
    return datetime.now(timezone.utc)


@attrs.define
class SectionEntity:
    name: str
    price: float
    total_seats: int
    available_seats: Optional[int] = None

    def __attrs_post_init__(self) -> None:
        if self.available_seats is None:
            self.available_seats = self.total_seats

    def validate(self) -> None:
        if not self.name or not self.name.strip():
            raise DomainError('Section name is required')
        if self.total_seats <= 0:
            raise DomainError(f'Section {self.name} must have at least one seat')
        if self.price <= 0:
            raise DomainError(f'Section {self.name} must have a positive price')


@attrs.define
class AdminFeedback:
    message: str
    status: ConcertStatus
    admin_wallet: str
    created_at: datetime = attrs.field(factory=_now)


@attrs.define
class AdditionalInfo:
    message: str
    created_at: datetime = attrs.field(factory=_now)


@attrs.define
class ConcertEntity:
    name: str
    venue: str
    date: datetime
    creator_id: int
    creator_wallet: str = ''
    description: str = ''
    sections: list[SectionEntity] = attrs.field(factory=list)
    status: ConcertStatus = ConcertStatus.PENDING
    admin_feedback: list[AdminFeedback] = attrs.field(factory=list)
    additional_info: list[AdditionalInfo] = attrs.field(factory=list)
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        *,
        name: str,
        venue: str,
        date: datetime,
        creator_id: int,
        creator_wallet: str,
        sections: list[SectionEntity],
        description: str = '',
    ) -> 'ConcertEntity':
        if not name or not name.strip():
            raise DomainError('Concert name is required')
        if not venue or not venue.strip():
            raise DomainError('Venue is required')
        if not sections:
            raise DomainError('At least one section is required')

        seen: set[str] = set()
        for section in sections:
            section.validate()
            if section.name in seen:
                raise DomainError(f'Duplicate section name: {section.name}')
            seen.add(section.name)
            section.available_seats = section.total_seats

        return cls(
            name=name.strip(),
            venue=venue.strip(),
            date=date,
            creator_id=creator_id,
            creator_wallet=creator_wallet,
            description=description,
            sections=sections,
            status=ConcertStatus.PENDING,
        )

    @property
    def total_seats(self) -> int:
        return sum(section.total_seats for section in self.sections)

    @property
    def available_seats(self) -> int:
        return sum(section.available_seats or 0 for section in self.sections)

    def get_section(self, section_name: str) -> SectionEntity:
        for section in self.sections:
            if section.name == section_name:
                return section
        raise NotFoundError(f'Section not found: {section_name}')

    def is_creator(self, user_id: int) -> bool:
        return self.creator_id == user_id

    def is_visible_to(self, user_id: Optional[int], is_admin: bool = False) -> bool:
        if self.status == ConcertStatus.APPROVED or is_admin:
            return True
        return user_id is not None and self.is_creator(user_id)

    # ========== Admin review ==========

    def approve(self, *, admin_wallet: str, feedback: Optional[str] = None) -> None:
        self._transition(
            to=ConcertStatus.APPROVED,
            allowed_from=(ConcertStatus.PENDING, ConcertStatus.INFO_REQUESTED),
        )
        self._add_feedback(feedback or 'Approved', admin_wallet)

    def reject(self, *, admin_wallet: str, feedback: str) -> None:
        self._require_feedback(feedback)
        self._transition(
            to=ConcertStatus.REJECTED,
            allowed_from=(ConcertStatus.PENDING, ConcertStatus.INFO_REQUESTED),
        )
        self._add_feedback(feedback, admin_wallet)

    def request_info(self, *, admin_wallet: str, feedback: str) -> None:
        self._require_feedback(feedback)
        self._transition(to=ConcertStatus.INFO_REQUESTED, allowed_from=(ConcertStatus.PENDING,))
        self._add_feedback(feedback, admin_wallet)

    def submit_additional_info(self, *, user_id: int, message: str) -> None:
        if not self.is_creator(user_id):
            raise ForbiddenError('Only the concert creator can submit additional info')
        if not message or not message.strip():
            raise DomainError('Additional info is required')
        self._transition(to=ConcertStatus.PENDING, allowed_from=(ConcertStatus.INFO_REQUESTED,))
        self.additional_info.append(AdditionalInfo(message=message.strip()))

    # ========== Minting ==========

    def ensure_mintable(self) -> None:
        if self.status != ConcertStatus.APPROVED:
            raise DomainError('Tickets can only be minted for approved concerts')

    def apply_minted_counts(self, minted_by_section: dict[str, int]) -> None:
        for section in self.sections:
            minted = minted_by_section.get(section.name, 0)
            section.available_seats = max(section.total_seats - minted, 0)

    def _transition(self, *, to: ConcertStatus, allowed_from: tuple[ConcertStatus, ...]) -> None:
        if self.status not in allowed_from:
            raise DomainError(
                f'Cannot change concert status from {self.status.value} to {to.value}'
            )
        self.status = to
        self.updated_at = _now()

    def _add_feedback(self, message: str, admin_wallet: str) -> None:
        self.admin_feedback.append(
            AdminFeedback(message=message, status=self.status, admin_wallet=admin_wallet)
        )

    @staticmethod
    def _require_feedback(feedback: Optional[str]) -> None:
        if not feedback or not feedback.strip():
            raise DomainError('Feedback is required')
