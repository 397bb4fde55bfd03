from enum import Enum
from typing import Any, Optional

import attrs


class LockType(str, Enum):
    TEMPORARY = 'temporary'  # user has the seat selected
    PROCESSING = 'processing'  # mint transaction in flight


class UnavailableReason(str, Enum):
    SEAT_LOCKED = 'seat_locked'
    PROCESSING_CONFLICT = 'processing_conflict'
    ALREADY_MINTED = 'already_minted'


_UNAVAILABLE_MESSAGES = {
    UnavailableReason.SEAT_LOCKED: 'This seat is currently selected by another user',
    UnavailableReason.PROCESSING_CONFLICT: 'This seat is being processed by another user',
    UnavailableReason.ALREADY_MINTED: 'This seat has already been purchased',
}
DEFAULT_UNAVAILABLE_MESSAGE = 'This seat is not available'
OWN_PROCESSING_MESSAGE = 'Your purchase of this seat is already being processed'


def unavailable_message(reason: Optional[str]) -> str:
    try:
        return _UNAVAILABLE_MESSAGES[UnavailableReason(reason)]
    except ValueError:
        return DEFAULT_UNAVAILABLE_MESSAGE


def build_seat_key(concert_id: int, section_name: str, seat_number: str) -> str:
    return f'{concert_id}-{section_name}-{seat_number}'


@attrs.define
class SeatLock:
    concert_id: int
    section_name: str
    seat_number: str
    user_id: int
    lock_type: LockType
    created_at: int  # epoch ms
    expires_at: int  # epoch ms
    operation: Optional[str] = None
    warned: bool = False

    @property
    def seat_key(self) -> str:
        return build_seat_key(self.concert_id, self.section_name, self.seat_number)

    def is_expired(self, now_ms: int) -> bool:
        return self.expires_at <= now_ms

    def time_remaining(self, now_ms: int) -> int:
        return max(self.expires_at - now_ms, 0)

    def can_be_replaced_by(self, other: 'SeatLock', now_ms: int) -> bool:
        """A live lock only yields to its owner, and never downgrades processing to temporary."""
        if self.is_expired(now_ms):
            return True
        if self.user_id != other.user_id:
            return False
        return not (
            self.lock_type == LockType.PROCESSING and other.lock_type == LockType.TEMPORARY
        )

    def to_dict(self, now_ms: int) -> dict[str, Any]:
        return {
            'seat_key': self.seat_key,
            'concert_id': self.concert_id,
            'section_name': self.section_name,
            'seat_number': self.seat_number,
            'user_id': self.user_id,
            'lock_type': self.lock_type.value,
            'operation': self.operation,
            'created_at': self.created_at,
            'expires_at': self.expires_at,
            'time_remaining': self.time_remaining(now_ms),
        }

    def to_record(self) -> dict[str, str]:
        return {
            'concert_id': str(self.concert_id),
            'section_name': self.section_name,
            'seat_number': self.seat_number,
            'user_id': str(self.user_id),
            'lock_type': self.lock_type.value,
            'created_at': str(self.created_at),
            'expires_at': str(self.expires_at),
            'operation': self.operation or '',
            'warned': '1' if self.warned else '0',
        }

    @classmethod
    def from_record(cls, record: dict[str, str]) -> 'SeatLock':
        return cls(
            concert_id=int(record['concert_id']),
            section_name=record['section_name'],
            seat_number=record['seat_number'],
            user_id=int(record['user_id']),
            lock_type=LockType(record['lock_type']),
            created_at=int(record['created_at']),
            expires_at=int(record['expires_at']),
            operation=record.get('operation') or None,
            warned=record.get('warned') == '1',
        )


@attrs.define(frozen=True)
class LockResult:
    seat_key: str
    lock_type: LockType
    expires_at: int
    time_remaining: int
    refreshed: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            'seat_key': self.seat_key,
            'lock_type': self.lock_type.value,
            'expires_at': self.expires_at,
            'time_remaining': self.time_remaining,
            'refreshed': self.refreshed,
        }
