from abc import ABC, abstractmethod
from typing import List, Optional

from src.service.seat_lock.domain.seat_lock_entity import LockType, SeatLock


class ISeatLockStore(ABC):
    """Storage for seat locks. Every method that mutates must be atomic per seat key."""

    @abstractmethod
    async def acquire(self, lock: SeatLock, *, now_ms: int) -> Optional[SeatLock]:
        """Store lock unless a live lock refuses to yield (see SeatLock.can_be_replaced_by).

        Returns None on success, otherwise the conflicting lock.
        """
        pass

    @abstractmethod
    async def get(self, seat_key: str, *, now_ms: int) -> Optional[SeatLock]:
        """Live lock for the seat, expired locks read as absent."""
        pass

    @abstractmethod
    async def release(
        self, seat_key: str, *, user_id: int, lock_type: Optional[LockType] = None
    ) -> Optional[SeatLock]:
        """Delete the lock if held by user_id (and of lock_type when given)."""
        pass

    @abstractmethod
    async def list_concert(self, concert_id: int, *, now_ms: int) -> List[SeatLock]:
        pass

    @abstractmethod
    async def list_all(self, *, now_ms: int) -> List[SeatLock]:
        pass

    @abstractmethod
    async def mark_warned(self, seat_key: str) -> None:
        pass

    @abstractmethod
    async def pop_expired(self, *, now_ms: int) -> List[SeatLock]:
        """Remove and return every lock whose expiry has passed."""
        pass
