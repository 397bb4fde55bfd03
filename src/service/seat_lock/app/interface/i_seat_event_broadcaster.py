from abc import ABC, abstractmethod
from typing import Any, Optional


class ISeatEventBroadcaster(ABC):
    @abstractmethod
    async def broadcast_seat_update(
        self,
        *,
        concert_id: int,
        section_name: str,
        seat_number: str,
        action: str,
        user_id: Optional[int] = None,
        extra: Optional[dict[str, Any]] = None,
    ) -> None:
        """Push seatStatusUpdate to everyone watching the concert."""
        pass

    @abstractmethod
    async def notify_user(
        self, *, concert_id: int, user_id: int, event: str, data: dict[str, Any]
    ) -> None:
        """Push an event only to the sockets of one user in the concert room."""
        pass
