from abc import ABC, abstractmethod


class IMintedSeatChecker(ABC):
    @abstractmethod
    async def is_minted(self, *, concert_id: int, section_name: str, seat_number: str) -> bool:
        pass
