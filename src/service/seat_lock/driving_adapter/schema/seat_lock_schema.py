from typing import Optional

from pydantic import BaseModel


class SeatRequest(BaseModel):
    concert_id: int
    section_name: str
    seat_number: str

    class Config:
        json_schema_extra = {
            'example': {'concert_id': 1, 'section_name': 'VIP', 'seat_number': 'A3'}
        }


class SeatAvailabilityResponse(BaseModel):
    success: bool = True
    seat_key: str
    available: bool
    status: str  # available | locked | minted
    reason: Optional[str] = None
    message: Optional[str] = None
    locked_by_me: bool = False
    lock_type: Optional[str] = None
    expires_at: Optional[int] = None
    time_remaining: Optional[int] = None


class ReserveSeatResponse(BaseModel):
    success: bool = True
    msg: str
    seat_key: str
    lock_type: str
    expires_at: int
    time_remaining: int
    refreshed: bool = False


class ReleaseSeatResponse(BaseModel):
    success: bool = True
    msg: str
