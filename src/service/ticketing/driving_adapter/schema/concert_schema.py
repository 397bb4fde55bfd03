from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from src.service.ticketing.domain.entity.concert_entity import ConcertEntity


class SectionRequest(BaseModel):
    name: str = ''
    price: float = 0
    total_seats: int = 0


class ConcertCreateRequest(BaseModel):
    name: str = ''
    venue: str = ''
    date: Optional[datetime] = None
    description: str = ''
    sections: List[SectionRequest] = []

    class Config:
        json_schema_extra = {
            'example': {
                'name': 'Summer Night Live',
                'venue': 'Jakarta International Stadium',
                'date': '2025-08-17T19:00:00Z',
                'description': 'Open-air concert',
                'sections': [
                    {'name': 'VIP', 'price': 1.5, 'total_seats': 50},
                    {'name': 'Regular', 'price': 0.5, 'total_seats': 200},
                ],
            }
        }


class AdditionalInfoRequest(BaseModel):
    additional_info: str = ''


class ReviewRequest(BaseModel):
    feedback: Optional[str] = None


class SectionResponse(BaseModel):
    name: str
    price: float
    total_seats: int
    available_seats: int


class AdminFeedbackResponse(BaseModel):
    message: str
    status: str
    admin_wallet: str
    created_at: Optional[datetime] = None


class AdditionalInfoResponse(BaseModel):
    message: str
    created_at: Optional[datetime] = None


class ConcertResponse(BaseModel):
    id: int
    name: str
    venue: str
    date: datetime
    description: str
    status: str
    creator_id: int
    creator_wallet: str
    sections: List[SectionResponse]
    total_seats: int
    available_seats: int
    admin_feedback: List[AdminFeedbackResponse]
    additional_info: List[AdditionalInfoResponse]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, concert: ConcertEntity) -> 'ConcertResponse':
        return cls(
            id=concert.id or 0,
            name=concert.name,
            venue=concert.venue,
            date=concert.date,
            description=concert.description,
            status=concert.status.value,
            creator_id=concert.creator_id,
            creator_wallet=concert.creator_wallet,
            sections=[
                SectionResponse(
                    name=section.name,
                    price=section.price,
                    total_seats=section.total_seats,
                    available_seats=section.available_seats or 0,
                )
                for section in concert.sections
            ],
            total_seats=concert.total_seats,
            available_seats=concert.available_seats,
            admin_feedback=[
                AdminFeedbackResponse(
                    message=entry.message,
                    status=entry.status.value,
                    admin_wallet=entry.admin_wallet,
                    created_at=entry.created_at,
                )
                for entry in concert.admin_feedback
            ],
            additional_info=[
                AdditionalInfoResponse(message=entry.message, created_at=entry.created_at)
                for entry in concert.additional_info
            ],
            created_at=concert.created_at,
            updated_at=concert.updated_at,
        )


class ConcertListResponse(BaseModel):
    success: bool = True
    concerts: List[ConcertResponse]
    count: int
