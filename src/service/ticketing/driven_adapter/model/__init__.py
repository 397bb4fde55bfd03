"""
Database Models

Import all models here to ensure they are registered with SQLAlchemy
"""

from src.service.ticketing.driven_adapter.model.concert_model import ConcertModel
from src.service.ticketing.driven_adapter.model.ticket_model import TicketModel
from src.service.ticketing.driven_adapter.model.user_model import UserModel

__all__ = [
    'ConcertModel',
    'TicketModel',
    'UserModel',
]
