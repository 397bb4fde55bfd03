from datetime import datetime
from typing import Optional

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from src.platform.database.orm_db_setting import Base


class TicketModel(Base):
    __tablename__ = 'ticket'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    concert_id: Mapped[int] = mapped_column(
        Integer, ForeignKey('concert.id'), nullable=False, index=True
    )
    owner_id: Mapped[int] = mapped_column(
        Integer, ForeignKey('user.id'), nullable=False, index=True
    )
    owner_wallet: Mapped[str] = mapped_column(String(128), nullable=False)
    section_name: Mapped[str] = mapped_column(String(100), nullable=False)
    seat_number: Mapped[str] = mapped_column(String(20), nullable=False)
    price: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    transaction_signature: Mapped[str] = mapped_column(String(128), default='', nullable=False)
    mint_address: Mapped[str] = mapped_column(String(128), default='', nullable=False)
    status: Mapped[str] = mapped_column(String(20), default='minted', nullable=False)
    is_used: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_listed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)
    listing_price: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    listing_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    # [{action, from_wallet, to_wallet, price, transaction_signature, timestamp}]
    transaction_history: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        UniqueConstraint('concert_id', 'section_name', 'seat_number', name='uq_ticket_seat'),
    )
