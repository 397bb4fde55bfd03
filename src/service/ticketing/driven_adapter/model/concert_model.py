from datetime import datetime

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base


class ConcertModel(Base):
    __tablename__ = 'concert'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    venue: Mapped[str] = mapped_column(String(255), nullable=False)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    description: Mapped[str] = mapped_column(Text, default='', nullable=False)
    status: Mapped[str] = mapped_column(String(20), default='pending', nullable=False, index=True)
    creator_id: Mapped[int] = mapped_column(Integer, ForeignKey('user.id'), index=True)
    creator_wallet: Mapped[str] = mapped_column(String(128), default='', nullable=False)

    # [{name, price, total_seats, available_seats}]
    sections: Mapped[list] = mapped_column(JSON, nullable=False)
    # [{message, status, admin_wallet, created_at}]
    admin_feedback: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    # [{message, created_at}]
    additional_info: Mapped[list] = mapped_column(JSON, default=list, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
