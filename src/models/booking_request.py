"""
QuickJob - Booking Request Model

A client's request for a professional's service.
"""

from datetime import datetime
from typing import Optional
from sqlalchemy import String, DateTime, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column
from src.database import Base
from src.timestamps import now_utc


class RequestStatus:
    """Lifecycle of a booking request."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    DECLINED = "declined"
    COMPLETED = "completed"

    ALL = (PENDING, CONFIRMED, DECLINED, COMPLETED)


class BookingRequest(Base):
    """A booking request sent from a client to a professional."""

    __tablename__ = "requests"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    client_id: Mapped[int] = mapped_column(ForeignKey("accounts.id"), nullable=False, index=True)
    professional_id: Mapped[int] = mapped_column(ForeignKey("accounts.id"), nullable=False, index=True)

    service: Mapped[str] = mapped_column(String(255), nullable=False)
    date: Mapped[str] = mapped_column(String(20), nullable=False)  # As entered, e.g. 2026-10-20
    time: Mapped[str] = mapped_column(String(20), nullable=False)
    urgency: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    status: Mapped[str] = mapped_column(String(20), default=RequestStatus.PENDING, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now_utc)

    def __repr__(self) -> str:
        return f"<BookingRequest {self.id}: {self.status}>"
