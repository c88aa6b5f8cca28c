"""
QuickJob - Notification Model
"""

from datetime import datetime
from sqlalchemy import String, Boolean, DateTime, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column
from src.database import Base
from src.timestamps import now_utc


class NotificationTab:
    """Client UI tabs a notification can route to."""
    VERIFICATION = "verification"
    REQUESTS = "requests"
    BOOKINGS = "bookings"
    MESSAGES = "messages"


class Notification(Base):
    """A user-visible notification."""

    __tablename__ = "notifications"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("accounts.id"), nullable=False, index=True)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    target_tab: Mapped[str] = mapped_column(String(50), nullable=True)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now_utc, index=True)

    def __repr__(self) -> str:
        return f"<Notification {self.id} for user {self.user_id}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "message": self.message,
            "targetTab": self.target_tab,
            "read": bool(self.is_read),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
