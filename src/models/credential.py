"""
QuickJob - Credential Model

Certification documents uploaded by an account for admin review.
"""

from datetime import datetime
from typing import Optional
from sqlalchemy import String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from src.database import Base
from src.timestamps import now_utc


class Credential(Base):
    """An uploaded credential with its own review status."""

    __tablename__ = "credentials"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    # Owner
    user_id: Mapped[int] = mapped_column(ForeignKey("accounts.id"), nullable=False, index=True)

    # File
    file_path: Mapped[str] = mapped_column(String(500), nullable=False)
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # Review status (see ReviewStatus), changed only by admin review
    status: Mapped[str] = mapped_column(String(20), default="pending", nullable=False)

    uploaded_at: Mapped[datetime] = mapped_column(DateTime, default=now_utc, index=True)

    def __repr__(self) -> str:
        return f"<Credential {self.id} for user {self.user_id}: {self.status}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "file_path": self.file_path,
            "status": self.status,
            "uploaded_at": self.uploaded_at.isoformat() if self.uploaded_at else None,
            "name": self.name,
        }
