"""
QuickJob - Verification Record Model

One row per account holding the four verification step statuses and the
overall status derived from them.
"""

from datetime import datetime
from typing import Optional
from sqlalchemy import String, DateTime, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column
from src.database import Base
from src.timestamps import now_utc


class ReviewStatus:
    """Status values shared by verification steps and credentials."""
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"

    ALL = (PENDING, SUCCESS, FAILED)


class VerificationStep:
    """Steps an admin can review."""
    ID_PHOTO = "id_photo"
    SELFIE = "selfie"
    CREDENTIALS = "credentials"

    REVIEWABLE = (ID_PHOTO, SELFIE, CREDENTIALS)


class VerificationRecord(Base):
    """
    Verification state for one account.

    overall_status is written only by src.verification after recomputing it
    from the step statuses; nothing else should assign it.
    """

    __tablename__ = "verification"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("accounts.id"), unique=True, nullable=False)

    # Step statuses
    email_status: Mapped[str] = mapped_column(String(20), default=ReviewStatus.SUCCESS)
    id_photo_status: Mapped[str] = mapped_column(String(20), default=ReviewStatus.PENDING)
    selfie_status: Mapped[str] = mapped_column(String(20), default=ReviewStatus.PENDING)
    credentials_status: Mapped[str] = mapped_column(String(20), default=ReviewStatus.PENDING)

    # Derived
    overall_status: Mapped[str] = mapped_column(String(20), default=ReviewStatus.PENDING)

    # Text of the last failure notification sent; cleared when no longer failed
    failure_notice: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=now_utc)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=now_utc, onupdate=now_utc)

    def __repr__(self) -> str:
        return f"<VerificationRecord user={self.user_id} overall={self.overall_status}>"

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "email_status": self.email_status,
            "id_photo_status": self.id_photo_status,
            "selfie_status": self.selfie_status,
            "credentials_status": self.credentials_status,
            "overall_status": self.overall_status,
        }

    def to_summary(self) -> dict:
        """Compact camelCase view used by the status endpoint."""
        return {
            "email": self.email_status,
            "idPhoto": self.id_photo_status,
            "selfie": self.selfie_status,
            "credentials": self.credentials_status,
            "overall": self.overall_status,
        }
