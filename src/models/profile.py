"""
QuickJob - Profile Model

Public profile details beyond what signup collects. The profile picture is
the account's avatar; everything else lives here.
"""

from datetime import datetime
from typing import Optional
from sqlalchemy import String, Text, DateTime, ForeignKey, JSON
from sqlalchemy.orm import Mapped, mapped_column
from src.database import Base
from src.timestamps import now_utc


class ProfileImage:
    """Image slots accepted by the profile upload endpoint."""
    PROFILE_PICTURE = "profilePicture"
    COVER_PHOTO = "coverPhoto"

    ALL = (PROFILE_PICTURE, COVER_PHOTO)


class Profile(Base):
    __tablename__ = "profiles"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("accounts.id"), unique=True, nullable=False)

    bio: Mapped[str] = mapped_column(Text, default="")
    address: Mapped[str] = mapped_column(String(255), default="")
    home: Mapped[str] = mapped_column(String(255), default="")
    social_links: Mapped[list] = mapped_column(JSON, default=list)
    cover_photo: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    updated_at: Mapped[datetime] = mapped_column(DateTime, default=now_utc, onupdate=now_utc)

    def __repr__(self) -> str:
        return f"<Profile user={self.user_id}>"
