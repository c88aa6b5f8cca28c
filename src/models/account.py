"""
QuickJob - Account Model
"""

from datetime import datetime
from typing import Optional
from sqlalchemy import String, Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from src.database import Base
from src.timestamps import now_utc


class AccountRole:
    """Roles an account can hold."""
    CLIENT = "client"
    PROFESSIONAL = "professional"
    ADMIN = "admin"


class Account(Base):
    """A registered client, professional or admin."""

    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False, index=True)

    # Authentication
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    verification_code: Mapped[Optional[str]] = mapped_column(String(6), nullable=True)

    # Profile
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    contact: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    profession: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    avatar: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # Identity documents captured at signup
    id_photo: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    selfie: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # Account status
    email_verified: Mapped[bool] = mapped_column(Boolean, default=False)  # Confirmed via emailed code
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False)  # Set once overall verification succeeds

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now_utc)

    def __repr__(self) -> str:
        return f"<Account {self.email} ({self.role})>"

    @property
    def is_admin(self) -> bool:
        return self.role == AccountRole.ADMIN
