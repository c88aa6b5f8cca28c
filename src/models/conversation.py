"""
QuickJob - Conversation Model

One thread per (client, professional) pair. Deletion, unread and archive
state is tracked separately for each side on the same row; use
``Conversation.side()`` rather than touching the per-side columns directly.
"""

from datetime import datetime
from typing import Optional
from sqlalchemy import Boolean, DateTime, ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from src.database import Base
from src.timestamps import now_utc


class Side:
    """The two parties of a conversation."""
    CLIENT = "client"
    PROFESSIONAL = "professional"

    ALL = (CLIENT, PROFESSIONAL)

    @staticmethod
    def other(side: str) -> str:
        return Side.PROFESSIONAL if side == Side.CLIENT else Side.CLIENT


# Column names backing each side's state
_SIDE_COLUMNS = {
    Side.CLIENT: {
        "deleted": "deleted_for_client",
        "deleted_at": "deleted_at_client",
        "unread": "client_unread",
        "archived": "archived_for_client",
    },
    Side.PROFESSIONAL: {
        "deleted": "deleted_for_professional",
        "deleted_at": "deleted_at_professional",
        "unread": "professional_unread",
        "archived": "archived_for_professional",
    },
}


class ConversationSide:
    """Read/write view over one party's columns of a Conversation."""

    def __init__(self, conversation: "Conversation", side: str):
        self.conversation = conversation
        self.name = side
        self._columns = _SIDE_COLUMNS[side]

    def _get(self, field: str):
        return getattr(self.conversation, self._columns[field])

    def _set(self, field: str, value) -> None:
        setattr(self.conversation, self._columns[field], value)

    @property
    def deleted(self) -> bool:
        return bool(self._get("deleted"))

    @deleted.setter
    def deleted(self, value: bool) -> None:
        self._set("deleted", value)

    @property
    def deleted_at(self) -> Optional[datetime]:
        return self._get("deleted_at")

    @deleted_at.setter
    def deleted_at(self, value: Optional[datetime]) -> None:
        self._set("deleted_at", value)

    @property
    def unread(self) -> bool:
        return bool(self._get("unread"))

    @unread.setter
    def unread(self, value: bool) -> None:
        self._set("unread", value)

    @property
    def archived(self) -> bool:
        return bool(self._get("archived"))

    @archived.setter
    def archived(self, value: bool) -> None:
        self._set("archived", value)


class Conversation(Base):
    """A durable thread between one client and one professional."""

    __tablename__ = "conversations"
    __table_args__ = (
        UniqueConstraint("client_id", "professional_id", name="uq_conversation_pair"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    # Parties
    client_id: Mapped[int] = mapped_column(ForeignKey("accounts.id"), nullable=False, index=True)
    professional_id: Mapped[int] = mapped_column(ForeignKey("accounts.id"), nullable=False, index=True)

    # Preview of the most recent message
    last_message: Mapped[str] = mapped_column(Text, default="")

    # Client side
    deleted_for_client: Mapped[bool] = mapped_column(Boolean, default=False)
    deleted_at_client: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    client_unread: Mapped[bool] = mapped_column(Boolean, default=False)
    archived_for_client: Mapped[bool] = mapped_column(Boolean, default=False)

    # Professional side
    deleted_for_professional: Mapped[bool] = mapped_column(Boolean, default=False)
    deleted_at_professional: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    professional_unread: Mapped[bool] = mapped_column(Boolean, default=False)
    archived_for_professional: Mapped[bool] = mapped_column(Boolean, default=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now_utc)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=now_utc, index=True)

    def __repr__(self) -> str:
        return f"<Conversation {self.id}: client={self.client_id} professional={self.professional_id}>"

    def side(self, side: str) -> ConversationSide:
        return ConversationSide(self, side)

    @property
    def client(self) -> ConversationSide:
        return self.side(Side.CLIENT)

    @property
    def professional(self) -> ConversationSide:
        return self.side(Side.PROFESSIONAL)

    def side_of(self, account_id: int) -> Optional[str]:
        """Return which side an account is on, or None if it is not a party."""
        if account_id == self.client_id:
            return Side.CLIENT
        if account_id == self.professional_id:
            return Side.PROFESSIONAL
        return None

    @property
    def deleted_for_both(self) -> bool:
        return self.client.deleted and self.professional.deleted

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "client_id": self.client_id,
            "professional_id": self.professional_id,
            "last_message": self.last_message,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
            "deleted_for_client": self.client.deleted,
            "deleted_for_professional": self.professional.deleted,
            "client_unread": self.client.unread,
            "professional_unread": self.professional.unread,
        }
