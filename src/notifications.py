"""
QuickJob - In-App Notifications

NotificationEmitter records notifications inside the caller's transaction
and, when given a mailer, mirrors them to the account's email address.
"""

import logging
from typing import Optional, List
from sqlalchemy import select, update, delete
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import Depends

from src.config import settings
from src.database import get_db
from src.errors import NotFound
from src.mailer import Mailer, get_mailer
from src.models.account import Account
from src.models.notification import Notification

logger = logging.getLogger(__name__)


class NotificationEmitter:
    """Creates notification rows for status changes and other events."""

    def __init__(self, db: AsyncSession, mailer: Optional[Mailer] = None):
        self.db = db
        self.mailer = mailer
        self._outbox: list[tuple[str, str]] = []

    async def emit(self, account: Account, message: str, target_tab: Optional[str]) -> Notification:
        """
        Add a notification for the account.

        The row is flushed but not committed; it becomes visible with the
        caller's transaction. Email copies are queued until ``flush_email()``.
        """
        notification = Notification(
            user_id=account.id,
            message=message,
            target_tab=target_tab,
            is_read=False,
        )
        self.db.add(notification)
        await self.db.flush()
        logger.info("Notification %s for account %s (%s)", notification.id, account.id, target_tab)

        if self.mailer is not None:
            self._outbox.append((account.email, message))
        return notification

    async def flush_email(self) -> int:
        """Send queued email copies. Call after the transaction commits."""
        sent = 0
        while self._outbox:
            email, message = self._outbox.pop(0)
            ok, _ = await self.mailer.send(email, "QuickJob notification", message)
            if ok:
                sent += 1
        return sent


def get_emitter(
    db: AsyncSession = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
) -> NotificationEmitter:
    """Dependency: an emitter bound to the request's session."""
    return NotificationEmitter(db, mailer if settings.NOTIFY_BY_EMAIL else None)


# =============================================================================
# QUERIES & UPDATES
# =============================================================================

async def list_notifications(db: AsyncSession, user_id: int) -> List[Notification]:
    """Notifications for a user, newest first."""
    result = await db.execute(
        select(Notification)
        .where(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
    )
    return list(result.scalars().all())


async def get_notification_by_id(db: AsyncSession, notification_id: int) -> Optional[Notification]:
    result = await db.execute(
        select(Notification).where(Notification.id == notification_id)
    )
    return result.scalar_one_or_none()


async def mark_notification_read(db: AsyncSession, notification_id: int) -> Notification:
    notification = await get_notification_by_id(db, notification_id)
    if not notification:
        raise NotFound("Notification not found")
    notification.is_read = True
    return notification


async def mark_all_read(db: AsyncSession, user_id: int) -> int:
    """Mark every notification for the user as read. Returns rows changed."""
    result = await db.execute(
        update(Notification)
        .where(Notification.user_id == user_id)
        .where(Notification.is_read.is_(False))
        .values(is_read=True)
    )
    return result.rowcount


async def delete_notification(db: AsyncSession, notification_id: int) -> None:
    result = await db.execute(
        delete(Notification).where(Notification.id == notification_id)
    )
    if result.rowcount == 0:
        raise NotFound("Notification not found")
