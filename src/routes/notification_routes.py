"""
QuickJob - Notification Routes
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.database import get_db, atomic
from src.errors import NotFound
from src.auth import get_account_by_id
from src.notifications import (
    NotificationEmitter,
    delete_notification,
    get_emitter,
    list_notifications,
    mark_all_read,
    mark_notification_read,
)
from src.schemas import NotificationCreate, NotificationReadAllRequest, NotificationReadRequest


router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.post("/read-all")
async def read_all(
    body: NotificationReadAllRequest,
    db: AsyncSession = Depends(get_db),
):
    async with atomic(db):
        await mark_all_read(db, body.userId)
    return {"success": True}


@router.post("/read")
async def read_one(
    body: NotificationReadRequest,
    db: AsyncSession = Depends(get_db),
):
    async with atomic(db):
        await mark_notification_read(db, body.id)
    return {"success": True}


@router.post("/add")
async def add(
    body: NotificationCreate,
    db: AsyncSession = Depends(get_db),
    emitter: NotificationEmitter = Depends(get_emitter),
):
    """Record an arbitrary notification for an account."""
    account = await get_account_by_id(db, body.userId)
    if not account:
        raise NotFound("Account not found")

    async with atomic(db):
        notification = await emitter.emit(account, body.message, body.targetTab)
    await emitter.flush_email()
    return {"success": True, "notification": notification.to_dict()}


@router.get("/{user_id}")
async def list_for_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Notifications for an account, newest first."""
    notifications = await list_notifications(db, user_id)
    return [notification.to_dict() for notification in notifications]


@router.delete("/{notification_id}")
async def delete(
    notification_id: int,
    db: AsyncSession = Depends(get_db),
):
    async with atomic(db):
        await delete_notification(db, notification_id)
    return {"success": True}
