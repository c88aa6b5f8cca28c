"""
QuickJob - Booking Request Routes
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.booking_requests import (
    create_request,
    list_requests_for_professional,
    update_request_status,
)
from src.database import get_db, atomic
from src.notifications import NotificationEmitter, get_emitter
from src.schemas import BookingRequestCreate, BookingStatusUpdate


router = APIRouter(prefix="/requests", tags=["requests"])


@router.post("")
async def create(
    body: BookingRequestCreate,
    db: AsyncSession = Depends(get_db),
    emitter: NotificationEmitter = Depends(get_emitter),
):
    """A client asks a professional for a booking."""
    async with atomic(db):
        booking = await create_request(
            db,
            emitter,
            client_id=body.clientId,
            professional_id=body.professionalId,
            service=body.service,
            date=body.date,
            time=body.time,
            urgency=body.urgency,
            message=body.message,
        )
    await emitter.flush_email()
    return {"success": True, "request": {"id": booking.id, "status": booking.status}}


@router.post("/update")
async def update_status(
    body: BookingStatusUpdate,
    db: AsyncSession = Depends(get_db),
    emitter: NotificationEmitter = Depends(get_emitter),
):
    """Change a request's status (pending, confirmed, declined, completed)."""
    async with atomic(db):
        await update_request_status(db, emitter, body.requestId, body.status)
    await emitter.flush_email()
    return {"success": True}


@router.get("/{professional_id}")
async def list_for_professional(
    professional_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Requests addressed to a professional, newest first."""
    return await list_requests_for_professional(db, professional_id)
