"""
QuickJob - Booking Requests
"""

from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth import get_account_by_id
from src.errors import NotFound, ValidationError
from src.models.account import Account
from src.models.booking_request import BookingRequest, RequestStatus
from src.models.notification import NotificationTab
from src.notifications import NotificationEmitter


async def create_request(
    db: AsyncSession,
    emitter: NotificationEmitter,
    client_id: int,
    professional_id: int,
    service: str,
    date: str,
    time: str,
    urgency: Optional[str] = None,
    message: Optional[str] = None,
) -> BookingRequest:
    """Create a pending request and notify the professional. The caller commits."""
    client = await get_account_by_id(db, client_id)
    professional = await get_account_by_id(db, professional_id)
    if not client or not professional:
        raise NotFound("Account not found")

    booking = BookingRequest(
        client_id=client_id,
        professional_id=professional_id,
        service=service.strip(),
        date=date,
        time=time,
        urgency=urgency,
        message=message,
        status=RequestStatus.PENDING,
    )
    db.add(booking)
    await db.flush()

    await emitter.emit(
        professional,
        f"New booking request from {client.name} for {booking.service}",
        NotificationTab.REQUESTS,
    )
    return booking


async def list_requests_for_professional(db: AsyncSession, professional_id: int) -> List[dict]:
    """Requests addressed to a professional, newest first, with the client's name."""
    result = await db.execute(
        select(BookingRequest, Account.name)
        .join(Account, BookingRequest.client_id == Account.id)
        .where(BookingRequest.professional_id == professional_id)
        .order_by(BookingRequest.created_at.desc(), BookingRequest.id.desc())
    )
    return [
        {
            "id": booking.id,
            "service": booking.service,
            "date": booking.date,
            "time": booking.time,
            "urgency": booking.urgency,
            "message": booking.message,
            "status": booking.status,
            "created_at": booking.created_at.isoformat() if booking.created_at else None,
            "client": client_name,
        }
        for booking, client_name in result.all()
    ]


async def update_request_status(
    db: AsyncSession,
    emitter: NotificationEmitter,
    request_id: int,
    status: str,
) -> BookingRequest:
    """
    Move a request to a new status and tell the client.

    Only pending/confirmed/declined/completed are accepted. No
    notification is sent when the status does not change.
    """
    if status not in RequestStatus.ALL:
        raise ValidationError("Invalid status")

    result = await db.execute(
        select(BookingRequest).where(BookingRequest.id == request_id)
    )
    booking = result.scalar_one_or_none()
    if not booking:
        raise NotFound("Request not found")

    if booking.status == status:
        return booking

    booking.status = status
    client = await get_account_by_id(db, booking.client_id)
    if client:
        await emitter.emit(
            client,
            f"Your booking request for {booking.service} is now {status}",
            NotificationTab.BOOKINGS,
        )
    await db.flush()
    return booking
