"""
QuickJob - Ratings

Clients rate professionals from one to five stars.
"""

from typing import List, Optional
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth import get_account_by_id
from src.errors import NotFound, ValidationError
from src.models.account import Account, AccountRole
from src.models.rating import Rating

MIN_STARS = 1
MAX_STARS = 5


async def add_rating(
    db: AsyncSession,
    professional_id: int,
    client_id: int,
    stars: int,
    comment: Optional[str] = None,
) -> Rating:
    """Record a rating. The caller commits."""
    if not MIN_STARS <= stars <= MAX_STARS:
        raise ValidationError(f"Stars must be between {MIN_STARS} and {MAX_STARS}")

    professional = await get_account_by_id(db, professional_id)
    client = await get_account_by_id(db, client_id)
    if not professional or not client:
        raise NotFound("Account not found")
    if professional.role != AccountRole.PROFESSIONAL:
        raise ValidationError("Only professionals can be rated")
    if client.role != AccountRole.CLIENT:
        raise ValidationError("Only clients can leave ratings")

    rating = Rating(
        professional_id=professional_id,
        client_id=client_id,
        stars=stars,
        comment=comment.strip() if comment else None,
    )
    db.add(rating)
    await db.flush()
    return rating


async def list_ratings(db: AsyncSession, professional_id: int) -> List[dict]:
    """Ratings for a professional, newest first, with the client's name."""
    result = await db.execute(
        select(Rating, Account.name)
        .join(Account, Rating.client_id == Account.id)
        .where(Rating.professional_id == professional_id)
        .order_by(Rating.created_at.desc(), Rating.id.desc())
    )
    return [
        {
            "id": rating.id,
            "stars": rating.stars,
            "comment": rating.comment,
            "created_at": rating.created_at.isoformat() if rating.created_at else None,
            "client_name": client_name,
        }
        for rating, client_name in result.all()
    ]


async def rating_summary(db: AsyncSession, professional_id: int) -> dict:
    result = await db.execute(
        select(func.count(Rating.id), func.avg(Rating.stars))
        .where(Rating.professional_id == professional_id)
    )
    count, average = result.one()
    return {
        "count": count,
        "average": round(float(average), 2) if average is not None else None,
    }
