"""
QuickJob - Rating Routes
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.database import get_db, atomic
from src.ratings import add_rating, list_ratings
from src.schemas import RatingCreate


router = APIRouter(prefix="/ratings", tags=["ratings"])


@router.post("/add")
async def add(
    body: RatingCreate,
    db: AsyncSession = Depends(get_db),
):
    """A client rates a professional."""
    async with atomic(db):
        rating = await add_rating(
            db,
            professional_id=body.professionalId,
            client_id=body.clientId,
            stars=body.stars,
            comment=body.comment,
        )
    return {"success": True, "rating": {"id": rating.id, "stars": rating.stars}}


@router.get("/{professional_id}")
async def ratings_for_professional(
    professional_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Ratings for a professional, newest first."""
    return await list_ratings(db, professional_id)
