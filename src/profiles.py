"""
QuickJob - Profiles

Profile details, profile picture and cover photo for an account. The
profile row is created lazily on first write; reads of an account without
one return empty defaults.
"""

import logging
from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.errors import ValidationError
from src.models.account import Account, AccountRole
from src.models.profile import Profile, ProfileImage
from src.ratings import rating_summary
from src.verification import require_account

logger = logging.getLogger(__name__)


def validate_image_kind(kind: str) -> str:
    if kind not in ProfileImage.ALL:
        raise ValidationError("Invalid upload type")
    return kind


async def get_profile_row(db: AsyncSession, user_id: int) -> Optional[Profile]:
    result = await db.execute(
        select(Profile).where(Profile.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def get_or_create_profile(db: AsyncSession, user_id: int) -> Profile:
    profile = await get_profile_row(db, user_id)
    if profile is None:
        profile = Profile(user_id=user_id, bio="", address="", home="", social_links=[])
        db.add(profile)
        await db.flush()
    return profile


async def get_profile(db: AsyncSession, user_id: int) -> dict:
    """Public profile for an account; professionals also get their rating summary."""
    account = await require_account(db, user_id)
    profile = await get_profile_row(db, user_id)

    data = {
        "user_id": account.id,
        "name": account.name,
        "role": account.role,
        "profession": account.profession,
        "contact": account.contact or "",
        "is_verified": account.is_verified,
        "bio": profile.bio if profile else "",
        "address": profile.address if profile else "",
        "home": profile.home if profile else "",
        "social_links": list(profile.social_links or []) if profile else [],
        "profile_picture": account.avatar,
        "cover_photo": profile.cover_photo if profile else None,
    }
    if account.role == AccountRole.PROFESSIONAL:
        data["rating"] = await rating_summary(db, account.id)
    return data


async def update_bio(db: AsyncSession, user_id: int, bio: str) -> Profile:
    await require_account(db, user_id)
    profile = await get_or_create_profile(db, user_id)
    profile.bio = bio
    return profile


async def update_profile(
    db: AsyncSession,
    user_id: int,
    bio: Optional[str] = None,
    address: Optional[str] = None,
    home: Optional[str] = None,
    contact: Optional[str] = None,
    social_links: Optional[List[str]] = None,
) -> Profile:
    """Overwrite the fields that were given; omitted fields keep their value."""
    account = await require_account(db, user_id)
    profile = await get_or_create_profile(db, user_id)

    if bio is not None:
        profile.bio = bio
    if address is not None:
        profile.address = address
    if home is not None:
        profile.home = home
    if social_links is not None:
        profile.social_links = list(social_links)
    if contact is not None:
        account.contact = contact.strip()
    return profile


async def set_profile_image(db: AsyncSession, user_id: int, kind: str, file_path: str) -> Optional[str]:
    """
    Point the profile picture (the account avatar) or cover photo at a
    stored file.

    Returns the path it replaced so the caller can remove that file once
    the change is committed.
    """
    validate_image_kind(kind)
    account = await require_account(db, user_id)

    if kind == ProfileImage.PROFILE_PICTURE:
        previous = account.avatar
        account.avatar = file_path
    else:
        profile = await get_or_create_profile(db, user_id)
        previous = profile.cover_photo
        profile.cover_photo = file_path

    logger.info("Account %s %s updated", user_id, kind)
    return previous
