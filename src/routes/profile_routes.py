"""
QuickJob - Profile Routes
"""

from fastapi import APIRouter, Depends, Form, UploadFile, File
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import settings
from src.database import get_db, atomic
from src.profiles import (
    get_profile,
    set_profile_image,
    update_bio,
    update_profile,
    validate_image_kind,
)
from src.schemas import ProfileBioUpdate, ProfileUpdate
from src.uploads import discard_on_error, remove_stored_file, save_upload


router = APIRouter(tags=["profiles"])


@router.get("/profiles/{user_id}")
async def profile(
    user_id: int,
    db: AsyncSession = Depends(get_db),
):
    return await get_profile(db, user_id)


@router.put("/profiles/{user_id}")
async def put_bio(
    user_id: int,
    body: ProfileBioUpdate,
    db: AsyncSession = Depends(get_db),
):
    async with atomic(db):
        await update_bio(db, user_id, body.bio)
    return {"success": True, "message": "Bio updated successfully"}


@router.post("/profile/update")
async def post_profile(
    body: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
):
    async with atomic(db):
        await update_profile(
            db,
            body.userId,
            bio=body.bio,
            address=body.address,
            home=body.home,
            contact=body.contact,
            social_links=body.socialLinks,
        )
    return {"success": True}


@router.post("/upload/{kind}")
async def upload_image(
    kind: str,
    userId: int = Form(...),
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
):
    """Replace the profile picture or cover photo."""
    validate_image_kind(kind)
    file_path = await save_upload(file, settings.ALLOWED_IMAGE_EXTENSIONS)

    async with discard_on_error(file_path), atomic(db):
        previous = await set_profile_image(db, userId, kind, file_path)

    remove_stored_file(previous)
    return {"success": True, "filePath": file_path}
