"""
QuickJob - Credential Routes
"""

from typing import Optional

from fastapi import APIRouter, Depends, Form, UploadFile, File
from sqlalchemy.ext.asyncio import AsyncSession

from src.credentials import create_credential, list_credentials, remove_credential
from src.database import get_db, atomic
from src.notifications import NotificationEmitter, get_emitter
from src.uploads import discard_on_error, save_upload


router = APIRouter(prefix="/credentials", tags=["credentials"])


@router.post("/upload")
async def upload(
    userId: int = Form(...),
    name: Optional[str] = Form(None),
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    emitter: NotificationEmitter = Depends(get_emitter),
):
    """Upload a credential document for review."""
    file_path = await save_upload(file)
    async with discard_on_error(file_path), atomic(db):
        credential = await create_credential(db, emitter, userId, file_path, name)
    await emitter.flush_email()
    return {"success": True, "credential": credential.to_dict()}


@router.get("/{user_id}")
async def list_for_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Credentials for an account, newest first."""
    credentials = await list_credentials(db, user_id)
    return [credential.to_dict() for credential in credentials]


@router.delete("/{credential_id}")
async def delete(
    credential_id: int,
    db: AsyncSession = Depends(get_db),
    emitter: NotificationEmitter = Depends(get_emitter),
):
    """Delete a credential; the owner's verification is recomputed."""
    async with atomic(db):
        await remove_credential(db, emitter, credential_id)
    await emitter.flush_email()
    return {"success": True, "message": "Credential deleted"}
