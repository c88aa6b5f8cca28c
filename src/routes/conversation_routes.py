"""
QuickJob - Conversation Routes
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import settings
from src.conversations import (
    get_or_create_conversation,
    list_conversations_for_user,
    mark_read,
    set_archived,
    soft_delete,
)
from src.database import get_db, atomic
from src.models.conversation import Side
from src.schemas import ConversationCreate, ConversationRoleRequest


router = APIRouter(prefix="/conversations", tags=["conversations"])


@router.post("")
async def open_conversation(
    body: ConversationCreate,
    db: AsyncSession = Depends(get_db),
):
    """Find or start the conversation between a professional and a client."""
    conversation = await get_or_create_conversation(db, body.professional_id, body.client_id)
    return {"success": True, "conversation": conversation.to_dict()}


@router.get("/{user_id}")
async def conversations_for_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Conversations the user has not deleted, newest activity first."""
    return await list_conversations_for_user(db, user_id, settings.DEFAULT_AVATAR_URL)


@router.put("/{conversation_id}/mark-read")
async def mark_conversation_read(
    conversation_id: int,
    body: ConversationRoleRequest,
    db: AsyncSession = Depends(get_db),
):
    async with atomic(db):
        await mark_read(db, conversation_id, body.role)
    return {"success": True}


@router.put("/{conversation_id}/archive")
async def archive_conversation(
    conversation_id: int,
    body: ConversationRoleRequest,
    db: AsyncSession = Depends(get_db),
):
    async with atomic(db):
        await set_archived(db, conversation_id, body.role, True)
    return {"success": True}


@router.put("/{conversation_id}/unarchive")
async def unarchive_conversation(
    conversation_id: int,
    body: ConversationRoleRequest,
    db: AsyncSession = Depends(get_db),
):
    async with atomic(db):
        await set_archived(db, conversation_id, body.role, False)
    return {"success": True}


@router.delete("/{conversation_id}/client")
async def delete_for_client(
    conversation_id: int,
    db: AsyncSession = Depends(get_db),
):
    async with atomic(db):
        await soft_delete(db, conversation_id, Side.CLIENT)
    return {"success": True}


@router.delete("/{conversation_id}/professional")
async def delete_for_professional(
    conversation_id: int,
    db: AsyncSession = Depends(get_db),
):
    async with atomic(db):
        await soft_delete(db, conversation_id, Side.PROFESSIONAL)
    return {"success": True}
