"""
QuickJob - Message Routes
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.database import get_db, atomic
from src.messages import send_message, list_messages
from src.schemas import MessageCreate


router = APIRouter(prefix="/messages", tags=["messages"])


@router.post("")
async def send(
    body: MessageCreate,
    db: AsyncSession = Depends(get_db),
):
    """Send a message; revives the conversation for both sides."""
    async with atomic(db):
        message = await send_message(db, body.conversation_id, body.sender_id, body.message)
    return {"success": True, "message": message.to_dict()}


@router.get("/{conversation_id}/{user_id}")
async def messages_for_viewer(
    conversation_id: int,
    user_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Messages the viewer is allowed to see, oldest first."""
    messages = await list_messages(db, conversation_id, user_id)
    return [message.to_dict() for message in messages]
