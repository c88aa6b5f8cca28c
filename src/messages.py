"""
QuickJob - Message Ledger

Sending a message revives a conversation for both sides and flips the
unread flags. Listing filters out whatever a viewer deleted.
"""

import logging
from typing import List
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from src.conversations import require_conversation
from src.errors import ValidationError
from src.models.conversation import Conversation, Side
from src.models.message import Message
from src.timestamps import now_utc

logger = logging.getLogger(__name__)


def resolve_side(conversation: Conversation, account_id: int) -> str:
    side = conversation.side_of(account_id)
    if side is None:
        raise ValidationError("Account is not a participant in this conversation")
    return side


async def send_message(
    db: AsyncSession,
    conversation_id: int,
    sender_id: int,
    body: str,
) -> Message:
    """
    Append a message and update the conversation.

    If the sender had deleted the conversation, its previous messages are
    purged first so the revived thread starts empty. The caller runs this
    inside one transaction.
    """
    if not body or not body.strip():
        raise ValidationError("Message cannot be empty")

    conversation = await require_conversation(db, conversation_id)
    sender_side = resolve_side(conversation, sender_id)
    sender = conversation.side(sender_side)
    recipient = conversation.side(Side.other(sender_side))

    if sender.deleted:
        result = await db.execute(
            delete(Message).where(Message.conversation_id == conversation_id)
        )
        logger.info(
            "Conversation %s revived by %s, purged %s earlier messages",
            conversation_id, sender_side, result.rowcount,
        )

    now = now_utc()
    message = Message(
        conversation_id=conversation_id,
        sender_id=sender_id,
        body=body,
        created_at=now,
    )
    db.add(message)

    conversation.last_message = body
    conversation.updated_at = now
    sender.deleted = False
    recipient.deleted = False
    sender.unread = False
    recipient.unread = True

    await db.flush()
    return message


async def list_messages(db: AsyncSession, conversation_id: int, viewer_id: int) -> List[Message]:
    """
    Messages in send order, hiding anything at or before the viewer's
    last delete of this conversation.
    """
    conversation = await require_conversation(db, conversation_id)
    viewer = conversation.side(resolve_side(conversation, viewer_id))

    query = (
        select(Message)
        .where(Message.conversation_id == conversation_id)
        .order_by(Message.created_at.asc(), Message.id.asc())
    )
    if viewer.deleted_at is not None:
        query = query.where(Message.created_at > viewer.deleted_at)

    result = await db.execute(query)
    return list(result.scalars().all())
