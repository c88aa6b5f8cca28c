"""
QuickJob - Conversation Registry

One conversation per (client, professional) pair. Each side has its own
deleted / unread / archived state; a side only sees conversations it has
not deleted.
"""

import logging
from typing import List, Optional
from sqlalchemy import select, or_, and_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from src.auth import get_account_by_id
from src.errors import NotFound, ValidationError, QuickJobError
from src.models.account import Account, AccountRole
from src.models.conversation import Conversation, Side
from src.timestamps import now_utc

logger = logging.getLogger(__name__)


class ConversationDeletedForBoth(QuickJobError):
    """Lookup hit a conversation both parties have deleted."""

    status_code = 409
    default_message = "deleted for both"


def validate_side(side: str) -> str:
    if side not in Side.ALL:
        raise ValidationError(f"Invalid role: {side}")
    return side


async def get_conversation_by_id(db: AsyncSession, conversation_id: int) -> Optional[Conversation]:
    result = await db.execute(
        select(Conversation).where(Conversation.id == conversation_id)
    )
    return result.scalar_one_or_none()


async def require_conversation(db: AsyncSession, conversation_id: int) -> Conversation:
    conversation = await get_conversation_by_id(db, conversation_id)
    if not conversation:
        raise NotFound("Conversation not found")
    return conversation


async def find_conversation(db: AsyncSession, professional_id: int, client_id: int) -> Optional[Conversation]:
    result = await db.execute(
        select(Conversation)
        .where(Conversation.professional_id == professional_id)
        .where(Conversation.client_id == client_id)
    )
    return result.scalar_one_or_none()


async def get_or_create_conversation(
    db: AsyncSession,
    professional_id: int,
    client_id: int,
) -> Conversation:
    """
    Return the pair's conversation, creating it if needed.

    A conversation deleted by both sides is not revived here; only a new
    message does that. Raises ConversationDeletedForBoth in that case.
    A conversation deleted by one side is returned as-is.

    Raises ValidationError unless the pair is one professional and one
    distinct client.
    """
    if professional_id == client_id:
        raise ValidationError("A conversation needs two different accounts")

    professional = await get_account_by_id(db, professional_id)
    client = await get_account_by_id(db, client_id)
    if not professional or not client:
        raise NotFound("Account not found")
    if professional.role != AccountRole.PROFESSIONAL:
        raise ValidationError("professional_id must belong to a professional account")
    if client.role != AccountRole.CLIENT:
        raise ValidationError("client_id must belong to a client account")

    conversation = await find_conversation(db, professional_id, client_id)
    if conversation:
        if conversation.deleted_for_both:
            raise ConversationDeletedForBoth()
        return conversation

    now = now_utc()
    conversation = Conversation(
        professional_id=professional_id,
        client_id=client_id,
        last_message="",
        created_at=now,
        updated_at=now,
    )
    db.add(conversation)
    try:
        await db.commit()
    except IntegrityError:
        # Another request created the pair first
        await db.rollback()
        conversation = await find_conversation(db, professional_id, client_id)
        if conversation is None:
            raise
        if conversation.deleted_for_both:
            raise ConversationDeletedForBoth()
        return conversation

    logger.info("Conversation %s created (client=%s professional=%s)", conversation.id, client_id, professional_id)
    return conversation


async def list_conversations_for_user(
    db: AsyncSession,
    user_id: int,
    default_avatar: str,
) -> List[dict]:
    """
    Conversations visible to a user, most recently updated first, with
    both parties' names and avatars.
    """
    client = aliased(Account)
    professional = aliased(Account)

    result = await db.execute(
        select(Conversation, client, professional)
        .join(client, Conversation.client_id == client.id)
        .join(professional, Conversation.professional_id == professional.id)
        .where(
            or_(
                and_(
                    Conversation.client_id == user_id,
                    Conversation.deleted_for_client.is_not(True),
                ),
                and_(
                    Conversation.professional_id == user_id,
                    Conversation.deleted_for_professional.is_not(True),
                ),
            )
        )
        .order_by(Conversation.updated_at.desc(), Conversation.id.desc())
    )

    conversations = []
    for conversation, client_account, professional_account in result.all():
        viewer = conversation.side(conversation.side_of(user_id))
        item = conversation.to_dict()
        item.update({
            "client_name": client_account.name,
            "client_avatar": client_account.avatar or default_avatar,
            "professional_name": professional_account.name,
            "professional_avatar": professional_account.avatar or default_avatar,
            "role": viewer.name,
            "unread": viewer.unread,
            "archived": viewer.archived,
        })
        conversations.append(item)
    return conversations


async def mark_read(db: AsyncSession, conversation_id: int, side: str) -> Conversation:
    """Clear one side's unread flag. The caller commits."""
    validate_side(side)
    conversation = await require_conversation(db, conversation_id)
    conversation.side(side).unread = False
    return conversation


async def set_archived(db: AsyncSession, conversation_id: int, side: str, archived: bool) -> Conversation:
    """Archive or unarchive for one side. Deletion and unread state are untouched."""
    validate_side(side)
    conversation = await require_conversation(db, conversation_id)
    conversation.side(side).archived = archived
    return conversation


async def soft_delete(db: AsyncSession, conversation_id: int, side: str) -> Conversation:
    """
    Hide the conversation from one side and record when.

    Messages are kept; the other side is unaffected. The caller commits.
    """
    validate_side(side)
    conversation = await require_conversation(db, conversation_id)
    state = conversation.side(side)
    state.deleted = True
    state.deleted_at = now_utc()
    logger.info("Conversation %s deleted for %s", conversation_id, side)
    return conversation
