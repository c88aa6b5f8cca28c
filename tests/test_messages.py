"""
Tests for the message ledger: revival on send, unread flags and
per-viewer history after a soft delete.
"""

import pytest
from sqlalchemy import select

from src.conversations import get_or_create_conversation, soft_delete
from src.errors import ValidationError
from src.messages import list_messages, send_message
from src.models import Message, Side


@pytest.fixture
def conversation_factory(db, professional_account, client_account):
    async def _make():
        conversation = await get_or_create_conversation(db, professional_account.id, client_account.id)
        return conversation
    return _make


async def bodies(db, conversation_id, viewer_id):
    return [m.body for m in await list_messages(db, conversation_id, viewer_id)]


class TestSendMessage:
    async def test_send_over_http(self, client, conversation_factory, client_account):
        conversation = await conversation_factory()
        response = await client.post("/messages", json={
            "conversation_id": conversation.id,
            "sender_id": client_account.id,
            "message": "Can you fix a leaking tap?",
        })
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["message"]["message"] == "Can you fix a leaking tap?"
        assert data["message"]["sender_id"] == client_account.id
        assert conversation.last_message == "Can you fix a leaking tap?"

    async def test_unread_flags_are_asymmetric(self, db, conversation_factory, client_account, professional_account):
        conversation = await conversation_factory()

        await send_message(db, conversation.id, client_account.id, "Hi")
        assert conversation.client.unread is False
        assert conversation.professional.unread is True

        await send_message(db, conversation.id, professional_account.id, "Hello")
        assert conversation.client.unread is True
        assert conversation.professional.unread is False

    async def test_send_revives_for_both(self, db, conversation_factory, client_account):
        conversation = await conversation_factory()
        await soft_delete(db, conversation.id, Side.CLIENT)
        await soft_delete(db, conversation.id, Side.PROFESSIONAL)

        await send_message(db, conversation.id, client_account.id, "Back again")
        assert conversation.client.deleted is False
        assert conversation.professional.deleted is False

    async def test_empty_message_rejected(self, db, conversation_factory, client_account):
        conversation = await conversation_factory()
        with pytest.raises(ValidationError):
            await send_message(db, conversation.id, client_account.id, "   ")

    async def test_non_participant_rejected(self, client, conversation_factory, make_account):
        conversation = await conversation_factory()
        conversation_id = conversation.id
        stranger = await make_account()
        response = await client.post("/messages", json={
            "conversation_id": conversation_id,
            "sender_id": stranger.id,
            "message": "Let me in",
        })
        assert response.status_code == 400
        assert response.json()["success"] is False

    async def test_unknown_conversation(self, client, client_account):
        response = await client.post("/messages", json={
            "conversation_id": 9999,
            "sender_id": client_account.id,
            "message": "Anyone?",
        })
        assert response.status_code == 404


class TestHistoryAfterDelete:
    async def test_other_side_reviving_hides_history_from_deleter(
        self, db, conversation_factory, client_account, professional_account,
    ):
        conversation = await conversation_factory()
        await send_message(db, conversation.id, client_account.id, "Old 1")
        await send_message(db, conversation.id, professional_account.id, "Old 2")
        await db.commit()

        await soft_delete(db, conversation.id, Side.CLIENT)
        await db.commit()

        await send_message(db, conversation.id, professional_account.id, "New")
        await db.commit()

        assert await bodies(db, conversation.id, client_account.id) == ["New"]
        assert await bodies(db, conversation.id, professional_account.id) == ["Old 1", "Old 2", "New"]
        assert conversation.client.deleted is False

    async def test_deleter_sending_purges_history(
        self, db, conversation_factory, client_account, professional_account,
    ):
        conversation = await conversation_factory()
        await send_message(db, conversation.id, client_account.id, "Old 1")
        await send_message(db, conversation.id, professional_account.id, "Old 2")
        await soft_delete(db, conversation.id, Side.CLIENT)
        await db.commit()

        await send_message(db, conversation.id, client_account.id, "Fresh start")
        await db.commit()

        result = await db.execute(
            select(Message.body).where(Message.conversation_id == conversation.id)
        )
        assert result.scalars().all() == ["Fresh start"]
        assert await bodies(db, conversation.id, professional_account.id) == ["Fresh start"]

    async def test_history_in_send_order(self, client, db, conversation_factory, client_account, professional_account):
        conversation = await conversation_factory()
        for sender, text in [
            (client_account.id, "One"),
            (professional_account.id, "Two"),
            (client_account.id, "Three"),
        ]:
            await client.post("/messages", json={
                "conversation_id": conversation.id, "sender_id": sender, "message": text,
            })

        response = await client.get(f"/messages/{conversation.id}/{professional_account.id}")
        assert response.status_code == 200
        assert [m["message"] for m in response.json()] == ["One", "Two", "Three"]

    async def test_non_participant_cannot_read(self, client, conversation_factory, make_account):
        conversation = await conversation_factory()
        conversation_id = conversation.id
        stranger = await make_account()
        response = await client.get(f"/messages/{conversation_id}/{stranger.id}")
        assert response.status_code == 400
