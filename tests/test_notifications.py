"""
Tests for in-app notifications and the booking request flow that
produces them.
"""

from sqlalchemy import select

from src.models import BookingRequest, Notification, NotificationTab, RequestStatus
from src.notifications import NotificationEmitter


async def notifications_for(db, account_id):
    result = await db.execute(
        select(Notification).where(Notification.user_id == account_id).order_by(Notification.id)
    )
    return list(result.scalars().all())


# =============================================================================
# NOTIFICATIONS
# =============================================================================

class TestNotificationEndpoints:
    async def test_add_and_list(self, client, client_account):
        account_id = client_account.id
        for text in ("First", "Second"):
            response = await client.post("/notifications/add", json={
                "userId": account_id,
                "message": text,
                "targetTab": NotificationTab.MESSAGES,
            })
            assert response.status_code == 200

        response = await client.get(f"/notifications/{account_id}")
        data = response.json()
        assert [n["message"] for n in data] == ["Second", "First"]
        assert data[0]["targetTab"] == NotificationTab.MESSAGES
        assert data[0]["read"] is False

    async def test_add_unknown_account(self, client):
        response = await client.post("/notifications/add", json={"userId": 9999, "message": "Hi"})
        assert response.status_code == 404

    async def test_mark_one_read(self, client, db, emitter, client_account):
        first = await emitter.emit(client_account, "One", None)
        second = await emitter.emit(client_account, "Two", None)
        await db.commit()

        response = await client.post("/notifications/read", json={"id": first.id})
        assert response.status_code == 200
        assert first.is_read is True
        assert second.is_read is False

    async def test_mark_unknown_read(self, client):
        response = await client.post("/notifications/read", json={"id": 9999})
        assert response.status_code == 404

    async def test_mark_all_read(self, client, db, emitter, client_account, professional_account):
        client_id, pro_id = client_account.id, professional_account.id
        await emitter.emit(client_account, "One", None)
        await emitter.emit(client_account, "Two", None)
        await emitter.emit(professional_account, "Other", None)
        await db.commit()

        response = await client.post("/notifications/read-all", json={"userId": client_id})
        assert response.status_code == 200

        listing = (await client.get(f"/notifications/{client_id}")).json()
        assert all(n["read"] for n in listing)
        other = (await client.get(f"/notifications/{pro_id}")).json()
        assert other[0]["read"] is False

    async def test_delete(self, client, db, emitter, client_account):
        account_id = client_account.id
        notification = await emitter.emit(client_account, "Bye", None)
        await db.commit()
        notification_id = notification.id

        response = await client.delete(f"/notifications/{notification_id}")
        assert response.status_code == 200
        assert (await client.get(f"/notifications/{account_id}")).json() == []

        response = await client.delete(f"/notifications/{notification_id}")
        assert response.status_code == 404


class TestNotificationEmitter:
    async def test_emit_without_mailer_sends_nothing(self, db, client_account):
        emitter = NotificationEmitter(db)
        await emitter.emit(client_account, "Quiet", None)
        assert await emitter.flush_email() == 0

    async def test_emit_with_mailer_queues_email(self, db, mailer, client_account):
        emitter = NotificationEmitter(db, mailer)
        await emitter.emit(client_account, "Loud", NotificationTab.BOOKINGS)
        assert mailer.sent == []

        assert await emitter.flush_email() == 1
        assert mailer.sent[0]["to"] == client_account.email
        assert mailer.sent[0]["text"] == "Loud"


# =============================================================================
# BOOKING REQUESTS
# =============================================================================

class TestBookingRequests:
    async def create(self, client, client_id, professional_id, service="Geyser repair"):
        response = await client.post("/requests", json={
            "clientId": client_id,
            "professionalId": professional_id,
            "service": service,
            "date": "2026-11-02",
            "time": "09:30",
            "urgency": "high",
            "message": "Water everywhere",
        })
        assert response.status_code == 200
        return response.json()["request"]

    async def test_create_notifies_professional(self, client, db, client_account, professional_account):
        client_id, pro_id = client_account.id, professional_account.id
        request = await self.create(client, client_id, pro_id)
        assert request["status"] == RequestStatus.PENDING

        [notification] = await notifications_for(db, pro_id)
        assert notification.message == "New booking request from Carla Client for Geyser repair"
        assert notification.target_tab == NotificationTab.REQUESTS

    async def test_list_for_professional(self, client, client_account, professional_account):
        client_id, pro_id = client_account.id, professional_account.id
        first = await self.create(client, client_id, pro_id, "Geyser repair")
        second = await self.create(client, client_id, pro_id, "Tap replacement")

        response = await client.get(f"/requests/{pro_id}")
        data = response.json()
        assert [r["id"] for r in data] == [second["id"], first["id"]]
        assert data[0]["client"] == "Carla Client"
        assert data[0]["service"] == "Tap replacement"

    async def test_update_notifies_client(self, client, db, client_account, professional_account):
        client_id, pro_id = client_account.id, professional_account.id
        request = await self.create(client, client_id, pro_id)

        response = await client.post("/requests/update", json={
            "requestId": request["id"],
            "status": RequestStatus.CONFIRMED,
        })
        assert response.status_code == 200

        booking = await db.get(BookingRequest, request["id"])
        assert booking.status == RequestStatus.CONFIRMED
        [notification] = await notifications_for(db, client_id)
        assert notification.message == "Your booking request for Geyser repair is now confirmed"
        assert notification.target_tab == NotificationTab.BOOKINGS

    async def test_unchanged_status_is_silent(self, client, db, client_account, professional_account):
        client_id, pro_id = client_account.id, professional_account.id
        request = await self.create(client, client_id, pro_id)

        await client.post("/requests/update", json={"requestId": request["id"], "status": RequestStatus.PENDING})
        assert await notifications_for(db, client_id) == []

    async def test_invalid_status(self, client, client_account, professional_account):
        request = await self.create(client, client_account.id, professional_account.id)
        response = await client.post("/requests/update", json={"requestId": request["id"], "status": "maybe"})
        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Invalid status"}

    async def test_unknown_request(self, client):
        response = await client.post("/requests/update", json={"requestId": 9999, "status": RequestStatus.DECLINED})
        assert response.status_code == 404
