"""알림 API 테스트 — 목록, 읽지 않은 수, 읽음 처리.

Notification API tests — Users only ever see and mark their own.
"""

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from staffhub.services.notification_service import notification_service
from tests.conftest import auth_header


class TestNotifications:
    async def test_list_and_unread_count(
        self, client: AsyncClient, db: AsyncSession, staff_user, other_staff, staff_token
    ):
        for i in range(3):
            await notification_service.notify(db, staff_user.id, "shift_assigned", f"Shift {i}")
        await notification_service.notify(db, other_staff.id, "shift_assigned", "Not yours")

        res = await client.get("/api/notifications", params={"per_page": 2}, headers=auth_header(staff_token))
        data = res.json()
        assert data["total"] == 3
        assert len(data["items"]) == 2

        count = await client.get("/api/notifications/unread-count", headers=auth_header(staff_token))
        assert count.json() == {"unread_count": 3}

    async def test_mark_read(self, client: AsyncClient, db: AsyncSession, staff_user, staff_token, other_token):
        note = await notification_service.notify(db, staff_user.id, "document_approved", "Approved")

        foreign = await client.patch(f"/api/notifications/{note.id}/read", headers=auth_header(other_token))
        assert foreign.status_code == 404

        res = await client.patch(f"/api/notifications/{note.id}/read", headers=auth_header(staff_token))
        assert res.status_code == 200

        count = await client.get("/api/notifications/unread-count", headers=auth_header(staff_token))
        assert count.json() == {"unread_count": 0}

    async def test_mark_all_read(self, client: AsyncClient, db: AsyncSession, staff_user, staff_token):
        await notification_service.notify(db, staff_user.id, "timesheet_approved", "One")
        await notification_service.notify(db, staff_user.id, "timesheet_rejected", "Two")

        res = await client.patch("/api/notifications/read-all", headers=auth_header(staff_token))
        assert res.json()["message"] == "2 notifications marked as read"
