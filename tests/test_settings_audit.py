"""설정/감사 로그 API 테스트.

Settings and audit log API tests — Runtime settings override config
defaults; audit logs are readable by Owner/Admin only.
"""

from datetime import datetime, timedelta, timezone

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from tests.conftest import auth_header, make_entry


class TestSettings:
    async def test_put_then_get(self, client: AsyncClient, admin_token):
        put = await client.put(
            "/api/settings/overtime_weekly_hours", json={"value": 36}, headers=auth_header(admin_token)
        )
        assert put.status_code == 200
        assert put.json()["value"] == 36

        got = await client.get("/api/settings/overtime_weekly_hours", headers=auth_header(admin_token))
        assert got.json()["value"] == 36

        listed = await client.get("/api/settings", headers=auth_header(admin_token))
        assert [s["key"] for s in listed.json()] == ["overtime_weekly_hours"]

    async def test_missing_key(self, client: AsyncClient, admin_token):
        res = await client.get("/api/settings/nope", headers=auth_header(admin_token))
        assert res.status_code == 404

    async def test_manager_cannot_change(self, client: AsyncClient, manager_token):
        res = await client.put(
            "/api/settings/require_clock_out_photos", json={"value": False}, headers=auth_header(manager_token)
        )
        assert res.status_code == 403

    async def test_auto_clock_out_uses_setting(
        self, client: AsyncClient, db: AsyncSession, staff_user, admin_token
    ):
        started = datetime.now(timezone.utc) - timedelta(hours=3)
        entry = await make_entry(db, staff_user, started)
        await client.put(
            "/api/settings/auto_clock_out_max_hours", json={"value": 2}, headers=auth_header(admin_token)
        )

        res = await client.post("/api/time/auto-clock-out", headers=auth_header(admin_token))
        assert res.json()["count"] == 1

        await db.refresh(entry)
        assert entry.status == "auto-clocked-out"
        assert entry.clock_out == entry.clock_in + timedelta(hours=2)


class TestAuditLogs:
    async def test_filters_and_permissions(
        self, client: AsyncClient, admin_user, admin_token, manager_token
    ):
        await client.put("/api/settings/a", json={"value": 1}, headers=auth_header(admin_token))
        await client.put("/api/settings/b", json={"value": 2}, headers=auth_header(admin_token))

        denied = await client.get("/api/audit-logs", headers=auth_header(manager_token))
        assert denied.status_code == 403

        res = await client.get(
            "/api/audit-logs",
            params={"resource_type": "setting", "user_id": str(admin_user.id)},
            headers=auth_header(admin_token),
        )
        assert res.status_code == 200
        assert {log["resource_id"] for log in res.json()} == {"a", "b"}
        assert all(log["action"] == "update" for log in res.json())

        limited = await client.get("/api/audit-logs", params={"limit": 1}, headers=auth_header(admin_token))
        assert len(limited.json()) == 1

        too_many = await client.get("/api/audit-logs", params={"limit": 5000}, headers=auth_header(admin_token))
        assert too_many.status_code == 400
