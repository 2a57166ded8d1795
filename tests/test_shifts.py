"""스케줄/시프트 API 테스트 — 스케줄, 템플릿, 배정, 복제, 근무 가능 여부.

Scheduling API tests — Schedules, templates, shift assignment capacity,
duplication with attachments and availability ownership.
"""

from datetime import datetime

from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from staffhub.models.notification import Notification
from tests.conftest import auth_header, make_shift, make_user, utc

SHIFT_BODY = {
    "title": "Night Shift",
    "job_name": "ICU",
    "start_time": "2026-04-01T19:00:00Z",
    "end_time": "2026-04-02T07:00:00Z",
    "max_assignees": 2,
}


class TestSchedules:
    async def test_scheduler_crud(self, client: AsyncClient, scheduler_token, staff_token):
        body = {"title": "April", "start_date": "2026-04-01", "end_date": "2026-04-30"}
        denied = await client.post("/api/schedules", json=body, headers=auth_header(staff_token))
        assert denied.status_code == 403

        created = await client.post("/api/schedules", json=body, headers=auth_header(scheduler_token))
        assert created.status_code == 201
        schedule_id = created.json()["id"]
        assert created.json()["status"] == "active"

        updated = await client.patch(
            f"/api/schedules/{schedule_id}", json={"status": "archived"}, headers=auth_header(scheduler_token)
        )
        assert updated.json()["status"] == "archived"

        listed = await client.get("/api/schedules", headers=auth_header(staff_token))
        assert [s["id"] for s in listed.json()] == [schedule_id]

        deleted = await client.delete(f"/api/schedules/{schedule_id}", headers=auth_header(scheduler_token))
        assert deleted.json()["message"] == "Schedule deleted"

    async def test_reversed_dates_rejected(self, client: AsyncClient, scheduler_token):
        res = await client.post(
            "/api/schedules",
            json={"title": "Bad", "start_date": "2026-04-30", "end_date": "2026-04-01"},
            headers=auth_header(scheduler_token),
        )
        assert res.status_code == 400

    async def test_template_time_format(self, client: AsyncClient, scheduler_token):
        ok = await client.post(
            "/api/shift-templates",
            json={"title": "Day", "start_time": "07:00", "end_time": "19:00"},
            headers=auth_header(scheduler_token),
        )
        assert ok.status_code == 201
        bad = await client.post(
            "/api/shift-templates",
            json={"title": "Day", "start_time": "7am", "end_time": "19:00"},
            headers=auth_header(scheduler_token),
        )
        assert bad.status_code == 400


class TestAssign:
    async def test_assign_until_full(
        self, client: AsyncClient, db: AsyncSession, staff_user, other_staff, manager_user, manager_token,
        scheduler_token,
    ):
        created = await client.post("/api/shifts", json=SHIFT_BODY, headers=auth_header(scheduler_token))
        assert created.status_code == 201
        shift_id = created.json()["id"]
        assert created.json()["status"] == "open"

        first = await client.post(
            f"/api/shifts/{shift_id}/assign", json={"user_id": str(staff_user.id)}, headers=auth_header(manager_token)
        )
        assert first.status_code == 201
        assert first.json()["status"] == "assigned"

        shift = await client.get(f"/api/shifts/{shift_id}", headers=auth_header(manager_token))
        assert shift.json()["status"] == "assigned"

        duplicate = await client.post(
            f"/api/shifts/{shift_id}/assign", json={"user_id": str(staff_user.id)}, headers=auth_header(manager_token)
        )
        assert duplicate.status_code == 409

        second = await client.post(
            f"/api/shifts/{shift_id}/assign", json={"user_id": str(other_staff.id)}, headers=auth_header(manager_token)
        )
        assert second.status_code == 201

        full = await client.post(
            f"/api/shifts/{shift_id}/assign", json={"user_id": str(manager_user.id)}, headers=auth_header(manager_token)
        )
        assert full.status_code == 400
        assert full.json()["detail"] == "Shift is full"

        notes = await db.execute(select(Notification).where(Notification.type == "shift_assigned"))
        assert {n.user_id for n in notes.scalars().all()} == {staff_user.id, other_staff.id}

    async def test_inactive_user_not_assignable(
        self, client: AsyncClient, db: AsyncSession, scheduler_token
    ):
        archived = await make_user(db, "gone", "Staff", status="archived")
        shift = await make_shift(db, utc(2026, 4, 1, 7))
        res = await client.post(
            f"/api/shifts/{shift.id}/assign", json={"user_id": str(archived.id)}, headers=auth_header(scheduler_token)
        )
        assert res.status_code == 400

    async def test_staff_cannot_assign(self, client: AsyncClient, db: AsyncSession, staff_user, staff_token):
        shift = await make_shift(db, utc(2026, 4, 1, 7))
        res = await client.post(
            f"/api/shifts/{shift.id}/assign", json={"user_id": str(staff_user.id)}, headers=auth_header(staff_token)
        )
        assert res.status_code == 403


class TestConfirm:
    async def test_only_assignee_confirms_once(
        self, client: AsyncClient, db: AsyncSession, staff_user, staff_token, other_token
    ):
        await make_shift(db, utc(2026, 4, 1, 7), assignee=staff_user)
        mine = await client.get("/api/shift-assignments", headers=auth_header(staff_token))
        assignment_id = mine.json()[0]["id"]

        others = await client.get("/api/shift-assignments", headers=auth_header(other_token))
        assert others.json() == []

        stolen = await client.post(f"/api/shift-assignments/{assignment_id}/confirm", headers=auth_header(other_token))
        assert stolen.status_code == 403

        confirmed = await client.post(f"/api/shift-assignments/{assignment_id}/confirm", headers=auth_header(staff_token))
        assert confirmed.json()["status"] == "accepted"
        assert confirmed.json()["accepted_at"] is not None

        again = await client.post(f"/api/shift-assignments/{assignment_id}/confirm", headers=auth_header(staff_token))
        assert again.status_code == 400


class TestDuplicate:
    async def test_copies_attachments_and_keeps_duration(
        self, client: AsyncClient, db: AsyncSession, staff_user, scheduler_token
    ):
        shift = await make_shift(db, utc(2026, 4, 1, 7), hours=12, assignee=staff_user, job_name="ER")
        await client.post(
            f"/api/shifts/{shift.id}/attachments",
            json={"file_name": "handoff.pdf", "file_url": "/api/files/handoff.pdf"},
            headers=auth_header(scheduler_token),
        )

        res = await client.post(
            f"/api/shifts/{shift.id}/duplicate",
            json={"start_time": "2026-04-08T07:00:00Z"},
            headers=auth_header(scheduler_token),
        )
        assert res.status_code == 201
        copy = res.json()
        assert copy["id"] != str(shift.id)
        assert copy["status"] == "open"
        assert copy["job_name"] == "ER"
        assert datetime.fromisoformat(copy["start_time"]) == utc(2026, 4, 8, 7)
        assert datetime.fromisoformat(copy["end_time"]) == utc(2026, 4, 8, 19)
        assert [a["file_name"] for a in copy["attachments"]] == ["handoff.pdf"]

        assignments = await client.get(
            "/api/shift-assignments", params={"shift_id": copy["id"]}, headers=auth_header(scheduler_token)
        )
        assert assignments.json() == []


class TestAvailability:
    async def test_owner_only_changes(
        self, client: AsyncClient, staff_user, staff_token, other_token, scheduler_token
    ):
        created = await client.post(
            "/api/user-availability",
            json={"date": "2026-04-03", "type": "unavailable", "notes": "Appointment"},
            headers=auth_header(staff_token),
        )
        assert created.status_code == 201
        row_id = created.json()["id"]
        assert created.json()["user_id"] == str(staff_user.id)

        foreign = await client.patch(
            f"/api/user-availability/{row_id}", json={"type": "preferred"}, headers=auth_header(other_token)
        )
        assert foreign.status_code == 403

        by_scheduler = await client.get(
            "/api/user-availability", params={"user_id": str(staff_user.id)}, headers=auth_header(scheduler_token)
        )
        assert [r["id"] for r in by_scheduler.json()] == [row_id]

        deleted = await client.delete(f"/api/user-availability/{row_id}", headers=auth_header(staff_token))
        assert deleted.json()["message"] == "Availability deleted"

    async def test_staff_cannot_set_for_others(self, client: AsyncClient, other_staff, staff_token):
        res = await client.post(
            "/api/user-availability",
            json={"user_id": str(other_staff.id), "date": "2026-04-03"},
            headers=auth_header(staff_token),
        )
        assert res.status_code == 403
