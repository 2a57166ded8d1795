"""근태 API 테스트 — 출퇴근, 자동 퇴근, 수정/승인/반려, 잠금.

Time entry API tests — Clock-in/out, auto clock-out, the two edit paths,
approve/reject and locked entries.
"""

from datetime import datetime, time, timedelta, timezone
from decimal import Decimal

from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from staffhub.models.audit_log import AuditLog
from staffhub.models.notification import Notification
from staffhub.models.time_entry import TimeEntry
from tests.conftest import auth_header, make_entry, make_shift, make_user, make_token, utc

CLOCK_IN_URL = "/api/time/clock-in"
CLOCK_OUT_URL = "/api/time/clock-out"
ENTRIES_URL = "/api/time/entries"


def parse(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class TestClockIn:
    """출근 테스트."""

    async def test_clock_in_creates_active_entry(self, client: AsyncClient, staff_token):
        res = await client.post(CLOCK_IN_URL, json={"location": "Main campus"}, headers=auth_header(staff_token))
        assert res.status_code == 201
        data = res.json()
        assert data["status"] == "active"
        assert data["approval_status"] == "approved"
        assert data["clock_out"] is None
        assert data["hours_worked"] is None
        assert Decimal(data["hourly_rate"]) == Decimal("25.00")

    async def test_clock_in_twice_rejected(self, client: AsyncClient, staff_token):
        await client.post(CLOCK_IN_URL, json={}, headers=auth_header(staff_token))
        res = await client.post(CLOCK_IN_URL, json={}, headers=auth_header(staff_token))
        assert res.status_code == 400
        assert res.json()["detail"] == "Already clocked in"

    async def test_clock_in_unknown_shift(self, client: AsyncClient, staff_token):
        res = await client.post(
            CLOCK_IN_URL,
            json={"shift_id": "00000000-0000-0000-0000-000000000001"},
            headers=auth_header(staff_token),
        )
        assert res.status_code == 404

    async def test_clock_in_detects_todays_shift_and_job_rate(self, client: AsyncClient, db: AsyncSession):
        """오늘 배정된 시프트 자동 탐지 — 프로그램 시급 적용."""
        nurse = await make_user(db, "rn1", "Staff", job_rates={"Vitas Central": "40.00"})
        today = datetime.now(timezone.utc).date()
        start = datetime.combine(today, time(12, 0), tzinfo=timezone.utc)
        shift = await make_shift(db, start, assignee=nurse, program="Vitas Central", job_name="Hospice")

        res = await client.post(CLOCK_IN_URL, json={}, headers=auth_header(make_token(nurse)))
        assert res.status_code == 201
        data = res.json()
        assert data["shift_id"] == str(shift.id)
        assert data["program_name"] == "Vitas Central"
        assert data["job_name"] == "Hospice"
        assert Decimal(data["hourly_rate"]) == Decimal("40.00")

    async def test_clock_in_programless_shift_uses_job(self, client: AsyncClient, db: AsyncSession):
        """프로그램 없는 시프트 — 직무명과 직무 시급 사용."""
        nurse = await make_user(db, "lpn1", "Staff", job_rates={"Wound Care": "33.00"})
        today = datetime.now(timezone.utc).date()
        start = datetime.combine(today, time(12, 0), tzinfo=timezone.utc)
        shift = await make_shift(db, start, assignee=nurse, job_name="Wound Care")

        res = await client.post(CLOCK_IN_URL, json={}, headers=auth_header(make_token(nurse)))
        assert res.status_code == 201
        data = res.json()
        assert data["shift_id"] == str(shift.id)
        assert data["program_name"] is None
        assert data["job_name"] == "Wound Care"
        assert Decimal(data["hourly_rate"]) == Decimal("33.00")

    async def test_clock_in_without_assignment_uses_default_rate(self, client: AsyncClient, staff_token):
        res = await client.post(CLOCK_IN_URL, json={}, headers=auth_header(staff_token))
        assert res.status_code == 201
        assert res.json()["shift_id"] is None
        assert res.json()["job_name"] is None
        assert Decimal(res.json()["hourly_rate"]) == Decimal("25.00")

    async def test_clock_in_requires_auth(self, client: AsyncClient):
        res = await client.post(CLOCK_IN_URL, json={})
        assert res.status_code == 401


class TestClockOut:
    """퇴근 테스트."""

    async def test_clock_out_without_active_entry(self, client: AsyncClient, staff_token):
        res = await client.post(CLOCK_OUT_URL, json={}, headers=auth_header(staff_token))
        assert res.status_code == 400
        assert res.json()["detail"] == "Not clocked in"

    async def test_clock_out_requires_photos(self, client: AsyncClient, staff_token):
        await client.post(CLOCK_IN_URL, json={}, headers=auth_header(staff_token))
        res = await client.post(CLOCK_OUT_URL, json={}, headers=auth_header(staff_token))
        assert res.status_code == 400
        assert res.json()["detail"] == "Shift note photos are required to clock out"

    async def test_clock_out_completes_entry(self, client: AsyncClient, staff_token):
        await client.post(CLOCK_IN_URL, json={}, headers=auth_header(staff_token))
        res = await client.post(
            CLOCK_OUT_URL,
            json={
                "shift_note_attachments": ["0123456789abcdef0123456789abcdef.jpg"],
                "relieving_nurse_signature": "J. Doe",
            },
            headers=auth_header(staff_token),
        )
        assert res.status_code == 200
        data = res.json()
        assert data["status"] == "completed"
        assert data["clock_out"] is not None
        assert data["relieving_nurse_signature"] == "J. Doe"

        active = await client.get("/api/time/active", headers=auth_header(staff_token))
        assert active.status_code == 200
        assert active.json() is None

    async def test_photo_exempt_program(self, client: AsyncClient, db: AsyncSession, staff_user, staff_token):
        """AdventHealth IPU 시프트는 사진 면제."""
        await make_entry(
            db, staff_user, datetime.now(timezone.utc) - timedelta(hours=2),
            program_name="AdventHealth IPU",
        )
        res = await client.post(CLOCK_OUT_URL, json={}, headers=auth_header(staff_token))
        assert res.status_code == 200
        assert res.json()["status"] == "completed"

    async def test_photo_requirement_disabled_by_setting(
        self, client: AsyncClient, owner_token, staff_token
    ):
        res = await client.put(
            "/api/settings/require_clock_out_photos",
            json={"value": False},
            headers=auth_header(owner_token),
        )
        assert res.status_code == 200

        await client.post(CLOCK_IN_URL, json={}, headers=auth_header(staff_token))
        res = await client.post(CLOCK_OUT_URL, json={}, headers=auth_header(staff_token))
        assert res.status_code == 200


class TestAutoClockOut:
    """자동 퇴근 테스트."""

    async def test_closes_stale_entries(self, client: AsyncClient, db: AsyncSession, staff_user, admin_token):
        clock_in = datetime.now(timezone.utc) - timedelta(hours=20)
        entry = await make_entry(db, staff_user, clock_in)

        res = await client.post("/api/time/auto-clock-out", json={}, headers=auth_header(admin_token))
        assert res.status_code == 200
        data = res.json()
        assert data["count"] == 1
        closed = data["entries"][0]
        assert closed["id"] == str(entry.id)
        assert closed["status"] == "auto-clocked-out"
        assert parse(closed["clock_out"]) - parse(closed["clock_in"]) == timedelta(hours=14)

        again = await client.post("/api/time/auto-clock-out", headers=auth_header(admin_token))
        assert again.json()["count"] == 0

    async def test_custom_max_hours_and_locked_skip(
        self, client: AsyncClient, db: AsyncSession, staff_user, other_staff, admin_token
    ):
        now = datetime.now(timezone.utc)
        await make_entry(db, staff_user, now - timedelta(hours=5))
        await make_entry(db, other_staff, now - timedelta(hours=5), locked=True)
        fresh = await make_user(db, "fresh", "Staff")
        await make_entry(db, fresh, now - timedelta(hours=1))

        res = await client.post(
            "/api/time/auto-clock-out", json={"max_hours": 4}, headers=auth_header(admin_token)
        )
        assert res.status_code == 200
        data = res.json()
        assert data["count"] == 1
        assert data["entries"][0]["user_id"] == str(staff_user.id)

    async def test_staff_cannot_trigger(self, client: AsyncClient, staff_token):
        res = await client.post("/api/time/auto-clock-out", json={}, headers=auth_header(staff_token))
        assert res.status_code == 403


class TestEdits:
    """근태 수정 테스트 — 관리자 직접 수정과 본인 수정."""

    async def test_self_edit_goes_pending_and_notifies_admins(
        self, client: AsyncClient, db: AsyncSession, staff_user, staff_token, owner_user, admin_user
    ):
        entry = await make_entry(db, staff_user, utc(2026, 3, 2, 8), utc(2026, 3, 2, 16))

        res = await client.patch(
            f"{ENTRIES_URL}/{entry.id}",
            json={"clock_in": "2026-03-02T07:30:00Z"},
            headers=auth_header(staff_token),
        )
        assert res.status_code == 200
        data = res.json()
        assert data["approval_status"] == "pending"
        assert parse(data["clock_in"]) == utc(2026, 3, 2, 7, 30)
        assert parse(data["original_clock_in"]) == utc(2026, 3, 2, 8)
        assert parse(data["original_clock_out"]) == utc(2026, 3, 2, 16)

        result = await db.execute(
            select(Notification).where(Notification.type == "time_entry_edit_request")
        )
        recipients = {n.user_id for n in result.scalars().all()}
        assert recipients == {owner_user.id, admin_user.id}

    async def test_second_self_edit_keeps_single_request_and_originals(
        self, client: AsyncClient, db: AsyncSession, staff_user, staff_token, admin_user
    ):
        entry = await make_entry(db, staff_user, utc(2026, 3, 2, 8), utc(2026, 3, 2, 16))
        url = f"{ENTRIES_URL}/{entry.id}"
        await client.patch(url, json={"clock_in": "2026-03-02T07:30:00Z"}, headers=auth_header(staff_token))
        res = await client.patch(url, json={"clock_out": "2026-03-02T17:00:00Z"}, headers=auth_header(staff_token))
        assert res.status_code == 200
        assert parse(res.json()["original_clock_in"]) == utc(2026, 3, 2, 8)
        assert parse(res.json()["original_clock_out"]) == utc(2026, 3, 2, 16)

        result = await db.execute(
            select(Notification).where(
                Notification.type == "time_entry_edit_request",
                Notification.reference_id == entry.id,
            )
        )
        assert len(result.scalars().all()) == 1

    async def test_notes_only_self_edit_stays_approved(
        self, client: AsyncClient, db: AsyncSession, staff_user, staff_token
    ):
        entry = await make_entry(db, staff_user, utc(2026, 3, 2, 8), utc(2026, 3, 2, 16))
        res = await client.patch(
            f"{ENTRIES_URL}/{entry.id}", json={"notes": "covered room 4"}, headers=auth_header(staff_token)
        )
        assert res.status_code == 200
        assert res.json()["approval_status"] == "approved"
        assert res.json()["original_clock_in"] is None

    async def test_admin_edit_applies_directly(
        self, client: AsyncClient, db: AsyncSession, staff_user, admin_token
    ):
        entry = await make_entry(db, staff_user, utc(2026, 3, 2, 8), utc(2026, 3, 2, 16))
        res = await client.patch(
            f"{ENTRIES_URL}/{entry.id}",
            json={"clock_out": "2026-03-02T18:00:00Z", "hourly_rate": "31.50"},
            headers=auth_header(admin_token),
        )
        assert res.status_code == 200
        data = res.json()
        assert data["approval_status"] == "approved"
        assert data["original_clock_in"] is None
        assert Decimal(data["hourly_rate"]) == Decimal("31.50")
        assert data["hours_worked"] == 10.0

        logs = await db.execute(select(AuditLog).where(AuditLog.resource_id == str(entry.id)))
        log = logs.scalars().one()
        assert log.action == "update"
        assert "before" in log.details and "changes" in log.details

    async def test_staff_cannot_send_admin_fields(
        self, client: AsyncClient, db: AsyncSession, staff_user, staff_token
    ):
        entry = await make_entry(db, staff_user, utc(2026, 3, 2, 8), utc(2026, 3, 2, 16))
        res = await client.patch(
            f"{ENTRIES_URL}/{entry.id}", json={"hourly_rate": "99.00"}, headers=auth_header(staff_token)
        )
        assert res.status_code == 403
        assert "hourly_rate" in res.json()["detail"]

    async def test_staff_cannot_edit_others_entry(
        self, client: AsyncClient, db: AsyncSession, other_staff, staff_token
    ):
        entry = await make_entry(db, other_staff, utc(2026, 3, 2, 8), utc(2026, 3, 2, 16))
        res = await client.patch(
            f"{ENTRIES_URL}/{entry.id}", json={"notes": "x"}, headers=auth_header(staff_token)
        )
        assert res.status_code == 403

    async def test_clock_out_before_clock_in_rejected(
        self, client: AsyncClient, db: AsyncSession, staff_user, admin_token
    ):
        entry = await make_entry(db, staff_user, utc(2026, 3, 2, 8), utc(2026, 3, 2, 16))
        res = await client.patch(
            f"{ENTRIES_URL}/{entry.id}",
            json={"clock_out": "2026-03-02T07:00:00Z"},
            headers=auth_header(admin_token),
        )
        assert res.status_code == 400

    async def test_self_edit_audit_records_applied_changes(
        self, client: AsyncClient, db: AsyncSession, staff_user, staff_token
    ):
        """감사 기록에는 실제 저장된 값 — 강제된 pending과 원본 포함."""
        entry = await make_entry(db, staff_user, utc(2026, 3, 2, 8), utc(2026, 3, 2, 16))
        res = await client.patch(
            f"{ENTRIES_URL}/{entry.id}",
            json={"clock_in": "2026-03-02T07:00:00Z"},
            headers=auth_header(staff_token),
        )
        assert res.status_code == 200

        logs = await db.execute(select(AuditLog).where(AuditLog.resource_id == str(entry.id)))
        changes = logs.scalars().one().details["changes"]
        assert changes["approval_status"] == "pending"
        assert changes["rejection_reason"] is None
        assert parse(changes["original_clock_in"]) == utc(2026, 3, 2, 8)
        assert parse(changes["original_clock_out"]) == utc(2026, 3, 2, 16)

    async def test_self_edit_of_clock_out_while_active_rejected(
        self, client: AsyncClient, db: AsyncSession, staff_user, staff_token
    ):
        entry = await make_entry(db, staff_user, utc(2026, 3, 3, 8))
        res = await client.patch(
            f"{ENTRIES_URL}/{entry.id}",
            json={"clock_out": "2026-03-03T12:00:00Z"},
            headers=auth_header(staff_token),
        )
        assert res.status_code == 400
        await db.refresh(entry)
        assert entry.clock_out is None
        assert entry.approval_status == "approved"

    async def test_self_edit_cannot_clear_clock_out(
        self, client: AsyncClient, db: AsyncSession, staff_user, staff_token
    ):
        entry = await make_entry(db, staff_user, utc(2026, 3, 2, 8), utc(2026, 3, 2, 16))
        res = await client.patch(
            f"{ENTRIES_URL}/{entry.id}", json={"clock_out": None}, headers=auth_header(staff_token)
        )
        assert res.status_code == 400


class TestAdminTransitions:
    """관리자 수정의 상태 전이 검증."""

    async def test_reopen_refused_while_user_has_active_entry(
        self, client: AsyncClient, db: AsyncSession, staff_user, admin_token
    ):
        await make_entry(db, staff_user, utc(2026, 3, 3, 8))
        done = await make_entry(db, staff_user, utc(2026, 3, 2, 8), utc(2026, 3, 2, 16))

        res = await client.patch(
            f"{ENTRIES_URL}/{done.id}", json={"status": "active"}, headers=auth_header(admin_token)
        )
        assert res.status_code == 400
        cleared = await client.patch(
            f"{ENTRIES_URL}/{done.id}",
            json={"status": "active", "clock_out": None},
            headers=auth_header(admin_token),
        )
        assert cleared.status_code == 400
        assert cleared.json()["detail"] == "User already has an active time entry"

        result = await db.execute(
            select(TimeEntry).where(TimeEntry.user_id == staff_user.id, TimeEntry.status == "active")
        )
        assert len(result.scalars().all()) == 1

    async def test_active_status_requires_clearing_clock_out(
        self, client: AsyncClient, db: AsyncSession, staff_user, admin_token
    ):
        entry = await make_entry(db, staff_user, utc(2026, 3, 2, 8), utc(2026, 3, 2, 16))
        url = f"{ENTRIES_URL}/{entry.id}"

        res = await client.patch(url, json={"status": "active"}, headers=auth_header(admin_token))
        assert res.status_code == 400
        assert res.json()["detail"] == "An active time entry cannot have clock_out"

        reopened = await client.patch(url, json={"clock_out": None}, headers=auth_header(admin_token))
        assert reopened.status_code == 200
        assert reopened.json()["status"] == "active"
        assert reopened.json()["clock_out"] is None

    async def test_setting_clock_out_completes_active_entry(
        self, client: AsyncClient, db: AsyncSession, staff_user, admin_token
    ):
        entry = await make_entry(db, staff_user, utc(2026, 3, 3, 8))
        res = await client.patch(
            f"{ENTRIES_URL}/{entry.id}",
            json={"clock_out": "2026-03-03T16:00:00Z"},
            headers=auth_header(admin_token),
        )
        assert res.status_code == 200
        assert res.json()["status"] == "completed"
        assert res.json()["hours_worked"] == 8.0

    async def test_auto_clocked_out_cannot_be_set_by_hand(
        self, client: AsyncClient, db: AsyncSession, staff_user, admin_token
    ):
        entry = await make_entry(db, staff_user, utc(2026, 3, 3, 8))
        res = await client.patch(
            f"{ENTRIES_URL}/{entry.id}",
            json={"status": "auto-clocked-out", "clock_out": "2026-03-03T22:00:00Z"},
            headers=auth_header(admin_token),
        )
        assert res.status_code == 400
        assert res.json()["detail"] == "Cannot set auto-clocked-out on time entry in status 'active'"

    async def test_approval_change_follows_transition_table(
        self, client: AsyncClient, db: AsyncSession, staff_user, admin_token
    ):
        approved = await make_entry(db, staff_user, utc(2026, 3, 2, 8), utc(2026, 3, 2, 16))
        res = await client.patch(
            f"{ENTRIES_URL}/{approved.id}", json={"approval_status": "rejected"}, headers=auth_header(admin_token)
        )
        assert res.status_code == 400
        assert res.json()["detail"] == "Cannot reject time entry edit in status 'approved'"

        pending_only = await client.patch(
            f"{ENTRIES_URL}/{approved.id}", json={"approval_status": "pending"}, headers=auth_header(admin_token)
        )
        assert pending_only.status_code == 400

    async def test_admin_approves_pending_edit_by_patch(
        self, client: AsyncClient, db: AsyncSession, staff_user, staff_token, admin_token
    ):
        entry = await make_entry(db, staff_user, utc(2026, 3, 2, 8), utc(2026, 3, 2, 16))
        url = f"{ENTRIES_URL}/{entry.id}"
        await client.patch(url, json={"clock_in": "2026-03-02T07:00:00Z"}, headers=auth_header(staff_token))

        res = await client.patch(url, json={"approval_status": "approved"}, headers=auth_header(admin_token))
        assert res.status_code == 200
        assert res.json()["approval_status"] == "approved"

        pending = await db.execute(
            select(Notification).where(Notification.type == "time_entry_edit_request")
        )
        assert pending.scalars().all() == []


class TestApproval:
    """수정 승인/반려 테스트."""

    async def _pending_entry(self, client: AsyncClient, db: AsyncSession, staff_user, staff_token):
        entry = await make_entry(db, staff_user, utc(2026, 3, 2, 8), utc(2026, 3, 2, 16))
        await client.patch(
            f"{ENTRIES_URL}/{entry.id}",
            json={"clock_in": "2026-03-02T06:00:00Z"},
            headers=auth_header(staff_token),
        )
        return entry

    async def test_approve(self, client: AsyncClient, db: AsyncSession, staff_user, staff_token, admin_token):
        entry = await self._pending_entry(client, db, staff_user, staff_token)
        res = await client.post(f"{ENTRIES_URL}/{entry.id}/approve", headers=auth_header(admin_token))
        assert res.status_code == 200
        data = res.json()
        assert data["approval_status"] == "approved"
        assert parse(data["clock_in"]) == utc(2026, 3, 2, 6)

        pending = await db.execute(
            select(Notification).where(Notification.type == "time_entry_edit_request")
        )
        assert pending.scalars().all() == []
        approved = await db.execute(
            select(Notification).where(
                Notification.user_id == staff_user.id, Notification.type == "time_entry_edit_approved"
            )
        )
        assert len(approved.scalars().all()) == 1

    async def test_reject_restores_originals(
        self, client: AsyncClient, db: AsyncSession, staff_user, staff_token, admin_token
    ):
        entry = await self._pending_entry(client, db, staff_user, staff_token)
        res = await client.post(
            f"{ENTRIES_URL}/{entry.id}/reject",
            json={"reason": "No overtime was scheduled"},
            headers=auth_header(admin_token),
        )
        assert res.status_code == 200
        data = res.json()
        assert data["approval_status"] == "rejected"
        assert data["rejection_reason"] == "No overtime was scheduled"
        assert parse(data["clock_in"]) == utc(2026, 3, 2, 8)
        assert parse(data["clock_out"]) == utc(2026, 3, 2, 16)

    async def test_edit_after_rejection_takes_new_snapshot(
        self, client: AsyncClient, db: AsyncSession, staff_user, staff_token, admin_token
    ):
        """반려 후 재수정 — 현재 값을 새 원본으로 보관."""
        entry = await self._pending_entry(client, db, staff_user, staff_token)
        url = f"{ENTRIES_URL}/{entry.id}"
        await client.post(f"{url}/reject", json={"reason": "no"}, headers=auth_header(admin_token))
        await client.patch(url, json={"clock_in": "2026-03-02T09:00:00Z"}, headers=auth_header(admin_token))

        res = await client.patch(url, json={"clock_in": "2026-03-02T07:45:00Z"}, headers=auth_header(staff_token))
        assert res.status_code == 200
        data = res.json()
        assert data["approval_status"] == "pending"
        assert data["rejection_reason"] is None
        assert parse(data["original_clock_in"]) == utc(2026, 3, 2, 9)
        assert parse(data["original_clock_out"]) == utc(2026, 3, 2, 16)

    async def test_reject_after_clock_out_keeps_clock_out(
        self, client: AsyncClient, db: AsyncSession, staff_user, staff_token, admin_token
    ):
        """진행 중 수정 후 퇴근, 반려 — 출근 시각만 복원."""
        entry = await make_entry(db, staff_user, utc(2026, 3, 3, 8))
        url = f"{ENTRIES_URL}/{entry.id}"
        edit = await client.patch(url, json={"clock_in": "2026-03-03T07:00:00Z"}, headers=auth_header(staff_token))
        assert edit.status_code == 200
        out = await client.post(
            CLOCK_OUT_URL,
            json={"shift_note_attachments": ["0123456789abcdef0123456789abcdef.jpg"]},
            headers=auth_header(staff_token),
        )
        assert out.status_code == 200
        clocked_out = out.json()["clock_out"]

        res = await client.post(f"{url}/reject", json={}, headers=auth_header(admin_token))
        assert res.status_code == 200
        data = res.json()
        assert data["status"] == "completed"
        assert data["approval_status"] == "rejected"
        assert parse(data["clock_in"]) == utc(2026, 3, 3, 8)
        assert parse(data["clock_out"]) == parse(clocked_out)

    async def test_approve_requires_pending(
        self, client: AsyncClient, db: AsyncSession, staff_user, admin_token
    ):
        entry = await make_entry(db, staff_user, utc(2026, 3, 2, 8), utc(2026, 3, 2, 16))
        res = await client.post(f"{ENTRIES_URL}/{entry.id}/approve", headers=auth_header(admin_token))
        assert res.status_code == 400
        assert res.json()["detail"] == "Cannot approve time entry edit in status 'approved'"

    async def test_staff_cannot_approve(
        self, client: AsyncClient, db: AsyncSession, staff_user, staff_token
    ):
        entry = await self._pending_entry(client, db, staff_user, staff_token)
        res = await client.post(f"{ENTRIES_URL}/{entry.id}/approve", headers=auth_header(staff_token))
        assert res.status_code == 403


class TestLocked:
    """잠긴 기록 테스트."""

    async def test_locked_entry_refuses_self_edit(
        self, client: AsyncClient, db: AsyncSession, staff_user, staff_token
    ):
        entry = await make_entry(db, staff_user, utc(2026, 3, 2, 8), utc(2026, 3, 2, 16), locked=True)
        res = await client.patch(
            f"{ENTRIES_URL}/{entry.id}", json={"notes": "late"}, headers=auth_header(staff_token)
        )
        assert res.status_code == 403
        assert res.json()["detail"] == "Time entry is locked"

    async def test_admin_can_only_unlock(
        self, client: AsyncClient, db: AsyncSession, staff_user, admin_token
    ):
        entry = await make_entry(db, staff_user, utc(2026, 3, 2, 8), utc(2026, 3, 2, 16), locked=True)
        url = f"{ENTRIES_URL}/{entry.id}"

        mixed = await client.patch(url, json={"locked": False, "notes": "x"}, headers=auth_header(admin_token))
        assert mixed.status_code == 403

        unlocked = await client.patch(url, json={"locked": False}, headers=auth_header(admin_token))
        assert unlocked.status_code == 200
        assert unlocked.json()["locked"] is False

        edited = await client.patch(url, json={"notes": "x"}, headers=auth_header(admin_token))
        assert edited.status_code == 200

    async def test_locked_entry_cannot_be_deleted(
        self, client: AsyncClient, db: AsyncSession, staff_user, admin_token
    ):
        entry = await make_entry(db, staff_user, utc(2026, 3, 2, 8), utc(2026, 3, 2, 16), locked=True)
        res = await client.delete(f"{ENTRIES_URL}/{entry.id}", headers=auth_header(admin_token))
        assert res.status_code == 403


class TestListAndDelete:
    """조회 및 삭제 테스트."""

    async def test_staff_only_sees_own_entries(
        self, client: AsyncClient, db: AsyncSession, staff_user, other_staff, staff_token
    ):
        await make_entry(db, staff_user, utc(2026, 3, 2, 8), utc(2026, 3, 2, 16))
        await make_entry(db, other_staff, utc(2026, 3, 2, 8), utc(2026, 3, 2, 16))

        res = await client.get(
            ENTRIES_URL, params={"user_id": str(other_staff.id)}, headers=auth_header(staff_token)
        )
        assert res.status_code == 200
        assert {e["user_id"] for e in res.json()} == {str(staff_user.id)}

    async def test_manager_sees_everyone(
        self, client: AsyncClient, db: AsyncSession, staff_user, other_staff, manager_token
    ):
        await make_entry(db, staff_user, utc(2026, 3, 2, 8), utc(2026, 3, 2, 16))
        await make_entry(db, other_staff, utc(2026, 3, 3, 8), utc(2026, 3, 3, 16))

        res = await client.get(ENTRIES_URL, headers=auth_header(manager_token))
        assert res.status_code == 200
        assert len(res.json()) == 2

        filtered = await client.get(
            ENTRIES_URL, params={"user_id": str(other_staff.id)}, headers=auth_header(manager_token)
        )
        assert [e["user_id"] for e in filtered.json()] == [str(other_staff.id)]

    async def test_get_other_entry_forbidden_for_staff(
        self, client: AsyncClient, db: AsyncSession, other_staff, staff_token
    ):
        entry = await make_entry(db, other_staff, utc(2026, 3, 2, 8), utc(2026, 3, 2, 16))
        res = await client.get(f"{ENTRIES_URL}/{entry.id}", headers=auth_header(staff_token))
        assert res.status_code == 403

    async def test_admin_delete_is_audited(
        self, client: AsyncClient, db: AsyncSession, staff_user, admin_token
    ):
        entry = await make_entry(db, staff_user, utc(2026, 3, 2, 8), utc(2026, 3, 2, 16))
        res = await client.delete(f"{ENTRIES_URL}/{entry.id}", headers=auth_header(admin_token))
        assert res.status_code == 200

        missing = await client.get(f"{ENTRIES_URL}/{entry.id}", headers=auth_header(admin_token))
        assert missing.status_code == 404

        logs = await db.execute(
            select(AuditLog).where(AuditLog.action == "delete", AuditLog.resource_type == "time_entry")
        )
        log = logs.scalars().one()
        assert log.details["before"]["user_id"] == str(staff_user.id)
