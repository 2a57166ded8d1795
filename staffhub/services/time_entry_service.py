"""근태 서비스 — 출퇴근 및 근태 수정/승인 비즈니스 로직.

Time Entry Service — Clock-in/out, auto clock-out, the two edit paths
(admin direct edit vs. self edit awaiting approval) and approve/reject.

Edit paths:
    - Admin (Owner/Admin): any field on any entry, applied immediately.
    - Self edit: a non-admin on their own entry. Changing clock_in/clock_out
      snapshots the originals, flips approval_status to pending and
      notifies every admin.
"""

from datetime import datetime, time, timedelta, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from staffhub.config import settings
from staffhub.database import utcnow
from staffhub.models.schedule import Shift
from staffhub.models.time_entry import TimeEntry
from staffhub.models.user import User
from staffhub.repositories.schedule_repository import shift_repository
from staffhub.repositories.time_entry_repository import time_entry_repository
from staffhub.schemas.time_entry import AutoClockOutRequest, ClockInRequest, ClockOutRequest, TimeEntryUpdate
from staffhub.services import time_entry_state as state
from staffhub.services.notification_service import notification_service
from staffhub.services.setting_service import setting_service
from staffhub.utils.exceptions import BadRequestError, ForbiddenError, NotFoundError
from staffhub.utils.permissions import has_permission, is_admin


def as_utc(value: datetime | None) -> datetime | None:
    """naive 값은 UTC로 간주 (Treat naive datetimes as UTC)."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _to_decimal(value: Any) -> Decimal | None:
    if value is None:
        return None
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return None


def resolve_hourly_rate(user: User, program: str | None, job_name: str | None) -> Decimal | None:
    """시급 결정 — 프로그램 → 직무 → 기본 시급 순.

    Pay rate lookup order: job_rates[program], job_rates[job_name],
    then the user's default hourly rate.
    """
    rates: dict[str, Any] = user.job_rates or {}
    for key in (program, job_name):
        if key and key in rates:
            rate = _to_decimal(rates[key])
            if rate is not None:
                return rate
    return _to_decimal(user.default_hourly_rate)


def is_photo_exempt(*names: str | None) -> bool:
    """근무 노트 사진 면제 — "advent"와 "ipu"를 모두 포함하는 이름.

    AdventHealth IPU shifts do not require shift note photos.
    """
    for name in names:
        if not name:
            continue
        lowered = name.lower()
        if "advent" in lowered and "ipu" in lowered:
            return True
    return False


class TimeEntryService:
    """근태 서비스."""

    # --- 조회 (Queries) ---

    async def get_entry(self, db: AsyncSession, entry_id: UUID) -> TimeEntry:
        """근태 기록 조회.

        Raises:
            NotFoundError: 기록 없음 (Entry does not exist)
        """
        entry = await time_entry_repository.get_by_id(db, entry_id)
        if entry is None:
            raise NotFoundError("Time entry not found")
        return entry

    async def get_visible_entry(self, db: AsyncSession, caller: User, entry_id: UUID) -> TimeEntry:
        """열람 권한 확인 후 조회 — 본인 기록 또는 전체 열람 권한.

        Raises:
            ForbiddenError: 타인 기록 열람 권한 없음 (Someone else's entry)
        """
        entry = await self.get_entry(db, entry_id)
        if entry.user_id != caller.id and not has_permission(caller.role, "time_entries:view_all"):
            raise ForbiddenError("Cannot view another user's time entry")
        return entry

    async def get_active(self, db: AsyncSession, user: User) -> TimeEntry | None:
        return await time_entry_repository.get_active(db, user.id)

    async def list_entries(
        self,
        db: AsyncSession,
        caller: User,
        user_id: UUID | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        approval_status: str | None = None,
    ) -> Sequence[TimeEntry]:
        """근태 기록 목록 — 권한 없는 사용자는 본인 기록으로 제한.

        Callers without ``time_entries:view_all`` only ever see their own
        entries, whatever user_id they pass.
        """
        if not has_permission(caller.role, "time_entries:view_all"):
            user_id = caller.id
        return await time_entry_repository.list_entries(
            db, user_id, as_utc(start), as_utc(end), approval_status
        )

    # --- 출퇴근 (Clock in / out) ---

    async def _detect_shift(self, db: AsyncSession, user: User, now: datetime) -> Shift | None:
        """오늘(UTC) 배정된 시프트 중 가장 이른 것 (Earliest shift assigned today)."""
        day_start = datetime.combine(now.date(), time.min, tzinfo=timezone.utc)
        return await shift_repository.get_assigned_shift_in_range(
            db, user.id, day_start, day_start + timedelta(days=1)
        )

    async def clock_in(self, db: AsyncSession, user: User, data: ClockInRequest) -> TimeEntry:
        """출근 처리.

        Open a new active entry. The shift comes from ``shift_id`` or, when
        omitted, from today's assignments; job, program and pay rate are
        copied from it.

        Raises:
            BadRequestError: 이미 출근 상태 (Already clocked in)
            NotFoundError: 지정한 시프트 없음 (Unknown shift_id)
        """
        if await time_entry_repository.get_active(db, user.id) is not None:
            raise BadRequestError("Already clocked in")

        now: datetime = utcnow()
        shift: Shift | None
        if data.shift_id is not None:
            shift = await shift_repository.get_by_id(db, data.shift_id)
            if shift is None:
                raise NotFoundError("Shift not found")
        else:
            shift = await self._detect_shift(db, user, now)

        job_name: str | None = shift.job_name if shift else None
        program_name: str | None = shift.program if shift else None

        return await time_entry_repository.create(db, {
            "user_id": user.id,
            "shift_id": shift.id if shift else None,
            "clock_in": now,
            "job_name": job_name,
            "program_name": program_name,
            "hourly_rate": resolve_hourly_rate(user, program_name, job_name),
            "location": data.location,
            "notes": data.notes,
            "status": "active",
            "approval_status": "approved",
        })

    async def clock_out(self, db: AsyncSession, user: User, data: ClockOutRequest) -> TimeEntry:
        """퇴근 처리.

        Close the caller's active entry. Shift note photos are required
        unless disabled by setting/config or the shift is photo exempt.

        Raises:
            BadRequestError: 출근 기록 없음 또는 사진 누락 (Not clocked in / photos missing)
            ForbiddenError: 잠긴 기록 (Entry is locked)
        """
        entry = await time_entry_repository.get_active(db, user.id)
        if entry is None:
            raise BadRequestError("Not clocked in")
        state.ensure_unlocked(entry)

        require_photos: bool = await setting_service.get_bool(
            db, "require_clock_out_photos", settings.REQUIRE_CLOCK_OUT_PHOTOS
        )
        if require_photos and not data.shift_note_attachments:
            shift = await shift_repository.get_by_id(db, entry.shift_id) if entry.shift_id else None
            names = [entry.program_name, entry.job_name]
            if shift is not None:
                names += [shift.program, shift.job_name]
            if not is_photo_exempt(*names):
                raise BadRequestError("Shift note photos are required to clock out")

        return await time_entry_repository.update(db, entry, {
            "clock_out": utcnow(),
            "status": state.next_status(entry, "clock_out"),
            "break_minutes": data.break_minutes,
            "notes": data.notes if data.notes is not None else entry.notes,
            "employee_notes": data.employee_notes,
            "relieving_nurse_signature": data.relieving_nurse_signature,
            "shift_note_attachments": list(data.shift_note_attachments),
        })

    async def auto_clock_out(self, db: AsyncSession, data: AutoClockOutRequest) -> list[TimeEntry]:
        """장시간 active 기록 자동 퇴근.

        Close every unlocked active entry older than ``max_hours`` with
        ``clock_out = clock_in + max_hours``. Running it again finds nothing.

        Returns:
            list[TimeEntry]: 처리된 기록 (Entries that were closed)
        """
        max_hours: float = data.max_hours or await setting_service.get_float(
            db, "auto_clock_out_max_hours", float(settings.AUTO_CLOCK_OUT_MAX_HOURS)
        )
        limit = timedelta(hours=max_hours)
        stale = await time_entry_repository.get_stale_active(db, utcnow() - limit)

        closed: list[TimeEntry] = []
        for entry in stale:
            if entry.locked:
                continue
            entry.clock_out = entry.clock_in + limit
            entry.status = state.next_status(entry, "auto_clock_out")
            closed.append(entry)
        await db.flush()
        return closed

    # --- 수정 (Edits) ---

    async def update_entry(
        self,
        db: AsyncSession,
        caller: User,
        entry_id: UUID,
        data: TimeEntryUpdate,
    ) -> tuple[TimeEntry, dict, dict]:
        """근태 기록 수정 — 관리자 직접 수정 또는 본인 수정(승인 대기).

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            caller: 요청 사용자 (Caller)
            entry_id: 기록 UUID (Entry UUID)
            data: 변경 사항 (Partial update; only sent fields count)

        Returns:
            tuple[TimeEntry, dict, dict]: (수정된 기록, 수정 전 값, 실제 적용된 변경)
                (Updated entry, prior values, fields actually written)

        Raises:
            ForbiddenError: 잠김, 타인 기록, 관리자 전용 필드 (Locked / not owner / admin-only field)
            BadRequestError: clock_out < clock_in, 정의되지 않은 전이, 진행 중 기록의 clock_out 수정
                (Bad times, undefined transition, clock_out on an active entry)
        """
        entry = await self.get_entry(db, entry_id)
        changes: dict[str, Any] = data.model_dump(exclude_unset=True)
        admin: bool = is_admin(caller.role)

        state.ensure_unlocked(entry, changes, admin)

        if not admin:
            if entry.user_id != caller.id:
                raise ForbiddenError("Cannot edit another user's time entry")
            blocked = sorted(state.ADMIN_ONLY_FIELDS & changes.keys())
            if blocked:
                raise ForbiddenError(f"Only administrators can change: {', '.join(blocked)}")

        for field in state.TIME_FIELDS:
            if field in changes:
                changes[field] = as_utc(changes[field])
        if "clock_in" in changes and changes["clock_in"] is None:
            raise BadRequestError("clock_in is required")
        new_in: datetime = changes.get("clock_in", entry.clock_in)
        new_out: datetime | None = changes.get("clock_out", entry.clock_out)
        if new_out is not None and new_out < new_in:
            raise BadRequestError("clock_out cannot be earlier than clock_in")

        if admin:
            await self._apply_admin_transitions(db, entry, changes, new_out)
        else:
            state.ensure_consistent(entry.status, new_out)

        before: dict[str, Any] = self.snapshot(entry)
        time_changed: bool = any(
            field in changes and changes[field] != getattr(entry, field) for field in state.TIME_FIELDS
        )
        reviewed: bool = admin and changes.get("approval_status", entry.approval_status) != entry.approval_status

        if not admin and time_changed:
            # 첫 수정 또는 반려 후 재수정일 때만 원본 보관 — keep the approved values
            if entry.original_clock_in is None or entry.approval_status == "rejected":
                changes["original_clock_in"] = entry.clock_in
                changes["original_clock_out"] = entry.clock_out
            changes["approval_status"] = state.next_approval(entry, "self_edit")
            changes["rejection_reason"] = None

        entry = await time_entry_repository.update(db, entry, changes)

        if not admin and time_changed:
            await notification_service.replace_edit_requests(db, entry, caller)
        elif reviewed:
            await notification_service.clear_edit_requests(db, entry.id)

        return entry, before, changes

    async def _apply_admin_transitions(
        self,
        db: AsyncSession,
        entry: TimeEntry,
        changes: dict[str, Any],
        new_out: datetime | None,
    ) -> None:
        """관리자 수정의 상태 변경 검증.

        Status follows clock_out unless sent explicitly: setting clock_out
        on an active entry completes it and clearing it reopens the entry.
        Reopening is refused while the owner has another active entry.

        Raises:
            BadRequestError: 정의되지 않은 전이, clock_out 불일치, 중복 active
                             (Undefined transition / clock_out mismatch / second active entry)
        """
        if "status" in changes:
            target: str = changes["status"]
        elif "clock_out" in changes and new_out is None:
            target = "active"
        elif "clock_out" in changes and entry.status == "active":
            target = "completed"
        else:
            target = entry.status

        target = state.admin_status(entry, target)
        state.ensure_consistent(target, new_out)
        if target != entry.status:
            changes["status"] = target

        owner_id: UUID = changes.get("user_id") or entry.user_id
        if target == "active" and (entry.status != "active" or owner_id != entry.user_id):
            active = await time_entry_repository.get_active(db, owner_id)
            if active is not None and active.id != entry.id:
                raise BadRequestError("User already has an active time entry")

        if "approval_status" in changes:
            changes["approval_status"] = state.admin_approval(entry, changes["approval_status"])

    async def approve_edit(self, db: AsyncSession, entry_id: UUID) -> TimeEntry:
        """본인 수정 승인.

        Raises:
            BadRequestError: pending 상태가 아님 (Not pending)
            ForbiddenError: 잠긴 기록 (Locked)
        """
        entry = await self.get_entry(db, entry_id)
        state.ensure_unlocked(entry)
        entry = await time_entry_repository.update(db, entry, {
            "approval_status": state.next_approval(entry, "approve"),
        })
        await notification_service.clear_edit_requests(db, entry.id)
        await notification_service.notify(
            db, entry.user_id, "time_entry_edit_approved",
            "Your time entry change was approved", "time_entry", entry.id,
        )
        return entry

    async def reject_edit(self, db: AsyncSession, entry_id: UUID, reason: str | None) -> TimeEntry:
        """본인 수정 반려 — 원본 시각으로 복원.

        Reject a pending self edit and restore the snapshotted clock times.

        Raises:
            BadRequestError: pending 상태가 아님 (Not pending)
            ForbiddenError: 잠긴 기록 (Locked)
        """
        entry = await self.get_entry(db, entry_id)
        state.ensure_unlocked(entry)
        changes: dict[str, Any] = {
            "approval_status": state.next_approval(entry, "reject"),
            "rejection_reason": reason,
        }
        if entry.original_clock_in is not None:
            changes["clock_in"] = entry.original_clock_in
            # 스냅샷 이후 퇴근했다면 실제 퇴근 시각 유지 (a finished entry keeps its clock_out)
            if entry.original_clock_out is not None or entry.status == "active":
                changes["clock_out"] = entry.original_clock_out
        entry = await time_entry_repository.update(db, entry, changes)

        await notification_service.clear_edit_requests(db, entry.id)
        message = "Your time entry change was rejected"
        if reason:
            message = f"{message}: {reason}"
        await notification_service.notify(
            db, entry.user_id, "time_entry_edit_rejected", message[:1000], "time_entry", entry.id,
        )
        return entry

    async def delete_entry(self, db: AsyncSession, entry_id: UUID) -> dict:
        """근태 기록 삭제 — 삭제 전 값을 반환 (감사 기록용).

        Raises:
            ForbiddenError: 잠긴 기록 (Locked)
        """
        entry = await self.get_entry(db, entry_id)
        state.ensure_unlocked(entry)
        before = self.snapshot(entry)
        await notification_service.clear_edit_requests(db, entry.id)
        await time_entry_repository.delete(db, entry)
        return before

    # --- 응답 (Responses) ---

    def snapshot(self, entry: TimeEntry) -> dict[str, Any]:
        """감사 기록용 주요 필드 (Audited fields of an entry)."""
        return {
            "user_id": entry.user_id,
            "clock_in": entry.clock_in,
            "clock_out": entry.clock_out,
            "break_minutes": entry.break_minutes,
            "job_name": entry.job_name,
            "program_name": entry.program_name,
            "hourly_rate": entry.hourly_rate,
            "status": entry.status,
            "approval_status": entry.approval_status,
            "locked": entry.locked,
        }

    def hours_worked(self, entry: TimeEntry) -> float | None:
        """근무 시간 — 휴식 제외, 퇴근 전이면 None."""
        if entry.clock_out is None:
            return None
        seconds = (entry.clock_out - entry.clock_in).total_seconds() - (entry.break_minutes or 0) * 60
        return round(max(seconds, 0) / 3600, 2)

    def build_response(self, entry: TimeEntry) -> dict:
        return {
            "id": str(entry.id),
            "user_id": str(entry.user_id),
            "shift_id": str(entry.shift_id) if entry.shift_id else None,
            "clock_in": entry.clock_in,
            "clock_out": entry.clock_out,
            "break_minutes": entry.break_minutes or 0,
            "job_name": entry.job_name,
            "program_name": entry.program_name,
            "hourly_rate": entry.hourly_rate,
            "location": entry.location,
            "notes": entry.notes,
            "status": entry.status,
            "approval_status": entry.approval_status,
            "locked": entry.locked,
            "original_clock_in": entry.original_clock_in,
            "original_clock_out": entry.original_clock_out,
            "rejection_reason": entry.rejection_reason,
            "relieving_nurse_signature": entry.relieving_nurse_signature,
            "shift_note_attachments": entry.shift_note_attachments or [],
            "employee_notes": entry.employee_notes,
            "manager_notes": entry.manager_notes,
            "hours_worked": self.hours_worked(entry),
            "created_at": entry.created_at,
            "updated_at": entry.updated_at,
        }


# 싱글턴 인스턴스 — Singleton instance
time_entry_service: TimeEntryService = TimeEntryService()
