"""타임시트 서비스 — 기간별 근무 시간 집계와 승인/내보내기.

Timesheet Service — Period totals computed from time entries, the
submit/approve/reject review flow and payroll export, which locks the
period's time entries.

Status flow:
    pending|rejected --submit--> submitted --approve--> approved --export--> exported
                                 submitted --reject---> rejected
"""

from collections import defaultdict
from datetime import date, datetime, time, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from staffhub.config import settings
from staffhub.database import utcnow
from staffhub.models.time_entry import TimeEntry
from staffhub.models.timesheet import Timesheet
from staffhub.models.user import User
from staffhub.repositories.time_entry_repository import time_entry_repository
from staffhub.repositories.timesheet_repository import timesheet_repository
from staffhub.repositories.user_repository import user_repository
from staffhub.schemas.timesheet import TimesheetCreate
from staffhub.services.notification_service import notification_service
from staffhub.services.setting_service import setting_service
from staffhub.utils.exceptions import ForbiddenError, InvalidTransitionError, NotFoundError
from staffhub.utils.permissions import has_permission

TRANSITIONS: dict[tuple[str, str], str] = {
    ("pending", "submit"): "submitted",
    ("rejected", "submit"): "submitted",
    ("submitted", "approve"): "approved",
    ("submitted", "reject"): "rejected",
    ("approved", "export"): "exported",
}

_CENT = Decimal("0.01")


def _day_start(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def compute_hours(entries: Sequence[TimeEntry], weekly_limit: float) -> tuple[Decimal, Decimal, Decimal]:
    """근무 시간 집계 — ISO 주 단위 초과근무.

    Sum worked hours (clock span minus break) and split each ISO week into
    regular hours up to ``weekly_limit`` and overtime beyond it.

    Returns:
        tuple[Decimal, Decimal, Decimal]: (total, regular, overtime)
    """
    weeks: dict[tuple[int, int], float] = defaultdict(float)
    for entry in entries:
        if entry.clock_out is None:
            continue
        seconds = (entry.clock_out - entry.clock_in).total_seconds() - (entry.break_minutes or 0) * 60
        iso = entry.clock_in.isocalendar()
        weeks[(iso[0], iso[1])] += max(seconds, 0) / 3600

    regular = sum(min(hours, weekly_limit) for hours in weeks.values())
    overtime = sum(max(hours - weekly_limit, 0) for hours in weeks.values())

    def q(value: float) -> Decimal:
        return Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP)

    return q(regular + overtime), q(regular), q(overtime)


class TimesheetService:
    """타임시트 서비스."""

    def _next(self, timesheet: Timesheet, action: str) -> str:
        target = TRANSITIONS.get((timesheet.status, action))
        if target is None:
            raise InvalidTransitionError("timesheet", timesheet.status, action)
        return target

    async def list_timesheets(
        self,
        db: AsyncSession,
        caller: User,
        user_id: UUID | None = None,
        status: str | None = None,
    ) -> Sequence[Timesheet]:
        """타임시트 목록 — 권한 없는 사용자는 본인 것만."""
        if not has_permission(caller.role, "timesheets:view_all"):
            user_id = caller.id
        return await timesheet_repository.list_timesheets(db, user_id, status)

    async def get_timesheet(self, db: AsyncSession, timesheet_id: UUID) -> Timesheet:
        timesheet = await timesheet_repository.get_by_id(db, timesheet_id)
        if timesheet is None:
            raise NotFoundError("Timesheet not found")
        return timesheet

    async def get_visible_timesheet(self, db: AsyncSession, caller: User, timesheet_id: UUID) -> Timesheet:
        timesheet = await self.get_timesheet(db, timesheet_id)
        if timesheet.user_id != caller.id and not has_permission(caller.role, "timesheets:view_all"):
            raise ForbiddenError("Cannot view another user's timesheet")
        return timesheet

    async def create_timesheet(self, db: AsyncSession, caller: User, data: TimesheetCreate) -> Timesheet:
        """타임시트 생성.

        Hours not supplied are computed from the user's completed and
        auto-clocked-out entries with clock_in inside the period.

        Raises:
            ForbiddenError: 권한 없이 타인 타임시트 생성 (Creating for someone else)
            NotFoundError: 대상 사용자 없음 (Unknown user)
        """
        user_id: UUID = data.user_id or caller.id
        if user_id != caller.id:
            if not has_permission(caller.role, "timesheets:view_all"):
                raise ForbiddenError("Cannot create a timesheet for another user")
            if await user_repository.get_by_id(db, user_id) is None:
                raise NotFoundError("User not found")

        total, regular, overtime = data.total_hours, data.regular_hours, data.overtime_hours
        if total is None:
            entries = await time_entry_repository.get_finished_in_range(
                db, user_id, _day_start(data.period_start), _day_start(data.period_end + timedelta(days=1))
            )
            weekly_limit = await setting_service.get_float(
                db, "overtime_weekly_hours", float(settings.OVERTIME_WEEKLY_HOURS)
            )
            total, regular, overtime = compute_hours(entries, weekly_limit)
        else:
            overtime = overtime if overtime is not None else Decimal("0")
            regular = regular if regular is not None else total - overtime

        return await timesheet_repository.create(db, {
            "user_id": user_id,
            "period_start": data.period_start,
            "period_end": data.period_end,
            "total_hours": total,
            "regular_hours": regular,
            "overtime_hours": overtime,
            "status": "pending",
            "notes": data.notes,
        })

    async def submit(self, db: AsyncSession, caller: User, timesheet_id: UUID) -> Timesheet:
        """타임시트 제출 — 본인만 가능.

        Raises:
            ForbiddenError: 본인 타임시트가 아님 (Not the owner)
            BadRequestError: 제출 불가 상태 (Not pending/rejected)
        """
        timesheet = await self.get_timesheet(db, timesheet_id)
        if timesheet.user_id != caller.id:
            raise ForbiddenError("Only the owner can submit a timesheet")
        return await timesheet_repository.update(db, timesheet, {
            "status": self._next(timesheet, "submit"),
            "rejection_reason": None,
        })

    async def approve(self, db: AsyncSession, reviewer: User, timesheet_id: UUID) -> Timesheet:
        timesheet = await self.get_timesheet(db, timesheet_id)
        timesheet = await timesheet_repository.update(db, timesheet, {
            "status": self._next(timesheet, "approve"),
            "approved_by": reviewer.id,
            "approved_at": utcnow(),
        })
        await notification_service.notify(
            db, timesheet.user_id, "timesheet_approved",
            f"Your timesheet for {timesheet.period_start} to {timesheet.period_end} was approved",
            "timesheet", timesheet.id,
        )
        return timesheet

    async def reject(self, db: AsyncSession, timesheet_id: UUID, reason: str | None) -> Timesheet:
        timesheet = await self.get_timesheet(db, timesheet_id)
        timesheet = await timesheet_repository.update(db, timesheet, {
            "status": self._next(timesheet, "reject"),
            "rejection_reason": reason,
        })
        await notification_service.notify(
            db, timesheet.user_id, "timesheet_rejected",
            f"Your timesheet for {timesheet.period_start} to {timesheet.period_end} was rejected",
            "timesheet", timesheet.id,
        )
        return timesheet

    async def export(self, db: AsyncSession, timesheet_id: UUID) -> tuple[Timesheet, int]:
        """급여 내보내기 — 기간 내 근태 기록 잠금.

        Returns:
            tuple[Timesheet, int]: (내보낸 타임시트, 잠긴 기록 수)
        """
        timesheet = await self.get_timesheet(db, timesheet_id)
        status = self._next(timesheet, "export")
        locked: int = await time_entry_repository.lock_range(
            db,
            timesheet.user_id,
            _day_start(timesheet.period_start),
            _day_start(timesheet.period_end + timedelta(days=1)),
        )
        timesheet = await timesheet_repository.update(db, timesheet, {"status": status})
        return timesheet, locked

    async def delete_timesheet(self, db: AsyncSession, timesheet_id: UUID) -> None:
        timesheet = await self.get_timesheet(db, timesheet_id)
        await timesheet_repository.delete(db, timesheet)

    def build_response(self, timesheet: Timesheet) -> dict:
        return {
            "id": str(timesheet.id),
            "user_id": str(timesheet.user_id),
            "period_start": timesheet.period_start,
            "period_end": timesheet.period_end,
            "total_hours": timesheet.total_hours,
            "regular_hours": timesheet.regular_hours,
            "overtime_hours": timesheet.overtime_hours,
            "status": timesheet.status,
            "approved_by": str(timesheet.approved_by) if timesheet.approved_by else None,
            "approved_at": timesheet.approved_at,
            "rejection_reason": timesheet.rejection_reason,
            "notes": timesheet.notes,
            "created_at": timesheet.created_at,
        }


# 싱글턴 인스턴스 — Singleton instance
timesheet_service: TimesheetService = TimesheetService()
