"""스케줄 레포지토리 — 스케줄, 시프트, 배정, 근무가능일 쿼리.

Schedule Repository — Queries for schedules, shift templates, shifts,
shift attachments, shift assignments and user availability.
"""

from datetime import date, datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from staffhub.models.schedule import (
    Schedule,
    Shift,
    ShiftAssignment,
    ShiftAttachment,
    ShiftTemplate,
    UserAvailability,
)
from staffhub.repositories.base import BaseRepository


class ScheduleRepository(BaseRepository[Schedule]):
    """스케줄 레포지토리."""

    def __init__(self) -> None:
        super().__init__(Schedule)

    async def list_schedules(self, db: AsyncSession, status: str | None = None) -> Sequence[Schedule]:
        """스케줄 목록 — 시작일 최신순 (Newest start date first)."""
        return await self.get_all(db, {"status": status}, order_by=Schedule.start_date.desc())


class ShiftTemplateRepository(BaseRepository[ShiftTemplate]):
    """시프트 템플릿 레포지토리."""

    def __init__(self) -> None:
        super().__init__(ShiftTemplate)


class ShiftRepository(BaseRepository[Shift]):
    """시프트 레포지토리."""

    def __init__(self) -> None:
        super().__init__(Shift)

    async def list_shifts(
        self,
        db: AsyncSession,
        schedule_id: UUID | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        status: str | None = None,
    ) -> Sequence[Shift]:
        """시프트 목록 — 스케줄/기간/상태 필터, 시작시각순.

        Args:
            schedule_id: 스케줄 필터 (Schedule filter)
            start: start_time 하한 (Lower bound on start_time, inclusive)
            end: start_time 상한 (Upper bound on start_time, exclusive)
            status: 상태 필터 (Status filter)
        """
        query: Select = select(Shift)
        if schedule_id is not None:
            query = query.where(Shift.schedule_id == schedule_id)
        if start is not None:
            query = query.where(Shift.start_time >= start)
        if end is not None:
            query = query.where(Shift.start_time < end)
        if status is not None:
            query = query.where(Shift.status == status)
        result = await db.execute(query.order_by(Shift.start_time))
        return result.scalars().all()

    async def get_assigned_shift_in_range(
        self,
        db: AsyncSession,
        user_id: UUID,
        start: datetime,
        end: datetime,
    ) -> Shift | None:
        """사용자에게 배정된 기간 내 첫 시프트.

        Earliest-starting shift in [start, end) that the user is assigned to,
        ignoring rejected assignments. Used to auto-detect the job at clock-in.
        """
        query: Select = (
            select(Shift)
            .join(ShiftAssignment, ShiftAssignment.shift_id == Shift.id)
            .where(
                ShiftAssignment.user_id == user_id,
                ShiftAssignment.status != "rejected",
                Shift.start_time >= start,
                Shift.start_time < end,
            )
            .order_by(Shift.start_time)
            .limit(1)
        )
        result = await db.execute(query)
        return result.scalars().first()


class ShiftAttachmentRepository(BaseRepository[ShiftAttachment]):
    """시프트 첨부파일 레포지토리."""

    def __init__(self) -> None:
        super().__init__(ShiftAttachment)

    async def list_for_shift(self, db: AsyncSession, shift_id: UUID) -> Sequence[ShiftAttachment]:
        return await self.get_all(db, {"shift_id": shift_id}, order_by=ShiftAttachment.created_at)


class ShiftAssignmentRepository(BaseRepository[ShiftAssignment]):
    """시프트 배정 레포지토리."""

    def __init__(self) -> None:
        super().__init__(ShiftAssignment)

    async def list_assignments(
        self,
        db: AsyncSession,
        shift_id: UUID | None = None,
        user_id: UUID | None = None,
    ) -> Sequence[ShiftAssignment]:
        """배정 목록 — 시프트/사용자 필터 (Filter by shift and/or user)."""
        return await self.get_all(
            db,
            {"shift_id": shift_id, "user_id": user_id},
            order_by=ShiftAssignment.assigned_at.desc(),
        )

    async def get_for_shift_and_user(
        self, db: AsyncSession, shift_id: UUID, user_id: UUID
    ) -> ShiftAssignment | None:
        result = await db.execute(
            select(ShiftAssignment).where(
                ShiftAssignment.shift_id == shift_id,
                ShiftAssignment.user_id == user_id,
            )
        )
        return result.scalars().first()

    async def delete_for_shift(self, db: AsyncSession, shift_id: UUID) -> None:
        """시프트의 모든 배정 삭제 (Remove every assignment of a shift)."""
        await db.execute(delete(ShiftAssignment).where(ShiftAssignment.shift_id == shift_id))
        await db.flush()


class AvailabilityRepository(BaseRepository[UserAvailability]):
    """근무 가능 여부 레포지토리."""

    def __init__(self) -> None:
        super().__init__(UserAvailability)

    async def list_availability(
        self,
        db: AsyncSession,
        user_id: UUID | None = None,
        start: date | None = None,
        end: date | None = None,
    ) -> Sequence[UserAvailability]:
        """근무 가능 여부 목록 — 사용자/기간 필터 (Inclusive date bounds)."""
        query: Select = select(UserAvailability)
        if user_id is not None:
            query = query.where(UserAvailability.user_id == user_id)
        if start is not None:
            query = query.where(UserAvailability.date >= start)
        if end is not None:
            query = query.where(UserAvailability.date <= end)
        result = await db.execute(query.order_by(UserAvailability.date))
        return result.scalars().all()


# 싱글턴 인스턴스 — Singleton instances
schedule_repository: ScheduleRepository = ScheduleRepository()
shift_template_repository: ShiftTemplateRepository = ShiftTemplateRepository()
shift_repository: ShiftRepository = ShiftRepository()
shift_attachment_repository: ShiftAttachmentRepository = ShiftAttachmentRepository()
shift_assignment_repository: ShiftAssignmentRepository = ShiftAssignmentRepository()
availability_repository: AvailabilityRepository = AvailabilityRepository()
