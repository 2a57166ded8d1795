"""근태 기록 레포지토리 — 출퇴근 기록 쿼리.

Time Entry Repository — Queries behind clock-in/out, listing, the
auto-clock-out sweep and payroll locking.
"""

from datetime import datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from staffhub.models.time_entry import TimeEntry
from staffhub.repositories.base import BaseRepository


class TimeEntryRepository(BaseRepository[TimeEntry]):
    """근태 기록 레포지토리.

    Extends:
        BaseRepository[TimeEntry]
    """

    def __init__(self) -> None:
        super().__init__(TimeEntry)

    async def get_active(self, db: AsyncSession, user_id: UUID) -> TimeEntry | None:
        """사용자의 진행 중(active) 기록 조회.

        Return the user's open entry. More than one can only exist through
        the concurrent clock-in race; the most recent wins.
        """
        query: Select = (
            select(TimeEntry)
            .where(TimeEntry.user_id == user_id, TimeEntry.status == "active")
            .order_by(TimeEntry.clock_in.desc())
        )
        result = await db.execute(query)
        return result.scalars().first()

    async def list_entries(
        self,
        db: AsyncSession,
        user_id: UUID | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        approval_status: str | None = None,
    ) -> Sequence[TimeEntry]:
        """근태 기록 목록 — 최신 출근순.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 사용자 필터, None이면 전체 (User filter; None = everyone)
            start: clock_in 하한, 포함 (Inclusive lower bound on clock_in)
            end: clock_in 상한, 포함 (Inclusive upper bound on clock_in)
            approval_status: 승인 상태 필터 (Approval status filter)

        Returns:
            Sequence[TimeEntry]: 근태 기록 목록 (Entries, newest first)
        """
        query: Select = select(TimeEntry)
        if user_id is not None:
            query = query.where(TimeEntry.user_id == user_id)
        if start is not None:
            query = query.where(TimeEntry.clock_in >= start)
        if end is not None:
            query = query.where(TimeEntry.clock_in <= end)
        if approval_status is not None:
            query = query.where(TimeEntry.approval_status == approval_status)
        result = await db.execute(query.order_by(TimeEntry.clock_in.desc()))
        return result.scalars().all()

    async def get_stale_active(self, db: AsyncSession, cutoff: datetime) -> Sequence[TimeEntry]:
        """cutoff 이전에 출근했고 아직 active인 기록 (Open entries started before cutoff)."""
        query: Select = select(TimeEntry).where(
            TimeEntry.status == "active",
            TimeEntry.clock_in < cutoff,
        )
        result = await db.execute(query)
        return result.scalars().all()

    async def get_finished_in_range(
        self,
        db: AsyncSession,
        user_id: UUID,
        start: datetime,
        end: datetime,
    ) -> Sequence[TimeEntry]:
        """기간 내 종료된 기록 — 타임시트 시간 계산용.

        Completed or auto-clocked-out entries of one user whose clock_in
        falls in [start, end).
        """
        query: Select = (
            select(TimeEntry)
            .where(
                TimeEntry.user_id == user_id,
                TimeEntry.status.in_(("completed", "auto-clocked-out")),
                TimeEntry.approval_status != "rejected",
                TimeEntry.clock_in >= start,
                TimeEntry.clock_in < end,
            )
            .order_by(TimeEntry.clock_in)
        )
        result = await db.execute(query)
        return result.scalars().all()

    async def lock_range(
        self,
        db: AsyncSession,
        user_id: UUID,
        start: datetime,
        end: datetime,
    ) -> int:
        """기간 내 종료된 기록 잠금 — 급여 내보내기.

        Lock a user's finished entries with clock_in in [start, end). Entries
        still active are left open so the employee can clock out.

        Returns:
            int: 잠긴 기록 수 (Number of rows locked)
        """
        result = await db.execute(
            update(TimeEntry)
            .where(
                TimeEntry.user_id == user_id,
                TimeEntry.clock_in >= start,
                TimeEntry.clock_in < end,
                TimeEntry.status != "active",
            )
            .values(locked=True)
            .execution_options(synchronize_session="fetch")
        )
        await db.flush()
        return result.rowcount


# 싱글턴 인스턴스 — Singleton instance
time_entry_repository: TimeEntryRepository = TimeEntryRepository()
