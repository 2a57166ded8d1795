"""타임시트 레포지토리.

Timesheet Repository — Listing with owner and status filters.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from staffhub.models.timesheet import Timesheet
from staffhub.repositories.base import BaseRepository


class TimesheetRepository(BaseRepository[Timesheet]):
    """타임시트 레포지토리."""

    def __init__(self) -> None:
        super().__init__(Timesheet)

    async def list_timesheets(
        self,
        db: AsyncSession,
        user_id: UUID | None = None,
        status: str | None = None,
    ) -> Sequence[Timesheet]:
        """타임시트 목록 — 기간 시작일 최신순."""
        return await self.get_all(
            db,
            {"user_id": user_id, "status": status},
            order_by=Timesheet.period_start.desc(),
        )


# 싱글턴 인스턴스 — Singleton instance
timesheet_repository: TimesheetRepository = TimesheetRepository()
