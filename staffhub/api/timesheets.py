"""타임시트 라우터 — 생성, 제출, 승인/반려, 급여 내보내기.

Timesheet Router — Create, submit, review and payroll export. Export locks
the period's time entries.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from staffhub.api.deps import get_current_user, require_permission
from staffhub.database import get_db
from staffhub.models.user import User
from staffhub.schemas.common import MessageResponse
from staffhub.schemas.timesheet import (
    TimesheetCreate,
    TimesheetExportResponse,
    TimesheetReject,
    TimesheetResponse,
)
from staffhub.services.audit_service import audit_service
from staffhub.services.timesheet_service import timesheet_service

router: APIRouter = APIRouter()


@router.get("", response_model=list[TimesheetResponse])
async def list_timesheets(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    user_id: Annotated[UUID | None, Query(description="사용자 필터 — 권한 없으면 무시")] = None,
    status: Annotated[str | None, Query(description="상태 필터")] = None,
) -> list[dict]:
    timesheets = await timesheet_service.list_timesheets(db, current_user, user_id, status)
    return [timesheet_service.build_response(t) for t in timesheets]


@router.get("/{timesheet_id}", response_model=TimesheetResponse)
async def get_timesheet(
    timesheet_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    timesheet = await timesheet_service.get_visible_timesheet(db, current_user, timesheet_id)
    return timesheet_service.build_response(timesheet)


@router.post("", response_model=TimesheetResponse, status_code=201)
async def create_timesheet(
    data: TimesheetCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    """타임시트 생성 — 시간 미지정 시 근태 기록에서 계산.

    Hours default to the sum of finished time entries in the period, with
    weekly overtime split out.
    """
    timesheet = await timesheet_service.create_timesheet(db, current_user, data)
    await db.commit()
    return timesheet_service.build_response(timesheet)


@router.post("/{timesheet_id}/submit", response_model=TimesheetResponse)
async def submit_timesheet(
    timesheet_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    timesheet = await timesheet_service.submit(db, current_user, timesheet_id)
    await db.commit()
    return timesheet_service.build_response(timesheet)


@router.post("/{timesheet_id}/approve", response_model=TimesheetResponse)
async def approve_timesheet(
    timesheet_id: UUID,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("timesheets:approve"))],
) -> dict:
    timesheet = await timesheet_service.approve(db, current_user, timesheet_id)
    await audit_service.log(db, current_user.id, "approve", "timesheet", timesheet.id, request=request)
    await db.commit()
    return timesheet_service.build_response(timesheet)


@router.post("/{timesheet_id}/reject", response_model=TimesheetResponse)
async def reject_timesheet(
    timesheet_id: UUID,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("timesheets:approve"))],
    data: TimesheetReject | None = None,
) -> dict:
    reason = data.reason if data else None
    timesheet = await timesheet_service.reject(db, timesheet_id, reason)
    await audit_service.log(
        db, current_user.id, "reject", "timesheet", timesheet.id, request=request,
        details={"reason": reason},
    )
    await db.commit()
    return timesheet_service.build_response(timesheet)


@router.post("/{timesheet_id}/export", response_model=TimesheetExportResponse)
async def export_timesheet(
    timesheet_id: UUID,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("timesheets:export"))],
) -> dict:
    """급여 내보내기 — 기간 내 근태 기록 잠금 (Locks the period's entries)."""
    timesheet, locked = await timesheet_service.export(db, timesheet_id)
    await audit_service.log(
        db, current_user.id, "export", "timesheet", timesheet.id, request=request,
        details={"locked_entries": locked},
    )
    await db.commit()
    return {"timesheet": timesheet_service.build_response(timesheet), "locked_entries": locked}


@router.delete("/{timesheet_id}", response_model=MessageResponse)
async def delete_timesheet(
    timesheet_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("timesheets:approve"))],
) -> dict[str, str]:
    await timesheet_service.delete_timesheet(db, timesheet_id)
    await db.commit()
    return {"message": "Timesheet deleted"}
