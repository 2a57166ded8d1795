"""근태 라우터 — 출퇴근, 자동 퇴근, 근태 기록 조회/수정/승인.

Time Entry Router — Clock-in/out, auto clock-out and the time entry
list/edit/approve/reject/delete endpoints.
"""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from staffhub.api.deps import get_current_user, require_permission
from staffhub.database import get_db
from staffhub.models.user import User
from staffhub.schemas.common import MessageResponse
from staffhub.schemas.time_entry import (
    AutoClockOutRequest,
    AutoClockOutResponse,
    ClockInRequest,
    ClockOutRequest,
    RejectEditRequest,
    TimeEntryResponse,
    TimeEntryUpdate,
)
from staffhub.services.audit_service import audit_service
from staffhub.services.time_entry_service import time_entry_service

router: APIRouter = APIRouter()


@router.post("/clock-in", response_model=TimeEntryResponse, status_code=201)
async def clock_in(
    data: ClockInRequest,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    """출근 — 진행 중 기록이 있으면 400 (Already clocked in → 400)."""
    entry = await time_entry_service.clock_in(db, current_user, data)
    await audit_service.log(db, current_user.id, "clock_in", "time_entry", entry.id, request=request)
    await db.commit()
    return time_entry_service.build_response(entry)


@router.post("/clock-out", response_model=TimeEntryResponse)
async def clock_out(
    data: ClockOutRequest,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    """퇴근 — 진행 중 기록이 없으면 400 (Not clocked in → 400)."""
    entry = await time_entry_service.clock_out(db, current_user, data)
    await audit_service.log(db, current_user.id, "clock_out", "time_entry", entry.id, request=request)
    await db.commit()
    return time_entry_service.build_response(entry)


@router.get("/active", response_model=TimeEntryResponse | None)
async def get_active(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict | None:
    """진행 중인 본인 기록, 없으면 null."""
    entry = await time_entry_service.get_active(db, current_user)
    return time_entry_service.build_response(entry) if entry else None


@router.post("/auto-clock-out", response_model=AutoClockOutResponse)
async def auto_clock_out(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("time_entries:auto_clock_out"))],
    data: AutoClockOutRequest | None = None,
) -> dict:
    """장시간 active 기록 자동 퇴근 (Close entries open longer than max_hours).

    Triggered externally (cron or an admin). Safe to run repeatedly.
    """
    entries = await time_entry_service.auto_clock_out(db, data or AutoClockOutRequest())
    await audit_service.log(
        db, current_user.id, "auto_clock_out", "time_entry", request=request,
        details={"count": len(entries), "entry_ids": [str(e.id) for e in entries]},
    )
    await db.commit()
    return {
        "count": len(entries),
        "entries": [time_entry_service.build_response(e) for e in entries],
    }


@router.get("/entries", response_model=list[TimeEntryResponse])
async def list_entries(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    user_id: Annotated[UUID | None, Query(description="사용자 필터 — 권한 없으면 무시")] = None,
    start: Annotated[datetime | None, Query(description="clock_in 하한")] = None,
    end: Annotated[datetime | None, Query(description="clock_in 상한")] = None,
    approval_status: Annotated[str | None, Query(description="approved | pending | rejected")] = None,
) -> list[dict]:
    """근태 기록 목록.

    Callers without the view-all permission always get only their own
    entries, whatever ``user_id`` says.
    """
    entries = await time_entry_service.list_entries(db, current_user, user_id, start, end, approval_status)
    return [time_entry_service.build_response(e) for e in entries]


@router.get("/entries/{entry_id}", response_model=TimeEntryResponse)
async def get_entry(
    entry_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    entry = await time_entry_service.get_visible_entry(db, current_user, entry_id)
    return time_entry_service.build_response(entry)


@router.patch("/entries/{entry_id}", response_model=TimeEntryResponse)
async def update_entry(
    entry_id: UUID,
    data: TimeEntryUpdate,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    """근태 기록 수정 — 관리자 직접 수정 또는 본인 수정(승인 대기).

    Admins edit directly. Employees editing their own clock times send the
    change for approval; the original times are kept until it is reviewed.
    """
    entry, before, changes = await time_entry_service.update_entry(db, current_user, entry_id, data)
    await audit_service.log(
        db, current_user.id, "update", "time_entry", entry.id, request=request,
        details={"before": before, "changes": changes},
    )
    await db.commit()
    return time_entry_service.build_response(entry)


@router.post("/entries/{entry_id}/approve", response_model=TimeEntryResponse)
async def approve_edit(
    entry_id: UUID,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("time_entries:manage"))],
) -> dict:
    """본인 수정 승인 (Approve a pending self edit)."""
    entry = await time_entry_service.approve_edit(db, entry_id)
    await audit_service.log(db, current_user.id, "approve_edit", "time_entry", entry.id, request=request)
    await db.commit()
    return time_entry_service.build_response(entry)


@router.post("/entries/{entry_id}/reject", response_model=TimeEntryResponse)
async def reject_edit(
    entry_id: UUID,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("time_entries:manage"))],
    data: RejectEditRequest | None = None,
) -> dict:
    """본인 수정 반려 — 원래 시각으로 복원 (Reject and restore the originals)."""
    reason = data.reason if data else None
    entry = await time_entry_service.reject_edit(db, entry_id, reason)
    await audit_service.log(
        db, current_user.id, "reject_edit", "time_entry", entry.id, request=request,
        details={"reason": reason},
    )
    await db.commit()
    return time_entry_service.build_response(entry)


@router.delete("/entries/{entry_id}", response_model=MessageResponse)
async def delete_entry(
    entry_id: UUID,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("time_entries:manage"))],
) -> dict[str, str]:
    """근태 기록 삭제 — 삭제 전 값은 감사 로그에 보관."""
    before = await time_entry_service.delete_entry(db, entry_id)
    await audit_service.log(
        db, current_user.id, "delete", "time_entry", entry_id, request=request,
        details={"before": before},
    )
    await db.commit()
    return {"message": "Time entry deleted"}
