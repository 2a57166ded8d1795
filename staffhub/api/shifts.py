"""시프트 라우터 — 시프트 CRUD, 배정, 복제, 첨부파일.

Shift Router — Shift CRUD plus assign, duplicate and attachment endpoints.
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
from staffhub.schemas.schedule import (
    ShiftAssignmentResponse,
    ShiftAssignRequest,
    ShiftAttachmentCreate,
    ShiftAttachmentResponse,
    ShiftCreate,
    ShiftDuplicateRequest,
    ShiftResponse,
    ShiftUpdate,
)
from staffhub.services.audit_service import audit_service
from staffhub.services.schedule_service import schedule_service

router: APIRouter = APIRouter()


@router.get("", response_model=list[ShiftResponse])
async def list_shifts(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    schedule_id: Annotated[UUID | None, Query(description="스케줄 필터")] = None,
    start: Annotated[datetime | None, Query(description="start_time 하한")] = None,
    end: Annotated[datetime | None, Query(description="start_time 상한 (exclusive)")] = None,
    status: Annotated[str | None, Query(description="상태 필터")] = None,
) -> list[dict]:
    shifts = await schedule_service.list_shifts(db, schedule_id, start, end, status)
    return [schedule_service.build_shift_response(s) for s in shifts]


@router.get("/{shift_id}", response_model=ShiftResponse)
async def get_shift(
    shift_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    """시프트 상세 — 첨부파일 포함 (Includes attachments)."""
    shift = await schedule_service.get_shift(db, shift_id)
    attachments = await schedule_service.list_attachments(db, shift.id)
    return schedule_service.build_shift_response(shift, attachments)


@router.post("", response_model=ShiftResponse, status_code=201)
async def create_shift(
    data: ShiftCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("shifts:manage"))],
) -> dict:
    shift = await schedule_service.create_shift(db, data)
    await db.commit()
    return schedule_service.build_shift_response(shift)


@router.patch("/{shift_id}", response_model=ShiftResponse)
async def update_shift(
    shift_id: UUID,
    data: ShiftUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("shifts:manage"))],
) -> dict:
    shift = await schedule_service.update_shift(db, shift_id, data)
    await db.commit()
    attachments = await schedule_service.list_attachments(db, shift.id)
    return schedule_service.build_shift_response(shift, attachments)


@router.delete("/{shift_id}", response_model=MessageResponse)
async def delete_shift(
    shift_id: UUID,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("shifts:manage"))],
) -> dict[str, str]:
    """시프트 삭제 — 배정도 함께 삭제 (Assignments are removed too)."""
    await schedule_service.delete_shift(db, shift_id)
    await audit_service.log(db, current_user.id, "delete", "shift", shift_id, request=request)
    await db.commit()
    return {"message": "Shift deleted"}


@router.post("/{shift_id}/assign", response_model=ShiftAssignmentResponse, status_code=201)
async def assign_shift(
    shift_id: UUID,
    data: ShiftAssignRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("shifts:assign"))],
) -> dict:
    """시프트에 직원 배정 (Assign an employee; notifies them)."""
    assignment = await schedule_service.assign_shift(db, shift_id, data)
    await db.commit()
    return schedule_service.build_assignment_response(assignment)


@router.post("/{shift_id}/duplicate", response_model=ShiftResponse, status_code=201)
async def duplicate_shift(
    shift_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("shifts:manage"))],
    data: ShiftDuplicateRequest | None = None,
) -> dict:
    """시프트 복제 — 첨부파일까지 한 번에 복사.

    Copy a shift with its attachments, optionally moved to a new start time.
    """
    shift = await schedule_service.duplicate_shift(db, shift_id, data or ShiftDuplicateRequest(), current_user)
    await db.commit()
    attachments = await schedule_service.list_attachments(db, shift.id)
    return schedule_service.build_shift_response(shift, attachments)


@router.get("/{shift_id}/attachments", response_model=list[ShiftAttachmentResponse])
async def list_attachments(
    shift_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> list[dict]:
    shift = await schedule_service.get_shift(db, shift_id)
    attachments = await schedule_service.list_attachments(db, shift.id)
    return [schedule_service.build_attachment_response(a) for a in attachments]


@router.post("/{shift_id}/attachments", response_model=ShiftAttachmentResponse, status_code=201)
async def add_attachment(
    shift_id: UUID,
    data: ShiftAttachmentCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("shifts:manage"))],
) -> dict:
    """업로드된 파일을 시프트에 첨부 (Attach an uploaded file to a shift)."""
    attachment = await schedule_service.add_attachment(db, shift_id, data, current_user)
    await db.commit()
    return schedule_service.build_attachment_response(attachment)
