"""시프트 배정 라우터 — 배정 조회, 수락, 상태 변경, 삭제.

Shift Assignment Router — List (scoped to the caller unless privileged),
confirm by the assignee, status update and removal by schedulers.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from staffhub.api.deps import get_current_user, require_permission
from staffhub.database import get_db
from staffhub.models.user import User
from staffhub.schemas.common import MessageResponse
from staffhub.schemas.schedule import ShiftAssignmentResponse, ShiftAssignmentUpdate
from staffhub.services.schedule_service import schedule_service

router: APIRouter = APIRouter()


@router.get("", response_model=list[ShiftAssignmentResponse])
async def list_assignments(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    shift_id: Annotated[UUID | None, Query(description="시프트 필터")] = None,
    user_id: Annotated[UUID | None, Query(description="사용자 필터 — 권한 없으면 무시")] = None,
) -> list[dict]:
    assignments = await schedule_service.list_assignments(db, current_user, shift_id, user_id)
    return [schedule_service.build_assignment_response(a) for a in assignments]


@router.post("/{assignment_id}/confirm", response_model=ShiftAssignmentResponse)
async def confirm_assignment(
    assignment_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    """배정 수락 — 배정된 본인만 (Assignee accepts the shift)."""
    assignment = await schedule_service.confirm_assignment(db, assignment_id, current_user)
    await db.commit()
    return schedule_service.build_assignment_response(assignment)


@router.patch("/{assignment_id}", response_model=ShiftAssignmentResponse)
async def update_assignment(
    assignment_id: UUID,
    data: ShiftAssignmentUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("shift_assignments:manage"))],
) -> dict:
    assignment = await schedule_service.update_assignment(db, assignment_id, data)
    await db.commit()
    return schedule_service.build_assignment_response(assignment)


@router.delete("/{assignment_id}", response_model=MessageResponse)
async def delete_assignment(
    assignment_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("shift_assignments:manage"))],
) -> dict[str, str]:
    await schedule_service.delete_assignment(db, assignment_id)
    await db.commit()
    return {"message": "Shift assignment deleted"}
