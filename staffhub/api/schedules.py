"""스케줄 라우터 — 스케줄 CRUD.

Schedule Router — Schedule list/detail and Owner/Admin/Scheduler management.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from staffhub.api.deps import get_current_user, require_permission
from staffhub.database import get_db
from staffhub.models.user import User
from staffhub.schemas.common import MessageResponse
from staffhub.schemas.schedule import ScheduleCreate, ScheduleResponse, ScheduleUpdate
from staffhub.services.schedule_service import schedule_service

router: APIRouter = APIRouter()


@router.get("", response_model=list[ScheduleResponse])
async def list_schedules(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    status: Annotated[str | None, Query(description="active | archived | draft")] = None,
) -> list[dict]:
    schedules = await schedule_service.list_schedules(db, status)
    return [schedule_service.build_schedule_response(s) for s in schedules]


@router.get("/{schedule_id}", response_model=ScheduleResponse)
async def get_schedule(
    schedule_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    schedule = await schedule_service.get_schedule(db, schedule_id)
    return schedule_service.build_schedule_response(schedule)


@router.post("", response_model=ScheduleResponse, status_code=201)
async def create_schedule(
    data: ScheduleCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("schedules:manage"))],
) -> dict:
    schedule = await schedule_service.create_schedule(db, data, current_user)
    await db.commit()
    return schedule_service.build_schedule_response(schedule)


@router.patch("/{schedule_id}", response_model=ScheduleResponse)
async def update_schedule(
    schedule_id: UUID,
    data: ScheduleUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("schedules:manage"))],
) -> dict:
    schedule = await schedule_service.update_schedule(db, schedule_id, data)
    await db.commit()
    return schedule_service.build_schedule_response(schedule)


@router.delete("/{schedule_id}", response_model=MessageResponse)
async def delete_schedule(
    schedule_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("schedules:manage"))],
) -> dict[str, str]:
    """스케줄 삭제 — 소속 시프트와 배정도 삭제 (Also removes its shifts)."""
    await schedule_service.delete_schedule(db, schedule_id)
    await db.commit()
    return {"message": "Schedule deleted"}
