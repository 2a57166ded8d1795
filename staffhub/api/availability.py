"""근무 가능 여부 라우터.

User Availability Router — Employees manage their own rows; schedulers and
managers see and edit everyone's.
"""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from staffhub.api.deps import get_current_user
from staffhub.database import get_db
from staffhub.models.user import User
from staffhub.schemas.common import MessageResponse
from staffhub.schemas.schedule import AvailabilityCreate, AvailabilityResponse, AvailabilityUpdate
from staffhub.services.schedule_service import schedule_service

router: APIRouter = APIRouter()


@router.get("", response_model=list[AvailabilityResponse])
async def list_availability(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    user_id: Annotated[UUID | None, Query(description="사용자 필터 — 권한 없으면 무시")] = None,
    start: Annotated[date | None, Query(description="시작일 (inclusive)")] = None,
    end: Annotated[date | None, Query(description="종료일 (inclusive)")] = None,
) -> list[dict]:
    rows = await schedule_service.list_availability(db, current_user, user_id, start, end)
    return [schedule_service.build_availability_response(r) for r in rows]


@router.post("", response_model=AvailabilityResponse, status_code=201)
async def create_availability(
    data: AvailabilityCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    row = await schedule_service.create_availability(db, data, current_user)
    await db.commit()
    return schedule_service.build_availability_response(row)


@router.patch("/{availability_id}", response_model=AvailabilityResponse)
async def update_availability(
    availability_id: UUID,
    data: AvailabilityUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    row = await schedule_service.update_availability(db, availability_id, data, current_user)
    await db.commit()
    return schedule_service.build_availability_response(row)


@router.delete("/{availability_id}", response_model=MessageResponse)
async def delete_availability(
    availability_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict[str, str]:
    await schedule_service.delete_availability(db, availability_id, current_user)
    await db.commit()
    return {"message": "Availability deleted"}
