"""그룹 관리 라우터 (Group Router)."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from staffhub.api.deps import require_permission
from staffhub.database import get_db
from staffhub.models.user import User
from staffhub.schemas.common import MessageResponse
from staffhub.schemas.user import GroupCreate, GroupResponse, GroupUpdate
from staffhub.services.user_service import user_service

router: APIRouter = APIRouter()


@router.get("", response_model=list[GroupResponse])
async def list_groups(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("groups:manage"))],
) -> list[dict]:
    groups = await user_service.list_groups(db)
    return [user_service.build_group_response(g) for g in groups]


@router.get("/{group_id}", response_model=GroupResponse)
async def get_group(
    group_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("groups:manage"))],
) -> dict:
    group = await user_service.get_group(db, group_id)
    return user_service.build_group_response(group)


@router.post("", response_model=GroupResponse, status_code=201)
async def create_group(
    data: GroupCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("groups:manage"))],
) -> dict:
    """그룹 생성 — 이름 중복 시 409 (Duplicate name → 409)."""
    group = await user_service.create_group(db, data, current_user)
    await db.commit()
    return user_service.build_group_response(group)


@router.patch("/{group_id}", response_model=GroupResponse)
async def update_group(
    group_id: UUID,
    data: GroupUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("groups:manage"))],
) -> dict:
    group = await user_service.update_group(db, group_id, data)
    await db.commit()
    return user_service.build_group_response(group)


@router.delete("/{group_id}", response_model=MessageResponse)
async def delete_group(
    group_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("groups:manage"))],
) -> dict[str, str]:
    await user_service.delete_group(db, group_id)
    await db.commit()
    return {"message": "Group deleted"}
