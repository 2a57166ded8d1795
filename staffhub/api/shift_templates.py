"""시프트 템플릿 라우터.

Shift Template Router — Reusable shift time slots ("07:00"–"19:00").
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from staffhub.api.deps import get_current_user, require_permission
from staffhub.database import get_db
from staffhub.models.user import User
from staffhub.schemas.common import MessageResponse
from staffhub.schemas.schedule import ShiftTemplateCreate, ShiftTemplateResponse, ShiftTemplateUpdate
from staffhub.services.schedule_service import schedule_service

router: APIRouter = APIRouter()


@router.get("", response_model=list[ShiftTemplateResponse])
async def list_templates(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> list[dict]:
    templates = await schedule_service.list_templates(db)
    return [schedule_service.build_template_response(t) for t in templates]


@router.post("", response_model=ShiftTemplateResponse, status_code=201)
async def create_template(
    data: ShiftTemplateCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("shift_templates:manage"))],
) -> dict:
    template = await schedule_service.create_template(db, data)
    await db.commit()
    return schedule_service.build_template_response(template)


@router.patch("/{template_id}", response_model=ShiftTemplateResponse)
async def update_template(
    template_id: UUID,
    data: ShiftTemplateUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("shift_templates:manage"))],
) -> dict:
    template = await schedule_service.update_template(db, template_id, data)
    await db.commit()
    return schedule_service.build_template_response(template)


@router.delete("/{template_id}", response_model=MessageResponse)
async def delete_template(
    template_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("shift_templates:manage"))],
) -> dict[str, str]:
    await schedule_service.delete_template(db, template_id)
    await db.commit()
    return {"message": "Shift template deleted"}
