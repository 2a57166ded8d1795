"""시스템 설정 라우터.

Settings Router — Runtime key/value settings (Owner/Admin). Values stored
here override the matching config defaults, e.g. ``auto_clock_out_max_hours``
and ``require_clock_out_photos``.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from staffhub.api.deps import require_permission
from staffhub.database import get_db
from staffhub.models.user import User
from staffhub.schemas.common import SettingResponse, SettingValue
from staffhub.services.audit_service import audit_service
from staffhub.services.setting_service import setting_service

router: APIRouter = APIRouter()


@router.get("", response_model=list[SettingResponse])
async def list_settings(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("settings:manage"))],
) -> list[dict]:
    settings = await setting_service.list_settings(db)
    return [setting_service.build_response(s) for s in settings]


@router.get("/{key}", response_model=SettingResponse)
async def get_setting(
    key: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("settings:manage"))],
) -> dict:
    setting = await setting_service.get_setting(db, key)
    return setting_service.build_response(setting)


@router.put("/{key}", response_model=SettingResponse)
async def put_setting(
    key: str,
    data: SettingValue,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("settings:manage"))],
) -> dict:
    """설정 생성 또는 갱신 (Create or replace a setting)."""
    setting = await setting_service.put_setting(db, key, data.value)
    await audit_service.log(
        db, current_user.id, "update", "setting", key, request=request,
        details={"value": data.value},
    )
    await db.commit()
    return setting_service.build_response(setting)
