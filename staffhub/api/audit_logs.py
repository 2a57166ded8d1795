"""감사 로그 라우터 (Audit Log Router) — Owner/Admin 전용, 최신순."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from staffhub.api.deps import require_permission
from staffhub.database import get_db
from staffhub.models.user import User
from staffhub.schemas.common import AuditLogResponse
from staffhub.services.audit_service import audit_service

router: APIRouter = APIRouter()


@router.get("", response_model=list[AuditLogResponse])
async def list_audit_logs(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("audit_logs:view"))],
    user_id: Annotated[UUID | None, Query(description="행위자 필터")] = None,
    resource_type: Annotated[str | None, Query(description="리소스 유형 필터")] = None,
    limit: Annotated[int, Query(ge=1, le=1000)] = 100,
) -> list[dict]:
    logs = await audit_service.list_logs(db, user_id, resource_type, limit)
    return [audit_service.build_response(log) for log in logs]
