"""사용자 관리 라우터.

User Router — User directory, admin-created accounts (onboarding links),
profile updates, archiving and external group synchronization.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from staffhub.api.deps import get_current_user, require_permission
from staffhub.database import get_db
from staffhub.models.user import User
from staffhub.schemas.user import GroupSyncRequest, GroupSyncResponse, UserCreate, UserResponse, UserUpdate
from staffhub.services.audit_service import audit_service
from staffhub.services.user_service import user_service
from staffhub.utils.exceptions import ForbiddenError
from staffhub.utils.permissions import has_permission

router: APIRouter = APIRouter()


@router.get("", response_model=list[UserResponse])
async def list_users(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("users:list"))],
    status: Annotated[str | None, Query(description="active | pending-onboarding | archived")] = None,
    role: Annotated[str | None, Query(description="역할 필터")] = None,
) -> list[dict]:
    users = await user_service.list_users(db, status, role)
    return [user_service.build_response(u) for u in users]


@router.post("/groups/sync", response_model=GroupSyncResponse)
async def sync_groups(
    data: GroupSyncRequest,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("users:manage"))],
) -> dict:
    """외부 그룹 동기화 — 사용자별 groups 배열 교체.

    Replace the ``groups`` array of each listed user. Unknown IDs are
    reported in ``missing_user_ids``.
    """
    result = await user_service.sync_groups(db, data)
    await audit_service.log(
        db, current_user.id, "sync_groups", "user", request=request,
        details={"updated": result["updated"], "missing_user_ids": result["missing_user_ids"]},
    )
    await db.commit()
    return result


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: UUID,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    """사용자 상세 — 본인 또는 users:view 권한 (Self or directory viewers).

    Profiles hold PHI, so every read is audited.
    """
    if user_id != current_user.id and not has_permission(current_user.role, "users:view"):
        raise ForbiddenError("Insufficient permissions")
    user = await user_service.get_user(db, user_id)
    await audit_service.log(
        db, current_user.id, "view", "user", user.id, request=request,
        phi_accessed=True, phi_fields=["profile"],
    )
    await db.commit()
    return user_service.build_response(user)


@router.post("", response_model=UserResponse, status_code=201)
async def create_user(
    data: UserCreate,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("users:manage"))],
) -> dict:
    """사용자 생성 — 비밀번호가 없으면 온보딩 링크 발급.

    Without a password the user starts in ``pending-onboarding`` and the
    link is emailed when SMTP is configured.
    """
    user = await user_service.create_user(db, data)
    await audit_service.log(
        db, current_user.id, "create", "user", user.id, request=request,
        details={"username": user.username, "role": user.role},
    )
    await db.commit()
    return user_service.build_response(user)


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: UUID,
    data: UserUpdate,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("users:manage"))],
) -> dict:
    user = await user_service.update_user(db, user_id, data)
    changed = sorted(data.model_dump(exclude_unset=True))
    await audit_service.log(
        db, current_user.id, "update", "user", user.id, request=request,
        phi_accessed="profile" in changed, phi_fields=["profile"] if "profile" in changed else None,
        # 비밀번호 값은 기록하지 않음 — field names only
        details={"fields": changed},
    )
    await db.commit()
    return user_service.build_response(user)


@router.delete("/{user_id}", response_model=UserResponse)
async def archive_user(
    user_id: UUID,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("users:manage"))],
) -> dict:
    """사용자 보관 처리 — 삭제 대신 archived (Users are archived, not deleted)."""
    user = await user_service.archive_user(db, user_id)
    await audit_service.log(db, current_user.id, "archive", "user", user.id, request=request)
    await db.commit()
    return user_service.build_response(user)
