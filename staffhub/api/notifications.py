"""알림 라우터 — 알림 목록, 읽지 않은 수, 읽음 처리.

Notification Router — Every user reads their own notifications.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from staffhub.api.deps import get_current_user
from staffhub.database import get_db
from staffhub.models.user import User
from staffhub.schemas.common import MessageResponse, PaginatedResponse, UnreadCountResponse
from staffhub.services.notification_service import notification_service

router: APIRouter = APIRouter()


@router.get("", response_model=PaginatedResponse)
async def list_notifications(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=100)] = 20,
) -> dict:
    """본인 알림 목록 — 최신순 페이지네이션.

    Args:
        db: 비동기 데이터베이스 세션 (Async database session)
        current_user: 인증된 사용자 (Authenticated user)
        page: 페이지 번호 (Page number)
        per_page: 페이지당 항목 수 (Items per page)

    Returns:
        dict: 페이지네이션된 알림 목록 (Paginated notification list)
    """
    notifications, total = await notification_service.list_notifications(
        db,
        user_id=current_user.id,
        page=page,
        per_page=per_page,
    )
    return {
        "items": [notification_service.build_response(n) for n in notifications],
        "total": total,
        "page": page,
        "per_page": per_page,
    }


@router.get("/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    count: int = await notification_service.get_unread_count(db, user_id=current_user.id)
    return {"unread_count": count}


@router.patch("/read-all", response_model=MessageResponse)
async def mark_all_read(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    """모든 읽지 않은 알림 읽음 처리 (Mark all unread notifications as read)."""
    count: int = await notification_service.mark_all_read(db, user_id=current_user.id)
    await db.commit()
    return {"message": f"{count} notifications marked as read"}


@router.patch("/{notification_id}/read", response_model=MessageResponse)
async def mark_read(
    notification_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    """단일 알림 읽음 처리 — 본인 알림이 아니면 404."""
    await notification_service.mark_read(db, notification_id=notification_id, user_id=current_user.id)
    await db.commit()
    return {"message": "Notification marked as read"}
