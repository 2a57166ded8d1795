"""공지(업데이트) 라우터 — 공지, 좋아요, 확인, 댓글.

Updates Router — Announcements filtered by audience, with likes,
acknowledgements, comments and attachments.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from staffhub.api.deps import get_current_user, require_permission
from staffhub.database import get_db
from staffhub.models.user import User
from staffhub.schemas.common import MessageResponse
from staffhub.schemas.content import (
    AcknowledgeResponse,
    CommentCreate,
    CommentResponse,
    LikeResponse,
    UpdateCreate,
    UpdateEdit,
    UpdateResponse,
)
from staffhub.services.content_service import content_service
from staffhub.services.storage_service import storage_service

router: APIRouter = APIRouter()


@router.get("", response_model=list[UpdateResponse])
async def list_updates(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> list[dict]:
    updates = await content_service.list_updates(db, current_user)
    return await content_service.build_update_responses(db, current_user, updates)


@router.get("/{update_id}", response_model=UpdateResponse)
async def get_update(
    update_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    update = await content_service.get_update(db, current_user, update_id)
    return (await content_service.build_update_responses(db, current_user, [update]))[0]


@router.post("", response_model=UpdateResponse, status_code=201)
async def create_update(
    data: UpdateCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("updates:manage"))],
) -> dict:
    update = await content_service.create_update(db, current_user, data)
    await db.commit()
    return (await content_service.build_update_responses(db, current_user, [update]))[0]


@router.patch("/{update_id}", response_model=UpdateResponse)
async def edit_update(
    update_id: UUID,
    data: UpdateEdit,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("updates:manage"))],
) -> dict:
    update = await content_service.edit_update(db, current_user, update_id, data)
    await db.commit()
    return (await content_service.build_update_responses(db, current_user, [update]))[0]


@router.delete("/{update_id}", response_model=MessageResponse)
async def delete_update(
    update_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("updates:manage"))],
) -> dict[str, str]:
    await content_service.delete_update(db, current_user, update_id)
    await db.commit()
    return {"message": "Update deleted"}


@router.post("/{update_id}/attachments", response_model=UpdateResponse)
async def upload_attachment(
    update_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("updates:manage"))],
    file: Annotated[UploadFile, File(description="첨부파일")],
) -> dict:
    """첨부파일 업로드 후 공지에 추가 (Upload and attach a file)."""
    name = storage_service.save(file.filename, await file.read(), file.content_type)
    update = await content_service.add_attachment(db, current_user, update_id, storage_service.file_url(name))
    await db.commit()
    return (await content_service.build_update_responses(db, current_user, [update]))[0]


@router.post("/{update_id}/like", response_model=LikeResponse)
async def toggle_like(
    update_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    """좋아요 토글 (Like or unlike)."""
    result = await content_service.toggle_like(db, current_user, update_id)
    await db.commit()
    return result


@router.post("/{update_id}/acknowledge", response_model=AcknowledgeResponse)
async def acknowledge(
    update_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    """공지 확인 — 반복 호출 시 최초 확인 시각 유지 (Keeps the first timestamp)."""
    ack = await content_service.acknowledge(db, current_user, update_id)
    await db.commit()
    return {"acknowledged": True, "acknowledged_at": ack.acknowledged_at}


@router.get("/{update_id}/comments", response_model=list[CommentResponse])
async def list_comments(
    update_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> list[dict]:
    comments = await content_service.list_comments(db, current_user, update_id)
    return [content_service.build_comment_response(c) for c in comments]


@router.post("/{update_id}/comments", response_model=CommentResponse, status_code=201)
async def add_comment(
    update_id: UUID,
    data: CommentCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    comment = await content_service.add_comment(db, current_user, update_id, data)
    await db.commit()
    return content_service.build_comment_response(comment)


@router.delete("/comments/{comment_id}", response_model=MessageResponse)
async def delete_comment(
    comment_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict[str, str]:
    """댓글 삭제 — 작성자 또는 Owner/Admin (Author or admin)."""
    await content_service.delete_comment(db, current_user, comment_id)
    await db.commit()
    return {"message": "Comment deleted"}
