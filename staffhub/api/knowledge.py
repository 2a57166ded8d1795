"""지식베이스 라우터.

Knowledge Router — Articles filtered by audience; Owner/Admin/HR manage
them and can upload PDFs (stored as ``pdf`` articles) and inline images.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from staffhub.api.deps import get_current_user, require_permission
from staffhub.database import get_db
from staffhub.models.user import User
from staffhub.schemas.common import MessageResponse, UploadedFile
from staffhub.schemas.content import KnowledgeCreate, KnowledgeResponse, KnowledgeUpdate
from staffhub.services.content_service import content_service
from staffhub.services.storage_service import storage_service

router: APIRouter = APIRouter()


@router.get("", response_model=list[KnowledgeResponse])
async def list_articles(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    category: Annotated[str | None, Query(description="분류 필터")] = None,
) -> list[dict]:
    """열람 가능한 문서 목록 — 초안은 관리자에게만 (Drafts only for managers)."""
    articles = await content_service.list_articles(db, current_user, category)
    return [content_service.build_article_response(a) for a in articles]


@router.get("/{article_id}", response_model=KnowledgeResponse)
async def get_article(
    article_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    article = await content_service.get_article(db, current_user, article_id)
    return content_service.build_article_response(article)


@router.post("", response_model=KnowledgeResponse, status_code=201)
async def create_article(
    data: KnowledgeCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("knowledge:manage"))],
) -> dict:
    article = await content_service.create_article(db, current_user, data)
    await db.commit()
    return content_service.build_article_response(article)


@router.post("/upload", response_model=KnowledgeResponse, status_code=201)
async def upload_article(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("knowledge:manage"))],
    file: Annotated[UploadFile, File(description="PDF 등 문서 파일")],
    title: Annotated[str, Form(min_length=1, max_length=255)],
    category: Annotated[str | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
) -> dict:
    """파일 업로드로 pdf 문서 생성 (Create a ``pdf`` article from an upload)."""
    name = storage_service.save(file.filename, await file.read(), file.content_type)
    data = KnowledgeCreate(
        title=title,
        description=description,
        category=category,
        type="pdf",
        file_url=storage_service.file_url(name),
    )
    article = await content_service.create_article(db, current_user, data)
    await db.commit()
    return content_service.build_article_response(article)


@router.post("/upload-image", response_model=UploadedFile, status_code=201)
async def upload_image(
    current_user: Annotated[User, Depends(require_permission("knowledge:manage"))],
    file: Annotated[UploadFile, File(description="본문 삽입 이미지")],
) -> dict:
    """본문용 이미지 업로드 — URL 반환 (Returns the image URL)."""
    data = await file.read()
    name = storage_service.save(file.filename, data, file.content_type)
    return {
        "file_name": name,
        "original_name": file.filename or name,
        "url": storage_service.file_url(name),
        "size": len(data),
        "content_type": file.content_type,
    }


@router.patch("/{article_id}", response_model=KnowledgeResponse)
async def update_article(
    article_id: UUID,
    data: KnowledgeUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("knowledge:manage"))],
) -> dict:
    article = await content_service.update_article(db, current_user, article_id, data)
    await db.commit()
    return content_service.build_article_response(article)


@router.delete("/{article_id}", response_model=MessageResponse)
async def delete_article(
    article_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("knowledge:manage"))],
) -> dict[str, str]:
    await content_service.delete_article(db, current_user, article_id)
    await db.commit()
    return {"message": "Article deleted"}
