"""서류 라우터 — 자격 서류 등록, 검토, 만료 검사.

Document Router — Credential documents. Listing is scoped to the caller
unless they hold ``documents:view_all``; reads are audited as PHI access.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from staffhub.api.deps import get_current_user, require_permission
from staffhub.database import get_db
from staffhub.models.user import User
from staffhub.schemas.common import MessageResponse
from staffhub.schemas.document import (
    DocumentCreate,
    DocumentReject,
    DocumentResponse,
    DocumentUpdate,
    ExpiryCheckRequest,
    ExpiryCheckResponse,
)
from staffhub.services.audit_service import audit_service
from staffhub.services.document_service import document_service

router: APIRouter = APIRouter()


@router.post("/check-expiry", response_model=ExpiryCheckResponse)
async def check_expiry(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("documents:check_expiry"))],
    data: ExpiryCheckRequest | None = None,
) -> dict:
    """만료 검사 — 기본 30일 이내 만료 예정 서류를 expiring으로.

    Flip approved documents expiring within ``days`` to ``expiring`` and
    past-due ones to ``expired``. Safe to call repeatedly.
    """
    days: int = (data or ExpiryCheckRequest()).days
    result = await document_service.check_expiry(db, days)
    await audit_service.log(
        db, current_user.id, "check_expiry", "document", request=request,
        details={"days": days, **result},
    )
    await db.commit()
    return result


@router.get("", response_model=list[DocumentResponse])
async def list_documents(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    user_id: Annotated[UUID | None, Query(description="사용자 필터 — 권한 없으면 무시")] = None,
    status: Annotated[str | None, Query(description="상태 필터")] = None,
    category: Annotated[str | None, Query(description="분류 필터")] = None,
) -> list[dict]:
    documents = await document_service.list_documents(db, current_user, user_id, status, category)
    return [document_service.build_response(d) for d in documents]


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: UUID,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    document = await document_service.get_visible_document(db, current_user, document_id)
    await audit_service.log(
        db, current_user.id, "view", "document", document.id, request=request,
        phi_accessed=True, phi_fields=["file_url", "metadata"],
    )
    await db.commit()
    return document_service.build_response(document)


@router.post("", response_model=DocumentResponse, status_code=201)
async def create_document(
    data: DocumentCreate,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    document = await document_service.create_document(db, current_user, data)
    await audit_service.log(db, current_user.id, "create", "document", document.id, request=request)
    await db.commit()
    return document_service.build_response(document)


@router.patch("/{document_id}", response_model=DocumentResponse)
async def update_document(
    document_id: UUID,
    data: DocumentUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    document = await document_service.update_document(db, current_user, document_id, data)
    await db.commit()
    return document_service.build_response(document)


@router.post("/{document_id}/submit", response_model=DocumentResponse)
async def submit_document(
    document_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    document = await document_service.submit(db, current_user, document_id)
    await db.commit()
    return document_service.build_response(document)


@router.post("/{document_id}/approve", response_model=DocumentResponse)
async def approve_document(
    document_id: UUID,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("documents:review"))],
) -> dict:
    document = await document_service.approve(db, current_user, document_id)
    await audit_service.log(db, current_user.id, "approve", "document", document.id, request=request)
    await db.commit()
    return document_service.build_response(document)


@router.post("/{document_id}/reject", response_model=DocumentResponse)
async def reject_document(
    document_id: UUID,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("documents:review"))],
    data: DocumentReject | None = None,
) -> dict:
    reason = data.reason if data else None
    document = await document_service.reject(db, document_id, reason)
    await audit_service.log(
        db, current_user.id, "reject", "document", document.id, request=request,
        details={"reason": reason},
    )
    await db.commit()
    return document_service.build_response(document)


@router.delete("/{document_id}", response_model=MessageResponse)
async def delete_document(
    document_id: UUID,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict[str, str]:
    before = await document_service.delete_document(db, current_user, document_id)
    await audit_service.log(
        db, current_user.id, "delete", "document", document_id, request=request,
        details={"before": before},
    )
    await db.commit()
    return {"message": "Document deleted"}
