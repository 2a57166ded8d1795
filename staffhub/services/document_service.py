"""서류 서비스 — 자격 서류 등록, 검토, 만료 검사.

Document Service — Credential documents: upload records, HR review and the
expiry sweep.
"""

from datetime import datetime, timedelta
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from staffhub.database import utcnow
from staffhub.models.document import Document
from staffhub.models.user import User
from staffhub.repositories.document_repository import document_repository
from staffhub.repositories.user_repository import user_repository
from staffhub.schemas.document import DocumentCreate, DocumentUpdate
from staffhub.services.notification_service import notification_service
from staffhub.services.time_entry_service import as_utc
from staffhub.utils.exceptions import ForbiddenError, InvalidTransitionError, NotFoundError
from staffhub.utils.permissions import has_permission

TRANSITIONS: dict[tuple[str, str], str] = {
    ("rejected", "submit"): "submitted",
    ("expired", "submit"): "submitted",
    ("expiring", "submit"): "submitted",
    ("submitted", "approve"): "approved",
    ("submitted", "reject"): "rejected",
}


class DocumentService:
    """서류 서비스."""

    def _next(self, document: Document, action: str) -> str:
        target = TRANSITIONS.get((document.status, action))
        if target is None:
            raise InvalidTransitionError("document", document.status, action)
        return target

    async def list_documents(
        self,
        db: AsyncSession,
        caller: User,
        user_id: UUID | None = None,
        status: str | None = None,
        category: str | None = None,
    ) -> Sequence[Document]:
        """서류 목록 — 권한 없는 사용자는 본인 서류만."""
        if not has_permission(caller.role, "documents:view_all"):
            user_id = caller.id
        return await document_repository.list_documents(db, user_id, status, category)

    async def get_document(self, db: AsyncSession, document_id: UUID) -> Document:
        document = await document_repository.get_by_id(db, document_id)
        if document is None:
            raise NotFoundError("Document not found")
        return document

    async def get_visible_document(self, db: AsyncSession, caller: User, document_id: UUID) -> Document:
        document = await self.get_document(db, document_id)
        if document.user_id != caller.id and not has_permission(caller.role, "documents:view_all"):
            raise ForbiddenError("Cannot view another user's document")
        return document

    async def create_document(self, db: AsyncSession, caller: User, data: DocumentCreate) -> Document:
        """서류 등록 — 본인 서류, HR 이상은 타인 서류도 가능.

        Raises:
            ForbiddenError: 권한 없이 타인 서류 등록 (Creating for someone else)
            NotFoundError: 대상 사용자 없음 (Unknown user)
        """
        user_id: UUID = data.user_id or caller.id
        if user_id != caller.id:
            if not has_permission(caller.role, "documents:review"):
                raise ForbiddenError("Cannot upload documents for another user")
            if await user_repository.get_by_id(db, user_id) is None:
                raise NotFoundError("User not found")

        values = data.model_dump(exclude={"user_id", "metadata"})
        values.update(
            user_id=user_id,
            meta=data.metadata,
            expiry_date=as_utc(data.expiry_date),
            status="submitted",
        )
        return await document_repository.create(db, values)

    async def update_document(
        self, db: AsyncSession, caller: User, document_id: UUID, data: DocumentUpdate
    ) -> Document:
        """서류 정보 수정 — 승인 전 본인, 또는 HR 이상.

        Raises:
            ForbiddenError: 권한 없음 또는 승인된 서류 (Not allowed / already approved)
        """
        document = await self.get_document(db, document_id)
        reviewer: bool = has_permission(caller.role, "documents:review")
        if not reviewer:
            if document.user_id != caller.id:
                raise ForbiddenError("Cannot edit another user's document")
            if document.status == "approved":
                raise ForbiddenError("Approved documents can only be changed by HR")

        changes: dict[str, Any] = data.model_dump(exclude_unset=True)
        if "metadata" in changes:
            changes["meta"] = changes.pop("metadata") or {}
        if "expiry_date" in changes:
            changes["expiry_date"] = as_utc(changes["expiry_date"])
        if changes.get("title", "") is None:
            changes.pop("title")
        return await document_repository.update(db, document, changes)

    async def submit(self, db: AsyncSession, caller: User, document_id: UUID) -> Document:
        """서류 재제출 (Resubmit a rejected or lapsing document for review)."""
        document = await self.get_document(db, document_id)
        if document.user_id != caller.id and not has_permission(caller.role, "documents:review"):
            raise ForbiddenError("Cannot submit another user's document")
        return await document_repository.update(db, document, {
            "status": self._next(document, "submit"),
            "rejection_reason": None,
        })

    async def approve(self, db: AsyncSession, reviewer: User, document_id: UUID) -> Document:
        document = await self.get_document(db, document_id)
        document = await document_repository.update(db, document, {
            "status": self._next(document, "approve"),
            "approved_by": reviewer.id,
            "approved_at": utcnow(),
            "rejection_reason": None,
        })
        await notification_service.notify(
            db, document.user_id, "document_approved",
            f"Your document '{document.title}' was approved", "document", document.id,
        )
        return document

    async def reject(self, db: AsyncSession, document_id: UUID, reason: str | None) -> Document:
        document = await self.get_document(db, document_id)
        document = await document_repository.update(db, document, {
            "status": self._next(document, "reject"),
            "rejection_reason": reason,
        })
        await notification_service.notify(
            db, document.user_id, "document_rejected",
            f"Your document '{document.title}' was rejected", "document", document.id,
        )
        return document

    async def delete_document(self, db: AsyncSession, caller: User, document_id: UUID) -> dict:
        """서류 삭제 — 본인 또는 HR 이상. 삭제 전 값을 반환."""
        document = await self.get_document(db, document_id)
        if document.user_id != caller.id and not has_permission(caller.role, "documents:review"):
            raise ForbiddenError("Cannot delete another user's document")
        before = {"user_id": document.user_id, "title": document.title, "status": document.status}
        await document_repository.delete(db, document)
        return before

    async def check_expiry(self, db: AsyncSession, days: int) -> dict:
        """만료 검사.

        Approved documents expiring within ``days`` become ``expiring``;
        approved or expiring documents already past their expiry date become
        ``expired``. Running the sweep again changes nothing.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            days: 만료 임박 기준 일수 (Look-ahead window in days)

        Returns:
            dict: {"expiring": int, "expired": int, "document_ids": list[str]}
        """
        now: datetime = utcnow()
        changed: list[Document] = []

        expired = await document_repository.get_past_due(db, now)
        for document in expired:
            document.status = "expired"
            changed.append(document)

        expiring = await document_repository.get_approved_expiring_between(db, now, now + timedelta(days=days))
        for document in expiring:
            document.status = "expiring"
            changed.append(document)
        await db.flush()

        for document in changed:
            await notification_service.notify(
                db, document.user_id, f"document_{document.status}",
                f"Your document '{document.title}' is {document.status}", "document", document.id,
            )

        return {
            "expiring": len(expiring),
            "expired": len(expired),
            "document_ids": [str(d.id) for d in changed],
        }

    def build_response(self, document: Document) -> dict:
        return {
            "id": str(document.id),
            "user_id": str(document.user_id),
            "title": document.title,
            "description": document.description,
            "file_url": document.file_url,
            "file_type": document.file_type,
            "category": document.category,
            "metadata": document.meta or {},
            "status": document.status,
            "uploaded_date": document.uploaded_date,
            "expiry_date": document.expiry_date,
            "approved_by": str(document.approved_by) if document.approved_by else None,
            "approved_at": document.approved_at,
            "rejection_reason": document.rejection_reason,
            "notes": document.notes,
        }


# 싱글턴 인스턴스 — Singleton instance
document_service: DocumentService = DocumentService()
