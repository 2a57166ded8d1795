"""서류 레포지토리 — 서류 목록 및 만료 검사 쿼리.

Document Repository — Listing and the bulk updates behind the expiry sweep.
"""

from datetime import datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from staffhub.models.document import Document
from staffhub.repositories.base import BaseRepository


class DocumentRepository(BaseRepository[Document]):
    """서류 레포지토리."""

    def __init__(self) -> None:
        super().__init__(Document)

    async def list_documents(
        self,
        db: AsyncSession,
        user_id: UUID | None = None,
        status: str | None = None,
        category: str | None = None,
    ) -> Sequence[Document]:
        """서류 목록 — 업로드 최신순."""
        return await self.get_all(
            db,
            {"user_id": user_id, "status": status, "category": category},
            order_by=Document.uploaded_date.desc(),
        )

    async def get_approved_expiring_between(
        self,
        db: AsyncSession,
        start: datetime,
        end: datetime,
    ) -> Sequence[Document]:
        """승인된 서류 중 만료일이 [start, end]에 있는 것."""
        query: Select = select(Document).where(
            Document.status == "approved",
            Document.expiry_date.is_not(None),
            Document.expiry_date >= start,
            Document.expiry_date <= end,
        )
        result = await db.execute(query)
        return result.scalars().all()

    async def get_past_due(self, db: AsyncSession, now: datetime) -> Sequence[Document]:
        """만료일이 지났지만 아직 approved/expiring인 서류."""
        query: Select = select(Document).where(
            Document.status.in_(("approved", "expiring")),
            Document.expiry_date.is_not(None),
            Document.expiry_date < now,
        )
        result = await db.execute(query)
        return result.scalars().all()


# 싱글턴 인스턴스 — Singleton instance
document_repository: DocumentRepository = DocumentRepository()
