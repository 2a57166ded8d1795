"""콘텐츠 레포지토리 — 지식베이스 및 공지(업데이트) 쿼리.

Content Repository — Knowledge articles, updates and update engagement
(likes, acknowledgements, comments).
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from staffhub.models.knowledge import KnowledgeArticle
from staffhub.models.update import Update, UpdateAcknowledgement, UpdateComment, UpdateLike
from staffhub.repositories.base import BaseRepository


class KnowledgeRepository(BaseRepository[KnowledgeArticle]):
    """지식 문서 레포지토리."""

    def __init__(self) -> None:
        super().__init__(KnowledgeArticle)

    async def list_articles(
        self,
        db: AsyncSession,
        category: str | None = None,
        publish_status: str | None = None,
    ) -> Sequence[KnowledgeArticle]:
        """지식 문서 목록 — 최근 수정순 (Most recently updated first)."""
        return await self.get_all(
            db,
            {"category": category, "publish_status": publish_status},
            order_by=KnowledgeArticle.last_updated.desc(),
        )


class UpdateRepository(BaseRepository[Update]):
    """공지 레포지토리."""

    def __init__(self) -> None:
        super().__init__(Update)

    async def list_updates(self, db: AsyncSession, publish_status: str | None = None) -> Sequence[Update]:
        """공지 목록 — 최신순."""
        return await self.get_all(db, {"publish_status": publish_status}, order_by=Update.created_at.desc())

    async def get_like(self, db: AsyncSession, update_id: UUID, user_id: UUID) -> UpdateLike | None:
        result = await db.execute(
            select(UpdateLike).where(UpdateLike.update_id == update_id, UpdateLike.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_acknowledgement(
        self, db: AsyncSession, update_id: UUID, user_id: UUID
    ) -> UpdateAcknowledgement | None:
        result = await db.execute(
            select(UpdateAcknowledgement).where(
                UpdateAcknowledgement.update_id == update_id,
                UpdateAcknowledgement.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def count_for(self, db: AsyncSession, model: type, update_ids: list[UUID]) -> dict[UUID, int]:
        """공지별 좋아요/확인/댓글 수 집계 (Per-update counts for an engagement table)."""
        if not update_ids:
            return {}
        query: Select = (
            select(model.update_id, func.count())
            .where(model.update_id.in_(update_ids))
            .group_by(model.update_id)
        )
        result = await db.execute(query)
        return {row[0]: row[1] for row in result.all()}

    async def ids_for_user(self, db: AsyncSession, model: type, user_id: UUID, update_ids: list[UUID]) -> set[UUID]:
        """사용자가 반응한 공지 ID 집합 (Updates the user liked or acknowledged)."""
        if not update_ids:
            return set()
        result = await db.execute(
            select(model.update_id).where(model.user_id == user_id, model.update_id.in_(update_ids))
        )
        return set(result.scalars().all())

    async def list_comments(self, db: AsyncSession, update_id: UUID) -> Sequence[UpdateComment]:
        result = await db.execute(
            select(UpdateComment).where(UpdateComment.update_id == update_id).order_by(UpdateComment.created_at)
        )
        return result.scalars().all()

    async def delete_engagement(self, db: AsyncSession, update_id: UUID) -> None:
        """공지의 좋아요/확인/댓글 일괄 삭제 (Remove engagement rows of an update)."""
        for model in (UpdateLike, UpdateAcknowledgement, UpdateComment):
            await db.execute(delete(model).where(model.update_id == update_id))
        await db.flush()


class UpdateCommentRepository(BaseRepository[UpdateComment]):
    """공지 댓글 레포지토리."""

    def __init__(self) -> None:
        super().__init__(UpdateComment)


# 싱글턴 인스턴스 — Singleton instances
knowledge_repository: KnowledgeRepository = KnowledgeRepository()
update_repository: UpdateRepository = UpdateRepository()
update_comment_repository: UpdateCommentRepository = UpdateCommentRepository()
