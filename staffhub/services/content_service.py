"""콘텐츠 서비스 — 지식베이스와 공지(업데이트).

Content Service — Knowledge articles and updates (announcements), both
filtered per caller by ``staffhub.services.visibility``. Updates also carry
likes, acknowledgements and comments.
"""

from typing import Any, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from staffhub.models.knowledge import KnowledgeArticle
from staffhub.models.update import Update, UpdateAcknowledgement, UpdateComment, UpdateLike
from staffhub.models.user import User
from staffhub.repositories.content_repository import (
    knowledge_repository,
    update_comment_repository,
    update_repository,
)
from staffhub.schemas.content import CommentCreate, KnowledgeCreate, KnowledgeUpdate, UpdateCreate, UpdateEdit
from staffhub.services.visibility import can_view, filter_visible
from staffhub.utils.exceptions import ForbiddenError, NotFoundError
from staffhub.utils.permissions import has_permission, is_admin

# null 불가 컬럼 — explicit nulls in partial updates are dropped
_NON_NULL_FIELDS: tuple[str, ...] = (
    "title", "content", "type", "publish_status", "visibility",
    "target_user_ids", "target_group_ids", "attachments",
)


def _drop_nulls(changes: dict[str, Any], content_nullable: bool = False) -> dict[str, Any]:
    for field in _NON_NULL_FIELDS:
        if field == "content" and content_nullable:
            continue
        if field in changes and changes[field] is None:
            changes.pop(field)
    return changes


class ContentService:
    """콘텐츠 서비스."""

    def is_knowledge_manager(self, user: User) -> bool:
        return has_permission(user.role, "knowledge:manage")

    def is_update_manager(self, user: User) -> bool:
        return has_permission(user.role, "updates:manage")

    # --- 지식베이스 (Knowledge) ---

    async def list_articles(
        self, db: AsyncSession, caller: User, category: str | None = None
    ) -> list[KnowledgeArticle]:
        """열람 가능한 지식 문서 목록 (Articles the caller may see)."""
        articles = await knowledge_repository.list_articles(db, category)
        return filter_visible(articles, caller, self.is_knowledge_manager(caller))

    async def get_article(self, db: AsyncSession, caller: User, article_id: UUID) -> KnowledgeArticle:
        """지식 문서 조회 — 볼 수 없으면 404 (Hidden articles look missing)."""
        article = await knowledge_repository.get_by_id(db, article_id)
        if article is None or not can_view(article, caller, self.is_knowledge_manager(caller)):
            raise NotFoundError("Article not found")
        return article

    async def create_article(self, db: AsyncSession, author: User, data: KnowledgeCreate) -> KnowledgeArticle:
        return await knowledge_repository.create(db, {**data.model_dump(), "author_id": author.id})

    async def update_article(
        self, db: AsyncSession, caller: User, article_id: UUID, data: KnowledgeUpdate
    ) -> KnowledgeArticle:
        article = await self.get_article(db, caller, article_id)
        changes = _drop_nulls(data.model_dump(exclude_unset=True), content_nullable=True)
        return await knowledge_repository.update(db, article, changes)

    async def delete_article(self, db: AsyncSession, caller: User, article_id: UUID) -> None:
        article = await self.get_article(db, caller, article_id)
        await knowledge_repository.delete(db, article)

    def build_article_response(self, article: KnowledgeArticle) -> dict:
        return {
            "id": str(article.id),
            "title": article.title,
            "description": article.description,
            "content": article.content,
            "type": article.type,
            "category": article.category,
            "publish_status": article.publish_status,
            "visibility": article.visibility,
            "target_user_ids": article.target_user_ids or [],
            "target_group_ids": article.target_group_ids or [],
            "file_url": article.file_url,
            "author_id": str(article.author_id) if article.author_id else None,
            "last_updated": article.last_updated,
            "created_at": article.created_at,
        }

    # --- 공지 (Updates) ---

    async def list_updates(self, db: AsyncSession, caller: User) -> list[Update]:
        updates = await update_repository.list_updates(db)
        return filter_visible(updates, caller, self.is_update_manager(caller))

    async def get_update(self, db: AsyncSession, caller: User, update_id: UUID) -> Update:
        update = await update_repository.get_by_id(db, update_id)
        if update is None or not can_view(update, caller, self.is_update_manager(caller)):
            raise NotFoundError("Update not found")
        return update

    async def create_update(self, db: AsyncSession, author: User, data: UpdateCreate) -> Update:
        return await update_repository.create(db, {**data.model_dump(), "author_id": author.id})

    async def edit_update(self, db: AsyncSession, caller: User, update_id: UUID, data: UpdateEdit) -> Update:
        update = await self.get_update(db, caller, update_id)
        return await update_repository.update(db, update, _drop_nulls(data.model_dump(exclude_unset=True)))

    async def delete_update(self, db: AsyncSession, caller: User, update_id: UUID) -> None:
        update = await self.get_update(db, caller, update_id)
        await update_repository.delete_engagement(db, update.id)
        await update_repository.delete(db, update)

    async def add_attachment(self, db: AsyncSession, caller: User, update_id: UUID, file_url: str) -> Update:
        update = await self.get_update(db, caller, update_id)
        return await update_repository.update(db, update, {"attachments": [*(update.attachments or []), file_url]})

    async def toggle_like(self, db: AsyncSession, caller: User, update_id: UUID) -> dict:
        """좋아요 토글 (Like, or unlike when already liked).

        Returns:
            dict: {"liked": bool, "like_count": int}
        """
        update = await self.get_update(db, caller, update_id)
        like = await update_repository.get_like(db, update.id, caller.id)
        if like is None:
            db.add(UpdateLike(update_id=update.id, user_id=caller.id))
        else:
            await db.delete(like)
        await db.flush()
        counts = await update_repository.count_for(db, UpdateLike, [update.id])
        return {"liked": like is None, "like_count": counts.get(update.id, 0)}

    async def acknowledge(self, db: AsyncSession, caller: User, update_id: UUID) -> UpdateAcknowledgement:
        """공지 확인 — 이미 확인했으면 기존 기록 반환 (Idempotent)."""
        update = await self.get_update(db, caller, update_id)
        ack = await update_repository.get_acknowledgement(db, update.id, caller.id)
        if ack is not None:
            return ack
        ack = UpdateAcknowledgement(update_id=update.id, user_id=caller.id)
        db.add(ack)
        await db.flush()
        await db.refresh(ack)
        return ack

    async def list_comments(self, db: AsyncSession, caller: User, update_id: UUID) -> Sequence[UpdateComment]:
        update = await self.get_update(db, caller, update_id)
        return await update_repository.list_comments(db, update.id)

    async def add_comment(
        self, db: AsyncSession, caller: User, update_id: UUID, data: CommentCreate
    ) -> UpdateComment:
        update = await self.get_update(db, caller, update_id)
        return await update_comment_repository.create(db, {
            "update_id": update.id,
            "user_id": caller.id,
            "content": data.content,
        })

    async def delete_comment(self, db: AsyncSession, caller: User, comment_id: UUID) -> None:
        """댓글 삭제 — 작성자 또는 Owner/Admin.

        Raises:
            NotFoundError: 댓글 없음 (Unknown comment)
            ForbiddenError: 작성자가 아님 (Not the author)
        """
        comment = await update_comment_repository.get_by_id(db, comment_id)
        if comment is None:
            raise NotFoundError("Comment not found")
        if comment.user_id != caller.id and not is_admin(caller.role):
            raise ForbiddenError("Cannot delete another user's comment")
        await update_comment_repository.delete(db, comment)

    async def build_update_responses(self, db: AsyncSession, caller: User, updates: Sequence[Update]) -> list[dict]:
        """공지 응답 목록 — 반응 수와 호출자 반응 여부 포함."""
        ids: list[UUID] = [u.id for u in updates]
        likes = await update_repository.count_for(db, UpdateLike, ids)
        acks = await update_repository.count_for(db, UpdateAcknowledgement, ids)
        comments = await update_repository.count_for(db, UpdateComment, ids)
        liked = await update_repository.ids_for_user(db, UpdateLike, caller.id, ids)
        acknowledged = await update_repository.ids_for_user(db, UpdateAcknowledgement, caller.id, ids)
        return [
            {
                "id": str(u.id),
                "title": u.title,
                "content": u.content,
                "publish_status": u.publish_status,
                "visibility": u.visibility,
                "target_user_ids": u.target_user_ids or [],
                "target_group_ids": u.target_group_ids or [],
                "attachments": u.attachments or [],
                "author_id": str(u.author_id) if u.author_id else None,
                "like_count": likes.get(u.id, 0),
                "acknowledgement_count": acks.get(u.id, 0),
                "comment_count": comments.get(u.id, 0),
                "liked": u.id in liked,
                "acknowledged": u.id in acknowledged,
                "created_at": u.created_at,
            }
            for u in updates
        ]

    def build_comment_response(self, comment: UpdateComment) -> dict:
        return {
            "id": str(comment.id),
            "update_id": str(comment.update_id),
            "user_id": str(comment.user_id),
            "content": comment.content,
            "created_at": comment.created_at,
        }


# 싱글턴 인스턴스 — Singleton instance
content_service: ContentService = ContentService()
