"""업데이트(공지) 관련 SQLAlchemy ORM 모델 정의.

Update (announcement) SQLAlchemy ORM model definitions.
Updates share the knowledge base visibility model and add engagement
tracking: likes, acknowledgements and comments.

Tables:
    - updates: 공지 (Announcements)
    - update_likes: 좋아요 (One like per user per update)
    - update_acknowledgements: 확인 (One acknowledgement per user per update)
    - update_comments: 댓글 (Comments)
"""

import uuid
from datetime import datetime

from sqlalchemy import JSON, ForeignKey, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from staffhub.database import Base, UTCDateTime, utcnow


class Update(Base):
    """공지 모델 — 전체 또는 특정 대상에게 게시되는 공지.

    Update model — An announcement published to everyone or to targeted
    users and groups.
    """

    __tablename__ = "updates"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    # 게시 상태 — "draft" | "published"
    publish_status: Mapped[str] = mapped_column(String(20), nullable=False, default="published")
    # 공개 범위 — "all" | "specific_users"
    visibility: Mapped[str] = mapped_column(String(20), nullable=False, default="all")
    target_user_ids: Mapped[list[str]] = mapped_column(JSON, default=list)
    target_group_ids: Mapped[list[str]] = mapped_column(JSON, default=list)
    # 첨부파일 URL 목록 — Attachment URLs
    attachments: Mapped[list[str]] = mapped_column(JSON, default=list)
    author_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, onupdate=utcnow)


class UpdateLike(Base):
    """공지 좋아요 — 사용자당 1회 (One like per user per update)."""

    __tablename__ = "update_likes"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    update_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("updates.id", ondelete="CASCADE"), nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)

    __table_args__ = (
        UniqueConstraint("update_id", "user_id", name="uq_update_like_user"),
    )


class UpdateAcknowledgement(Base):
    """공지 확인 — 사용자당 1회 (One acknowledgement per user per update)."""

    __tablename__ = "update_acknowledgements"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    update_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("updates.id", ondelete="CASCADE"), nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    acknowledged_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)

    __table_args__ = (
        UniqueConstraint("update_id", "user_id", name="uq_update_ack_user"),
    )


class UpdateComment(Base):
    """공지 댓글."""

    __tablename__ = "update_comments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    update_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("updates.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)
