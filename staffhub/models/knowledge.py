"""지식베이스 SQLAlchemy ORM 모델 정의.

Knowledge base SQLAlchemy ORM model definitions.

Tables:
    - knowledge_articles: 지식 문서 (Pages, PDFs and folders)
"""

import uuid
from datetime import datetime

from sqlalchemy import JSON, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from staffhub.database import Base, UTCDateTime, utcnow


class KnowledgeArticle(Base):
    """지식 문서 모델.

    Knowledge article model — A page, uploaded PDF or folder.
    Readers are resolved through ``visibility`` plus the target lists;
    drafts are only shown to content managers.

    Attributes:
        type: 유형 (page | pdf | folder)
        publish_status: 게시 상태 (draft | published)
        visibility: 공개 범위 (all | specific_users)
        target_user_ids: 대상 사용자 ID 목록 (Explicit reader IDs)
        target_group_ids: 대상 그룹 ID 목록 (Reader group IDs)
    """

    __tablename__ = "knowledge_articles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    # 유형 — "page" | "pdf" | "folder"
    type: Mapped[str] = mapped_column(String(20), nullable=False, default="page")
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    # 게시 상태 — "draft" | "published"
    publish_status: Mapped[str] = mapped_column(String(20), nullable=False, default="published")
    # 공개 범위 — "all" | "specific_users"
    visibility: Mapped[str] = mapped_column(String(20), nullable=False, default="all")
    target_user_ids: Mapped[list[str]] = mapped_column(JSON, default=list)
    target_group_ids: Mapped[list[str]] = mapped_column(JSON, default=list)
    file_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    author_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    last_updated: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, onupdate=utcnow)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)
