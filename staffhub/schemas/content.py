"""지식베이스 및 공지 관련 Pydantic 요청/응답 스키마 정의.

Knowledge base and update (announcement) Pydantic schema definitions.
Both share the audience fields: ``visibility`` plus target user/group IDs.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

PublishStatus = Literal["draft", "published"]
Visibility = Literal["all", "specific_users"]


# === 지식베이스 (Knowledge) ===

class KnowledgeCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    content: str | None = None
    type: Literal["page", "pdf", "folder"] = "page"
    category: str | None = None
    publish_status: PublishStatus = "published"
    visibility: Visibility = "all"
    target_user_ids: list[str] = Field(default_factory=list)
    target_group_ids: list[str] = Field(default_factory=list)
    file_url: str | None = None


class KnowledgeUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    content: str | None = None
    type: Literal["page", "pdf", "folder"] | None = None
    category: str | None = None
    publish_status: PublishStatus | None = None
    visibility: Visibility | None = None
    target_user_ids: list[str] | None = None
    target_group_ids: list[str] | None = None
    file_url: str | None = None


class KnowledgeResponse(BaseModel):
    id: str
    title: str
    description: str | None
    content: str | None
    type: str
    category: str | None
    publish_status: str
    visibility: str
    target_user_ids: list[str]
    target_group_ids: list[str]
    file_url: str | None
    author_id: str | None
    last_updated: datetime
    created_at: datetime


# === 공지 (Updates) ===

class UpdateCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1)
    publish_status: PublishStatus = "published"
    visibility: Visibility = "all"
    target_user_ids: list[str] = Field(default_factory=list)
    target_group_ids: list[str] = Field(default_factory=list)
    attachments: list[str] = Field(default_factory=list)


class UpdateEdit(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    content: str | None = Field(default=None, min_length=1)
    publish_status: PublishStatus | None = None
    visibility: Visibility | None = None
    target_user_ids: list[str] | None = None
    target_group_ids: list[str] | None = None
    attachments: list[str] | None = None


class UpdateResponse(BaseModel):
    """공지 응답 — 호출자 기준 반응 상태 포함."""

    id: str
    title: str
    content: str
    publish_status: str
    visibility: str
    target_user_ids: list[str]
    target_group_ids: list[str]
    attachments: list[str]
    author_id: str | None
    like_count: int = 0
    acknowledgement_count: int = 0
    comment_count: int = 0
    liked: bool = False
    acknowledged: bool = False
    created_at: datetime


class LikeResponse(BaseModel):
    liked: bool
    like_count: int


class AcknowledgeResponse(BaseModel):
    acknowledged: bool
    acknowledged_at: datetime


class CommentCreate(BaseModel):
    content: str = Field(min_length=1, max_length=5000)


class CommentResponse(BaseModel):
    id: str
    update_id: str
    user_id: str
    content: str
    created_at: datetime
