"""서류 관련 Pydantic 요청/응답 스키마 정의.

Document Pydantic request/response schema definitions, including the
expiry sweep.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field


class DocumentCreate(BaseModel):
    """서류 등록 요청 — user_id는 HR 이상만 타인 지정 가능."""

    user_id: UUID | None = None
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    file_url: str | None = None
    file_type: str | None = None
    category: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    expiry_date: datetime | None = None
    notes: str | None = None


class DocumentUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    file_url: str | None = None
    file_type: str | None = None
    category: str | None = None
    metadata: dict[str, Any] | None = None
    expiry_date: datetime | None = None
    notes: str | None = None


class DocumentReject(BaseModel):
    reason: str | None = None


class ExpiryCheckRequest(BaseModel):
    """만료 검사 요청 — 기본 30일."""

    days: int = Field(default=30, ge=0, le=3650)


class ExpiryCheckResponse(BaseModel):
    """만료 검사 결과 (How many documents changed status)."""

    expiring: int
    expired: int
    document_ids: list[str]


class DocumentResponse(BaseModel):
    id: str
    user_id: str
    title: str
    description: str | None
    file_url: str | None
    file_type: str | None
    category: str | None
    metadata: dict[str, Any]
    status: str
    uploaded_date: datetime
    expiry_date: datetime | None
    approved_by: str | None
    approved_at: datetime | None
    rejection_reason: str | None
    notes: str | None
