"""공통 Pydantic 요청/응답 스키마 정의.

Common Pydantic request/response schema definitions: generic messages,
pagination, notifications, settings, audit logs and file uploads.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel


class MessageResponse(BaseModel):
    """단순 메시지 응답 (Generic message response)."""

    message: str


class PaginatedResponse(BaseModel):
    """페이지네이션 응답 스키마.

    Attributes:
        items: 현재 페이지 항목 목록 (Items for the current page)
        total: 전체 항목 수 (Total count across all pages)
        page: 현재 페이지 번호 (Current page number, 1-based)
        per_page: 페이지당 항목 수 (Items per page)
    """

    items: list[Any]
    total: int
    page: int
    per_page: int


# === 알림 (Notification) ===

class NotificationResponse(BaseModel):
    id: str
    type: str
    message: str
    reference_type: str | None
    reference_id: str | None
    is_read: bool
    created_at: datetime


class UnreadCountResponse(BaseModel):
    unread_count: int


# === 설정 (Setting) ===

class SettingValue(BaseModel):
    """설정 값 저장 요청 — 임의 JSON 값."""

    value: Any


class SettingResponse(BaseModel):
    key: str
    value: Any
    updated_at: datetime


# === 감사 로그 (Audit log) ===

class AuditLogResponse(BaseModel):
    id: str
    user_id: str | None
    action: str
    resource_type: str
    resource_id: str | None
    ip_address: str | None
    user_agent: str | None
    phi_accessed: bool
    phi_fields: list[str]
    details: dict[str, Any]
    timestamp: datetime


# === 파일 (Files) ===

class UploadedFile(BaseModel):
    """업로드된 파일 정보."""

    file_name: str
    original_name: str
    url: str
    size: int
    content_type: str | None


class UploadResponse(BaseModel):
    files: list[UploadedFile]
