"""감사 로그 SQLAlchemy ORM 모델 정의.

Audit log SQLAlchemy ORM model definitions.
Append-only: rows are inserted by ``audit_service.log`` and never updated.

Tables:
    - audit_logs: 감사 기록 (Who did what to which resource, with PHI flags)
"""

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from staffhub.database import Base, UTCDateTime, utcnow


class AuditLog(Base):
    """감사 로그 모델.

    Audit log model — One row per audited action.

    Attributes:
        user_id: 행위자 FK (Acting user, null for system actions)
        action: 액션 (e.g. "time_entry.update")
        resource_type: 리소스 유형 (e.g. "time_entry")
        resource_id: 리소스 ID 문자열 (Resource identifier)
        ip_address: 요청 IP (Client address)
        user_agent: 요청 UA (Client user agent)
        phi_accessed: PHI 접근 여부 (Protected health info touched)
        phi_fields: 접근한 PHI 필드 목록 (Touched PHI field names)
        details: 상세 JSON (Before/after values)
        timestamp: 발생 시각 (Event time)
    """

    __tablename__ = "audit_logs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    action: Mapped[str] = mapped_column(String(100), nullable=False)
    resource_type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    resource_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String(500), nullable=True)
    phi_accessed: Mapped[bool] = mapped_column(Boolean, default=False)
    phi_fields: Mapped[list[str]] = mapped_column(JSON, default=list)
    details: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)
    timestamp: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, index=True)
