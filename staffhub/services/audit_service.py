"""감사 로그 서비스 — 최선 노력(best-effort) 감사 기록.

Audit Service — Best-effort audit trail writes.
Each write runs inside a SAVEPOINT; a failure rolls back only the audit row,
is logged, and never reaches the caller.
"""

import logging
from typing import Any, Sequence
from uuid import UUID

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from staffhub.models.audit_log import AuditLog
from staffhub.repositories.admin_repository import audit_log_repository

logger = logging.getLogger(__name__)


class AuditService:
    """감사 로그 서비스."""

    async def log(
        self,
        db: AsyncSession,
        user_id: UUID | None,
        action: str,
        resource_type: str,
        resource_id: UUID | str | None = None,
        *,
        request: Request | None = None,
        phi_accessed: bool = False,
        phi_fields: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """감사 기록을 남깁니다. 실패해도 예외를 전파하지 않습니다.

        Record an audited action. Errors are logged and swallowed.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 행위자 ID (Acting user, None for system actions)
            action: 액션 이름 (e.g. "update")
            resource_type: 리소스 유형 (e.g. "time_entry")
            resource_id: 리소스 ID (Resource identifier)
            request: 요청 객체 — IP/UA 추출용 (Request for client IP and user agent)
            phi_accessed: PHI 접근 여부 (Protected health info touched)
            phi_fields: PHI 필드 목록 (Touched PHI field names)
            details: 상세 정보 (Before/after values, filters ...)
        """
        ip_address: str | None = None
        user_agent: str | None = None
        if request is not None:
            ip_address = request.client.host if request.client else None
            user_agent = request.headers.get("user-agent")

        try:
            async with db.begin_nested():
                db.add(
                    AuditLog(
                        user_id=user_id,
                        action=action,
                        resource_type=resource_type,
                        resource_id=str(resource_id) if resource_id is not None else None,
                        ip_address=ip_address,
                        user_agent=user_agent[:500] if user_agent else None,
                        phi_accessed=phi_accessed,
                        phi_fields=phi_fields or [],
                        details=jsonable_encoder(details or {}),
                    )
                )
        except (SQLAlchemyError, TypeError, ValueError):
            logger.exception("Failed to create audit log: %s %s %s", action, resource_type, resource_id)

    async def list_logs(
        self,
        db: AsyncSession,
        user_id: UUID | None = None,
        resource_type: str | None = None,
        limit: int = 100,
    ) -> Sequence[AuditLog]:
        """감사 로그 조회 (Newest first, capped at limit)."""
        return await audit_log_repository.list_logs(db, user_id, resource_type, limit)

    def build_response(self, log: AuditLog) -> dict:
        return {
            "id": str(log.id),
            "user_id": str(log.user_id) if log.user_id else None,
            "action": log.action,
            "resource_type": log.resource_type,
            "resource_id": log.resource_id,
            "ip_address": log.ip_address,
            "user_agent": log.user_agent,
            "phi_accessed": log.phi_accessed,
            "phi_fields": log.phi_fields or [],
            "details": log.details or {},
            "timestamp": log.timestamp,
        }


# 싱글턴 인스턴스 — Singleton instance
audit_service: AuditService = AuditService()
