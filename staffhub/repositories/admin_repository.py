"""관리 레포지토리 — 그룹, 설정, 감사 로그 쿼리.

Admin Repository — Groups, runtime settings and the audit trail.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from staffhub.models.audit_log import AuditLog
from staffhub.models.group import Group
from staffhub.models.setting import Setting
from staffhub.repositories.base import BaseRepository


class GroupRepository(BaseRepository[Group]):
    """그룹 레포지토리."""

    def __init__(self) -> None:
        super().__init__(Group)

    async def get_by_name(self, db: AsyncSession, name: str) -> Group | None:
        result = await db.execute(select(Group).where(Group.name == name))
        return result.scalar_one_or_none()


class SettingRepository(BaseRepository[Setting]):
    """설정 레포지토리."""

    def __init__(self) -> None:
        super().__init__(Setting)

    async def get_by_key(self, db: AsyncSession, key: str) -> Setting | None:
        result = await db.execute(select(Setting).where(Setting.key == key))
        return result.scalar_one_or_none()


class AuditLogRepository(BaseRepository[AuditLog]):
    """감사 로그 레포지토리 — 추가 전용 (Append-only)."""

    def __init__(self) -> None:
        super().__init__(AuditLog)

    async def list_logs(
        self,
        db: AsyncSession,
        user_id: UUID | None = None,
        resource_type: str | None = None,
        limit: int = 100,
    ) -> Sequence[AuditLog]:
        """감사 로그 목록 — 최신순, limit 건.

        Args:
            user_id: 행위자 필터 (Actor filter)
            resource_type: 리소스 유형 필터 (Resource type filter)
            limit: 최대 건수 (Maximum rows, default 100)
        """
        query: Select = select(AuditLog)
        if user_id is not None:
            query = query.where(AuditLog.user_id == user_id)
        if resource_type is not None:
            query = query.where(AuditLog.resource_type == resource_type)
        result = await db.execute(query.order_by(AuditLog.timestamp.desc()).limit(limit))
        return result.scalars().all()


# 싱글턴 인스턴스 — Singleton instances
group_repository: GroupRepository = GroupRepository()
setting_repository: SettingRepository = SettingRepository()
audit_log_repository: AuditLogRepository = AuditLogRepository()
