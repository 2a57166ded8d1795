"""사용자 레포지토리 — 사용자 조회 쿼리.

User Repository — Lookups by username, email, onboarding token and role.
"""

from typing import Sequence

from sqlalchemy import Select, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from staffhub.models.user import User
from staffhub.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """사용자 레포지토리.

    Extends:
        BaseRepository[User]
    """

    def __init__(self) -> None:
        super().__init__(User)

    async def get_by_login(self, db: AsyncSession, login: str) -> User | None:
        """사용자명 또는 이메일로 조회 (Lookup by username or email)."""
        result = await db.execute(
            select(User).where(or_(User.username == login, User.email == login))
        )
        return result.scalars().first()

    async def get_by_onboarding_token(self, db: AsyncSession, token: str) -> User | None:
        """온보딩 토큰으로 조회 (Lookup by onboarding token)."""
        result = await db.execute(select(User).where(User.onboarding_token == token))
        return result.scalar_one_or_none()

    async def list_users(
        self,
        db: AsyncSession,
        status: str | None = None,
        role: str | None = None,
    ) -> Sequence[User]:
        """사용자 목록 — 상태/역할 필터, 이름순.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            status: 상태 필터 (active | archived | pending-onboarding)
            role: 역할 필터 (Role filter)

        Returns:
            Sequence[User]: 사용자 목록 (Users ordered by full name)
        """
        return await self.get_all(db, {"status": status, "role": role}, order_by=User.full_name)

    async def get_by_roles(self, db: AsyncSession, roles: frozenset[str]) -> Sequence[User]:
        """지정한 역할의 활성 사용자 목록 (Active users holding any of the roles)."""
        query: Select = select(User).where(User.role.in_(roles), User.status == "active")
        result = await db.execute(query)
        return result.scalars().all()


# 싱글턴 인스턴스 — Singleton instance
user_repository: UserRepository = UserRepository()
