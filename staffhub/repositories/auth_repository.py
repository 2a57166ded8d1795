"""인증 레포지토리 — 리프레시 토큰 CRUD.

Auth Repository — Refresh token persistence for login, refresh and logout.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import Select, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from staffhub.models.token import RefreshToken


class AuthRepository:
    """리프레시 토큰 레포지토리 (Refresh token repository)."""

    async def create_refresh_token(
        self,
        db: AsyncSession,
        user_id: UUID,
        token: str,
        expires_at: datetime,
    ) -> RefreshToken:
        """새 리프레시 토큰을 저장합니다.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 토큰 소유자 사용자 ID (Token owner user UUID)
            token: JWT 리프레시 토큰 문자열 (JWT refresh token string)
            expires_at: 토큰 만료 일시 (Token expiration timestamp)

        Returns:
            RefreshToken: 생성된 리프레시 토큰 레코드 (Created refresh token record)
        """
        db_token: RefreshToken = RefreshToken(user_id=user_id, token=token, expires_at=expires_at)
        db.add(db_token)
        await db.flush()
        return db_token

    async def get_refresh_token(self, db: AsyncSession, token: str) -> RefreshToken | None:
        """토큰 문자열로 리프레시 토큰을 조회합니다."""
        query: Select = select(RefreshToken).where(RefreshToken.token == token)
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def delete_refresh_token(self, db: AsyncSession, token: str) -> bool:
        """리프레시 토큰을 삭제합니다 (Revoke a single refresh token).

        Returns:
            bool: 삭제 성공 여부 (Whether a token was removed)
        """
        db_token: RefreshToken | None = await self.get_refresh_token(db, token)
        if db_token is None:
            return False

        await db.delete(db_token)
        await db.flush()
        return True

    async def delete_user_refresh_tokens(self, db: AsyncSession, user_id: UUID) -> None:
        """사용자의 모든 리프레시 토큰 삭제 — archive 시 모든 세션 종료.

        Delete every refresh token of a user (used when the account is archived).
        """
        await db.execute(delete(RefreshToken).where(RefreshToken.user_id == user_id))
        await db.flush()


# 싱글턴 인스턴스 — Singleton instance
auth_repository: AuthRepository = AuthRepository()
