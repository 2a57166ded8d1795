"""인증 서비스 — 로그인, 회원가입, 토큰 갱신, 온보딩 비즈니스 로직.

Auth Service — Business logic for login, self-registration, token refresh,
logout and onboarding-link completion. Only ``active`` accounts may
authenticate.
"""

from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt
from sqlalchemy.ext.asyncio import AsyncSession

from staffhub.config import settings
from staffhub.database import utcnow
from staffhub.models.user import User
from staffhub.repositories.auth_repository import auth_repository
from staffhub.repositories.user_repository import user_repository
from staffhub.schemas.auth import (
    LoginRequest,
    OnboardingCompleteRequest,
    RefreshRequest,
    RegisterRequest,
    TokenResponse,
)
from staffhub.services.user_service import user_service
from staffhub.utils.exceptions import DuplicateError, NotFoundError, UnauthorizedError
from staffhub.utils.jwt import create_access_token, create_refresh_token, decode_token
from staffhub.utils.password import hash_password, verify_password
from staffhub.utils.permissions import STAFF


class AuthService:
    """인증 관련 비즈니스 로직을 처리하는 서비스.

    Service handling authentication business logic.
    """

    def _build_jwt_payload(self, user: User) -> dict[str, str]:
        """JWT 토큰 페이로드를 생성합니다 (sub + role)."""
        return {"sub": str(user.id), "role": user.role}

    async def _generate_tokens(self, db: AsyncSession, user: User) -> TokenResponse:
        """액세스 토큰과 리프레시 토큰을 생성합니다.

        Generate an access/refresh pair and persist the refresh token.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user: 사용자 모델 (User model instance)

        Returns:
            TokenResponse: 토큰 응답 (Token response with the user)
        """
        payload: dict[str, str] = self._build_jwt_payload(user)
        access_token: str = create_access_token(payload)
        refresh_token: str = create_refresh_token(payload)

        # 리프레시 토큰을 DB에 저장 — Persist refresh token to database
        expires_at: datetime = datetime.now(timezone.utc) + timedelta(
            days=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS
        )
        await auth_repository.create_refresh_token(
            db, user_id=user.id, token=refresh_token, expires_at=expires_at
        )

        return TokenResponse(
            access_token=access_token,
            refresh_token=refresh_token,
            user=user_service.build_response(user),
        )

    async def login(self, db: AsyncSession, data: LoginRequest) -> TokenResponse:
        """로그인을 처리합니다.

        Process login by username or email.

        Raises:
            UnauthorizedError: 잘못된 인증 정보 또는 비활성 계정
                               (Invalid credentials, archived or pending-onboarding account)
        """
        user: User | None = await user_repository.get_by_login(db, data.username)
        if user is None or not verify_password(data.password, user.password_hash):
            raise UnauthorizedError("Invalid username or password")

        if user.status == "archived":
            raise UnauthorizedError("Account is archived")
        if user.status == "pending-onboarding":
            raise UnauthorizedError("Account onboarding is not complete")

        return await self._generate_tokens(db, user)

    async def register(self, db: AsyncSession, data: RegisterRequest) -> TokenResponse:
        """자가 회원가입 — Staff 역할로 생성 후 토큰 발급.

        Raises:
            DuplicateError: 사용자명 또는 이메일 중복 (Username or email taken)
        """
        if await user_repository.exists(db, {"username": data.username}):
            raise DuplicateError("Username already exists")
        if await user_repository.exists(db, {"email": data.email}):
            raise DuplicateError("Email already exists")

        user: User = await user_repository.create(db, {
            "username": data.username,
            "email": data.email,
            "full_name": data.full_name,
            "phone_number": data.phone_number,
            "password_hash": hash_password(data.password),
            "role": STAFF,
            "status": "active",
            "job_rates": {},
            "groups": [],
            "profile": {},
        })
        return await self._generate_tokens(db, user)

    async def refresh_tokens(self, db: AsyncSession, data: RefreshRequest) -> TokenResponse:
        """리프레시 토큰으로 새 토큰 쌍을 발급합니다.

        The old refresh token is revoked (rotation).

        Raises:
            UnauthorizedError: 유효하지 않거나 만료된 리프레시 토큰
                               (Invalid, revoked or expired refresh token)
        """
        # DB에서 리프레시 토큰 확인 — Verify refresh token in database
        db_token = await auth_repository.get_refresh_token(db, data.refresh_token)
        if db_token is None:
            raise UnauthorizedError("Invalid refresh token")

        # 만료 확인 — Check expiration
        if db_token.expires_at < datetime.now(timezone.utc):
            await auth_repository.delete_refresh_token(db, data.refresh_token)
            raise UnauthorizedError("Refresh token has expired")

        try:
            payload: dict = decode_token(data.refresh_token)
        except jwt.InvalidTokenError:
            await auth_repository.delete_refresh_token(db, data.refresh_token)
            raise UnauthorizedError("Invalid refresh token")

        if payload.get("type") != "refresh" or payload.get("sub") is None:
            raise UnauthorizedError("Invalid refresh token payload")

        user: User | None = await user_repository.get_by_id(db, UUID(payload["sub"]))
        if user is None or not user.is_active:
            raise UnauthorizedError("User not found or inactive")

        # 기존 리프레시 토큰 삭제 후 새 토큰 발급 — Delete old token and issue new pair
        await auth_repository.delete_refresh_token(db, data.refresh_token)
        return await self._generate_tokens(db, user)

    async def logout(self, db: AsyncSession, refresh_token: str) -> None:
        """로그아웃 처리 — 리프레시 토큰을 삭제합니다."""
        await auth_repository.delete_refresh_token(db, refresh_token)

    # --- 온보딩 (Onboarding) ---

    async def _get_onboarding_user(self, db: AsyncSession, token: str) -> User:
        """온보딩 토큰 검증.

        Raises:
            NotFoundError: 토큰이 없거나 이미 사용됨 (Unknown or used token)
            UnauthorizedError: 토큰 만료 (Expired token)
        """
        user = await user_repository.get_by_onboarding_token(db, token)
        if user is None or user.status != "pending-onboarding":
            raise NotFoundError("Invalid onboarding link")
        if user.onboarding_token_expiry is not None and user.onboarding_token_expiry < utcnow():
            raise UnauthorizedError("Onboarding link has expired")
        return user

    async def get_onboarding(self, db: AsyncSession, token: str) -> dict:
        user = await self._get_onboarding_user(db, token)
        return {
            "username": user.username,
            "email": user.email,
            "full_name": user.full_name,
            "expires_at": user.onboarding_token_expiry,
        }

    async def complete_onboarding(
        self,
        db: AsyncSession,
        token: str,
        data: OnboardingCompleteRequest,
    ) -> TokenResponse:
        """온보딩 완료 — 비밀번호와 프로필 설정 후 활성화, 토큰 발급.

        Set the password and profile, activate the account and consume the
        token so the link cannot be reused.
        """
        user = await self._get_onboarding_user(db, token)
        changes: dict = {
            "password_hash": hash_password(data.password),
            "status": "active",
            "onboarding_completed": True,
            "onboarding_token": None,
            "onboarding_token_expiry": None,
        }
        if data.phone_number is not None:
            changes["phone_number"] = data.phone_number
        if data.profile is not None:
            changes["profile"] = data.profile.model_dump()
        user = await user_repository.update(db, user, changes)
        return await self._generate_tokens(db, user)


# 싱글턴 인스턴스 — Singleton instance
auth_service: AuthService = AuthService()
