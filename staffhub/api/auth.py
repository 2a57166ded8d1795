"""인증 라우터 — 로그인, 회원가입, 토큰 갱신, 로그아웃, 온보딩.

Auth Router — Login, self-registration, token refresh, logout, current
user and onboarding-link endpoints.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from staffhub.api.deps import get_current_user
from staffhub.database import get_db
from staffhub.models.user import User
from staffhub.schemas.auth import (
    LoginRequest,
    OnboardingCompleteRequest,
    OnboardingInfoResponse,
    RefreshRequest,
    RegisterRequest,
    TokenResponse,
)
from staffhub.schemas.common import MessageResponse
from staffhub.schemas.user import UserResponse
from staffhub.services.audit_service import audit_service
from staffhub.services.auth_service import auth_service
from staffhub.services.user_service import user_service

router: APIRouter = APIRouter()


@router.post("/register", response_model=TokenResponse, status_code=201)
async def register(
    data: RegisterRequest,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """자가 회원가입 — Staff 역할로 생성 후 토큰 발급.

    Self-registration. The account always gets the Staff role.
    """
    result: TokenResponse = await auth_service.register(db, data)
    await audit_service.log(db, UUID(result.user.id), "register", "user", result.user.id, request=request)
    await db.commit()
    return result


@router.post("/login", response_model=TokenResponse)
async def login(
    data: LoginRequest,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """로그인 — 사용자명 또는 이메일 (Login by username or email)."""
    result: TokenResponse = await auth_service.login(db, data)
    await audit_service.log(db, UUID(result.user.id), "login", "user", result.user.id, request=request)
    await db.commit()
    return result


@router.post("/refresh", response_model=TokenResponse)
async def refresh(
    data: RefreshRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """토큰 갱신 — 기존 리프레시 토큰은 폐기 (Rotates the refresh token)."""
    result: TokenResponse = await auth_service.refresh_tokens(db, data)
    await db.commit()
    return result


@router.post("/logout", response_model=MessageResponse)
async def logout(
    data: RefreshRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict[str, str]:
    """로그아웃 — 리프레시 토큰 폐기 (Revoke the refresh token)."""
    await auth_service.logout(db, data.refresh_token)
    await db.commit()
    return {"message": "Logged out"}


@router.get("/me", response_model=UserResponse)
async def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    """현재 로그인한 사용자 (Authenticated user's own record)."""
    return user_service.build_response(current_user)


@router.get("/onboarding/{token}", response_model=OnboardingInfoResponse)
async def get_onboarding(
    token: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """온보딩 링크 확인 (Validate an onboarding link)."""
    return await auth_service.get_onboarding(db, token)


@router.post("/onboarding/{token}", response_model=TokenResponse)
async def complete_onboarding(
    token: str,
    data: OnboardingCompleteRequest,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """온보딩 완료 — 비밀번호/프로필 설정 후 활성화.

    Set the password and profile, activate the account and sign in.
    """
    result: TokenResponse = await auth_service.complete_onboarding(db, token, data)
    await audit_service.log(
        db, UUID(result.user.id), "complete_onboarding", "user", result.user.id,
        request=request, phi_accessed=data.profile is not None,
        phi_fields=["profile"] if data.profile is not None else None,
    )
    await db.commit()
    return result
