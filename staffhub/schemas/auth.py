"""인증 관련 Pydantic 요청/응답 스키마 정의.

Authentication-related Pydantic request/response schema definitions.
Covers login, self-registration, token refresh/logout and onboarding links.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from staffhub.schemas.user import ProfileDetails, UserResponse


class LoginRequest(BaseModel):
    """로그인 요청 스키마.

    Attributes:
        username: 사용자 아이디 또는 이메일 (Username or email)
        password: 비밀번호 (Plain text password, verified against bcrypt hash)
    """

    username: str
    password: str


class RegisterRequest(BaseModel):
    """자가 회원가입 요청 스키마 — Staff 역할로 생성.

    Self-registration request schema. New accounts always get the Staff role.
    """

    username: str = Field(min_length=3, max_length=100)
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=8)
    full_name: str = Field(min_length=1, max_length=255)
    phone_number: str | None = None


class TokenResponse(BaseModel):
    """JWT 토큰 발급 응답 스키마.

    Attributes:
        access_token: JWT 액세스 토큰 (Short-lived access token)
        refresh_token: JWT 리프레시 토큰 (Long-lived refresh token)
        token_type: 토큰 유형 (Always "bearer")
        user: 로그인한 사용자 (Authenticated user)
    """

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: UserResponse


class RefreshRequest(BaseModel):
    """토큰 갱신/로그아웃 요청 (Refresh token body)."""

    refresh_token: str


class OnboardingInfoResponse(BaseModel):
    """온보딩 토큰 확인 응답 (Who the onboarding link belongs to)."""

    username: str
    email: str
    full_name: str
    expires_at: datetime | None


class OnboardingCompleteRequest(BaseModel):
    """온보딩 완료 요청 — 비밀번호 설정 및 프로필 입력.

    Completes onboarding: sets the password, optional phone number and
    profile details, then activates the account.
    """

    password: str = Field(min_length=8)
    phone_number: str | None = None
    profile: ProfileDetails | None = None
