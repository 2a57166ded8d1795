"""사용자, 프로필 및 그룹 관련 Pydantic 요청/응답 스키마 정의.

User, profile and group Pydantic request/response schema definitions.
``ProfileDetails`` is the typed shape of ``User.profile``; ad-hoc HR fields
go into its ``extra`` map instead of new top-level keys.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

UserStatus = Literal["active", "archived", "pending-onboarding"]


class ProfileDetails(BaseModel):
    """직원 프로필 상세 — User.profile JSON의 스키마.

    Typed profile record persisted as JSON on the user row.

    Attributes:
        programs: 소속 프로그램 목록 (Programs; each yields an auto-program group tag)
        license_number: 면허 번호 (Nursing license number)
        license_state: 면허 발급 주 (Issuing state)
        emergency_contact_name: 비상 연락처 이름 (Emergency contact)
        emergency_contact_phone: 비상 연락처 전화 (Emergency contact phone)
        address: 주소 (Mailing address)
        shift_preferences: 선호 시프트 (Preferred shift labels)
        work_setting: 근무 형태 (e.g. "hospice", "facility")
        allergies: 알레르기 (Allergies)
        extra: 기타 필드 (Anything not covered above)
    """

    model_config = ConfigDict(extra="forbid")

    programs: list[str] = Field(default_factory=list)
    license_number: str | None = None
    license_state: str | None = None
    emergency_contact_name: str | None = None
    emergency_contact_phone: str | None = None
    address: str | None = None
    shift_preferences: list[str] = Field(default_factory=list)
    work_setting: str | None = None
    allergies: str | None = None
    extra: dict[str, Any] = Field(default_factory=dict)


# === 사용자 (User) 스키마 ===

class UserCreate(BaseModel):
    """사용자 생성 요청 스키마 (관리자용).

    Admin-created users start in ``pending-onboarding`` with an onboarding
    link unless a password is supplied, in which case they are active.
    """

    username: str = Field(min_length=3, max_length=100)
    email: str = Field(min_length=3, max_length=255)
    full_name: str = Field(min_length=1, max_length=255)
    role: str = "Staff"
    password: str | None = Field(default=None, min_length=8)
    phone_number: str | None = None
    default_hourly_rate: Decimal | None = Field(default=None, ge=0)
    job_rates: dict[str, Decimal] = Field(default_factory=dict)
    groups: list[str] = Field(default_factory=list)
    profile: ProfileDetails | None = None
    require_mfa: bool = False


class UserUpdate(BaseModel):
    """사용자 수정 요청 스키마 (부분 업데이트).

    Only provided fields are updated; omitted fields remain unchanged.
    A supplied password is re-hashed.
    """

    email: str | None = None
    full_name: str | None = None
    role: str | None = None
    password: str | None = Field(default=None, min_length=8)
    phone_number: str | None = None
    default_hourly_rate: Decimal | None = Field(default=None, ge=0)
    job_rates: dict[str, Decimal] | None = None
    groups: list[str] | None = None
    profile: ProfileDetails | None = None
    status: UserStatus | None = None
    require_mfa: bool | None = None


class UserResponse(BaseModel):
    """사용자 응답 스키마 — 비밀번호 해시 및 온보딩 토큰 제외."""

    id: str
    username: str
    email: str
    full_name: str
    phone_number: str | None
    role: str
    default_hourly_rate: Decimal | None
    job_rates: dict[str, Decimal]
    groups: list[str]
    profile: ProfileDetails
    status: str
    require_mfa: bool
    onboarding_completed: bool
    created_at: datetime


class UserGroupsItem(BaseModel):
    """그룹 동기화 항목 — 한 사용자의 전체 그룹 목록."""

    user_id: str
    groups: list[str]


class GroupSyncRequest(BaseModel):
    """그룹 동기화 요청 — 외부 시스템에서 가져온 그룹 목록으로 교체."""

    items: list[UserGroupsItem]


class GroupSyncResponse(BaseModel):
    updated: int
    missing_user_ids: list[str]


# === 그룹 (Group) 스키마 ===

class GroupCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    category: str | None = None
    administered_by: str | None = None


class GroupUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    category: str | None = None
    administered_by: str | None = None


class GroupResponse(BaseModel):
    id: str
    name: str
    category: str | None
    created_by: str | None
    administered_by: str | None
    created_at: datetime
