"""사용자 관련 SQLAlchemy ORM 모델 정의.

User SQLAlchemy ORM model definitions.
Roles are plain strings (Owner, Admin, HR, Manager, Scheduler, Payroll, Staff);
what each role may do is decided by the permission table in
``staffhub.utils.permissions``, never by the model.

Tables:
    - users: 사용자 계정 (User accounts with pay rates, groups and typed profile)
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import JSON, Boolean, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from staffhub.database import Base, UTCDateTime, utcnow


class User(Base):
    """사용자 모델 — 시스템 사용자 계정 정보.

    User model — System user account information.
    Pay rates, program memberships and HR details live on the row:
    ``job_rates`` maps a job/program name to an hourly rate, ``groups`` holds
    externally-synced group IDs, and ``profile`` stores a serialized
    ``ProfileDetails`` record (see ``staffhub.schemas.user``).

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        username: 로그인 아이디 (Login username, globally unique)
        email: 이메일 (Email address, globally unique)
        full_name: 실명 (Full display name)
        phone_number: 전화번호 (Phone number for SMS, optional)
        password_hash: bcrypt 해시된 비밀번호 (bcrypt-hashed password)
        role: 역할 문자열 (Role name)
        default_hourly_rate: 기본 시급 (Default pay rate)
        job_rates: 직무별 시급 (Job/program specific rates)
        groups: 동기화된 그룹 ID 목록 (Synced group IDs)
        profile: 프로필 상세 JSON (Typed profile details)
        status: 상태 (active | archived | pending-onboarding)
        require_mfa: MFA 필요 여부 (MFA flag)
        onboarding_token: 온보딩 토큰 (One-time onboarding link token)
        onboarding_token_expiry: 온보딩 토큰 만료 (Token expiry)
        onboarding_completed: 온보딩 완료 여부 (Onboarding finished)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)
    """

    __tablename__ = "users"

    # 사용자 고유 식별자 — User unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 로그인 아이디 — Login username
    username: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)
    # 이메일 — Email address
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    # 실명 — User's full display name
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    # 전화번호 — SMS notifications
    phone_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    # 비밀번호 해시 — bcrypt hashed password (평문 저장 금지, never store plaintext)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    # 역할 — Owner, Admin, HR, Manager, Scheduler, Payroll, Staff (CNA/LPN/RN → Staff)
    role: Mapped[str] = mapped_column(String(30), nullable=False, default="Staff", index=True)
    # 기본 시급 — Fallback pay rate when no job rate matches
    default_hourly_rate: Mapped[Decimal | None] = mapped_column(Numeric(8, 2), default=Decimal("25.00"))
    # 직무별 시급 — {"Vitas Central Florida": "30.00"}
    job_rates: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)
    # 그룹 ID 목록 — Externally synced group memberships
    groups: Mapped[list[str]] = mapped_column(JSON, default=list)
    # 프로필 — Serialized ProfileDetails (programs, license, emergency contact ...)
    profile: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)
    # 상태 — "active" | "archived" | "pending-onboarding"
    status: Mapped[str] = mapped_column(String(30), nullable=False, default="active", index=True)
    require_mfa: Mapped[bool] = mapped_column(Boolean, default=False)
    # 온보딩 — Onboarding link token and state
    onboarding_token: Mapped[str | None] = mapped_column(String(128), nullable=True, index=True)
    onboarding_token_expiry: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    onboarding_completed: Mapped[bool] = mapped_column(Boolean, default=False)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, onupdate=utcnow)

    # 관계 — Relationships
    refresh_tokens = relationship("RefreshToken", back_populates="user", cascade="all, delete-orphan")

    @property
    def is_active(self) -> bool:
        """로그인 가능한 활성 계정 여부 (Whether the account may authenticate)."""
        return self.status == "active"
