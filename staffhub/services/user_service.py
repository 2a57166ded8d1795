"""사용자 서비스 — 사용자 CRUD, 온보딩 링크, 그룹 관리 비즈니스 로직.

User Service — Business logic for user CRUD, onboarding links and groups.
Admin-created users start in ``pending-onboarding`` and receive a one-time
link; archiving a user revokes every refresh token.
"""

import logging
from datetime import timedelta
from decimal import Decimal
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from staffhub.config import settings
from staffhub.database import utcnow
from staffhub.models.group import Group
from staffhub.models.user import User
from staffhub.repositories.admin_repository import group_repository
from staffhub.repositories.auth_repository import auth_repository
from staffhub.repositories.user_repository import user_repository
from staffhub.schemas.user import GroupCreate, GroupSyncRequest, GroupUpdate, UserCreate, UserUpdate
from staffhub.utils.email import send_onboarding_email, smtp_enabled
from staffhub.utils.exceptions import BadRequestError, DuplicateError, NotFoundError
from staffhub.utils.password import generate_onboarding_token, hash_password
from staffhub.utils.permissions import ROLES, normalize_role

logger = logging.getLogger(__name__)


def _rates_to_json(rates: dict[str, Decimal] | None) -> dict[str, str]:
    """Decimal 시급을 JSON 저장용 문자열로 변환 (Decimals are stored as strings)."""
    return {name: str(rate) for name, rate in (rates or {}).items()}


def _parse_user_id(value: str | None) -> UUID | None:
    if value is None:
        return None
    try:
        return UUID(value)
    except ValueError:
        raise BadRequestError(f"Invalid user id: {value}")


class UserService:
    """사용자 관련 비즈니스 로직을 처리하는 서비스.

    Service handling user business logic.
    """

    async def list_users(
        self,
        db: AsyncSession,
        status: str | None = None,
        role: str | None = None,
    ) -> Sequence[User]:
        return await user_repository.list_users(db, status, role)

    async def get_user(self, db: AsyncSession, user_id: UUID) -> User:
        """사용자 조회.

        Raises:
            NotFoundError: 사용자 없음 (User does not exist)
        """
        user = await user_repository.get_by_id(db, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def _check_role(self, role: str) -> str:
        """역할 검증 — 임상 직함(CNA/LPN/RN)은 Staff로 저장."""
        normalized = normalize_role(role)
        if normalized != role and role.upper() not in ("CNA", "LPN", "RN"):
            raise BadRequestError(f"Unknown role '{role}'. Expected one of: {', '.join(ROLES)}")
        return normalized

    async def _ensure_unique(self, db: AsyncSession, username: str | None, email: str | None) -> None:
        if username is not None and await user_repository.exists(db, {"username": username}):
            raise DuplicateError("Username already exists")
        if email is not None and await user_repository.exists(db, {"email": email}):
            raise DuplicateError("Email already exists")

    def onboarding_link(self, token: str) -> str:
        return f"{settings.ONBOARDING_BASE_URL.rstrip('/')}/{token}"

    async def create_user(self, db: AsyncSession, data: UserCreate) -> User:
        """사용자 생성 (관리자용).

        Without a password the user is ``pending-onboarding`` and gets a
        one-time onboarding token, emailed when SMTP is configured. With a
        password the account is active immediately.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 사용자 생성 데이터 (User creation data)

        Returns:
            User: 생성된 사용자 (Created user)

        Raises:
            DuplicateError: 사용자명/이메일 중복 (Username or email taken)
            BadRequestError: 알 수 없는 역할 (Unknown role)
        """
        await self._ensure_unique(db, data.username, data.email)

        values: dict[str, Any] = {
            "username": data.username,
            "email": data.email,
            "full_name": data.full_name,
            "phone_number": data.phone_number,
            "role": self._check_role(data.role),
            "job_rates": _rates_to_json(data.job_rates),
            "groups": list(data.groups),
            "profile": data.profile.model_dump() if data.profile else {},
            "require_mfa": data.require_mfa,
        }
        if data.default_hourly_rate is not None:
            values["default_hourly_rate"] = data.default_hourly_rate

        if data.password:
            values.update(password_hash=hash_password(data.password), status="active")
        else:
            # 로그인 불가 임시 해시 — unusable until onboarding sets a password
            values.update(
                password_hash=hash_password(generate_onboarding_token()),
                status="pending-onboarding",
                onboarding_token=generate_onboarding_token(),
                onboarding_token_expiry=utcnow() + timedelta(days=settings.ONBOARDING_TOKEN_EXPIRE_DAYS),
            )

        user = await user_repository.create(db, values)

        if user.onboarding_token and smtp_enabled():
            try:
                await send_onboarding_email(
                    user.email, user.full_name, self.onboarding_link(user.onboarding_token)
                )
            except Exception:
                # 메일 실패는 사용자 생성에 영향 없음 — the link can be resent
                logger.exception("Failed to send onboarding email to %s", user.email)

        return user

    async def update_user(self, db: AsyncSession, user_id: UUID, data: UserUpdate) -> User:
        """사용자 수정 — 비밀번호는 재해시.

        Raises:
            NotFoundError: 사용자 없음 (User does not exist)
            DuplicateError: 이메일 중복 (Email taken)
        """
        user = await self.get_user(db, user_id)
        changes: dict[str, Any] = data.model_dump(exclude_unset=True)

        if "email" in changes and changes["email"] not in (None, user.email):
            await self._ensure_unique(db, None, changes["email"])
        if changes.get("role") is not None:
            changes["role"] = self._check_role(changes["role"])
        if "password" in changes:
            password = changes.pop("password")
            if password:
                changes["password_hash"] = hash_password(password)
        if "job_rates" in changes:
            changes["job_rates"] = _rates_to_json(changes["job_rates"])
        if "profile" in changes:
            changes["profile"] = changes["profile"] or {}
        if changes.get("groups") is None:
            changes.pop("groups", None)

        # null이 허용되지 않는 컬럼 — Non-nullable columns ignore explicit nulls
        for field in ("email", "full_name", "role", "status", "require_mfa"):
            if field in changes and changes[field] is None:
                changes.pop(field)

        user = await user_repository.update(db, user, changes)
        if user.status == "archived":
            await auth_repository.delete_user_refresh_tokens(db, user.id)
        return user

    async def archive_user(self, db: AsyncSession, user_id: UUID) -> User:
        """사용자 보관 처리 — 모든 세션 종료 (Archive and revoke sessions)."""
        user = await self.get_user(db, user_id)
        user = await user_repository.update(db, user, {"status": "archived"})
        await auth_repository.delete_user_refresh_tokens(db, user.id)
        return user

    async def sync_groups(self, db: AsyncSession, data: GroupSyncRequest) -> dict:
        """외부 그룹 동기화 — 항목별 groups 배열 교체.

        Replace ``groups`` for every listed user. Unknown user IDs are
        reported back instead of failing the batch.

        Returns:
            dict: {"updated": int, "missing_user_ids": list[str]}
        """
        updated: int = 0
        missing: list[str] = []
        for item in data.items:
            try:
                user = await user_repository.get_by_id(db, UUID(item.user_id))
            except ValueError:
                user = None
            if user is None:
                missing.append(item.user_id)
                continue
            user.groups = list(dict.fromkeys(g for g in item.groups if g))
            updated += 1
        await db.flush()
        return {"updated": updated, "missing_user_ids": missing}

    def build_response(self, user: User) -> dict:
        return {
            "id": str(user.id),
            "username": user.username,
            "email": user.email,
            "full_name": user.full_name,
            "phone_number": user.phone_number,
            "role": user.role,
            "default_hourly_rate": user.default_hourly_rate,
            "job_rates": user.job_rates or {},
            "groups": user.groups or [],
            "profile": user.profile or {},
            "status": user.status,
            "require_mfa": user.require_mfa,
            "onboarding_completed": user.onboarding_completed,
            "created_at": user.created_at,
        }

    # --- 그룹 (Groups) ---

    async def list_groups(self, db: AsyncSession) -> Sequence[Group]:
        return await group_repository.get_all(db, order_by=Group.name)

    async def get_group(self, db: AsyncSession, group_id: UUID) -> Group:
        group = await group_repository.get_by_id(db, group_id)
        if group is None:
            raise NotFoundError("Group not found")
        return group

    async def create_group(self, db: AsyncSession, data: GroupCreate, creator: User) -> Group:
        """그룹 생성.

        Raises:
            DuplicateError: 같은 이름의 그룹 존재 (Name taken)
        """
        if await group_repository.get_by_name(db, data.name) is not None:
            raise DuplicateError("Group name already exists")
        return await group_repository.create(db, {
            "name": data.name,
            "category": data.category,
            "created_by": creator.id,
            "administered_by": _parse_user_id(data.administered_by),
        })

    async def update_group(self, db: AsyncSession, group_id: UUID, data: GroupUpdate) -> Group:
        group = await self.get_group(db, group_id)
        changes: dict[str, Any] = data.model_dump(exclude_unset=True)
        if changes.get("name") is None:
            changes.pop("name", None)
        elif changes["name"] != group.name and await group_repository.get_by_name(db, changes["name"]):
            raise DuplicateError("Group name already exists")
        if "administered_by" in changes:
            changes["administered_by"] = _parse_user_id(changes["administered_by"])
        return await group_repository.update(db, group, changes)

    async def delete_group(self, db: AsyncSession, group_id: UUID) -> None:
        group = await self.get_group(db, group_id)
        await group_repository.delete(db, group)

    def build_group_response(self, group: Group) -> dict:
        return {
            "id": str(group.id),
            "name": group.name,
            "category": group.category,
            "created_by": str(group.created_by) if group.created_by else None,
            "administered_by": str(group.administered_by) if group.administered_by else None,
            "created_at": group.created_at,
        }


# 싱글턴 인스턴스 — Singleton instance
user_service: UserService = UserService()
