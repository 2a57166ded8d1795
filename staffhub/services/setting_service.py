"""설정 서비스 — 런타임 키-값 설정.

Setting Service — Runtime key/value settings that override config defaults.
"""

from typing import Any, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from staffhub.models.setting import Setting
from staffhub.repositories.admin_repository import setting_repository
from staffhub.utils.exceptions import NotFoundError


class SettingService:
    """설정 서비스."""

    async def list_settings(self, db: AsyncSession) -> Sequence[Setting]:
        return await setting_repository.get_all(db, order_by=Setting.key)

    async def get_setting(self, db: AsyncSession, key: str) -> Setting:
        """키로 설정 조회.

        Raises:
            NotFoundError: 설정이 없음 (Unknown key)
        """
        setting = await setting_repository.get_by_key(db, key)
        if setting is None:
            raise NotFoundError("Setting not found")
        return setting

    async def get_value(self, db: AsyncSession, key: str, default: Any = None) -> Any:
        """설정 값 조회 — 없거나 null이면 default (Value or default)."""
        setting = await setting_repository.get_by_key(db, key)
        if setting is None or setting.value is None:
            return default
        return setting.value

    async def get_bool(self, db: AsyncSession, key: str, default: bool) -> bool:
        """불리언 설정 — "true"/"false" 문자열도 허용."""
        value = await self.get_value(db, key, default)
        if isinstance(value, str):
            return value.strip().lower() in ("1", "true", "yes", "on")
        return bool(value)

    async def get_float(self, db: AsyncSession, key: str, default: float) -> float:
        """숫자 설정 — 변환 불가하거나 0 이하이면 default."""
        value = await self.get_value(db, key, default)
        try:
            number = float(value)
        except (TypeError, ValueError):
            return default
        return number if number > 0 else default

    async def put_setting(self, db: AsyncSession, key: str, value: Any) -> Setting:
        """설정 생성 또는 갱신 (Upsert)."""
        setting = await setting_repository.get_by_key(db, key)
        if setting is None:
            return await setting_repository.create(db, {"key": key, "value": value})
        return await setting_repository.update(db, setting, {"value": value})

    def build_response(self, setting: Setting) -> dict:
        return {"key": setting.key, "value": setting.value, "updated_at": setting.updated_at}


# 싱글턴 인스턴스 — Singleton instance
setting_service: SettingService = SettingService()
