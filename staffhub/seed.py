"""초기 데이터 시드 스크립트 — Owner 계정과 기본 설정 생성.

Seed script — Creates the first Owner account and the default runtime
settings. Run once to bootstrap an empty database.

Usage:
    python -m staffhub.seed

Creates:
    - 1개 Owner 계정: owner / owner12345 (1 owner user, change the password)
    - 기본 설정 (Default settings): auto_clock_out_max_hours,
      require_clock_out_photos, overtime_weekly_hours
"""

import asyncio

from sqlalchemy import select

from staffhub.config import settings
from staffhub.database import Base, async_session, engine
from staffhub.models import Setting, User
from staffhub.utils.password import hash_password

DEFAULT_SETTINGS: dict[str, object] = {
    "auto_clock_out_max_hours": settings.AUTO_CLOCK_OUT_MAX_HOURS,
    "require_clock_out_photos": settings.REQUIRE_CLOCK_OUT_PHOTOS,
    "overtime_weekly_hours": settings.OVERTIME_WEEKLY_HOURS,
}


async def seed() -> None:
    """데이터베이스를 초기 데이터로 시드합니다.

    Creates tables if they don't exist, then inserts the Owner account and
    any missing default settings.

    Idempotent: 이미 있는 계정/설정은 건너뜁니다 (Existing rows are kept).
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as db:
        existing = await db.execute(select(User).where(User.role == "Owner").limit(1))
        if existing.scalar_one_or_none() is None:
            db.add(User(
                username="owner",
                email="owner@staffhub.local",
                full_name="System Owner",
                password_hash=hash_password("owner12345"),
                role="Owner",
                status="active",
                onboarding_completed=True,
            ))
            print("Seeded owner user: owner/owner12345")

        for key, value in DEFAULT_SETTINGS.items():
            found = await db.execute(select(Setting).where(Setting.key == key))
            if found.scalar_one_or_none() is None:
                db.add(Setting(key=key, value=value))

        await db.commit()
        print("Seed complete.")


if __name__ == "__main__":
    asyncio.run(seed())
