"""테스트 인프라 — 인메모리 SQLite DB, 세션, httpx 클라이언트 픽스처.

Test infrastructure — In-memory SQLite DB, session, and httpx client fixtures.
Each test gets a fresh database; the app shares the test session so
fixtures and requests see the same rows.
"""

import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-with-enough-length-0123456789")

from collections.abc import AsyncGenerator  # noqa: E402
from datetime import datetime, timedelta, timezone  # noqa: E402
from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import event  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from staffhub.database import Base, get_db  # noqa: E402
from staffhub.main import app  # noqa: E402
from staffhub.models import *  # noqa: F401,F403,E402 — register all models with metadata
from staffhub.models.schedule import Shift, ShiftAssignment  # noqa: E402
from staffhub.models.time_entry import TimeEntry  # noqa: E402
from staffhub.models.user import User  # noqa: E402
from staffhub.services.storage_service import storage_service  # noqa: E402
from staffhub.utils.jwt import create_access_token  # noqa: E402
from staffhub.utils.password import hash_password  # noqa: E402


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 async 엔진 — 테스트마다 새 인메모리 DB."""
    eng = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # SAVEPOINT 지원 — pysqlite의 자동 트랜잭션 처리를 끄고 BEGIN을 직접 발행
    @event.listens_for(eng.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(eng.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db: AsyncSession, tmp_path, monkeypatch) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — DB 세션과 업로드 디렉토리를 오버라이드합니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    monkeypatch.setattr(storage_service, "uploads_dir", tmp_path / "uploads")

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# 헬퍼 픽스처: 테스트용 데이터 생성
# ---------------------------------------------------------------------------
async def make_user(
    db: AsyncSession,
    username: str,
    role: str,
    *,
    status: str = "active",
    groups: list[str] | None = None,
    profile: dict | None = None,
    job_rates: dict | None = None,
) -> User:
    user = User(
        username=username,
        email=f"{username}@test.com",
        full_name=f"Test {username.title()}",
        password_hash=hash_password(f"{username}-pass-123"),
        role=role,
        status=status,
        groups=groups or [],
        profile=profile or {},
        job_rates=job_rates or {},
        default_hourly_rate=Decimal("25.00"),
        onboarding_completed=status == "active",
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def owner_user(db: AsyncSession) -> User:
    return await make_user(db, "owner", "Owner")


@pytest_asyncio.fixture
async def admin_user(db: AsyncSession) -> User:
    return await make_user(db, "admin", "Admin")


@pytest_asyncio.fixture
async def hr_user(db: AsyncSession) -> User:
    return await make_user(db, "hr", "HR")


@pytest_asyncio.fixture
async def manager_user(db: AsyncSession) -> User:
    return await make_user(db, "manager", "Manager")


@pytest_asyncio.fixture
async def scheduler_user(db: AsyncSession) -> User:
    return await make_user(db, "scheduler", "Scheduler")


@pytest_asyncio.fixture
async def payroll_user(db: AsyncSession) -> User:
    return await make_user(db, "payroll", "Payroll")


@pytest_asyncio.fixture
async def staff_user(db: AsyncSession) -> User:
    return await make_user(db, "staff", "Staff")


@pytest_asyncio.fixture
async def other_staff(db: AsyncSession) -> User:
    return await make_user(db, "nurse", "Staff")


def make_token(user: User) -> str:
    """테스트용 JWT 액세스 토큰을 생성합니다."""
    return create_access_token({"sub": str(user.id), "role": user.role})


@pytest.fixture
def owner_token(owner_user) -> str:
    return make_token(owner_user)


@pytest.fixture
def admin_token(admin_user) -> str:
    return make_token(admin_user)


@pytest.fixture
def hr_token(hr_user) -> str:
    return make_token(hr_user)


@pytest.fixture
def manager_token(manager_user) -> str:
    return make_token(manager_user)


@pytest.fixture
def scheduler_token(scheduler_user) -> str:
    return make_token(scheduler_user)


@pytest.fixture
def payroll_token(payroll_user) -> str:
    return make_token(payroll_user)


@pytest.fixture
def staff_token(staff_user) -> str:
    return make_token(staff_user)


@pytest.fixture
def other_token(other_staff) -> str:
    return make_token(other_staff)


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


async def make_entry(
    db: AsyncSession,
    user: User,
    clock_in: datetime,
    clock_out: datetime | None = None,
    **values,
) -> TimeEntry:
    """근태 기록 직접 생성 (Insert a time entry bypassing the clock endpoints)."""
    entry = TimeEntry(
        user_id=user.id,
        clock_in=clock_in,
        clock_out=clock_out,
        status=values.pop("status", "completed" if clock_out else "active"),
        approval_status=values.pop("approval_status", "approved"),
        **values,
    )
    db.add(entry)
    await db.flush()
    await db.refresh(entry)
    return entry


async def make_shift(
    db: AsyncSession,
    start: datetime,
    hours: int = 8,
    *,
    assignee: User | None = None,
    **values,
) -> Shift:
    """시프트 직접 생성 — assignee가 있으면 배정까지."""
    shift = Shift(
        title=values.pop("title", "Day Shift"),
        start_time=start,
        end_time=start + timedelta(hours=hours),
        status="assigned" if assignee else values.pop("status", "open"),
        **values,
    )
    db.add(shift)
    await db.flush()
    if assignee is not None:
        db.add(ShiftAssignment(shift_id=shift.id, user_id=assignee.id, status="assigned"))
        await db.flush()
    await db.refresh(shift)
    return shift
