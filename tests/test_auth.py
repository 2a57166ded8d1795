"""인증 API 테스트 — 회원가입, 로그인, 토큰 갱신, 로그아웃, 온보딩.

Auth API tests — Register, login, refresh rotation, logout and the
onboarding link flow.
"""

from datetime import timedelta
from uuid import UUID

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from staffhub.database import utcnow
from staffhub.models.user import User
from tests.conftest import auth_header, make_user

AUTH_URL = "/api/auth"


class TestRegister:
    async def test_register_creates_active_staff(self, client: AsyncClient):
        res = await client.post(f"{AUTH_URL}/register", json={
            "username": "newnurse",
            "email": "newnurse@test.com",
            "password": "secure-pass-1",
            "full_name": "New Nurse",
        })
        assert res.status_code == 201
        data = res.json()
        assert data["token_type"] == "bearer"
        assert data["user"]["role"] == "Staff"
        assert data["user"]["status"] == "active"
        assert "password_hash" not in data["user"]

    async def test_duplicate_username(self, client: AsyncClient, staff_user):
        res = await client.post(f"{AUTH_URL}/register", json={
            "username": "staff",
            "email": "another@test.com",
            "password": "secure-pass-1",
            "full_name": "Dup",
        })
        assert res.status_code == 409

    async def test_short_password(self, client: AsyncClient):
        res = await client.post(f"{AUTH_URL}/register", json={
            "username": "shorty",
            "email": "shorty@test.com",
            "password": "short",
            "full_name": "Shorty",
        })
        assert res.status_code == 400


class TestLogin:
    async def test_login_by_username_or_email(self, client: AsyncClient, staff_user):
        by_name = await client.post(f"{AUTH_URL}/login", json={"username": "staff", "password": "staff-pass-123"})
        assert by_name.status_code == 200
        by_email = await client.post(
            f"{AUTH_URL}/login", json={"username": "staff@test.com", "password": "staff-pass-123"}
        )
        assert by_email.status_code == 200
        assert by_email.json()["user"]["id"] == str(staff_user.id)

    async def test_wrong_password(self, client: AsyncClient, staff_user):
        res = await client.post(f"{AUTH_URL}/login", json={"username": "staff", "password": "nope-nope"})
        assert res.status_code == 401
        assert res.json()["detail"] == "Invalid username or password"

    async def test_archived_cannot_login(self, client: AsyncClient, db: AsyncSession):
        await make_user(db, "retired", "Staff", status="archived")
        res = await client.post(f"{AUTH_URL}/login", json={"username": "retired", "password": "retired-pass-123"})
        assert res.status_code == 401
        assert res.json()["detail"] == "Account is archived"

    async def test_me_requires_token(self, client: AsyncClient, staff_token):
        assert (await client.get(f"{AUTH_URL}/me")).status_code == 401
        res = await client.get(f"{AUTH_URL}/me", headers=auth_header(staff_token))
        assert res.json()["username"] == "staff"


class TestRefresh:
    async def test_refresh_rotates(self, client: AsyncClient, staff_user):
        login = await client.post(f"{AUTH_URL}/login", json={"username": "staff", "password": "staff-pass-123"})
        old_refresh = login.json()["refresh_token"]

        rotated = await client.post(f"{AUTH_URL}/refresh", json={"refresh_token": old_refresh})
        assert rotated.status_code == 200
        assert rotated.json()["refresh_token"] != old_refresh

        reused = await client.post(f"{AUTH_URL}/refresh", json={"refresh_token": old_refresh})
        assert reused.status_code == 401

    async def test_access_token_is_not_a_refresh_token(self, client: AsyncClient, staff_user):
        login = await client.post(f"{AUTH_URL}/login", json={"username": "staff", "password": "staff-pass-123"})
        res = await client.post(f"{AUTH_URL}/refresh", json={"refresh_token": login.json()["access_token"]})
        assert res.status_code == 401

    async def test_logout_revokes(self, client: AsyncClient, staff_user):
        login = await client.post(f"{AUTH_URL}/login", json={"username": "staff", "password": "staff-pass-123"})
        refresh_token = login.json()["refresh_token"]

        out = await client.post(f"{AUTH_URL}/logout", json={"refresh_token": refresh_token})
        assert out.json()["message"] == "Logged out"

        res = await client.post(f"{AUTH_URL}/refresh", json={"refresh_token": refresh_token})
        assert res.status_code == 401


class TestOnboarding:
    async def _invite(self, client: AsyncClient, db: AsyncSession, token: str) -> User:
        res = await client.post("/api/users", json={
            "username": "invitee",
            "email": "invitee@test.com",
            "full_name": "Invited Nurse",
        }, headers=auth_header(token))
        assert res.status_code == 201
        assert res.json()["status"] == "pending-onboarding"
        user = await db.get(User, UUID(res.json()["id"]))
        return user

    async def test_complete_onboarding(self, client: AsyncClient, db: AsyncSession, hr_token):
        user = await self._invite(client, db, hr_token)
        token = user.onboarding_token

        info = await client.get(f"{AUTH_URL}/onboarding/{token}")
        assert info.status_code == 200
        assert info.json()["username"] == "invitee"

        early = await client.post(f"{AUTH_URL}/login", json={"username": "invitee", "password": "whatever-123"})
        assert early.status_code == 401

        done = await client.post(f"{AUTH_URL}/onboarding/{token}", json={
            "password": "brand-new-pass",
            "profile": {"license_number": "RN-12345", "programs": ["Hospice"]},
        })
        assert done.status_code == 200
        assert done.json()["user"]["status"] == "active"
        assert done.json()["user"]["onboarding_completed"] is True
        assert done.json()["user"]["profile"]["license_number"] == "RN-12345"

        login = await client.post(f"{AUTH_URL}/login", json={"username": "invitee", "password": "brand-new-pass"})
        assert login.status_code == 200

        reused = await client.get(f"{AUTH_URL}/onboarding/{token}")
        assert reused.status_code == 404

    async def test_expired_link(self, client: AsyncClient, db: AsyncSession, hr_token):
        user = await self._invite(client, db, hr_token)
        user.onboarding_token_expiry = utcnow() - timedelta(minutes=1)
        await db.flush()

        res = await client.get(f"{AUTH_URL}/onboarding/{user.onboarding_token}")
        assert res.status_code == 401
