"""서류 API 테스트 — 등록, HR 검토, 만료 검사.

Document API tests — Upload records, HR review and the expiry sweep.
"""

from datetime import datetime, timedelta, timezone

from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from staffhub.models.audit_log import AuditLog
from staffhub.models.document import Document
from staffhub.models.notification import Notification
from tests.conftest import auth_header

DOCUMENTS_URL = "/api/documents"


async def make_document(db: AsyncSession, user, status: str, expires_in_days: float | None) -> Document:
    expiry = None
    if expires_in_days is not None:
        expiry = datetime.now(timezone.utc) + timedelta(days=expires_in_days)
    document = Document(user_id=user.id, title=f"RN License ({status})", status=status, expiry_date=expiry)
    db.add(document)
    await db.flush()
    await db.refresh(document)
    return document


class TestCreateAndReview:
    async def test_create_is_submitted(self, client: AsyncClient, staff_user, staff_token):
        res = await client.post(
            DOCUMENTS_URL,
            json={"title": "CPR Certificate", "category": "certification", "metadata": {"issuer": "AHA"}},
            headers=auth_header(staff_token),
        )
        assert res.status_code == 201
        data = res.json()
        assert data["status"] == "submitted"
        assert data["user_id"] == str(staff_user.id)
        assert data["metadata"] == {"issuer": "AHA"}

    async def test_staff_cannot_create_for_others(self, client: AsyncClient, other_staff, staff_token):
        res = await client.post(
            DOCUMENTS_URL,
            json={"title": "TB Test", "user_id": str(other_staff.id)},
            headers=auth_header(staff_token),
        )
        assert res.status_code == 403

    async def test_hr_approves_and_notifies(
        self, client: AsyncClient, db: AsyncSession, staff_user, staff_token, hr_token
    ):
        created = await client.post(DOCUMENTS_URL, json={"title": "TB Test"}, headers=auth_header(staff_token))
        doc_id = created.json()["id"]

        denied = await client.post(f"{DOCUMENTS_URL}/{doc_id}/approve", headers=auth_header(staff_token))
        assert denied.status_code == 403

        res = await client.post(f"{DOCUMENTS_URL}/{doc_id}/approve", headers=auth_header(hr_token))
        assert res.status_code == 200
        assert res.json()["status"] == "approved"
        assert res.json()["approved_at"] is not None

        again = await client.post(f"{DOCUMENTS_URL}/{doc_id}/approve", headers=auth_header(hr_token))
        assert again.status_code == 400

    async def test_reject_then_resubmit(self, client: AsyncClient, staff_token, hr_token):
        created = await client.post(DOCUMENTS_URL, json={"title": "Badge"}, headers=auth_header(staff_token))
        doc_id = created.json()["id"]

        rejected = await client.post(
            f"{DOCUMENTS_URL}/{doc_id}/reject", json={"reason": "Blurry scan"}, headers=auth_header(hr_token)
        )
        assert rejected.json()["status"] == "rejected"
        assert rejected.json()["rejection_reason"] == "Blurry scan"

        resubmitted = await client.post(f"{DOCUMENTS_URL}/{doc_id}/submit", headers=auth_header(staff_token))
        assert resubmitted.json()["status"] == "submitted"


class TestVisibility:
    async def test_staff_sees_only_own(
        self, client: AsyncClient, db: AsyncSession, staff_user, other_staff, staff_token, other_token
    ):
        mine = await make_document(db, staff_user, "submitted", None)
        await make_document(db, other_staff, "submitted", None)

        listed = await client.get(DOCUMENTS_URL, headers=auth_header(staff_token))
        assert [d["id"] for d in listed.json()] == [str(mine.id)]

        peek = await client.get(f"{DOCUMENTS_URL}/{mine.id}", headers=auth_header(other_token))
        assert peek.status_code == 403

    async def test_manager_read_is_audited(
        self, client: AsyncClient, db: AsyncSession, staff_user, manager_user, manager_token
    ):
        document = await make_document(db, staff_user, "approved", 90)
        res = await client.get(f"{DOCUMENTS_URL}/{document.id}", headers=auth_header(manager_token))
        assert res.status_code == 200

        logs = await db.execute(select(AuditLog).where(AuditLog.resource_id == str(document.id)))
        entry = logs.scalars().one()
        assert entry.user_id == manager_user.id
        assert entry.phi_accessed is True


class TestExpirySweep:
    async def test_flags_expiring_and_expired(
        self, client: AsyncClient, db: AsyncSession, staff_user, hr_token
    ):
        soon = await make_document(db, staff_user, "approved", 10)
        late = await make_document(db, staff_user, "approved", -1)
        stale = await make_document(db, staff_user, "expiring", -2)
        far = await make_document(db, staff_user, "approved", 60)
        pending = await make_document(db, staff_user, "submitted", 5)

        res = await client.post(f"{DOCUMENTS_URL}/check-expiry", json={"days": 30}, headers=auth_header(hr_token))
        assert res.status_code == 200
        data = res.json()
        assert data["expiring"] == 1
        assert data["expired"] == 2
        assert set(data["document_ids"]) == {str(soon.id), str(late.id), str(stale.id)}

        for document, status in ((soon, "expiring"), (late, "expired"), (stale, "expired"),
                                 (far, "approved"), (pending, "submitted")):
            await db.refresh(document)
            assert document.status == status

        notes = await db.execute(select(Notification).where(Notification.user_id == staff_user.id))
        assert sorted(n.type for n in notes.scalars().all()) == [
            "document_expired", "document_expired", "document_expiring",
        ]

    async def test_rerun_changes_nothing(self, client: AsyncClient, db: AsyncSession, staff_user, hr_token):
        await make_document(db, staff_user, "approved", 3)
        await client.post(f"{DOCUMENTS_URL}/check-expiry", headers=auth_header(hr_token))

        res = await client.post(f"{DOCUMENTS_URL}/check-expiry", headers=auth_header(hr_token))
        assert res.json() == {"expiring": 0, "expired": 0, "document_ids": []}

    async def test_staff_cannot_run_sweep(self, client: AsyncClient, staff_token):
        res = await client.post(f"{DOCUMENTS_URL}/check-expiry", headers=auth_header(staff_token))
        assert res.status_code == 403

    async def test_window_beyond_ten_years_rejected(self, client: AsyncClient, hr_token):
        res = await client.post(
            f"{DOCUMENTS_URL}/check-expiry", json={"days": 1_000_000_000}, headers=auth_header(hr_token)
        )
        assert res.status_code == 400
