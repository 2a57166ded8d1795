"""지식베이스/공지 API 테스트 — 공개 범위, 좋아요, 확인, 댓글, 업로드.

Knowledge and update API tests — Audience targeting, likes,
acknowledgements, comments and file-backed articles.
"""

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from tests.conftest import auth_header, make_token, make_user


async def post_update(client: AsyncClient, token: str, **values) -> dict:
    body = {"title": "Flu shots", "content": "Clinic opens Monday", **values}
    res = await client.post("/api/updates", json=body, headers=auth_header(token))
    assert res.status_code == 201
    return res.json()


class TestKnowledge:
    async def test_audience_filtering(
        self, client: AsyncClient, db: AsyncSession, staff_user, other_staff, hr_token, staff_token, other_token
    ):
        hospice = await make_user(db, "hospice", "Staff", profile={"programs": ["Hospice"]})
        articles = [
            {"title": "Handbook"},
            {"title": "Draft policy", "publish_status": "draft"},
            {"title": "Just for staff", "visibility": "specific_users", "target_user_ids": [str(staff_user.id)]},
            {"title": "Hospice only", "visibility": "specific_users", "target_group_ids": ["auto-program-Hospice"]},
        ]
        for body in articles:
            res = await client.post("/api/knowledge", json=body, headers=auth_header(hr_token))
            assert res.status_code == 201

        async def titles(token: str) -> set[str]:
            res = await client.get("/api/knowledge", headers=auth_header(token))
            return {a["title"] for a in res.json()}

        assert await titles(hr_token) == {a["title"] for a in articles}
        assert await titles(staff_token) == {"Handbook", "Just for staff"}
        assert await titles(other_token) == {"Handbook"}
        assert await titles(make_token(hospice)) == {"Handbook", "Hospice only"}

    async def test_hidden_article_is_not_found(self, client: AsyncClient, hr_token, staff_token):
        draft = await client.post(
            "/api/knowledge", json={"title": "WIP", "publish_status": "draft"}, headers=auth_header(hr_token)
        )
        res = await client.get(f"/api/knowledge/{draft.json()['id']}", headers=auth_header(staff_token))
        assert res.status_code == 404

    async def test_staff_cannot_author(self, client: AsyncClient, staff_token):
        res = await client.post("/api/knowledge", json={"title": "Mine"}, headers=auth_header(staff_token))
        assert res.status_code == 403

    async def test_upload_creates_pdf_article(self, client: AsyncClient, hr_token):
        res = await client.post(
            "/api/knowledge/upload",
            data={"title": "Infection control", "category": "policies"},
            files={"file": ("infection.pdf", b"%PDF-1.4 test", "application/pdf")},
            headers=auth_header(hr_token),
        )
        assert res.status_code == 201
        data = res.json()
        assert data["type"] == "pdf"
        assert data["file_url"].startswith("/api/files/")
        assert data["file_url"].endswith(".pdf")


class TestUpdates:
    async def test_like_toggles(self, client: AsyncClient, manager_token, staff_token):
        update = await post_update(client, manager_token)

        liked = await client.post(f"/api/updates/{update['id']}/like", headers=auth_header(staff_token))
        assert liked.json() == {"liked": True, "like_count": 1}

        unliked = await client.post(f"/api/updates/{update['id']}/like", headers=auth_header(staff_token))
        assert unliked.json() == {"liked": False, "like_count": 0}

    async def test_acknowledge_is_idempotent(self, client: AsyncClient, manager_token, staff_token):
        update = await post_update(client, manager_token)

        first = await client.post(f"/api/updates/{update['id']}/acknowledge", headers=auth_header(staff_token))
        second = await client.post(f"/api/updates/{update['id']}/acknowledge", headers=auth_header(staff_token))
        assert first.json()["acknowledged_at"] == second.json()["acknowledged_at"]

        listed = await client.get("/api/updates", headers=auth_header(staff_token))
        row = listed.json()[0]
        assert row["acknowledgement_count"] == 1
        assert row["acknowledged"] is True
        assert row["liked"] is False

    async def test_comments(self, client: AsyncClient, manager_token, staff_token, other_token, admin_token):
        update = await post_update(client, manager_token)
        url = f"/api/updates/{update['id']}/comments"

        created = await client.post(url, json={"content": "Thanks!"}, headers=auth_header(staff_token))
        assert created.status_code == 201
        comment_id = created.json()["id"]

        listed = await client.get(url, headers=auth_header(other_token))
        assert [c["content"] for c in listed.json()] == ["Thanks!"]

        foreign = await client.delete(f"/api/updates/comments/{comment_id}", headers=auth_header(other_token))
        assert foreign.status_code == 403

        by_admin = await client.delete(f"/api/updates/comments/{comment_id}", headers=auth_header(admin_token))
        assert by_admin.json()["message"] == "Comment deleted"

    async def test_targeted_update_hidden_from_others(
        self, client: AsyncClient, staff_user, manager_token, staff_token, other_token
    ):
        update = await post_update(
            client, manager_token, visibility="specific_users", target_user_ids=[str(staff_user.id)]
        )
        seen = await client.get(f"/api/updates/{update['id']}", headers=auth_header(staff_token))
        assert seen.status_code == 200

        hidden = await client.post(f"/api/updates/{update['id']}/like", headers=auth_header(other_token))
        assert hidden.status_code == 404

    async def test_attachment_upload(self, client: AsyncClient, manager_token):
        update = await post_update(client, manager_token)
        res = await client.post(
            f"/api/updates/{update['id']}/attachments",
            files={"file": ("schedule.xlsx", b"PK\x03\x04", "application/octet-stream")},
            headers=auth_header(manager_token),
        )
        assert res.status_code == 200
        assert len(res.json()["attachments"]) == 1
