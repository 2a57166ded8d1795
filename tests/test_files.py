"""파일 API 테스트 — 업로드, 다운로드, 삭제 (로컬 모드).

File API tests — Upload, download and delete against local storage.
"""

from httpx import AsyncClient

from staffhub.services.storage_service import storage_service
from tests.conftest import auth_header


class TestFiles:
    async def test_upload_download_delete(self, client: AsyncClient, staff_token, admin_token):
        res = await client.post(
            "/api/upload",
            files=[
                ("files", ("wound.jpg", b"\xff\xd8\xff image", "image/jpeg")),
                ("files", ("notes.txt", b"handoff", "text/plain")),
            ],
            headers=auth_header(staff_token),
        )
        assert res.status_code == 201
        files = res.json()["files"]
        assert [f["original_name"] for f in files] == ["wound.jpg", "notes.txt"]
        name = files[1]["file_name"]
        assert files[1]["url"] == f"/api/files/{name}"

        download = await client.get(f"/api/files/{name}", headers=auth_header(staff_token))
        assert download.status_code == 200
        assert download.content == b"handoff"

        denied = await client.delete(f"/api/files/{name}", headers=auth_header(staff_token))
        assert denied.status_code == 403

        deleted = await client.delete(f"/api/files/{name}", headers=auth_header(admin_token))
        assert deleted.json()["message"] == "File deleted"

        gone = await client.get(f"/api/files/{name}", headers=auth_header(staff_token))
        assert gone.status_code == 404

    async def test_bad_type_rejects_whole_batch(self, client: AsyncClient, staff_token):
        res = await client.post(
            "/api/upload",
            files=[
                ("files", ("ok.pdf", b"%PDF", "application/pdf")),
                ("files", ("run.exe", b"MZ", "application/octet-stream")),
            ],
            headers=auth_header(staff_token),
        )
        assert res.status_code == 400
        assert not storage_service.uploads_dir.exists() or not any(storage_service.uploads_dir.iterdir())

    async def test_download_requires_auth_and_valid_name(self, client: AsyncClient, staff_token):
        assert (await client.get("/api/files/anything.pdf")).status_code == 401
        traversal = await client.get("/api/files/..%2Fsecret.txt", headers=auth_header(staff_token))
        assert traversal.status_code == 404
