"""파일 업로드 라우터 — 업로드, 다운로드, 삭제.

File Router — Multipart upload of one or more files, download by stored
name and deletion. Local mode streams files from disk; S3 mode redirects
to a short-lived presigned URL.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Request, UploadFile
from fastapi.responses import FileResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from staffhub.api.deps import get_current_user, require_permission
from staffhub.database import get_db
from staffhub.models.user import User
from staffhub.schemas.common import MessageResponse, UploadResponse
from staffhub.services.audit_service import audit_service
from staffhub.services.storage_service import storage_service

router: APIRouter = APIRouter()


@router.post("/upload", response_model=UploadResponse, status_code=201)
async def upload_files(
    current_user: Annotated[User, Depends(get_current_user)],
    files: Annotated[list[UploadFile], File(description="업로드 파일 (one or more)")],
) -> dict:
    """파일 업로드 — 저장 파일명과 URL 반환.

    Every file is validated before any is stored, so a rejected file
    fails the whole request without leaving partial uploads behind.
    The returned ``file_name`` is what shift note attachments reference.
    """
    contents: list[tuple[UploadFile, bytes]] = []
    for upload in files:
        data = await upload.read()
        storage_service.validate(upload.filename, len(data))
        contents.append((upload, data))

    uploaded: list[dict] = []
    for upload, data in contents:
        name = storage_service.save(upload.filename, data, upload.content_type)
        uploaded.append({
            "file_name": name,
            "original_name": upload.filename or name,
            "url": storage_service.file_url(name),
            "size": len(data),
            "content_type": upload.content_type,
        })
    return {"files": uploaded}


@router.get("/files/{name}", response_model=None)
async def get_file(
    name: str,
    current_user: Annotated[User, Depends(get_current_user)],
) -> FileResponse | RedirectResponse:
    """파일 다운로드 — 로컬은 직접 전송, S3는 presigned URL로 리다이렉트."""
    if storage_service.is_local:
        return FileResponse(storage_service.local_path(name))
    return RedirectResponse(storage_service.presigned_url(name))


@router.delete("/files/{name}", response_model=MessageResponse)
async def delete_file(
    name: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission("files:delete"))],
) -> dict[str, str]:
    storage_service.delete(name)
    await audit_service.log(db, current_user.id, "delete", "file", name, request=request)
    await db.commit()
    return {"message": "File deleted"}
