"""스토리지 서비스 — S3 또는 로컬 파일 저장.

Storage Service — Uploaded files on S3 or the local disk.
AWS 키가 비어있으면 자동으로 로컬 모드로 전환됩니다.
Files are stored under a random name that keeps the original extension;
that name is what the rest of the API references (e.g. shift note photos).
"""

import re
import uuid
from pathlib import Path

from staffhub.config import settings
from staffhub.utils.exceptions import BadRequestError, NotFoundError

# 로컬 업로드 디렉토리 — .env의 LOCAL_UPLOADS_DIR 또는 <project>/uploads/
_PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent.parent
UPLOADS_DIR: Path = Path(settings.LOCAL_UPLOADS_DIR) if settings.LOCAL_UPLOADS_DIR else _PROJECT_ROOT / "uploads"

ALLOWED_EXTENSIONS: frozenset[str] = frozenset(
    {"jpeg", "jpg", "png", "gif", "pdf", "doc", "docx", "xls", "xlsx", "txt", "csv"}
)

# 저장 파일명 형식 — <32 hex>.<ext>; 경로 조작 차단
_STORED_NAME = re.compile(r"^[0-9a-f]{32}\.[a-z0-9]{1,5}$")


def file_extension(filename: str | None) -> str:
    if not filename or "." not in filename:
        return ""
    return filename.rsplit(".", 1)[-1].lower()


class StorageService:
    """파일 업로드 서비스 — S3 또는 로컬 모드 자동 선택."""

    def __init__(self) -> None:
        self._client = None
        self.uploads_dir: Path = UPLOADS_DIR

    @property
    def is_local(self) -> bool:
        return not settings.AWS_ACCESS_KEY_ID or not settings.AWS_S3_BUCKET

    @property
    def client(self):
        if self.is_local:
            return None
        if self._client is None:
            import boto3
            from botocore.config import Config as BotoConfig

            self._client = boto3.client(
                "s3",
                region_name=settings.AWS_S3_REGION,
                aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
                aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
                config=BotoConfig(signature_version="s3v4"),
            )
        return self._client

    def validate(self, filename: str | None, size: int) -> str:
        """확장자와 크기 검증 — 확장자를 반환.

        Raises:
            BadRequestError: 허용되지 않은 확장자 또는 크기 초과
                             (Extension not allowed / file too large)
        """
        ext = file_extension(filename)
        if ext not in ALLOWED_EXTENSIONS:
            raise BadRequestError(f"File type not allowed: {filename}")
        if size > settings.MAX_UPLOAD_BYTES:
            raise BadRequestError(f"File too large: {filename}")
        if size == 0:
            raise BadRequestError(f"File is empty: {filename}")
        return ext

    def _s3_url(self, key: str) -> str:
        return f"https://{settings.AWS_S3_BUCKET}.s3.{settings.AWS_S3_REGION}.amazonaws.com/{key}"

    def file_url(self, name: str) -> str:
        """저장 파일의 URL (Local files are served by GET /api/files/{name})."""
        if self.is_local:
            return f"/api/files/{name}"
        return self._s3_url(f"uploads/{name}")

    def check_name(self, name: str) -> str:
        if not _STORED_NAME.match(name):
            raise NotFoundError("File not found")
        return name

    def save(self, filename: str | None, data: bytes, content_type: str | None = None) -> str:
        """파일 저장 — 저장된 파일명을 반환합니다.

        Args:
            filename: 원본 파일명 (Original client filename)
            data: 파일 내용 (File bytes)
            content_type: MIME 타입 (Content type for S3)

        Returns:
            str: 저장 파일명 (Stored name, e.g. "3f2a...9c.pdf")
        """
        ext = self.validate(filename, len(data))
        name = f"{uuid.uuid4().hex}.{ext}"

        if self.is_local:
            path = self.uploads_dir / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
            return name

        self.client.put_object(
            Bucket=settings.AWS_S3_BUCKET,
            Key=f"uploads/{name}",
            Body=data,
            ContentType=content_type or "application/octet-stream",
        )
        return name

    def local_path(self, name: str) -> Path:
        """로컬 파일 경로.

        Raises:
            NotFoundError: 파일 없음 (Unknown file)
        """
        path = self.uploads_dir / self.check_name(name)
        if not path.is_file():
            raise NotFoundError("File not found")
        return path

    def presigned_url(self, name: str, expires: int = 3600) -> str:
        """S3 다운로드용 presigned GET URL."""
        return self.client.generate_presigned_url(
            "get_object",
            Params={"Bucket": settings.AWS_S3_BUCKET, "Key": f"uploads/{self.check_name(name)}"},
            ExpiresIn=expires,
        )

    def delete(self, name: str) -> None:
        """저장 파일 삭제.

        Raises:
            NotFoundError: 파일 없음 (Unknown file)
        """
        if self.is_local:
            self.local_path(name).unlink()
            return
        self.client.delete_object(Bucket=settings.AWS_S3_BUCKET, Key=f"uploads/{self.check_name(name)}")


storage_service: StorageService = StorageService()
