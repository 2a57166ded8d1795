"""문서(자격증/서류) SQLAlchemy ORM 모델 정의.

Document SQLAlchemy ORM model definitions.
Staff credentials (licenses, CPR cards, TB tests ...) with an expiry date
that the expiry sweep watches.

Tables:
    - documents: 직원 제출 서류 (Staff-submitted documents)
"""

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from staffhub.database import Base, UTCDateTime, utcnow


class Document(Base):
    """문서 모델 — 직원 자격 서류.

    Document model — A credential or HR document owned by a user.

    Status values:
        - submitted: 제출됨, 검토 대기 (Awaiting review)
        - approved: 승인됨 (Approved)
        - rejected: 반려됨 (Rejected with reason)
        - expiring: 만료 임박 (Expiry within the sweep window)
        - expired: 만료됨 (Expiry date passed)
    """

    __tablename__ = "documents"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    file_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    file_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    # 추가 정보 — Free-form metadata ("metadata" is reserved on declarative classes)
    meta: Mapped[dict[str, Any]] = mapped_column("metadata", JSON, default=dict)
    # 상태 — "submitted" | "approved" | "rejected" | "expired" | "expiring"
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="submitted", index=True)
    uploaded_date: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)
    expiry_date: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True, index=True)
    approved_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, onupdate=utcnow)
