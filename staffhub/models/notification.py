"""알림 관련 SQLAlchemy ORM 모델 정의.

Notification SQLAlchemy ORM model definitions.
Each notification can point back at the entity that triggered it via
reference_type and reference_id.

Tables:
    - notifications: 사용자 알림 (User notifications with polymorphic references)
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from staffhub.database import Base, UTCDateTime, utcnow


class Notification(Base):
    """알림 모델 — 사용자에게 전달되는 시스템 알림.

    Notification model — System notifications delivered to users.

    Notification Types (type 필드 값):
        - "time_entry_edit_request": 근태 수정 승인 요청 (Self edit awaiting an admin)
        - "time_entry_edit_approved": 근태 수정 승인됨 (Edit approved)
        - "time_entry_edit_rejected": 근태 수정 반려됨 (Edit rejected)
        - "shift_assigned": 시프트 배정 (New shift assignment)
        - "document_reviewed": 서류 검토 결과 (Document approved or rejected)
        - "timesheet_reviewed": 타임시트 검토 결과 (Timesheet approved or rejected)

    Reference Types (reference_type 필드 값):
        - "time_entry", "shift_assignment", "document", "timesheet"

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        user_id: 수신자 FK (Recipient user foreign key)
        type: 알림 유형 (Notification type, see above)
        message: 알림 메시지 (Human-readable notification message)
        reference_type: 참조 엔티티 유형 (Referenced entity kind)
        reference_id: 참조 엔티티 ID (Referenced entity UUID)
        is_read: 읽음 여부 (Whether the user has read this notification)
        created_at: 생성 일시 UTC (Creation timestamp)
    """

    __tablename__ = "notifications"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 수신자 FK — Target user who receives this notification
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    message: Mapped[str] = mapped_column(String(1000), nullable=False)
    reference_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    reference_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True, index=True)
    # 읽음 여부 — False=미읽음, True=읽음 (Unread by default)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)
