"""스케줄 관련 SQLAlchemy ORM 모델 정의.

Schedule-related SQLAlchemy ORM model definitions.
A schedule groups shifts over a date range; shifts are staffed through
assignments, and staff publish their own availability.

Tables:
    - schedules: 스케줄 (Schedules over a date range)
    - shift_templates: 시프트 템플릿 (Reusable shift presets)
    - shifts: 시프트 (Concrete shifts with job/program)
    - shift_attachments: 시프트 첨부파일 (Files attached to a shift)
    - shift_assignments: 시프트 배정 (Shift ↔ user staffing rows)
    - user_availability: 근무 가능 여부 (Staff availability)
"""

import uuid
from datetime import date as date_type, datetime

from sqlalchemy import Boolean, Date, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from staffhub.database import Base, UTCDateTime, utcnow


class Schedule(Base):
    """스케줄 모델 — 기간 단위 근무표.

    Schedule model — A roster covering a date range.

    Status values:
        - active: 게시됨 (Published)
        - draft: 작성 중 (Being drafted)
        - archived: 보관 (Archived)
    """

    __tablename__ = "schedules"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    start_date: Mapped[date_type] = mapped_column(Date, nullable=False)
    end_date: Mapped[date_type] = mapped_column(Date, nullable=False)
    # 상태 — "active" | "draft" | "archived"
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")
    created_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, onupdate=utcnow)


class ShiftTemplate(Base):
    """시프트 템플릿 모델 — 자주 쓰는 시프트 프리셋.

    Shift template model — Reusable shift preset. Start/end are display
    labels such as "07:00", not timestamps.
    """

    __tablename__ = "shift_templates"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    start_time: Mapped[str] = mapped_column(String(10), nullable=False)
    end_time: Mapped[str] = mapped_column(String(10), nullable=False)
    color: Mapped[str | None] = mapped_column(String(20), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)


class Shift(Base):
    """시프트 모델 — 특정 시각의 실제 근무.

    Shift model — A concrete block of work with a job and optional program.

    Status values:
        open → assigned → in-progress → completed, or cancelled

    Attributes:
        schedule_id: 스케줄 FK, 선택 (Owning schedule)
        template_id: 템플릿 FK, 선택 (Template it was created from)
        job_name: 직무/근무지 (Job or facility name used for pay rate lookup)
        program: 프로그램 (Program name, first pay rate lookup key)
        max_assignees: 최대 배정 인원 (Staffing ceiling)
    """

    __tablename__ = "shifts"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    schedule_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("schedules.id", ondelete="CASCADE"), nullable=True)
    template_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("shift_templates.id", ondelete="SET NULL"), nullable=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    job_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    program: Mapped[str | None] = mapped_column(String(255), nullable=True)
    start_time: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    end_time: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    location: Mapped[str | None] = mapped_column(String(500), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    # 상태 — "open" | "assigned" | "in-progress" | "completed" | "cancelled"
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="open")
    color: Mapped[str | None] = mapped_column(String(20), nullable=True)
    max_assignees: Mapped[int] = mapped_column(Integer, default=1)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index("ix_shifts_start_time", "start_time"),
    )


class ShiftAttachment(Base):
    """시프트 첨부파일 — 시프트에 첨부된 파일 URL."""

    __tablename__ = "shift_attachments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    shift_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("shifts.id", ondelete="CASCADE"), nullable=False, index=True)
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_url: Mapped[str] = mapped_column(String(1000), nullable=False)
    uploaded_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)


class ShiftAssignment(Base):
    """시프트 배정 모델 — 시프트와 직원 연결.

    Shift assignment model — Links a user to a shift.

    Status values:
        assigned → accepted | rejected → completed
    """

    __tablename__ = "shift_assignments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    shift_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("shifts.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # 상태 — "assigned" | "accepted" | "rejected" | "completed"
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="assigned")
    assigned_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)
    accepted_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)


class UserAvailability(Base):
    """근무 가능 여부 모델 — 직원이 등록하는 불가/선호 일자.

    User availability model — A staff member's unavailable or preferred day.
    """

    __tablename__ = "user_availability"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    date: Mapped[date_type] = mapped_column(Date, nullable=False)
    # 유형 — "unavailable" | "preferred"
    type: Mapped[str] = mapped_column(String(20), nullable=False, default="unavailable")
    all_day: Mapped[bool] = mapped_column(Boolean, default=True)
    start_time: Mapped[str | None] = mapped_column(String(10), nullable=True)
    end_time: Mapped[str | None] = mapped_column(String(10), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)
