"""근태 기록 SQLAlchemy ORM 모델 정의.

Time entry SQLAlchemy ORM model definitions.
One row per clock-in. The row carries three independent state dimensions
(lifecycle ``status``, edit ``approval_status`` and the payroll ``locked``
flag); the legal moves between them live in
``staffhub.services.time_entry_state``.

Tables:
    - time_entries: 출퇴근 기록 (Clock-in/out records)
"""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import JSON, Boolean, ForeignKey, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from staffhub.database import Base, UTCDateTime, utcnow


class TimeEntry(Base):
    """출퇴근 기록 모델.

    Time entry model — A single clock-in/clock-out record.

    Status flow: active -> completed | auto-clocked-out
    Approval flow: approved -> pending (self edit) -> approved | rejected

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        user_id: 사용자 FK (Owner of the entry)
        shift_id: 시프트 FK, 선택 (Shift this entry was worked against)
        clock_in: 출근 시각 (Clock-in timestamp, required)
        clock_out: 퇴근 시각 (Clock-out timestamp, null while active)
        break_minutes: 휴식 시간(분) (Unpaid break minutes)
        job_name: 직무/근무지 이름 (Job or facility name)
        program_name: 프로그램 이름 (Program the shift belongs to)
        hourly_rate: 적용 시급 (Rate resolved at clock-in)
        status: 상태 (active | completed | auto-clocked-out)
        approval_status: 승인 상태 (approved | pending | rejected)
        locked: 잠금 여부 (Locked by payroll export)
        original_clock_in: 수정 전 출근 시각 (Snapshot for revert-on-reject)
        original_clock_out: 수정 전 퇴근 시각 (Snapshot for revert-on-reject)
        rejection_reason: 반려 사유 (Reason given when an edit is rejected)
    """

    __tablename__ = "time_entries"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 사용자 FK — Owner of this entry
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # 시프트 FK — Linked shift (SET NULL when the shift is removed)
    shift_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("shifts.id", ondelete="SET NULL"), nullable=True)
    clock_in: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, index=True)
    clock_out: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    break_minutes: Mapped[int] = mapped_column(Integer, default=0)
    job_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    program_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    hourly_rate: Mapped[Decimal | None] = mapped_column(Numeric(8, 2), nullable=True)
    # 위치 — GPS or manual location
    location: Mapped[str | None] = mapped_column(String(500), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    # 상태 — "active" → "completed" | "auto-clocked-out"
    status: Mapped[str] = mapped_column(String(30), nullable=False, default="active", index=True)
    # 승인 상태 — "approved" | "pending" | "rejected"
    approval_status: Mapped[str] = mapped_column(String(20), nullable=False, default="approved", index=True)
    # 잠금 — 급여 내보내기 후 수정 불가 (Locked once payroll-exported)
    locked: Mapped[bool] = mapped_column(Boolean, default=False)
    original_clock_in: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    original_clock_out: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    # 퇴근 시 인계 간호사 서명 — Signature obtained at clock out
    relieving_nurse_signature: Mapped[str | None] = mapped_column(Text, nullable=True)
    # 퇴근 시 업로드한 근무 노트 사진 — Shift note photo file names
    shift_note_attachments: Mapped[list[str]] = mapped_column(JSON, default=list)
    employee_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    manager_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, onupdate=utcnow)
