"""타임시트 SQLAlchemy ORM 모델 정의.

Timesheet SQLAlchemy ORM model definitions.

Tables:
    - timesheets: 기간별 근무시간 집계 (Per-period hour summaries for payroll)
"""

import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from staffhub.database import Base, UTCDateTime, utcnow


class Timesheet(Base):
    """타임시트 모델 — 급여 기간 동안의 근무 시간 요약.

    Timesheet model — Hours worked by one user over a pay period.

    Status Flow:
        pending → submitted → approved | rejected → exported
        - rejected 상태는 다시 submitted로 제출 가능 (Rejected sheets may be resubmitted)
        - exported 시 기간 내 근태 기록이 잠김 (Export locks the period's time entries)

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        user_id: 대상 직원 FK (Employee)
        period_start: 기간 시작일 (Period start date, inclusive)
        period_end: 기간 종료일 (Period end date, inclusive)
        total_hours: 총 근무 시간 (Total hours)
        regular_hours: 정규 시간 (Regular hours)
        overtime_hours: 초과 근무 시간 (Overtime hours)
        status: 상태 (see flow above)
        approved_by: 승인자 FK (Approver)
        approved_at: 승인 일시 (Approval timestamp)
        rejection_reason: 반려 사유 (Rejection reason)
        notes: 메모 (Free-form notes)
    """

    __tablename__ = "timesheets"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    period_start: Mapped[date] = mapped_column(Date, nullable=False)
    period_end: Mapped[date] = mapped_column(Date, nullable=False)
    total_hours: Mapped[Decimal] = mapped_column(Numeric(8, 2), default=Decimal("0"))
    regular_hours: Mapped[Decimal] = mapped_column(Numeric(8, 2), default=Decimal("0"))
    overtime_hours: Mapped[Decimal] = mapped_column(Numeric(8, 2), default=Decimal("0"))
    # 상태 — "pending" | "submitted" | "approved" | "rejected" | "exported"
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending", index=True)
    approved_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, onupdate=utcnow)
