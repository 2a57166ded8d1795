"""타임시트 관련 Pydantic 요청/응답 스키마 정의.

Timesheet Pydantic request/response schema definitions.
"""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field, model_validator


class TimesheetCreate(BaseModel):
    """타임시트 생성 요청 스키마.

    Hours are computed from the user's finished time entries in the period
    when ``total_hours`` is omitted.

    Attributes:
        user_id: 대상 직원, 생략 시 본인 (Employee; defaults to the caller)
        period_start: 기간 시작일 (Inclusive)
        period_end: 기간 종료일 (Inclusive)
    """

    user_id: UUID | None = None
    period_start: date
    period_end: date
    total_hours: Decimal | None = Field(default=None, ge=0)
    regular_hours: Decimal | None = Field(default=None, ge=0)
    overtime_hours: Decimal | None = Field(default=None, ge=0)
    notes: str | None = None

    @model_validator(mode="after")
    def check_period(self) -> "TimesheetCreate":
        if self.period_end < self.period_start:
            raise ValueError("period_end must not be before period_start")
        return self


class TimesheetReject(BaseModel):
    reason: str | None = None


class TimesheetResponse(BaseModel):
    id: str
    user_id: str
    period_start: date
    period_end: date
    total_hours: Decimal
    regular_hours: Decimal
    overtime_hours: Decimal
    status: str
    approved_by: str | None
    approved_at: datetime | None
    rejection_reason: str | None
    notes: str | None
    created_at: datetime


class TimesheetExportResponse(BaseModel):
    """내보내기 결과 — 잠긴 근태 기록 수 포함."""

    timesheet: TimesheetResponse
    locked_entries: int
