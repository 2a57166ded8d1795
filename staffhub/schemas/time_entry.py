"""근태 기록 관련 Pydantic 요청/응답 스키마 정의.

Time entry Pydantic request/response schema definitions.
Covers clock-in/out, auto-clock-out, edits and the approval actions.
"""

from datetime import datetime
from decimal import Decimal
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field


class ClockInRequest(BaseModel):
    """출근 요청 스키마.

    Attributes:
        shift_id: 시프트 UUID, 선택 — 없으면 오늘 배정된 시프트 자동 탐지
                  (Optional; today's assigned shift is detected when omitted)
        location: 위치 (GPS or manual location)
        notes: 메모 (Free-form notes)
    """

    shift_id: UUID | None = None
    location: str | None = None
    notes: str | None = None


class ClockOutRequest(BaseModel):
    """퇴근 요청 스키마.

    Attributes:
        break_minutes: 휴식 시간(분) (Unpaid break minutes)
        notes: 메모 (Notes)
        employee_notes: 직원 메모 (Employee notes about the shift)
        relieving_nurse_signature: 인계 간호사 서명 (Relieving nurse signature)
        shift_note_attachments: 근무 노트 사진 파일명 (Uploaded shift note photos)
    """

    break_minutes: int = Field(default=0, ge=0)
    notes: str | None = None
    employee_notes: str | None = None
    relieving_nurse_signature: str | None = None
    shift_note_attachments: list[str] = Field(default_factory=list)


class AutoClockOutRequest(BaseModel):
    """자동 퇴근 요청 — max_hours 미지정 시 설정값 사용."""

    max_hours: float | None = Field(default=None, gt=0)


class TimeEntryUpdate(BaseModel):
    """근태 수정 요청 스키마 (부분 업데이트).

    Partial update. Which fields a caller may send depends on the edit path:
    admins may send anything; a non-admin editing their own entry may not
    send the admin-only fields (locked, status, approval_status,
    hourly_rate, manager_notes, user_id).
    """

    clock_in: datetime | None = None
    clock_out: datetime | None = None
    break_minutes: int | None = Field(default=None, ge=0)
    job_name: str | None = None
    program_name: str | None = None
    location: str | None = None
    notes: str | None = None
    employee_notes: str | None = None
    shift_id: UUID | None = None
    # 관리자 전용 — Admin-only fields
    user_id: UUID | None = None
    hourly_rate: Decimal | None = Field(default=None, ge=0)
    status: Literal["active", "completed", "auto-clocked-out"] | None = None
    approval_status: Literal["approved", "pending", "rejected"] | None = None
    locked: bool | None = None
    manager_notes: str | None = None


class RejectEditRequest(BaseModel):
    """수정 반려 요청 (Reason shown to the employee)."""

    reason: str | None = None


class TimeEntryResponse(BaseModel):
    """근태 기록 응답 스키마."""

    id: str
    user_id: str
    shift_id: str | None
    clock_in: datetime
    clock_out: datetime | None
    break_minutes: int
    job_name: str | None
    program_name: str | None
    hourly_rate: Decimal | None
    location: str | None
    notes: str | None
    status: str
    approval_status: str
    locked: bool
    original_clock_in: datetime | None
    original_clock_out: datetime | None
    rejection_reason: str | None
    relieving_nurse_signature: str | None
    shift_note_attachments: list[str]
    employee_notes: str | None
    manager_notes: str | None
    hours_worked: float | None
    created_at: datetime
    updated_at: datetime


class AutoClockOutResponse(BaseModel):
    """자동 퇴근 결과 — 처리 건수와 기록."""

    count: int
    entries: list[TimeEntryResponse]
