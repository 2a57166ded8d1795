"""스케줄 관련 Pydantic 요청/응답 스키마 정의.

Scheduling Pydantic request/response schema definitions:
schedules, shift templates, shifts, shift assignments and availability.
"""

from datetime import date as date_type, datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

ScheduleStatus = Literal["active", "archived", "draft"]
ShiftStatus = Literal["open", "assigned", "in-progress", "completed", "cancelled"]
AssignmentStatus = Literal["assigned", "accepted", "rejected", "completed"]


# === 스케줄 (Schedule) ===

class ScheduleCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    start_date: date_type
    end_date: date_type
    status: ScheduleStatus = "active"

    @model_validator(mode="after")
    def check_range(self) -> "ScheduleCreate":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class ScheduleUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    start_date: date_type | None = None
    end_date: date_type | None = None
    status: ScheduleStatus | None = None


class ScheduleResponse(BaseModel):
    id: str
    title: str
    description: str | None
    start_date: date_type
    end_date: date_type
    status: str
    created_by: str | None
    created_at: datetime


# === 시프트 템플릿 (Shift template) ===

class ShiftTemplateCreate(BaseModel):
    """시프트 템플릿 생성 — 시작/종료는 "07:00" 형식 라벨."""

    title: str = Field(min_length=1, max_length=255)
    start_time: str = Field(pattern=r"^\d{2}:\d{2}$")
    end_time: str = Field(pattern=r"^\d{2}:\d{2}$")
    color: str | None = None
    description: str | None = None


class ShiftTemplateUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    start_time: str | None = Field(default=None, pattern=r"^\d{2}:\d{2}$")
    end_time: str | None = Field(default=None, pattern=r"^\d{2}:\d{2}$")
    color: str | None = None
    description: str | None = None


class ShiftTemplateResponse(BaseModel):
    id: str
    title: str
    start_time: str
    end_time: str
    color: str | None
    description: str | None


# === 시프트 (Shift) ===

class ShiftCreate(BaseModel):
    """시프트 생성 요청 스키마.

    Attributes:
        schedule_id: 스케줄 UUID, 선택 (Owning schedule)
        template_id: 템플릿 UUID, 선택 (Source template)
        job_name: 직무/근무지 (Job or facility; pay rate lookup key)
        program: 프로그램 (Program; first pay rate lookup key)
    """

    schedule_id: UUID | None = None
    template_id: UUID | None = None
    title: str = Field(min_length=1, max_length=255)
    job_name: str | None = None
    program: str | None = None
    start_time: datetime
    end_time: datetime
    location: str | None = None
    notes: str | None = None
    status: ShiftStatus = "open"
    color: str | None = None
    max_assignees: int = Field(default=1, ge=1)

    @model_validator(mode="after")
    def check_range(self) -> "ShiftCreate":
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class ShiftUpdate(BaseModel):
    schedule_id: UUID | None = None
    template_id: UUID | None = None
    title: str | None = Field(default=None, min_length=1, max_length=255)
    job_name: str | None = None
    program: str | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    location: str | None = None
    notes: str | None = None
    status: ShiftStatus | None = None
    color: str | None = None
    max_assignees: int | None = Field(default=None, ge=1)


class ShiftAttachmentCreate(BaseModel):
    file_name: str = Field(min_length=1, max_length=255)
    file_url: str = Field(min_length=1, max_length=1000)


class ShiftAttachmentResponse(BaseModel):
    id: str
    shift_id: str
    file_name: str
    file_url: str
    created_at: datetime


class ShiftResponse(BaseModel):
    id: str
    schedule_id: str | None
    template_id: str | None
    title: str
    job_name: str | None
    program: str | None
    start_time: datetime
    end_time: datetime
    location: str | None
    notes: str | None
    status: str
    color: str | None
    max_assignees: int
    attachments: list[ShiftAttachmentResponse] = []


class ShiftAssignRequest(BaseModel):
    """시프트 배정 요청 (Assign one user to a shift)."""

    user_id: UUID
    notes: str | None = None


class ShiftDuplicateRequest(BaseModel):
    """시프트 복제 요청 — start_time 지정 시 같은 길이로 이동.

    When ``start_time`` is given the copy keeps the original duration.
    """

    start_time: datetime | None = None


# === 시프트 배정 (Shift assignment) ===

class ShiftAssignmentUpdate(BaseModel):
    status: AssignmentStatus | None = None
    notes: str | None = None


class ShiftAssignmentResponse(BaseModel):
    id: str
    shift_id: str
    user_id: str
    status: str
    assigned_at: datetime
    accepted_at: datetime | None
    notes: str | None


# === 근무 가능 여부 (Availability) ===

class AvailabilityCreate(BaseModel):
    """근무 가능 여부 등록 — user_id는 스케줄러만 지정 가능."""

    user_id: UUID | None = None
    date: date_type
    type: Literal["unavailable", "preferred"] = "unavailable"
    all_day: bool = True
    start_time: str | None = Field(default=None, pattern=r"^\d{2}:\d{2}$")
    end_time: str | None = Field(default=None, pattern=r"^\d{2}:\d{2}$")
    notes: str | None = None


class AvailabilityUpdate(BaseModel):
    date: date_type | None = None
    type: Literal["unavailable", "preferred"] | None = None
    all_day: bool | None = None
    start_time: str | None = Field(default=None, pattern=r"^\d{2}:\d{2}$")
    end_time: str | None = Field(default=None, pattern=r"^\d{2}:\d{2}$")
    notes: str | None = None


class AvailabilityResponse(BaseModel):
    id: str
    user_id: str
    date: date_type
    type: str
    all_day: bool
    start_time: str | None
    end_time: str | None
    notes: str | None
