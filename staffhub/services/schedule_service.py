"""스케줄 서비스 — 스케줄, 시프트, 배정, 근무 가능 여부 비즈니스 로직.

Schedule Service — Business logic for schedules, shift templates, shifts
(assign, duplicate, attachments), shift assignments and user availability.
"""

from datetime import date, datetime
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from staffhub.database import utcnow
from staffhub.models.schedule import (
    Schedule,
    Shift,
    ShiftAssignment,
    ShiftAttachment,
    ShiftTemplate,
    UserAvailability,
)
from staffhub.models.user import User
from staffhub.repositories.schedule_repository import (
    availability_repository,
    schedule_repository,
    shift_assignment_repository,
    shift_attachment_repository,
    shift_repository,
    shift_template_repository,
)
from staffhub.repositories.user_repository import user_repository
from staffhub.schemas.schedule import (
    AvailabilityCreate,
    AvailabilityUpdate,
    ScheduleCreate,
    ScheduleUpdate,
    ShiftAssignmentUpdate,
    ShiftAssignRequest,
    ShiftAttachmentCreate,
    ShiftCreate,
    ShiftDuplicateRequest,
    ShiftTemplateCreate,
    ShiftTemplateUpdate,
    ShiftUpdate,
)
from staffhub.services.notification_service import notification_service
from staffhub.services.time_entry_service import as_utc
from staffhub.utils.exceptions import BadRequestError, DuplicateError, ForbiddenError, NotFoundError
from staffhub.utils.permissions import has_permission

# 필수 컬럼 — explicit null in a partial update is ignored for these
_REQUIRED_SHIFT_FIELDS: tuple[str, ...] = ("title", "start_time", "end_time", "status", "max_assignees")


class ScheduleService:
    """스케줄 관련 비즈니스 로직을 처리하는 서비스.

    Service handling scheduling business logic.
    """

    # --- 스케줄 (Schedules) ---

    async def list_schedules(self, db: AsyncSession, status: str | None = None) -> Sequence[Schedule]:
        return await schedule_repository.list_schedules(db, status)

    async def get_schedule(self, db: AsyncSession, schedule_id: UUID) -> Schedule:
        schedule = await schedule_repository.get_by_id(db, schedule_id)
        if schedule is None:
            raise NotFoundError("Schedule not found")
        return schedule

    async def create_schedule(self, db: AsyncSession, data: ScheduleCreate, creator: User) -> Schedule:
        return await schedule_repository.create(db, {**data.model_dump(), "created_by": creator.id})

    async def update_schedule(self, db: AsyncSession, schedule_id: UUID, data: ScheduleUpdate) -> Schedule:
        """스케줄 수정.

        Raises:
            BadRequestError: 종료일이 시작일보다 이름 (end_date before start_date)
        """
        schedule = await self.get_schedule(db, schedule_id)
        changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None or k == "description"}
        start: date = changes.get("start_date", schedule.start_date)
        end: date = changes.get("end_date", schedule.end_date)
        if end < start:
            raise BadRequestError("end_date must not be before start_date")
        return await schedule_repository.update(db, schedule, changes)

    async def delete_schedule(self, db: AsyncSession, schedule_id: UUID) -> None:
        """스케줄 삭제 — 소속 시프트와 배정도 함께 삭제."""
        schedule = await self.get_schedule(db, schedule_id)
        for shift in await shift_repository.list_shifts(db, schedule_id=schedule.id):
            await self._delete_shift_rows(db, shift)
        await schedule_repository.delete(db, schedule)

    def build_schedule_response(self, schedule: Schedule) -> dict:
        return {
            "id": str(schedule.id),
            "title": schedule.title,
            "description": schedule.description,
            "start_date": schedule.start_date,
            "end_date": schedule.end_date,
            "status": schedule.status,
            "created_by": str(schedule.created_by) if schedule.created_by else None,
            "created_at": schedule.created_at,
        }

    # --- 시프트 템플릿 (Shift templates) ---

    async def list_templates(self, db: AsyncSession) -> Sequence[ShiftTemplate]:
        return await shift_template_repository.get_all(db, order_by=ShiftTemplate.start_time)

    async def get_template(self, db: AsyncSession, template_id: UUID) -> ShiftTemplate:
        template = await shift_template_repository.get_by_id(db, template_id)
        if template is None:
            raise NotFoundError("Shift template not found")
        return template

    async def create_template(self, db: AsyncSession, data: ShiftTemplateCreate) -> ShiftTemplate:
        return await shift_template_repository.create(db, data.model_dump())

    async def update_template(
        self, db: AsyncSession, template_id: UUID, data: ShiftTemplateUpdate
    ) -> ShiftTemplate:
        template = await self.get_template(db, template_id)
        changes = data.model_dump(exclude_unset=True)
        for field in ("title", "start_time", "end_time"):
            if field in changes and changes[field] is None:
                changes.pop(field)
        return await shift_template_repository.update(db, template, changes)

    async def delete_template(self, db: AsyncSession, template_id: UUID) -> None:
        template = await self.get_template(db, template_id)
        await shift_template_repository.delete(db, template)

    def build_template_response(self, template: ShiftTemplate) -> dict:
        return {
            "id": str(template.id),
            "title": template.title,
            "start_time": template.start_time,
            "end_time": template.end_time,
            "color": template.color,
            "description": template.description,
        }

    # --- 시프트 (Shifts) ---

    async def list_shifts(
        self,
        db: AsyncSession,
        schedule_id: UUID | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        status: str | None = None,
    ) -> Sequence[Shift]:
        return await shift_repository.list_shifts(db, schedule_id, as_utc(start), as_utc(end), status)

    async def get_shift(self, db: AsyncSession, shift_id: UUID) -> Shift:
        """시프트 조회.

        Raises:
            NotFoundError: 시프트 없음 (Shift does not exist)
        """
        shift = await shift_repository.get_by_id(db, shift_id)
        if shift is None:
            raise NotFoundError("Shift not found")
        return shift

    async def _check_links(self, db: AsyncSession, schedule_id: UUID | None, template_id: UUID | None) -> None:
        if schedule_id is not None:
            await self.get_schedule(db, schedule_id)
        if template_id is not None:
            await self.get_template(db, template_id)

    async def create_shift(self, db: AsyncSession, data: ShiftCreate) -> Shift:
        await self._check_links(db, data.schedule_id, data.template_id)
        values = data.model_dump()
        values["start_time"] = as_utc(data.start_time)
        values["end_time"] = as_utc(data.end_time)
        return await shift_repository.create(db, values)

    async def update_shift(self, db: AsyncSession, shift_id: UUID, data: ShiftUpdate) -> Shift:
        """시프트 수정.

        Raises:
            BadRequestError: 종료 시각이 시작 이전 (end_time not after start_time)
        """
        shift = await self.get_shift(db, shift_id)
        changes: dict[str, Any] = data.model_dump(exclude_unset=True)
        for field in _REQUIRED_SHIFT_FIELDS:
            if field in changes and changes[field] is None:
                changes.pop(field)
        await self._check_links(db, changes.get("schedule_id"), changes.get("template_id"))
        for field in ("start_time", "end_time"):
            if field in changes:
                changes[field] = as_utc(changes[field])
        if changes.get("end_time", shift.end_time) <= changes.get("start_time", shift.start_time):
            raise BadRequestError("end_time must be after start_time")
        return await shift_repository.update(db, shift, changes)

    async def _delete_shift_rows(self, db: AsyncSession, shift: Shift) -> None:
        await shift_assignment_repository.delete_for_shift(db, shift.id)
        for attachment in await shift_attachment_repository.list_for_shift(db, shift.id):
            await shift_attachment_repository.delete(db, attachment)
        await shift_repository.delete(db, shift)

    async def delete_shift(self, db: AsyncSession, shift_id: UUID) -> None:
        """시프트 삭제 — 배정과 첨부파일도 함께 삭제."""
        shift = await self.get_shift(db, shift_id)
        await self._delete_shift_rows(db, shift)

    async def assign_shift(self, db: AsyncSession, shift_id: UUID, data: ShiftAssignRequest) -> ShiftAssignment:
        """시프트에 사용자 배정.

        Raises:
            NotFoundError: 시프트 또는 사용자 없음 (Unknown shift or user)
            BadRequestError: 비활성 사용자 또는 정원 초과 (Inactive user / shift full)
            DuplicateError: 이미 배정됨 (Already assigned)
        """
        shift = await self.get_shift(db, shift_id)
        user = await user_repository.get_by_id(db, data.user_id)
        if user is None:
            raise NotFoundError("User not found")
        if not user.is_active:
            raise BadRequestError("Cannot assign an inactive user")
        if await shift_assignment_repository.get_for_shift_and_user(db, shift.id, user.id) is not None:
            raise DuplicateError("User is already assigned to this shift")

        current = [
            a for a in await shift_assignment_repository.list_assignments(db, shift_id=shift.id)
            if a.status != "rejected"
        ]
        if len(current) >= (shift.max_assignees or 1):
            raise BadRequestError("Shift is full")

        assignment = await shift_assignment_repository.create(db, {
            "shift_id": shift.id,
            "user_id": user.id,
            "status": "assigned",
            "notes": data.notes,
        })
        if shift.status == "open":
            shift.status = "assigned"
            await db.flush()

        await notification_service.notify(
            db, user.id, "shift_assigned", f"You were assigned to {shift.title}", "shift", shift.id,
        )
        return assignment

    async def duplicate_shift(
        self, db: AsyncSession, shift_id: UUID, data: ShiftDuplicateRequest, user: User
    ) -> Shift:
        """시프트 복제 — 행과 첨부파일을 하나의 savepoint 안에서 복사.

        Copy the shift and its attachment rows inside a savepoint; any
        failure rolls the savepoint back so no partial copy remains. With
        ``start_time`` the copy is moved and keeps the original duration.
        Assignments are not copied; the copy is ``open``.
        """
        source = await self.get_shift(db, shift_id)
        attachments = await shift_attachment_repository.list_for_shift(db, source.id)

        start: datetime = as_utc(data.start_time) or source.start_time
        end: datetime = start + (source.end_time - source.start_time)

        async with db.begin_nested():
            copy = Shift(
                schedule_id=source.schedule_id,
                template_id=source.template_id,
                title=source.title,
                job_name=source.job_name,
                program=source.program,
                start_time=start,
                end_time=end,
                location=source.location,
                notes=source.notes,
                status="open",
                color=source.color,
                max_assignees=source.max_assignees,
            )
            db.add(copy)
            await db.flush()
            for attachment in attachments:
                db.add(ShiftAttachment(
                    shift_id=copy.id,
                    file_name=attachment.file_name,
                    file_url=attachment.file_url,
                    uploaded_by=user.id,
                ))
            await db.flush()

        await db.refresh(copy)
        return copy

    async def add_attachment(
        self, db: AsyncSession, shift_id: UUID, data: ShiftAttachmentCreate, user: User
    ) -> ShiftAttachment:
        shift = await self.get_shift(db, shift_id)
        return await shift_attachment_repository.create(db, {
            "shift_id": shift.id,
            "file_name": data.file_name,
            "file_url": data.file_url,
            "uploaded_by": user.id,
        })

    async def list_attachments(self, db: AsyncSession, shift_id: UUID) -> Sequence[ShiftAttachment]:
        return await shift_attachment_repository.list_for_shift(db, shift_id)

    def build_attachment_response(self, attachment: ShiftAttachment) -> dict:
        return {
            "id": str(attachment.id),
            "shift_id": str(attachment.shift_id),
            "file_name": attachment.file_name,
            "file_url": attachment.file_url,
            "created_at": attachment.created_at,
        }

    def build_shift_response(self, shift: Shift, attachments: Sequence[ShiftAttachment] = ()) -> dict:
        return {
            "id": str(shift.id),
            "schedule_id": str(shift.schedule_id) if shift.schedule_id else None,
            "template_id": str(shift.template_id) if shift.template_id else None,
            "title": shift.title,
            "job_name": shift.job_name,
            "program": shift.program,
            "start_time": shift.start_time,
            "end_time": shift.end_time,
            "location": shift.location,
            "notes": shift.notes,
            "status": shift.status,
            "color": shift.color,
            "max_assignees": shift.max_assignees,
            "attachments": [self.build_attachment_response(a) for a in attachments],
        }

    # --- 시프트 배정 (Shift assignments) ---

    async def list_assignments(
        self,
        db: AsyncSession,
        caller: User,
        shift_id: UUID | None = None,
        user_id: UUID | None = None,
    ) -> Sequence[ShiftAssignment]:
        """배정 목록 — 권한 없는 사용자는 본인 배정만."""
        if not has_permission(caller.role, "shift_assignments:view_all"):
            user_id = caller.id
        return await shift_assignment_repository.list_assignments(db, shift_id, user_id)

    async def get_assignment(self, db: AsyncSession, assignment_id: UUID) -> ShiftAssignment:
        assignment = await shift_assignment_repository.get_by_id(db, assignment_id)
        if assignment is None:
            raise NotFoundError("Shift assignment not found")
        return assignment

    async def confirm_assignment(self, db: AsyncSession, assignment_id: UUID, caller: User) -> ShiftAssignment:
        """배정 수락 — 배정된 본인만 가능.

        Raises:
            ForbiddenError: 본인 배정이 아님 (Not the assignee)
            BadRequestError: assigned 상태가 아님 (Not in assigned status)
        """
        assignment = await self.get_assignment(db, assignment_id)
        if assignment.user_id != caller.id:
            raise ForbiddenError("Only the assignee can confirm this shift")
        if assignment.status != "assigned":
            raise BadRequestError(f"Cannot confirm shift assignment in status '{assignment.status}'")
        return await shift_assignment_repository.update(db, assignment, {
            "status": "accepted",
            "accepted_at": utcnow(),
        })

    async def update_assignment(
        self, db: AsyncSession, assignment_id: UUID, data: ShiftAssignmentUpdate
    ) -> ShiftAssignment:
        assignment = await self.get_assignment(db, assignment_id)
        changes = data.model_dump(exclude_unset=True)
        if changes.get("status") is None:
            changes.pop("status", None)
        elif changes["status"] == "accepted" and assignment.accepted_at is None:
            changes["accepted_at"] = utcnow()
        return await shift_assignment_repository.update(db, assignment, changes)

    async def delete_assignment(self, db: AsyncSession, assignment_id: UUID) -> None:
        assignment = await self.get_assignment(db, assignment_id)
        await shift_assignment_repository.delete(db, assignment)

    def build_assignment_response(self, assignment: ShiftAssignment) -> dict:
        return {
            "id": str(assignment.id),
            "shift_id": str(assignment.shift_id),
            "user_id": str(assignment.user_id),
            "status": assignment.status,
            "assigned_at": assignment.assigned_at,
            "accepted_at": assignment.accepted_at,
            "notes": assignment.notes,
        }

    # --- 근무 가능 여부 (Availability) ---

    async def list_availability(
        self,
        db: AsyncSession,
        caller: User,
        user_id: UUID | None = None,
        start: date | None = None,
        end: date | None = None,
    ) -> Sequence[UserAvailability]:
        if not has_permission(caller.role, "availability:view_all"):
            user_id = caller.id
        return await availability_repository.list_availability(db, user_id, start, end)

    async def _get_owned_availability(
        self, db: AsyncSession, availability_id: UUID, caller: User
    ) -> UserAvailability:
        """본인 행 또는 스케줄러 권한 확인.

        Raises:
            NotFoundError: 행 없음 (Unknown row)
            ForbiddenError: 타인 행 (Someone else's row)
        """
        row = await availability_repository.get_by_id(db, availability_id)
        if row is None:
            raise NotFoundError("Availability not found")
        if row.user_id != caller.id and not has_permission(caller.role, "availability:view_all"):
            raise ForbiddenError("Cannot change another user's availability")
        return row

    async def create_availability(
        self, db: AsyncSession, data: AvailabilityCreate, caller: User
    ) -> UserAvailability:
        user_id: UUID = data.user_id or caller.id
        if user_id != caller.id and not has_permission(caller.role, "availability:view_all"):
            raise ForbiddenError("Cannot set another user's availability")
        values = data.model_dump(exclude={"user_id"})
        values["user_id"] = user_id
        return await availability_repository.create(db, values)

    async def update_availability(
        self, db: AsyncSession, availability_id: UUID, data: AvailabilityUpdate, caller: User
    ) -> UserAvailability:
        row = await self._get_owned_availability(db, availability_id, caller)
        changes = data.model_dump(exclude_unset=True)
        for field in ("date", "type", "all_day"):
            if field in changes and changes[field] is None:
                changes.pop(field)
        return await availability_repository.update(db, row, changes)

    async def delete_availability(self, db: AsyncSession, availability_id: UUID, caller: User) -> None:
        row = await self._get_owned_availability(db, availability_id, caller)
        await availability_repository.delete(db, row)

    def build_availability_response(self, row: UserAvailability) -> dict:
        return {
            "id": str(row.id),
            "user_id": str(row.user_id),
            "date": row.date,
            "type": row.type,
            "all_day": row.all_day,
            "start_time": row.start_time,
            "end_time": row.end_time,
            "notes": row.notes,
        }


# 싱글턴 인스턴스 — Singleton instance
schedule_service: ScheduleService = ScheduleService()
