"""근태 기록 상태 전이 테이블.

Time entry state transitions.

A time entry carries three independent dimensions:

    status           active --clock_out--> completed
                     active --auto_clock_out--> auto-clocked-out
                     active|auto-clocked-out --complete--> completed  (admin)
                     completed|auto-clocked-out --reopen--> active     (admin)
    approval_status  approved|pending|rejected --self_edit--> pending
                     pending --approve--> approved
                     pending --reject--> rejected
                     (admins reach approve/reject through a patch too)
    locked           set by payroll export; while set, the only accepted
                     change is an admin patch of exactly {locked: false}

Every action is looked up here; a pair missing from a table is an
``InvalidTransitionError`` (400).
"""

from datetime import datetime
from typing import Any

from staffhub.models.time_entry import TimeEntry
from staffhub.utils.exceptions import BadRequestError, ForbiddenError, InvalidTransitionError

STATUS_TRANSITIONS: dict[tuple[str, str], str] = {
    ("active", "clock_out"): "completed",
    ("active", "auto_clock_out"): "auto-clocked-out",
    ("active", "complete"): "completed",
    ("auto-clocked-out", "complete"): "completed",
    ("completed", "reopen"): "active",
    ("auto-clocked-out", "reopen"): "active",
}

# 관리자 수정 시 목표 상태 → 동작 (Admin patch target → action)
ADMIN_STATUS_ACTIONS: dict[str, str] = {
    "completed": "complete",
    "active": "reopen",
}

APPROVAL_TRANSITIONS: dict[tuple[str, str], str] = {
    ("approved", "self_edit"): "pending",
    ("pending", "self_edit"): "pending",
    ("rejected", "self_edit"): "pending",
    ("pending", "approve"): "approved",
    ("pending", "reject"): "rejected",
}

ADMIN_APPROVAL_ACTIONS: dict[str, str] = {
    "approved": "approve",
    "rejected": "reject",
}

# 자기 수정 시 변경 불가 필드 — Fields a non-admin may not send
ADMIN_ONLY_FIELDS: frozenset[str] = frozenset(
    {"locked", "status", "approval_status", "hourly_rate", "manager_notes", "user_id"}
)

# 승인이 필요한 시간 필드 — Fields whose change needs admin approval
TIME_FIELDS: tuple[str, ...] = ("clock_in", "clock_out")

UNLOCK_PATCH: dict[str, Any] = {"locked": False}


def next_status(entry: TimeEntry, action: str) -> str:
    """생명주기 상태 전이 (Lifecycle transition or 400)."""
    target = STATUS_TRANSITIONS.get((entry.status, action))
    if target is None:
        raise InvalidTransitionError("time entry", entry.status, action.replace("_", " "))
    return target


def next_approval(entry: TimeEntry, action: str) -> str:
    """승인 상태 전이 (Approval transition or 400)."""
    target = APPROVAL_TRANSITIONS.get((entry.approval_status, action))
    if target is None:
        raise InvalidTransitionError("time entry edit", entry.approval_status, action.replace("_", " "))
    return target


def ensure_unlocked(entry: TimeEntry, changes: dict[str, Any] | None = None, is_admin: bool = False) -> None:
    """잠긴 기록 변경 차단.

    Refuse any change to a locked entry except an admin's solo unlock patch.

    Args:
        entry: 대상 기록 (Target entry)
        changes: 요청된 변경 사항, 액션이면 None (Requested field changes; None for actions)
        is_admin: Owner/Admin 여부 (Caller takes the admin path)

    Raises:
        ForbiddenError: 잠긴 기록 (Entry is locked)
    """
    if not entry.locked:
        return
    if is_admin and changes == UNLOCK_PATCH:
        return
    raise ForbiddenError("Time entry is locked")


def admin_status(entry: TimeEntry, target: str) -> str:
    """관리자 수정의 생명주기 전이 (Admin patch of status, or 400)."""
    if target == entry.status:
        return target
    action = ADMIN_STATUS_ACTIONS.get(target)
    if action is None:
        raise InvalidTransitionError("time entry", entry.status, f"set {target} on")
    return next_status(entry, action)


def admin_approval(entry: TimeEntry, target: str) -> str:
    """관리자 수정의 승인 상태 전이 (Admin patch of approval_status, or 400)."""
    if target == entry.approval_status:
        return target
    action = ADMIN_APPROVAL_ACTIONS.get(target)
    if action is None:
        raise InvalidTransitionError("time entry edit", entry.approval_status, f"set {target} on")
    return next_approval(entry, action)


def ensure_consistent(status: str, clock_out: datetime | None) -> None:
    """상태와 퇴근 시각의 일관성 — active ⇔ clock_out 없음.

    Raises:
        BadRequestError: active인데 clock_out 있음, 또는 종료인데 clock_out 없음
    """
    if status == "active" and clock_out is not None:
        raise BadRequestError("An active time entry cannot have clock_out")
    if status != "active" and clock_out is None:
        raise BadRequestError("A finished time entry requires clock_out")
