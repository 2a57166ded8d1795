"""역할 기반 권한 테이블 모듈.

Role-based permission table.
Every authorization decision goes through ``PERMISSIONS``: a map from a
``"resource:action"`` code to the roles allowed to perform it. Routers
enforce a code with ``staffhub.api.deps.require_permission``; services use
``has_permission`` when a permission only widens what the caller sees
(e.g. ``time_entries:view_all`` lifts the own-records filter).

Roles:
    Owner, Admin, HR, Manager, Scheduler, Payroll, Staff
    임상 직함(CNA/LPN/RN)은 Staff로 취급 (Clinical titles are treated as Staff)
"""

OWNER = "Owner"
ADMIN = "Admin"
HR = "HR"
MANAGER = "Manager"
SCHEDULER = "Scheduler"
PAYROLL = "Payroll"
STAFF = "Staff"

ROLES: tuple[str, ...] = (OWNER, ADMIN, HR, MANAGER, SCHEDULER, PAYROLL, STAFF)

_ADMINS: frozenset[str] = frozenset({OWNER, ADMIN})

PERMISSIONS: dict[str, frozenset[str]] = {
    # 근태 — Time entries
    "time_entries:view_all": frozenset({OWNER, ADMIN, PAYROLL, MANAGER}),
    "time_entries:manage": _ADMINS,
    "time_entries:auto_clock_out": _ADMINS,
    # 스케줄 — Scheduling
    "schedules:manage": frozenset({OWNER, ADMIN, SCHEDULER}),
    "shift_templates:manage": frozenset({OWNER, ADMIN, SCHEDULER}),
    "shifts:manage": frozenset({OWNER, ADMIN, SCHEDULER}),
    "shifts:assign": frozenset({OWNER, ADMIN, SCHEDULER, MANAGER}),
    "shift_assignments:view_all": frozenset({OWNER, ADMIN, SCHEDULER, MANAGER}),
    "shift_assignments:manage": frozenset({OWNER, ADMIN, SCHEDULER}),
    "availability:view_all": frozenset({OWNER, ADMIN, SCHEDULER, MANAGER}),
    # 타임시트 — Timesheets
    "timesheets:view_all": frozenset({OWNER, ADMIN, PAYROLL, MANAGER}),
    "timesheets:approve": frozenset({OWNER, ADMIN, PAYROLL, MANAGER}),
    "timesheets:export": frozenset({OWNER, ADMIN, PAYROLL}),
    # 서류 — Documents
    "documents:view_all": frozenset({OWNER, ADMIN, HR, MANAGER}),
    "documents:review": frozenset({OWNER, ADMIN, HR}),
    "documents:check_expiry": frozenset({OWNER, ADMIN, HR}),
    # 콘텐츠 — Knowledge base and updates
    "knowledge:manage": frozenset({OWNER, ADMIN, HR}),
    "updates:manage": frozenset({OWNER, ADMIN, HR, MANAGER}),
    # 사용자 — Users and groups
    "users:list": frozenset({OWNER, ADMIN, HR, MANAGER, SCHEDULER}),
    "users:view": frozenset({OWNER, ADMIN, HR, MANAGER}),
    "users:manage": frozenset({OWNER, ADMIN, HR}),
    "groups:manage": frozenset({OWNER, ADMIN, HR}),
    # 시스템 — System
    "settings:manage": _ADMINS,
    "audit_logs:view": _ADMINS,
    "files:delete": _ADMINS,
}


def normalize_role(role: str | None) -> str:
    """역할 문자열 정규화 — CNA/LPN/RN 및 알 수 없는 값은 Staff."""
    return role if role in ROLES else STAFF


def has_permission(role: str | None, code: str) -> bool:
    """역할이 권한 코드를 가지는지 확인합니다.

    Args:
        role: 사용자 역할 문자열 (User role string)
        code: "resource:action" 권한 코드 (Permission code)

    Returns:
        bool: 허용 여부 (Whether the role is allowed)

    Raises:
        KeyError: 정의되지 않은 권한 코드 (Unknown permission code)
    """
    return normalize_role(role) in PERMISSIONS[code]


def is_admin(role: str | None) -> bool:
    """Owner 또는 Admin 여부 (Whether the role takes the admin edit path)."""
    return has_permission(role, "time_entries:manage")
