"""API 라우터 패키지 — 모든 엔드포인트 통합.

API Router package — Aggregates every resource router into a single
router, mounted under ``/api`` by the application.

Included routers:
    - auth: 인증, 온보딩 (Authentication and onboarding)
    - time_entries: 출퇴근 및 근태 기록 (Clock-in/out and time entries)
    - schedules, shift_templates, shifts, shift_assignments, availability:
      스케줄링 (Scheduling)
    - timesheets: 타임시트 (Timesheets)
    - documents: 자격 서류 (Credential documents)
    - knowledge, updates: 지식베이스와 공지 (Knowledge base and updates)
    - users, groups: 사용자와 그룹 (Users and groups)
    - notifications: 알림 (Notifications)
    - settings, audit_logs: 시스템 설정과 감사 로그 (Settings and audit trail)
    - files: 파일 업로드/다운로드 (File upload plumbing, mounted at the root)
"""

from fastapi import APIRouter

from staffhub.api.auth import router as auth_router
from staffhub.api.time_entries import router as time_entries_router

# 스케줄링 — Scheduling
from staffhub.api.schedules import router as schedules_router
from staffhub.api.shift_templates import router as shift_templates_router
from staffhub.api.shifts import router as shifts_router
from staffhub.api.shift_assignments import router as shift_assignments_router
from staffhub.api.availability import router as availability_router

# 급여/서류 — Payroll and credentials
from staffhub.api.timesheets import router as timesheets_router
from staffhub.api.documents import router as documents_router

# 콘텐츠 — Content
from staffhub.api.knowledge import router as knowledge_router
from staffhub.api.updates import router as updates_router

# 관리 — Administration
from staffhub.api.users import router as users_router
from staffhub.api.groups import router as groups_router
from staffhub.api.notifications import router as notifications_router
from staffhub.api.settings import router as settings_router
from staffhub.api.audit_logs import router as audit_logs_router
from staffhub.api.files import router as files_router

api_router: APIRouter = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["Auth"])
api_router.include_router(time_entries_router, prefix="/time", tags=["Time Entries"])

api_router.include_router(schedules_router, prefix="/schedules", tags=["Schedules"])
api_router.include_router(shift_templates_router, prefix="/shift-templates", tags=["Shift Templates"])
api_router.include_router(shifts_router, prefix="/shifts", tags=["Shifts"])
api_router.include_router(shift_assignments_router, prefix="/shift-assignments", tags=["Shift Assignments"])
api_router.include_router(availability_router, prefix="/user-availability", tags=["Availability"])

api_router.include_router(timesheets_router, prefix="/timesheets", tags=["Timesheets"])
api_router.include_router(documents_router, prefix="/documents", tags=["Documents"])

api_router.include_router(knowledge_router, prefix="/knowledge", tags=["Knowledge"])
api_router.include_router(updates_router, prefix="/updates", tags=["Updates"])

api_router.include_router(users_router, prefix="/users", tags=["Users"])
api_router.include_router(groups_router, prefix="/groups", tags=["Groups"])
api_router.include_router(notifications_router, prefix="/notifications", tags=["Notifications"])
api_router.include_router(settings_router, prefix="/settings", tags=["Settings"])
api_router.include_router(audit_logs_router, prefix="/audit-logs", tags=["Audit Logs"])
api_router.include_router(files_router, tags=["Files"])
