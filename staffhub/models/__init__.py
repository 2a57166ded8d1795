"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata, which is required for Alembic migrations and
relationship resolution.

Modules:
    user: 사용자 (Users with pay rates, groups and profile)
    token: 리프레시 토큰 (Refresh tokens)
    time_entry: 근태 기록 (Clock-in/out entries)
    schedule: 스케줄, 시프트, 배정, 근무가능일 (Schedules, shifts, assignments, availability)
    timesheet: 타임시트 (Timesheets)
    document: 서류 (Credential documents)
    knowledge: 지식베이스 (Knowledge articles)
    update: 공지 및 반응 (Updates, likes, acknowledgements, comments)
    group: 그룹 (User groups)
    notification: 알림 (User notifications)
    audit_log: 감사 로그 (Audit trail)
    setting: 설정 (Runtime settings)
"""

from staffhub.models.user import User
from staffhub.models.token import RefreshToken
from staffhub.models.schedule import Schedule, ShiftTemplate, Shift, ShiftAttachment, ShiftAssignment, UserAvailability
from staffhub.models.time_entry import TimeEntry
from staffhub.models.timesheet import Timesheet
from staffhub.models.document import Document
from staffhub.models.knowledge import KnowledgeArticle
from staffhub.models.update import Update, UpdateLike, UpdateAcknowledgement, UpdateComment
from staffhub.models.group import Group
from staffhub.models.notification import Notification
from staffhub.models.audit_log import AuditLog
from staffhub.models.setting import Setting

__all__ = [
    "User", "RefreshToken",
    "Schedule", "ShiftTemplate", "Shift", "ShiftAttachment", "ShiftAssignment", "UserAvailability",
    "TimeEntry", "Timesheet", "Document", "KnowledgeArticle",
    "Update", "UpdateLike", "UpdateAcknowledgement", "UpdateComment",
    "Group", "Notification", "AuditLog", "Setting",
]
