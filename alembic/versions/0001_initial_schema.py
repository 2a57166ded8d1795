"""initial_schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-15 09:00:00.000000

전체 초기 스키마 생성 — 사용자, 근태, 스케줄, 타임시트, 서류, 콘텐츠, 관리 테이블.
Create the initial schema: users and tokens, time entries, scheduling,
timesheets, documents, knowledge base, updates, groups, notifications,
audit logs and settings.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID


# revision identifiers, used by Alembic.
revision: str = '0001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id() -> sa.Column:
    return sa.Column('id', UUID(as_uuid=True), primary_key=True)


def _user_fk(name: str, nullable: bool = True, ondelete: str = 'SET NULL') -> sa.Column:
    return sa.Column(name, UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete=ondelete), nullable=nullable)


def _ts(name: str, nullable: bool = True) -> sa.Column:
    return sa.Column(name, sa.DateTime(timezone=True), nullable=nullable)


def upgrade() -> None:
    # users — 사용자 (시급, 그룹, PHI 프로필)
    op.create_table(
        'users',
        _id(),
        sa.Column('username', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('full_name', sa.String(255), nullable=False),
        sa.Column('phone_number', sa.String(50), nullable=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('role', sa.String(30), server_default='Staff', nullable=False),
        sa.Column('default_hourly_rate', sa.Numeric(8, 2), nullable=True),
        sa.Column('job_rates', sa.JSON(), nullable=True),
        sa.Column('groups', sa.JSON(), nullable=True),
        sa.Column('profile', sa.JSON(), nullable=True),
        sa.Column('status', sa.String(30), server_default='active', nullable=False),
        sa.Column('require_mfa', sa.Boolean(), server_default=sa.false()),
        sa.Column('onboarding_token', sa.String(128), nullable=True),
        _ts('onboarding_token_expiry'),
        sa.Column('onboarding_completed', sa.Boolean(), server_default=sa.false()),
        _ts('created_at'),
        _ts('updated_at'),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_role', 'users', ['role'])
    op.create_index('ix_users_status', 'users', ['status'])
    op.create_index('ix_users_onboarding_token', 'users', ['onboarding_token'])

    op.create_table(
        'refresh_tokens',
        _id(),
        _user_fk('user_id', nullable=False, ondelete='CASCADE'),
        sa.Column('token', sa.String(512), nullable=False, unique=True),
        _ts('expires_at', nullable=False),
        _ts('created_at'),
    )

    # 스케줄링 — Scheduling
    op.create_table(
        'schedules',
        _id(),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('status', sa.String(20), server_default='active', nullable=False),
        _user_fk('created_by'),
        _ts('created_at'),
        _ts('updated_at'),
    )
    op.create_table(
        'shift_templates',
        _id(),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('start_time', sa.String(10), nullable=False),
        sa.Column('end_time', sa.String(10), nullable=False),
        sa.Column('color', sa.String(20), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        _ts('created_at'),
    )
    op.create_table(
        'shifts',
        _id(),
        sa.Column('schedule_id', UUID(as_uuid=True), sa.ForeignKey('schedules.id', ondelete='CASCADE'), nullable=True),
        sa.Column('template_id', UUID(as_uuid=True), sa.ForeignKey('shift_templates.id', ondelete='SET NULL'), nullable=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('job_name', sa.String(255), nullable=True),
        sa.Column('program', sa.String(255), nullable=True),
        _ts('start_time', nullable=False),
        _ts('end_time', nullable=False),
        sa.Column('location', sa.String(500), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('status', sa.String(20), server_default='open', nullable=False),
        sa.Column('color', sa.String(20), nullable=True),
        sa.Column('max_assignees', sa.Integer(), server_default='1'),
        _ts('created_at'),
        _ts('updated_at'),
    )
    op.create_index('ix_shifts_start_time', 'shifts', ['start_time'])
    op.create_table(
        'shift_attachments',
        _id(),
        sa.Column('shift_id', UUID(as_uuid=True), sa.ForeignKey('shifts.id', ondelete='CASCADE'), nullable=False),
        sa.Column('file_name', sa.String(255), nullable=False),
        sa.Column('file_url', sa.String(1000), nullable=False),
        _user_fk('uploaded_by'),
        _ts('created_at'),
    )
    op.create_index('ix_shift_attachments_shift_id', 'shift_attachments', ['shift_id'])
    op.create_table(
        'shift_assignments',
        _id(),
        sa.Column('shift_id', UUID(as_uuid=True), sa.ForeignKey('shifts.id', ondelete='CASCADE'), nullable=False),
        _user_fk('user_id', nullable=False, ondelete='CASCADE'),
        sa.Column('status', sa.String(20), server_default='assigned', nullable=False),
        _ts('assigned_at'),
        _ts('accepted_at'),
        sa.Column('notes', sa.Text(), nullable=True),
    )
    op.create_index('ix_shift_assignments_shift_id', 'shift_assignments', ['shift_id'])
    op.create_index('ix_shift_assignments_user_id', 'shift_assignments', ['user_id'])
    op.create_table(
        'user_availability',
        _id(),
        _user_fk('user_id', nullable=False, ondelete='CASCADE'),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('type', sa.String(20), server_default='unavailable', nullable=False),
        sa.Column('all_day', sa.Boolean(), server_default=sa.true()),
        sa.Column('start_time', sa.String(10), nullable=True),
        sa.Column('end_time', sa.String(10), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        _ts('created_at'),
    )
    op.create_index('ix_user_availability_user_id', 'user_availability', ['user_id'])

    # time_entries — 근태 기록 (잠금, 본인 수정 승인, 원래 시각 보관)
    op.create_table(
        'time_entries',
        _id(),
        _user_fk('user_id', nullable=False, ondelete='CASCADE'),
        sa.Column('shift_id', UUID(as_uuid=True), sa.ForeignKey('shifts.id', ondelete='SET NULL'), nullable=True),
        _ts('clock_in', nullable=False),
        _ts('clock_out'),
        sa.Column('break_minutes', sa.Integer(), server_default='0'),
        sa.Column('job_name', sa.String(255), nullable=True),
        sa.Column('program_name', sa.String(255), nullable=True),
        sa.Column('hourly_rate', sa.Numeric(8, 2), nullable=True),
        sa.Column('location', sa.String(500), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('status', sa.String(30), server_default='active', nullable=False),
        sa.Column('approval_status', sa.String(20), server_default='approved', nullable=False),
        sa.Column('locked', sa.Boolean(), server_default=sa.false()),
        _ts('original_clock_in'),
        _ts('original_clock_out'),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('relieving_nurse_signature', sa.Text(), nullable=True),
        sa.Column('shift_note_attachments', sa.JSON(), nullable=True),
        sa.Column('employee_notes', sa.Text(), nullable=True),
        sa.Column('manager_notes', sa.Text(), nullable=True),
        _ts('created_at'),
        _ts('updated_at'),
    )
    op.create_index('ix_time_entries_user_id', 'time_entries', ['user_id'])
    op.create_index('ix_time_entries_clock_in', 'time_entries', ['clock_in'])
    op.create_index('ix_time_entries_status', 'time_entries', ['status'])
    op.create_index('ix_time_entries_approval_status', 'time_entries', ['approval_status'])

    op.create_table(
        'timesheets',
        _id(),
        _user_fk('user_id', nullable=False, ondelete='CASCADE'),
        sa.Column('period_start', sa.Date(), nullable=False),
        sa.Column('period_end', sa.Date(), nullable=False),
        sa.Column('total_hours', sa.Numeric(8, 2), server_default='0'),
        sa.Column('regular_hours', sa.Numeric(8, 2), server_default='0'),
        sa.Column('overtime_hours', sa.Numeric(8, 2), server_default='0'),
        sa.Column('status', sa.String(20), server_default='pending', nullable=False),
        _user_fk('approved_by'),
        _ts('approved_at'),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        _ts('created_at'),
        _ts('updated_at'),
    )
    op.create_index('ix_timesheets_user_id', 'timesheets', ['user_id'])
    op.create_index('ix_timesheets_status', 'timesheets', ['status'])

    op.create_table(
        'documents',
        _id(),
        _user_fk('user_id', nullable=False, ondelete='CASCADE'),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('file_url', sa.String(1000), nullable=True),
        sa.Column('file_type', sa.String(100), nullable=True),
        sa.Column('category', sa.String(100), nullable=True),
        sa.Column('metadata', sa.JSON(), nullable=True),
        sa.Column('status', sa.String(20), server_default='submitted', nullable=False),
        _ts('uploaded_date'),
        _ts('expiry_date'),
        _user_fk('approved_by'),
        _ts('approved_at'),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        _ts('created_at'),
        _ts('updated_at'),
    )
    op.create_index('ix_documents_user_id', 'documents', ['user_id'])
    op.create_index('ix_documents_status', 'documents', ['status'])
    op.create_index('ix_documents_expiry_date', 'documents', ['expiry_date'])

    # 콘텐츠 — Knowledge base and updates
    op.create_table(
        'knowledge_articles',
        _id(),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('type', sa.String(20), server_default='page', nullable=False),
        sa.Column('category', sa.String(100), nullable=True),
        sa.Column('publish_status', sa.String(20), server_default='published', nullable=False),
        sa.Column('visibility', sa.String(20), server_default='all', nullable=False),
        sa.Column('target_user_ids', sa.JSON(), nullable=True),
        sa.Column('target_group_ids', sa.JSON(), nullable=True),
        sa.Column('file_url', sa.String(1000), nullable=True),
        _user_fk('author_id'),
        _ts('last_updated'),
        _ts('created_at'),
    )
    op.create_table(
        'updates',
        _id(),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('publish_status', sa.String(20), server_default='published', nullable=False),
        sa.Column('visibility', sa.String(20), server_default='all', nullable=False),
        sa.Column('target_user_ids', sa.JSON(), nullable=True),
        sa.Column('target_group_ids', sa.JSON(), nullable=True),
        sa.Column('attachments', sa.JSON(), nullable=True),
        _user_fk('author_id'),
        _ts('created_at'),
        _ts('updated_at'),
    )
    op.create_table(
        'update_likes',
        _id(),
        sa.Column('update_id', UUID(as_uuid=True), sa.ForeignKey('updates.id', ondelete='CASCADE'), nullable=False),
        _user_fk('user_id', nullable=False, ondelete='CASCADE'),
        _ts('created_at'),
        sa.UniqueConstraint('update_id', 'user_id', name='uq_update_like_user'),
    )
    op.create_table(
        'update_acknowledgements',
        _id(),
        sa.Column('update_id', UUID(as_uuid=True), sa.ForeignKey('updates.id', ondelete='CASCADE'), nullable=False),
        _user_fk('user_id', nullable=False, ondelete='CASCADE'),
        _ts('acknowledged_at'),
        sa.UniqueConstraint('update_id', 'user_id', name='uq_update_ack_user'),
    )
    op.create_table(
        'update_comments',
        _id(),
        sa.Column('update_id', UUID(as_uuid=True), sa.ForeignKey('updates.id', ondelete='CASCADE'), nullable=False),
        _user_fk('user_id', nullable=False, ondelete='CASCADE'),
        sa.Column('content', sa.Text(), nullable=False),
        _ts('created_at'),
    )
    op.create_index('ix_update_comments_update_id', 'update_comments', ['update_id'])

    # 관리 — Administration
    op.create_table(
        'groups',
        _id(),
        sa.Column('name', sa.String(255), nullable=False, unique=True),
        sa.Column('category', sa.String(100), nullable=True),
        _user_fk('created_by'),
        _user_fk('administered_by'),
        _ts('created_at'),
        _ts('updated_at'),
    )
    op.create_table(
        'notifications',
        _id(),
        _user_fk('user_id', nullable=False, ondelete='CASCADE'),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('message', sa.String(1000), nullable=False),
        sa.Column('reference_type', sa.String(50), nullable=True),
        sa.Column('reference_id', UUID(as_uuid=True), nullable=True),
        sa.Column('is_read', sa.Boolean(), server_default=sa.false()),
        _ts('created_at'),
    )
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])
    op.create_index('ix_notifications_reference_id', 'notifications', ['reference_id'])
    op.create_table(
        'audit_logs',
        _id(),
        _user_fk('user_id'),
        sa.Column('action', sa.String(100), nullable=False),
        sa.Column('resource_type', sa.String(50), nullable=False),
        sa.Column('resource_id', sa.String(100), nullable=True),
        sa.Column('ip_address', sa.String(64), nullable=True),
        sa.Column('user_agent', sa.String(500), nullable=True),
        sa.Column('phi_accessed', sa.Boolean(), server_default=sa.false()),
        sa.Column('phi_fields', sa.JSON(), nullable=True),
        sa.Column('details', sa.JSON(), nullable=True),
        _ts('timestamp'),
    )
    op.create_index('ix_audit_logs_user_id', 'audit_logs', ['user_id'])
    op.create_index('ix_audit_logs_resource_type', 'audit_logs', ['resource_type'])
    op.create_index('ix_audit_logs_timestamp', 'audit_logs', ['timestamp'])
    op.create_table(
        'settings',
        _id(),
        sa.Column('key', sa.String(100), nullable=False, unique=True),
        sa.Column('value', sa.JSON(), nullable=True),
        _ts('updated_at'),
    )


def downgrade() -> None:
    for table in (
        'settings', 'audit_logs', 'notifications', 'groups',
        'update_comments', 'update_acknowledgements', 'update_likes', 'updates',
        'knowledge_articles', 'documents', 'timesheets', 'time_entries',
        'user_availability', 'shift_assignments', 'shift_attachments', 'shifts',
        'shift_templates', 'schedules', 'refresh_tokens', 'users',
    ):
        op.drop_table(table)
