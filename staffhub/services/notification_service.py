"""알림 서비스 — 알림 비즈니스 로직.

Notification Service — Business logic for notification management.
Handles read/unread operations and the notifications raised by the
time-entry approval flow, shift assignments and document/timesheet reviews.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from staffhub.models.notification import Notification
from staffhub.models.time_entry import TimeEntry
from staffhub.models.user import User
from staffhub.repositories.notification_repository import notification_repository
from staffhub.repositories.user_repository import user_repository
from staffhub.utils.exceptions import NotFoundError
from staffhub.utils.permissions import PERMISSIONS

# 근태 수정 승인 요청 알림 유형 — Pending self-edit request type
EDIT_REQUEST_TYPE: str = "time_entry_edit_request"


class NotificationService:
    """알림 서비스."""

    # --- 공통 조회/읽음 처리 (Shared read/unread operations) ---

    async def list_notifications(
        self,
        db: AsyncSession,
        user_id: UUID,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[Notification], int]:
        """사용자의 알림 목록을 페이지네이션하여 조회합니다.

        Returns:
            tuple[Sequence[Notification], int]: (알림 목록, 전체 개수)
        """
        return await notification_repository.get_user_notifications(db, user_id, page, per_page)

    async def get_unread_count(self, db: AsyncSession, user_id: UUID) -> int:
        return await notification_repository.get_unread_count(db, user_id)

    async def mark_read(self, db: AsyncSession, notification_id: UUID, user_id: UUID) -> None:
        """단일 알림 읽음 처리 — 본인 알림이 아니면 404.

        Raises:
            NotFoundError: 알림이 없거나 본인 것이 아님 (Missing or not the user's)
        """
        if not await notification_repository.mark_read(db, notification_id, user_id):
            raise NotFoundError("Notification not found")

    async def mark_all_read(self, db: AsyncSession, user_id: UUID) -> int:
        return await notification_repository.mark_all_read(db, user_id)

    def build_response(self, notification: Notification) -> dict:
        return {
            "id": str(notification.id),
            "type": notification.type,
            "message": notification.message,
            "reference_type": notification.reference_type,
            "reference_id": str(notification.reference_id) if notification.reference_id else None,
            "is_read": notification.is_read,
            "created_at": notification.created_at,
        }

    # --- 자동 생성 (Auto-creation) ---

    async def notify(
        self,
        db: AsyncSession,
        user_id: UUID,
        notification_type: str,
        message: str,
        reference_type: str | None = None,
        reference_id: UUID | None = None,
    ) -> Notification:
        """단일 사용자에게 알림 생성."""
        return await notification_repository.create_notification(
            db, user_id, notification_type, message, reference_type, reference_id
        )

    async def replace_edit_requests(self, db: AsyncSession, entry: TimeEntry, requester: User) -> int:
        """근태 수정 승인 요청 알림을 관리자별 1건으로 교체합니다.

        Drop any pending edit-request notifications for the entry and create
        exactly one per active Owner/Admin.

        Returns:
            int: 생성된 알림 수 (Notifications created)
        """
        await self.clear_edit_requests(db, entry.id)
        admins = await user_repository.get_by_roles(db, PERMISSIONS["time_entries:manage"])
        message: str = f"{requester.full_name} requested a change to a time entry"
        for admin in admins:
            await notification_repository.create_notification(
                db, admin.id, EDIT_REQUEST_TYPE, message, "time_entry", entry.id
            )
        return len(admins)

    async def clear_edit_requests(self, db: AsyncSession, entry_id: UUID) -> int:
        """근태 기록의 승인 요청 알림 삭제."""
        return await notification_repository.delete_for_reference(
            db, EDIT_REQUEST_TYPE, "time_entry", entry_id
        )


# 싱글턴 인스턴스 — Singleton instance
notification_service: NotificationService = NotificationService()
