"""콘텐츠 공개 범위 판정 모듈.

Audience resolution for knowledge articles and updates.

A user's groups are the synced ``User.groups`` IDs plus one
``auto-program-<program>`` tag per program in ``profile.programs``.
Content managers see everything; everyone else sees published content
whose audience is ``all`` or names them directly or through a group.
"""

from typing import Iterable, Protocol, TypeVar

from staffhub.models.user import User

AUTO_PROGRAM_PREFIX: str = "auto-program-"


class TargetedContent(Protocol):
    publish_status: str
    visibility: str
    target_user_ids: list[str]
    target_group_ids: list[str]


ContentT = TypeVar("ContentT", bound=TargetedContent)


def program_group_id(program: str) -> str:
    """프로그램 이름 → 자동 그룹 ID (e.g. "auto-program-Vitas Central")."""
    return f"{AUTO_PROGRAM_PREFIX}{program}"


def user_group_ids(user: User) -> set[str]:
    """사용자의 전체 그룹 ID 집합 (Synced groups plus derived program tags)."""
    groups: set[str] = {g for g in (user.groups or []) if g}
    programs = (user.profile or {}).get("programs") or []
    groups.update(program_group_id(p) for p in programs if p)
    return groups


def can_view(content: TargetedContent, user: User, is_manager: bool) -> bool:
    """사용자가 콘텐츠를 볼 수 있는지 판정합니다.

    Args:
        content: 지식 문서 또는 공지 (Knowledge article or update)
        user: 요청 사용자 (Caller)
        is_manager: 콘텐츠 관리 권한 보유 여부 (Caller manages this content type)

    Returns:
        bool: 열람 가능 여부 (Whether the caller may see the content)
    """
    if is_manager:
        return True
    if content.publish_status == "draft":
        return False
    if content.visibility == "all":
        return True
    if str(user.id) in (content.target_user_ids or []):
        return True
    return bool(user_group_ids(user) & set(content.target_group_ids or []))


def filter_visible(items: Iterable[ContentT], user: User, is_manager: bool) -> list[ContentT]:
    """열람 가능한 항목만 남깁니다 (Keep only what the caller may see)."""
    return [item for item in items if can_view(item, user, is_manager)]
