"""콘텐츠 공개 범위 단위 테스트 (Audience resolution unit tests)."""

import uuid
from types import SimpleNamespace

from staffhub.models.user import User
from staffhub.services.visibility import can_view, filter_visible, user_group_ids


def content(**values) -> SimpleNamespace:
    values.setdefault("publish_status", "published")
    values.setdefault("visibility", "all")
    values.setdefault("target_user_ids", [])
    values.setdefault("target_group_ids", [])
    return SimpleNamespace(**values)


def user(groups=None, programs=None) -> User:
    return User(
        id=uuid.uuid4(),
        groups=groups or [],
        profile={"programs": programs} if programs else {},
    )


class TestUserGroups:
    def test_program_tags_are_derived(self):
        u = user(groups=["g-1"], programs=["Vitas Central"])
        assert user_group_ids(u) == {"g-1", "auto-program-Vitas Central"}


class TestCanView:
    def test_draft_hidden_from_staff(self):
        assert not can_view(content(publish_status="draft"), user(), is_manager=False)

    def test_manager_sees_drafts(self):
        assert can_view(content(publish_status="draft", visibility="specific_users"), user(), is_manager=True)

    def test_specific_user_target(self):
        u = user()
        item = content(visibility="specific_users", target_user_ids=[str(u.id)])
        assert can_view(item, u, is_manager=False)
        assert not can_view(item, user(), is_manager=False)

    def test_group_and_program_targets(self):
        by_group = content(visibility="specific_users", target_group_ids=["g-1"])
        by_program = content(visibility="specific_users", target_group_ids=["auto-program-Vitas"])
        assert can_view(by_group, user(groups=["g-1"]), is_manager=False)
        assert can_view(by_program, user(programs=["Vitas"]), is_manager=False)
        assert not can_view(by_program, user(groups=["g-2"]), is_manager=False)

    def test_filter_keeps_order(self):
        u = user()
        items = [content(title="a"), content(title="b", publish_status="draft"), content(title="c")]
        assert [i.title for i in filter_visible(items, u, is_manager=False)] == ["a", "c"]
