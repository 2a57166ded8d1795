"""근태 상태 전이 및 시급/사진 면제 규칙 단위 테스트.

Unit tests for the time entry transition tables, lock guard, pay rate
lookup and shift-note photo exemption.
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from staffhub.models.time_entry import TimeEntry
from staffhub.models.user import User
from staffhub.services import time_entry_state as state
from staffhub.services.time_entry_service import is_photo_exempt, resolve_hourly_rate
from staffhub.utils.exceptions import BadRequestError, ForbiddenError, InvalidTransitionError


def entry(**values) -> TimeEntry:
    values.setdefault("status", "active")
    values.setdefault("approval_status", "approved")
    values.setdefault("locked", False)
    return TimeEntry(**values)


class TestTransitions:
    def test_clock_out_from_active(self):
        assert state.next_status(entry(), "clock_out") == "completed"
        assert state.next_status(entry(), "auto_clock_out") == "auto-clocked-out"

    def test_clock_out_twice_is_invalid(self):
        with pytest.raises(InvalidTransitionError) as exc:
            state.next_status(entry(status="completed"), "clock_out")
        assert exc.value.status_code == 400
        assert exc.value.detail == "Cannot clock out time entry in status 'completed'"

    @pytest.mark.parametrize("current", ["approved", "pending", "rejected"])
    def test_self_edit_always_pending(self, current):
        assert state.next_approval(entry(approval_status=current), "self_edit") == "pending"

    def test_review_only_from_pending(self):
        assert state.next_approval(entry(approval_status="pending"), "approve") == "approved"
        assert state.next_approval(entry(approval_status="pending"), "reject") == "rejected"
        with pytest.raises(InvalidTransitionError):
            state.next_approval(entry(approval_status="rejected"), "approve")


class TestAdminTransitions:
    @pytest.mark.parametrize(
        "current, target",
        [("active", "completed"), ("auto-clocked-out", "completed"),
         ("completed", "active"), ("auto-clocked-out", "active"), ("completed", "completed")],
    )
    def test_allowed_status_changes(self, current, target):
        assert state.admin_status(entry(status=current), target) == target

    @pytest.mark.parametrize("current", ["active", "completed"])
    def test_auto_clocked_out_only_from_batch(self, current):
        with pytest.raises(InvalidTransitionError):
            state.admin_status(entry(status=current), "auto-clocked-out")

    def test_admin_approval_uses_review_actions(self):
        assert state.admin_approval(entry(approval_status="pending"), "rejected") == "rejected"
        assert state.admin_approval(entry(approval_status="approved"), "approved") == "approved"
        with pytest.raises(InvalidTransitionError):
            state.admin_approval(entry(approval_status="approved"), "rejected")
        with pytest.raises(InvalidTransitionError):
            state.admin_approval(entry(approval_status="approved"), "pending")

    def test_status_and_clock_out_must_agree(self):
        state.ensure_consistent("active", None)
        state.ensure_consistent("completed", datetime(2026, 3, 2, 16, tzinfo=timezone.utc))
        with pytest.raises(BadRequestError):
            state.ensure_consistent("active", datetime(2026, 3, 2, 16, tzinfo=timezone.utc))
        with pytest.raises(BadRequestError):
            state.ensure_consistent("auto-clocked-out", None)


class TestLockGuard:
    def test_unlocked_entry_passes(self):
        state.ensure_unlocked(entry(), {"notes": "x"})

    def test_locked_entry_blocks_changes(self):
        with pytest.raises(ForbiddenError):
            state.ensure_unlocked(entry(locked=True), {"notes": "x"}, is_admin=True)

    def test_admin_unlock_patch_allowed(self):
        state.ensure_unlocked(entry(locked=True), {"locked": False}, is_admin=True)

    def test_non_admin_unlock_blocked(self):
        with pytest.raises(ForbiddenError):
            state.ensure_unlocked(entry(locked=True), {"locked": False}, is_admin=False)


class TestPayRate:
    def test_program_rate_wins(self):
        user = User(job_rates={"Vitas": "40", "Hospice": "35"}, default_hourly_rate=Decimal("25"))
        assert resolve_hourly_rate(user, "Vitas", "Hospice") == Decimal("40")

    def test_job_rate_then_default(self):
        user = User(job_rates={"Hospice": "35"}, default_hourly_rate=Decimal("25"))
        assert resolve_hourly_rate(user, "Unknown", "Hospice") == Decimal("35")
        assert resolve_hourly_rate(user, None, None) == Decimal("25")


class TestPhotoExemption:
    @pytest.mark.parametrize("name", ["AdventHealth IPU", "advent health - ipu", "IPU at Advent"])
    def test_exempt_names(self, name):
        assert is_photo_exempt(None, name)

    @pytest.mark.parametrize("name", ["AdventHealth", "Vitas IPU", ""])
    def test_not_exempt(self, name):
        assert not is_photo_exempt(name, None)
