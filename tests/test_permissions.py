"""권한 테이블 테스트.

Permission table tests — Role normalization and a few codes whose role
sets are easy to get wrong.
"""

import pytest

from staffhub.api.deps import require_permission
from staffhub.utils.permissions import PERMISSIONS, ROLES, has_permission, is_admin, normalize_role


class TestNormalizeRole:
    @pytest.mark.parametrize("role", ["CNA", "LPN", "RN", "Janitor", None])
    def test_unknown_and_clinical_titles_are_staff(self, role):
        assert normalize_role(role) == "Staff"

    def test_known_roles_kept(self):
        assert [normalize_role(r) for r in ROLES] == list(ROLES)


class TestHasPermission:
    def test_every_code_allows_owner(self):
        assert all(has_permission("Owner", code) for code in PERMISSIONS)

    def test_clinical_title_gets_no_privileges(self):
        assert not any(has_permission("RN", code) for code in PERMISSIONS)

    @pytest.mark.parametrize(("role", "code", "allowed"), [
        ("Payroll", "timesheets:export", True),
        ("Manager", "timesheets:export", False),
        ("Manager", "timesheets:approve", True),
        ("Manager", "shifts:assign", True),
        ("Manager", "shifts:manage", False),
        ("Scheduler", "users:list", True),
        ("Scheduler", "users:view", False),
        ("HR", "documents:check_expiry", True),
        ("HR", "time_entries:manage", False),
        ("Manager", "time_entries:view_all", True),
    ])
    def test_role_sets(self, role, code, allowed):
        assert has_permission(role, code) is allowed

    def test_unknown_code(self):
        with pytest.raises(KeyError):
            has_permission("Owner", "nope:nothing")
        with pytest.raises(KeyError):
            require_permission("nope:nothing")

    def test_is_admin(self):
        assert is_admin("Owner") and is_admin("Admin")
        assert not is_admin("HR")
