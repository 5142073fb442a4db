"""
Role-Based Access Control (RBAC) Unit Tests
============================================

Tests for RBAC functionality including:
- Role hierarchy construction and levels
- has_role_or_higher over every role pair
- has_permission with missing, unknown and changing roles
- require_role_or_higher dependency factory
"""

import itertools
from uuid import uuid4

import pytest

from app.models.role_enum import Role
from app.core.permissions import (
    DEFAULT_ROLE_HIERARCHY,
    RoleHierarchy,
    get_role_level,
    has_permission,
    has_role_or_higher,
)
from app.core.dependencies.rbac import require_role_or_higher


pytestmark = pytest.mark.rbac


ROLE_ORDER = [Role.DEVELOPER, Role.TESTER, Role.MANAGER]


class TestRoleHierarchy:
    """Tests for role hierarchy configuration."""

    def test_default_levels_strictly_increase(self):
        """Test that levels increase with seniority."""
        # Act
        levels = [get_role_level(role) for role in ROLE_ORDER]

        # Assert
        assert levels == sorted(levels)
        assert len(set(levels)) == len(levels)

    def test_every_role_has_a_level(self):
        """Test that the default hierarchy covers the whole Role set."""
        # Assert
        assert set(DEFAULT_ROLE_HIERARCHY.levels) == set(Role)

    def test_levels_are_read_only(self):
        """Test that the level mapping cannot be mutated."""
        # Act & Assert
        with pytest.raises(TypeError):
            DEFAULT_ROLE_HIERARCHY.levels[Role.DEVELOPER] = 100

    def test_missing_role_is_rejected(self):
        """Test that an incomplete mapping cannot be constructed."""
        # Act & Assert
        with pytest.raises(ValueError, match="manager"):
            RoleHierarchy({Role.DEVELOPER: 1, Role.TESTER: 2})

    def test_non_increasing_levels_are_rejected(self):
        """Test that tied or inverted levels cannot be constructed."""
        # Act & Assert
        with pytest.raises(ValueError):
            RoleHierarchy({Role.DEVELOPER: 5, Role.TESTER: 5, Role.MANAGER: 9})
        with pytest.raises(ValueError):
            RoleHierarchy({Role.DEVELOPER: 9, Role.TESTER: 6, Role.MANAGER: 3})

    def test_spacing_is_arbitrary(self):
        """Test that only the order of levels matters."""
        # Arrange
        hierarchy = RoleHierarchy({Role.DEVELOPER: 1, Role.TESTER: 50, Role.MANAGER: 51})

        # Assert
        assert hierarchy.has_role_or_higher(Role.MANAGER, Role.TESTER) is True
        assert hierarchy.has_role_or_higher(Role.DEVELOPER, Role.TESTER) is False

    def test_level_of_raw_token(self):
        """Test that raw tokens resolve like Role members."""
        # Assert
        assert get_role_level("tester") == get_role_level(Role.TESTER)

    def test_level_of_unknown_role_is_none(self):
        """Test that unknown, missing and mis-cased roles have no level."""
        # Assert
        assert get_role_level("admin") is None
        assert get_role_level(None) is None
        assert get_role_level("Tester") is None


class TestHasRoleOrHigher:
    """Tests for has_role_or_higher function."""

    @pytest.mark.parametrize(
        "actor_role,required_role",
        list(itertools.product(ROLE_ORDER, ROLE_ORDER)),
    )
    def test_matches_level_comparison(self, actor_role, required_role):
        """Test every role pair against the declared order."""
        # Arrange
        expected = ROLE_ORDER.index(actor_role) >= ROLE_ORDER.index(required_role)

        # Act
        result = has_role_or_higher(actor_role, required_role)

        # Assert
        assert result is expected

    def test_developer_lacks_tester(self):
        """Test developer vs requirement tester."""
        assert has_role_or_higher(Role.DEVELOPER, Role.TESTER) is False

    def test_tester_has_developer(self):
        """Test tester vs requirement developer."""
        assert has_role_or_higher(Role.TESTER, Role.DEVELOPER) is True

    def test_manager_has_manager(self):
        """Test manager vs requirement manager."""
        assert has_role_or_higher(Role.MANAGER, Role.MANAGER) is True

    def test_invalid_required_role_raises(self):
        """Test that an invalid requirement is a caller error."""
        # Act & Assert
        with pytest.raises(ValueError):
            has_role_or_higher(Role.MANAGER, "admin")


class TestHasPermission:
    """Tests for has_permission with a role lookup."""

    @pytest.mark.parametrize("required_role", ROLE_ORDER)
    def test_no_role_is_denied(self, required_role):
        """Test that an actor without a role is denied everything."""
        # Arrange
        lookup = {"u1": None}.get

        # Act & Assert
        assert has_permission(lookup, "u1", required_role) is False

    @pytest.mark.parametrize("required_role", ROLE_ORDER)
    def test_unknown_role_is_denied(self, required_role):
        """Test that an unrecognized role is denied everything."""
        # Arrange
        lookup = {"u1": "superuser"}.get

        # Act & Assert
        assert has_permission(lookup, "u1", required_role) is False

    @pytest.mark.parametrize("required_role", ROLE_ORDER)
    def test_missing_actor_is_denied(self, required_role):
        """Test that a non-existent actor is denied everything."""
        # Arrange
        lookup = {}.get

        # Act & Assert
        assert has_permission(lookup, uuid4(), required_role) is False

    def test_no_actor_is_denied_without_lookup(self):
        """Test that a None actor is denied without calling the lookup."""
        # Arrange
        calls = []

        def lookup(actor_id):
            calls.append(actor_id)
            return Role.MANAGER.value

        # Act
        result = has_permission(lookup, None, Role.DEVELOPER)

        # Assert
        assert result is False
        assert calls == []

    def test_role_is_read_on_every_check(self):
        """Test that a role change takes effect on the next check."""
        # Arrange
        roles = {"u1": "developer"}

        # Act
        before = has_permission(roles.get, "u1", Role.TESTER)
        roles["u1"] = "tester"
        after = has_permission(roles.get, "u1", Role.TESTER)

        # Assert
        assert before is False
        assert after is True

    def test_enum_role_from_lookup(self):
        """Test that the lookup may return Role members."""
        # Arrange
        lookup = {"u1": Role.MANAGER}.get

        # Act & Assert
        assert has_permission(lookup, "u1", Role.TESTER) is True

    def test_invalid_required_role_raises(self):
        """Test that an invalid requirement raises before the lookup."""
        # Act & Assert
        with pytest.raises(ValueError):
            has_permission({"u1": "manager"}.get, "u1", "owner")

    def test_custom_hierarchy(self):
        """Test that an explicit hierarchy can be passed in."""
        # Arrange
        hierarchy = RoleHierarchy({Role.DEVELOPER: 10, Role.TESTER: 20, Role.MANAGER: 30})

        # Act & Assert
        assert has_permission({"u1": "tester"}.get, "u1", Role.DEVELOPER, hierarchy) is True


class TestRequireRoleOrHigher:
    """Tests for the require_role_or_higher dependency factory."""

    def test_returns_callable(self):
        """Test that a dependency function is returned."""
        # Act
        dependency = require_role_or_higher(Role.TESTER)

        # Assert
        assert callable(dependency)

    def test_invalid_role_fails_at_definition(self):
        """Test that an invalid minimum role is rejected immediately."""
        # Act & Assert
        with pytest.raises(ValueError):
            require_role_or_higher("owner")
