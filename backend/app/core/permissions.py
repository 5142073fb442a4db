"""
Role Hierarchy Module
=====================

Answers "does this actor hold at least the privilege of role R?".

Privilege is a total order over the closed Role set, encoded as
integer levels. Only the relative order of the levels matters; the
spacing is arbitrary.

An actor with no role, an unrecognized role, or no identity at all is
treated as having no privilege. Such checks return False and never raise.

Usage:
    allowed = has_permission(user_service.get_role, user_id, Role.TESTER)
"""

from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Hashable, Mapping, Optional

from app.core.logging import get_logger, security_logger
from app.models.role_enum import Role

# Initialize logger
logger = get_logger(__name__)

RoleLookup = Callable[[Any], Optional[str]]


def _as_role(value: Any) -> Optional[Role]:
    """Coerce a raw role token to Role, or None if it is not one."""
    if isinstance(value, Role):
        return value
    if isinstance(value, Enum):
        value = value.value
    if not isinstance(value, str):
        return None
    try:
        return Role(value)
    except ValueError:
        return None


class RoleHierarchy:
    """
    Immutable mapping from role to privilege level.

    The mapping must cover every Role and its levels must strictly
    increase in Role declaration order.

    Attributes:
        levels: Read-only view of the role -> level mapping
    """

    def __init__(self, levels: Mapping[Role, int]):
        missing = [role.value for role in Role if role not in levels]
        if missing:
            raise ValueError(f"Role hierarchy is missing levels for: {', '.join(missing)}")

        ordered = [levels[role] for role in Role]
        if any(lower >= higher for lower, higher in zip(ordered, ordered[1:])):
            raise ValueError("Role levels must strictly increase with seniority")

        self._levels = MappingProxyType({role: levels[role] for role in Role})

    @property
    def levels(self) -> Mapping[Role, int]:
        return self._levels

    def level_of(self, role: Any) -> Optional[int]:
        """
        Get the privilege level for a role.

        Args:
            role: Role member or raw role token

        Returns:
            Integer level, or None if the role is missing or unknown
        """
        resolved = _as_role(role)
        if resolved is None:
            return None
        return self._levels[resolved]

    def has_role_or_higher(self, actor_role: Any, required_role: Any) -> bool:
        """
        Check if an actor role meets a minimum required role.

        Args:
            actor_role: The actor's current role (may be None or unknown)
            required_role: Minimum role required

        Returns:
            True if the actor's level is at least the required level

        Raises:
            ValueError: If required_role is not a valid Role
        """
        required_level = self.level_of(required_role)
        if required_level is None:
            raise ValueError(f"Invalid required role: {required_role!r}")

        actor_level = self.level_of(actor_role)
        if actor_level is None:
            return False
        return actor_level >= required_level

    def __repr__(self) -> str:
        levels = ", ".join(f"{role.value}={level}" for role, level in self._levels.items())
        return f"<RoleHierarchy({levels})>"


DEFAULT_ROLE_HIERARCHY = RoleHierarchy({
    Role.DEVELOPER: 3,
    Role.TESTER: 6,
    Role.MANAGER: 9,
})


def get_role_level(role: Any) -> Optional[int]:
    """Get the level of a role in the default hierarchy."""
    return DEFAULT_ROLE_HIERARCHY.level_of(role)


def has_role_or_higher(actor_role: Any, required_role: Any) -> bool:
    """Check a role against a minimum role in the default hierarchy."""
    return DEFAULT_ROLE_HIERARCHY.has_role_or_higher(actor_role, required_role)


def has_permission(
    role_lookup: RoleLookup,
    actor_id: Optional[Hashable],
    required_role: Role,
    hierarchy: RoleHierarchy = DEFAULT_ROLE_HIERARCHY,
) -> bool:
    """
    Decide whether an actor may perform an operation gated at a role.

    The actor's role is resolved through ``role_lookup`` on every call,
    so role changes take effect immediately.

    Args:
        role_lookup: Callable returning the actor's current role token,
            or None when the actor has no role or does not exist
        actor_id: Identifier of the actor (None means no actor)
        required_role: Minimum role required for the operation
        hierarchy: Role hierarchy to compare against

    Returns:
        True if the actor's role is at least the required role

    Raises:
        ValueError: If required_role is not a valid Role
    """
    if hierarchy.level_of(required_role) is None:
        raise ValueError(f"Invalid required role: {required_role!r}")

    actor_role = role_lookup(actor_id) if actor_id is not None else None
    allowed = hierarchy.has_role_or_higher(actor_role, required_role)

    if allowed:
        logger.debug(
            "permission_granted",
            actor_id=str(actor_id),
            required_role=_as_role(required_role).value,
        )
    else:
        security_logger.log_permission_denied(
            actor_id=str(actor_id) if actor_id is not None else None,
            actor_role=actor_role if isinstance(actor_role, str) else None,
            required_role=_as_role(required_role).value,
        )

    return allowed
