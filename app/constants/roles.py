"""
Role Constants for CMS Project

This module defines the role tags an actor can hold and the privilege tier
each tag maps to. Tiers are ranked; the evaluator in
``app.permissions_config.permissions`` only ever compares tiers.
"""

from collections.abc import Iterable
from enum import Enum, IntEnum


class RoleName(str, Enum):
    """Enumeration of role names in the system."""

    USER = "user"
    VIEWER = "viewer"
    EDITOR = "editor"
    ADMIN = "admin"
    SUPERADMIN = "superadmin"


class RoleTier(IntEnum):
    """Relative privilege rank of a role tag (higher number = more privileges)."""

    NONE = 0
    LOW = 1
    MID = 2
    TOP = 3


# Default roles for new self-service registrations
DEFAULT_ROLE = RoleName.USER
DEFAULT_ROLES = [DEFAULT_ROLE.value]

# Role hierarchy
ROLE_HIERARCHY = {
    RoleName.USER: RoleTier.NONE,
    RoleName.VIEWER: RoleTier.LOW,
    RoleName.EDITOR: RoleTier.MID,
    RoleName.ADMIN: RoleTier.TOP,
    RoleName.SUPERADMIN: RoleTier.TOP,
}

TOP_TIER_ROLES = frozenset(role.value for role, tier in ROLE_HIERARCHY.items() if tier is RoleTier.TOP)


def get_default_role_name() -> str:
    """Get the default role name for new users."""
    return DEFAULT_ROLE.value


def get_role_tier(role: str) -> RoleTier:
    """
    Return the tier of a single role tag.

    Unknown or malformed tags rank as ``RoleTier.NONE``.
    """
    try:
        return ROLE_HIERARCHY[RoleName(role)]
    except ValueError:
        return RoleTier.NONE


def highest_tier(roles: Iterable[str] | None) -> RoleTier:
    """Return the most privileged tier held by a role set (NONE for an empty set)."""
    if not roles:
        return RoleTier.NONE
    return max((get_role_tier(role) for role in roles if isinstance(role, str)), default=RoleTier.NONE)


def is_higher_role(role1: str, role2: str) -> bool:
    """
    Check if role1 has higher privileges than role2.

    Args:
        role1: First role name
        role2: Second role name

    Returns:
        bool: True if role1 > role2 in hierarchy
    """
    return get_role_tier(role1) > get_role_tier(role2)
