"""Constants package for CMS Project."""

from .auth import ACCESS_TOKEN_EXPIRE_MINUTES, ALGORITHM, SECRET_KEY
from .collections import COLLECTION_SLUGS, CollectionName, is_known_collection, normalize_collections
from .roles import (
    DEFAULT_ROLE,
    DEFAULT_ROLES,
    ROLE_HIERARCHY,
    TOP_TIER_ROLES,
    RoleName,
    RoleTier,
    get_default_role_name,
    get_role_tier,
    highest_tier,
    is_higher_role,
)

__all__ = [
    # Role constants
    "RoleName",
    "RoleTier",
    "DEFAULT_ROLE",
    "DEFAULT_ROLES",
    "ROLE_HIERARCHY",
    "TOP_TIER_ROLES",
    "get_default_role_name",
    "get_role_tier",
    "highest_tier",
    "is_higher_role",
    # Collection constants
    "CollectionName",
    "COLLECTION_SLUGS",
    "is_known_collection",
    "normalize_collections",
    # Auth constants
    "SECRET_KEY",
    "ALGORITHM",
    "ACCESS_TOKEN_EXPIRE_MINUTES",
]
