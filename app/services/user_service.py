"""
User service

Signup, profile updates and role/capability management. Two rules apply on
every write:

* the first user ever created is promoted to ``admin`` when no top-tier user
  exists yet (checked with a query in the creating transaction);
* only editor-tier roles and above hold editable collections, and every
  editable collection is also visible (``visible ⊇ editable``).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: TC002

from app.auth import hash_password
from app.constants.collections import COLLECTION_SLUGS
from app.constants.roles import DEFAULT_ROLES, TOP_TIER_ROLES, RoleName, RoleTier, highest_tier
from app.exceptions import AuthorizationError, DuplicateResourceError, UserNotFoundError, ValidationError
from app.models.user import User
from app.permissions_config.permissions import ActorSnapshot, can_delete, is_self_or_admin

logger = logging.getLogger(__name__)


# ── Write rules ───────────────────────────────────────────────────────────────


def validate_roles(roles: Iterable[str]) -> list[str]:
    valid = {r.value for r in RoleName}
    result: list[str] = []
    for role in roles:
        if role not in valid:
            raise ValidationError(f"Invalid role: {role}", field="roles")
        if role not in result:
            result.append(role)
    return result


def validate_collections(values: Iterable[str] | None, field: str) -> list[str]:
    result: list[str] = []
    for value in values or ():
        if value not in COLLECTION_SLUGS:
            raise ValidationError(f"Unknown collection: {value}", field=field)
        if value not in result:
            result.append(value)
    return result


def check_editable_allowed(roles: Iterable[str] | None, editable: list[str]) -> list[str]:
    """Only editor-tier roles and above may hold editable collections."""
    if editable and highest_tier(roles) < RoleTier.MID:
        raise ValidationError(
            "Only editors and administrators can hold editable collections",
            field="editable_collections",
        )
    return editable


def sync_editable_to_visible(
    roles: Iterable[str] | None,
    editable: Iterable[str] | None,
    visible: Iterable[str] | None,
) -> list[str]:
    """Return the visible list, extended with every editable collection when the roles can edit."""
    visible_list = list(visible or [])
    if highest_tier(roles) < RoleTier.MID:
        return visible_list
    for collection in editable or []:
        if collection not in visible_list:
            visible_list.append(collection)
    return visible_list


async def top_tier_user_exists(db: AsyncSession) -> bool:
    result = await db.execute(select(User.roles))
    return any(set(roles or ()) & TOP_TIER_ROLES for roles in result.scalars().all())


async def ensure_first_user_is_admin(roles: Iterable[str], db: AsyncSession) -> list[str]:
    """Add ``admin`` to ``roles`` when no top-tier user exists yet."""
    roles = list(roles)
    if await top_tier_user_exists(db):
        return roles
    if RoleName.ADMIN.value not in roles:
        logger.info("No admin exists yet, promoting the new user to admin")
        roles.append(RoleName.ADMIN.value)
    return roles


def _require_top_tier(actor: ActorSnapshot | None) -> None:
    if actor is None or actor.tier is not RoleTier.TOP:
        raise AuthorizationError(message="Only administrators can change roles or collection access")


# ── CRUD ──────────────────────────────────────────────────────────────────────


async def get_user(user_id: int, db: AsyncSession) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise UserNotFoundError(user_id)
    return user


async def get_user_by_email(email: str, db: AsyncSession) -> User | None:
    result = await db.execute(select(User).where(func.lower(User.email) == email.lower()))
    return result.scalars().first()


async def list_users(db: AsyncSession, skip: int = 0, limit: int = 50) -> list[User]:
    result = await db.execute(select(User).order_by(User.id).offset(skip).limit(limit))
    return list(result.scalars().all())


async def create_user(
    email: str,
    password: str,
    db: AsyncSession,
    *,
    name: str | None = None,
    roles: Iterable[str] | None = None,
    editable_collections: Iterable[str] | None = None,
    visible_collections: Iterable[str] | None = None,
    actor: ActorSnapshot | None = None,
) -> User:
    """
    Create a user.

    Self-service signups get ``DEFAULT_ROLES``; only a top-tier actor may
    choose roles and capability lists for a new account.

    Raises:
        DuplicateResourceError: if the email is already registered.
        AuthorizationError: if a non-admin tries to set roles or collections.
    """
    if await get_user_by_email(email, db) is not None:
        raise DuplicateResourceError("User", "email", email)

    privileged = roles is not None or editable_collections is not None or visible_collections is not None
    if privileged:
        _require_top_tier(actor)

    role_list = validate_roles(roles if roles is not None else DEFAULT_ROLES)
    role_list = await ensure_first_user_is_admin(role_list, db)
    editable = check_editable_allowed(role_list, validate_collections(editable_collections, "editable_collections"))
    visible = validate_collections(visible_collections, "visible_collections")

    user = User(
        email=email,
        name=name,
        hashed_password=hash_password(password),
        roles=role_list,
        editable_collections=editable,
        visible_collections=sync_editable_to_visible(role_list, editable, visible),
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info("User created: id=%s roles=%s", user.id, role_list)
    return user


async def update_profile(
    actor: ActorSnapshot | None,
    user_id: int,
    updates: dict[str, Any],
    db: AsyncSession,
) -> User:
    """Update name, email or password of one's own account (or any account as admin)."""
    if not is_self_or_admin(actor, user_id):
        raise AuthorizationError(message="You can only update your own account")

    user = await get_user(user_id, db)

    if updates.get("email") and updates["email"].lower() != user.email.lower():
        if await get_user_by_email(updates["email"], db) is not None:
            raise DuplicateResourceError("User", "email", updates["email"])
        user.email = updates["email"]
    if "name" in updates:
        user.name = updates["name"]
    if updates.get("password"):
        user.hashed_password = hash_password(updates["password"])

    user.visible_collections = sync_editable_to_visible(
        user.roles, user.editable_collections, user.visible_collections
    )
    await db.commit()
    await db.refresh(user)
    logger.info("User profile updated: id=%s", user_id)
    return user


async def update_user_access(
    actor: ActorSnapshot | None,
    user_id: int,
    db: AsyncSession,
    *,
    roles: Iterable[str] | None = None,
    editable_collections: Iterable[str] | None = None,
    visible_collections: Iterable[str] | None = None,
) -> User:
    """Change roles and capability lists (top tier only)."""
    _require_top_tier(actor)
    user = await get_user(user_id, db)

    if roles is not None:
        user.roles = validate_roles(roles)
    if editable_collections is not None:
        user.editable_collections = check_editable_allowed(
            user.roles, validate_collections(editable_collections, "editable_collections")
        )
    elif user.editable_collections and highest_tier(user.roles) < RoleTier.MID:
        logger.info("Clearing editable collections of user %s after role change to %s", user_id, user.roles)
        user.editable_collections = []
    visible = user.visible_collections
    if visible_collections is not None:
        visible = validate_collections(visible_collections, "visible_collections")
    user.visible_collections = sync_editable_to_visible(user.roles, user.editable_collections, visible)

    await db.commit()
    await db.refresh(user)
    logger.info(
        "User access updated: id=%s roles=%s editable=%s visible=%s by=%s",
        user_id,
        user.roles,
        user.editable_collections,
        user.visible_collections,
        actor.id if actor else None,
    )
    return user


async def delete_user(actor: ActorSnapshot | None, user_id: int, db: AsyncSession) -> None:
    if not can_delete(actor):
        raise AuthorizationError(operation="delete", collection="users")
    user = await get_user(user_id, db)
    await db.delete(user)
    await db.commit()
    logger.info("User deleted: id=%s by=%s", user_id, actor.id if actor else None)
