"""
Collection access evaluation.

Pure predicates deciding whether an actor may create, read, update or delete
documents of a collection. Inputs are an ``ActorSnapshot`` (or ``None`` for
anonymous requests) and a collection slug; outputs are plain booleans. Nothing
here touches the database or raises.

Tier rules (see ``app.constants.roles``):

    TOP  (admin, superadmin)  every collection, create and delete
    MID  (editor)             edit editableCollections, view visible ∪ editable
    LOW  (viewer)             view visibleCollections
    NONE (user)               nothing
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from app.constants.collections import normalize_collections
from app.constants.roles import RoleTier, highest_tier


class Operation(str, Enum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class ActorSnapshot:
    """Read-only view of a user's roles and capability lists."""

    id: int | None = None
    roles: frozenset[str] = field(default_factory=frozenset)
    editable_collections: frozenset[str] = field(default_factory=frozenset)
    visible_collections: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def build(
        cls,
        id: int | None = None,
        roles: Iterable[Any] | None = None,
        editable_collections: Iterable[Any] | None = None,
        visible_collections: Iterable[Any] | None = None,
    ) -> ActorSnapshot:
        """Normalise raw values; missing lists become empty, unknown collections are dropped."""
        return cls(
            id=id,
            roles=frozenset(r for r in (roles or ()) if isinstance(r, str)),
            editable_collections=normalize_collections(editable_collections),
            visible_collections=normalize_collections(visible_collections),
        )

    @classmethod
    def from_user(cls, user: Any) -> ActorSnapshot | None:
        if user is None:
            return None
        return cls.build(
            id=getattr(user, "id", None),
            roles=getattr(user, "roles", None),
            editable_collections=getattr(user, "editable_collections", None),
            visible_collections=getattr(user, "visible_collections", None),
        )

    @property
    def tier(self) -> RoleTier:
        return highest_tier(self.roles)


def _tier(actor: ActorSnapshot | None) -> RoleTier:
    return actor.tier if actor is not None else RoleTier.NONE


def can_create(actor: ActorSnapshot | None) -> bool:
    return _tier(actor) is RoleTier.TOP


def can_delete(actor: ActorSnapshot | None) -> bool:
    return _tier(actor) is RoleTier.TOP


def can_edit_collection(actor: ActorSnapshot | None, collection: str) -> bool:
    """
    Admins can edit every collection, editors only their editable collections,
    everyone else nothing.
    """
    if actor is None:
        return False

    tier = actor.tier
    if tier is RoleTier.TOP:
        return True
    if tier is RoleTier.MID:
        return collection in actor.editable_collections
    return False


def can_view_collection(actor: ActorSnapshot | None, collection: str) -> bool:
    """
    Admins can view every collection. Editors view what they may see or edit;
    viewers only their visible collections.
    """
    if actor is None:
        return False

    tier = actor.tier
    if tier is RoleTier.TOP:
        return True
    if tier is RoleTier.MID:
        return collection in actor.visible_collections or collection in actor.editable_collections
    if tier is RoleTier.LOW:
        return collection in actor.visible_collections
    return False


def is_self_or_admin(actor: ActorSnapshot | None, owner_id: Any) -> bool:
    if actor is None:
        return False
    if actor.tier is RoleTier.TOP:
        return True
    return actor.id is not None and actor.id == owner_id


def can_access_admin(actor: ActorSnapshot | None) -> bool:
    """Anyone with a staff tier (viewer and up) may open the admin panel."""
    return _tier(actor) >= RoleTier.LOW


def evaluate(actor: ActorSnapshot | None, operation: Operation | str, collection: str) -> bool:
    """Single entry point mapping an operation onto the predicates above."""
    try:
        operation = Operation(operation)
    except ValueError:
        return False

    if operation is Operation.CREATE:
        return can_create(actor)
    if operation is Operation.DELETE:
        return can_delete(actor)
    if operation is Operation.UPDATE:
        return can_edit_collection(actor, collection)
    return can_view_collection(actor, collection)
