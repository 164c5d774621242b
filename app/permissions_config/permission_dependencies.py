"""
FastAPI dependencies that turn access-evaluator decisions into 403 responses.
"""

import logging
from typing import Optional

from fastapi import Depends

from app.auth import get_current_actor
from app.constants.collections import is_known_collection
from app.exceptions import AuthorizationError, CollectionNotFoundError
from app.permissions_config.permissions import ActorSnapshot, Operation, evaluate, is_self_or_admin

logger = logging.getLogger(__name__)


def ensure_allowed(actor: Optional[ActorSnapshot], operation: Operation, collection: str) -> None:
    """Raise ``AuthorizationError`` unless the evaluator allows the operation."""
    if not evaluate(actor, operation, collection):
        logger.info(
            "Access denied: actor=%s operation=%s collection=%s",
            actor.id if actor else None,
            operation.value,
            collection,
        )
        raise AuthorizationError(operation=operation.value, collection=collection)


def require_collection_access(operation: Operation, collection: str):
    """Dependency factory for routes bound to one fixed collection."""
    if not is_known_collection(collection):
        raise CollectionNotFoundError(collection)

    async def checker(actor: Optional[ActorSnapshot] = Depends(get_current_actor)) -> ActorSnapshot:
        ensure_allowed(actor, operation, collection)
        return actor

    return checker


def require_self_or_admin():
    """Dependency factory for ``/users/{user_id}`` style routes."""

    async def checker(user_id: int, actor: Optional[ActorSnapshot] = Depends(get_current_actor)) -> ActorSnapshot:
        if not is_self_or_admin(actor, user_id):
            raise AuthorizationError(message="You can only access your own account")
        return actor

    return checker
