"""
Collection document routes (prefix: /api/v1/collections)

    POST   /{collection}                 create a document
    GET    /{collection}/{id}            read one locale (``locale``, ``draft`` query params)
    PATCH  /{collection}/{id}            partial update of one locale
    DELETE /{collection}/{id}            delete a document and all its locales
    POST   /{collection}/{id}/publish    promote a locale's draft to live

Writes go through a store carrying ``DOCUMENT_HOOKS``, so publishing the
canonical locale queues the translation fan-out.
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import get_current_actor
from app.config import settings
from app.constants.collections import CollectionName, is_known_collection
from app.database import get_db
from app.exceptions import AuthorizationError, CollectionNotFoundError, DocumentNotFoundError, UnsupportedLocaleError
from app.i18n.locale import is_supported_locale
from app.models.document import DocumentStatus
from app.permissions_config.permission_dependencies import ensure_allowed
from app.permissions_config.permissions import (
    ActorSnapshot,
    Operation,
    can_create,
    can_edit_collection,
    can_view_collection,
)
from app.schemas import DocumentCreate, DocumentPublish, DocumentUpdate
from app.services.document_hooks import DOCUMENT_HOOKS
from app.services.document_service import SQLAlchemyDocumentStore
from app.services.translation_service import get_document_in_locale

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Collections"])


async def get_document_store(db: AsyncSession = Depends(get_db)) -> SQLAlchemyDocumentStore:
    return SQLAlchemyDocumentStore(db, hooks=DOCUMENT_HOOKS)


def resolve_collection(collection: str) -> str:
    """Path-parameter dependency: users live in their own table and routes."""
    if collection == CollectionName.USERS.value or not is_known_collection(collection):
        raise CollectionNotFoundError(collection)
    return collection


def checked_locale(locale: str) -> str:
    if not is_supported_locale(locale, settings.supported_languages):
        raise UnsupportedLocaleError(locale, settings.supported_languages)
    return locale


def request_locale(request: Request) -> str:
    """Locale resolved by ``LanguageMiddleware``; an explicit ``locale`` query param must be supported."""
    explicit = request.query_params.get("locale")
    if explicit is not None:
        return checked_locale(explicit.strip())
    return getattr(request.state, "locale", None) or settings.default_language


def write_locale(request: Request, body_locale: Optional[str]) -> str:
    return checked_locale(body_locale) if body_locale else request_locale(request)


@router.post("/{collection}", status_code=status.HTTP_201_CREATED)
async def create_document(
    request: Request,
    document_in: DocumentCreate,
    collection: str = Depends(resolve_collection),
    store: SQLAlchemyDocumentStore = Depends(get_document_store),
    actor: Optional[ActorSnapshot] = Depends(get_current_actor),
) -> dict[str, Any]:
    if not (can_create(actor) or can_edit_collection(actor, collection)):
        raise AuthorizationError(operation=Operation.CREATE.value, collection=collection)

    return await store.create(
        collection,
        document_in.data,
        locale=write_locale(request, document_in.locale),
        status=document_in.status,
    )


@router.get("/{collection}/{document_id}")
async def get_document(
    request: Request,
    document_id: int,
    draft: bool = Query(False, description="Prefer the locale's draft over its live copy"),
    collection: str = Depends(resolve_collection),
    store: SQLAlchemyDocumentStore = Depends(get_document_store),
    actor: Optional[ActorSnapshot] = Depends(get_current_actor),
) -> dict[str, Any]:
    """
    Read one locale of a document.

    Actors with view capability see everything, drafts included. Everyone
    else, anonymous requests included, only sees published live copies.
    A locale with nothing readable falls back to its base language and
    then to the canonical locale; the returned ``locale`` says which.
    """
    privileged = can_view_collection(actor, collection)
    doc = await get_document_in_locale(
        store,
        collection,
        document_id,
        request_locale(request),
        draft=draft and privileged,
    )
    if doc is None:
        raise DocumentNotFoundError(collection, document_id)
    if not privileged and doc.get("_status") != DocumentStatus.published.value:
        raise AuthorizationError(operation=Operation.READ.value, collection=collection)
    return doc


@router.patch("/{collection}/{document_id}")
async def update_document(
    request: Request,
    document_id: int,
    document_in: DocumentUpdate,
    collection: str = Depends(resolve_collection),
    store: SQLAlchemyDocumentStore = Depends(get_document_store),
    actor: Optional[ActorSnapshot] = Depends(get_current_actor),
) -> dict[str, Any]:
    ensure_allowed(actor, Operation.UPDATE, collection)
    return await store.update(
        collection,
        document_id,
        data=document_in.data,
        locale=write_locale(request, document_in.locale),
        draft=document_in.draft,
    )


@router.post("/{collection}/{document_id}/publish")
async def publish_document(
    request: Request,
    document_id: int,
    publish_in: Optional[DocumentPublish] = None,
    collection: str = Depends(resolve_collection),
    store: SQLAlchemyDocumentStore = Depends(get_document_store),
    actor: Optional[ActorSnapshot] = Depends(get_current_actor),
) -> dict[str, Any]:
    ensure_allowed(actor, Operation.UPDATE, collection)
    locale = write_locale(request, publish_in.locale if publish_in else None)
    return await store.publish(collection, document_id, locale=locale)


@router.delete("/{collection}/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(
    document_id: int,
    collection: str = Depends(resolve_collection),
    store: SQLAlchemyDocumentStore = Depends(get_document_store),
    actor: Optional[ActorSnapshot] = Depends(get_current_actor),
) -> None:
    ensure_allowed(actor, Operation.DELETE, collection)
    if not await store.delete(collection, document_id):
        raise DocumentNotFoundError(collection, document_id)
