"""
Translation & i18n routes

Two APIRouter objects exported from this module:

translations_router  (prefix: /api/v1/collections)
    POST   /{collection}/{id}/translate   → queue a locale fan-out (``?inline=true`` runs it now)
    GET    /{collection}/{id}/languages   → locale codes with a stored representation

i18n_router  (prefix: /api/v1/i18n)
    GET    /languages                     → supported languages (public)

Both routers are registered before the collection document router in main.py.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.auth import get_current_actor
from app.config import settings
from app.i18n.locale import get_language_info
from app.permissions_config.permission_dependencies import ensure_allowed
from app.permissions_config.permissions import ActorSnapshot, Operation
from app.routes.documents import get_document_store, resolve_collection
from app.schemas import DocumentLanguagesResponse, TranslationQueuedResponse, TranslationRunResponse
from app.services.document_service import SQLAlchemyDocumentStore
from app.services.translation_queue import enqueue_translation, run_translation_inline
from app.services.translation_service import list_languages_for_document

translations_router = APIRouter(tags=["Translations"])
i18n_router = APIRouter(tags=["Internationalization"])
logger = logging.getLogger(__name__)


@translations_router.post(
    "/{collection}/{document_id}/translate",
    response_model=TranslationRunResponse | TranslationQueuedResponse,
)
async def trigger_translation(
    document_id: int,
    inline: bool = Query(False, description="Run the fan-out inside this request"),
    collection: str = Depends(resolve_collection),
    actor: Optional[ActorSnapshot] = Depends(get_current_actor),
):
    """Translate a published document into every non-canonical locale."""
    ensure_allowed(actor, Operation.UPDATE, collection)

    if inline:
        result = await run_translation_inline(collection, document_id)
        logger.info(
            "Inline translation of %s %s requested by %s: %s",
            collection,
            document_id,
            actor.id if actor else None,
            result.message,
        )
        return result.to_dict()

    job_id = enqueue_translation(collection, document_id, delay_seconds=0)
    return {"queued": True, "job_id": job_id, "collection": collection, "document_id": document_id}


@translations_router.get("/{collection}/{document_id}/languages", response_model=DocumentLanguagesResponse)
async def document_languages(
    document_id: int,
    collection: str = Depends(resolve_collection),
    store: SQLAlchemyDocumentStore = Depends(get_document_store),
):
    """Return the locale codes that hold a copy of the document."""
    languages = await list_languages_for_document(store, collection, document_id)
    return {"collection": collection, "document_id": document_id, "languages": languages}


@i18n_router.get("/languages")
async def list_supported_languages():
    """Return all supported languages with their name and RTL flag."""
    return {
        "default": settings.default_language,
        "languages": [get_language_info(code) for code in settings.supported_languages],
    }
