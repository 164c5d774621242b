"""
After-change hooks for collection documents.

``after_document_change`` is registered on the document store used by the HTTP
routes. It never raises: queuing problems are logged and the write that
triggered it still succeeds.
"""

import logging
from typing import Any

from app.services.translation_queue import enqueue_translation
from app.services.translation_service import DISABLE_REVALIDATE, should_trigger_fanout

logger = logging.getLogger(__name__)


async def after_document_change(
    collection: str,
    doc: dict[str, Any],
    operation: str,
    locale: str | None,
    context: dict[str, Any],
) -> None:
    if context.get(DISABLE_REVALIDATE):
        return
    if not should_trigger_fanout(collection, doc, operation, request_locale=locale):
        logger.debug("Translation not triggered for %s %s (%s)", collection, doc.get("id"), operation)
        return

    try:
        enqueue_translation(collection, doc["id"])
    except Exception:
        logger.exception("Error queuing translation task for %s %s", collection, doc.get("id"))


DOCUMENT_HOOKS = [after_document_change]
