"""
Translation queue

Fan-out runs are queued as one-shot APScheduler jobs instead of running inside
the write request. The job id is derived from (collection, document id) with
``replace_existing=True``, so repeated publishes inside the delay window
collapse into a single run against the latest canonical copy.

Retry policy: only a source that could not be *loaded* (database trouble) is
retried, with the delays in ``TRANSLATION_RETRY_BACKOFF``. A missing or
unpublished source is final, and per-locale failures are never retried; the
next edit of the document starts a fresh fan-out.
"""

import logging
from datetime import datetime, timedelta, timezone

from apscheduler.triggers.date import DateTrigger

from app.config import settings
from app.database import AsyncSessionLocal
from app.scheduler import scheduler
from app.services.document_service import SQLAlchemyDocumentStore
from app.services.translation_service import FanoutResult, LocaleFanoutTranslator
from app.services.translator_client import ChatCompletionTranslator

logger = logging.getLogger(__name__)

# Delay before each retry (seconds)
TRANSLATION_RETRY_BACKOFF = [30, 120, 600]


def translation_job_id(collection: str, document_id: int) -> str:
    return f"translate_{collection}_{document_id}"


def enqueue_translation(
    collection: str,
    document_id: int,
    delay_seconds: float | None = None,
    attempt: int = 1,
) -> str:
    """Schedule a fan-out run and return its job id."""
    if delay_seconds is None:
        delay_seconds = settings.translation_queue_delay_seconds
    run_at = datetime.now(timezone.utc) + timedelta(seconds=delay_seconds)
    job_id = translation_job_id(collection, document_id)

    scheduler.add_job(
        run_translation_job,
        trigger=DateTrigger(run_date=run_at),
        args=[collection, document_id, attempt],
        id=job_id,
        replace_existing=True,
    )
    logger.info(
        "[Scheduler] Queued translation of %s %s (attempt %d) to run at %s",
        collection,
        document_id,
        attempt,
        run_at.isoformat(),
    )
    return job_id


def retry_delay(attempt: int) -> float | None:
    """Delay before retrying after ``attempt`` failed, or None when retries are exhausted."""
    if attempt > settings.translation_max_retries:
        return None
    index = min(attempt - 1, len(TRANSLATION_RETRY_BACKOFF) - 1)
    return TRANSLATION_RETRY_BACKOFF[index]


async def run_translation_inline(collection: str, document_id: int) -> FanoutResult:
    """Run a fan-out right away in a fresh session."""
    async with AsyncSessionLocal() as db:
        store = SQLAlchemyDocumentStore(db)
        fanout = LocaleFanoutTranslator(store, ChatCompletionTranslator())
        return await fanout.run(collection, document_id)


async def run_translation_job(collection: str, document_id: int, attempt: int = 1) -> FanoutResult:
    result = await run_translation_inline(collection, document_id)

    if result.success:
        logger.info(
            "[Scheduler] Translation of %s %s done: succeeded=%s failed=%s",
            collection,
            document_id,
            result.succeeded_locales,
            result.failed_locales,
        )
    elif result.retryable:
        delay = retry_delay(attempt)
        if delay is None:
            logger.error(
                "[Scheduler] Giving up translating %s %s after %d attempts: %s",
                collection,
                document_id,
                attempt,
                result.message,
            )
        else:
            enqueue_translation(collection, document_id, delay_seconds=delay, attempt=attempt + 1)
    else:
        logger.error("[Scheduler] Translation of %s %s failed: %s", collection, document_id, result.message)

    return result
