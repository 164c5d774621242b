import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler

scheduler = AsyncIOScheduler()

logger = logging.getLogger(__name__)


def start_scheduler() -> None:
    if not scheduler.running:
        scheduler.start()
        logger.info("[Scheduler] Started")


def shutdown_scheduler() -> None:
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("[Scheduler] Stopped")
