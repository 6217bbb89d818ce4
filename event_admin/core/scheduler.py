"""Background job scheduler for edit session housekeeping."""
import logging
from datetime import timedelta

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from event_admin.core.config import settings
from event_admin.roster.sessions import EditSessions

logger = logging.getLogger(__name__)

scheduler = AsyncIOScheduler()


def purge_drafts_job():
    """Drop edit sessions idle for longer than the configured TTL."""
    try:
        purged = EditSessions.purge_stale(timedelta(minutes=settings.draft_ttl_minutes))
        logger.debug(f"Draft cleanup completed, {purged} purged")
    except Exception as e:
        logger.error(f"Draft cleanup failed: {e}")


def start_scheduler():
    """Start the background scheduler."""
    scheduler.add_job(
        purge_drafts_job,
        trigger=IntervalTrigger(minutes=settings.draft_cleanup_interval_minutes),
        id="draft_cleanup",
        replace_existing=True,
    )
    scheduler.start()
    logger.info(
        f"Scheduler started, purging idle drafts every "
        f"{settings.draft_cleanup_interval_minutes} minutes"
    )


def shutdown_scheduler():
    """Graceful shutdown."""
    scheduler.shutdown(wait=False)
    logger.info("Scheduler shut down")
