"""Background job that moves finished events to the past status."""
import logging
from datetime import date

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from eventhub.core.config import settings
from eventhub.services.events import EventRepository

logger = logging.getLogger(__name__)

scheduler = AsyncIOScheduler()


async def sweep_past_events(events: EventRepository) -> int:
    """Background sweep job. Returns how many events were concluded."""
    try:
        concluded = await events.mark_past(date.today())
    except Exception as e:
        logger.error(f"Past-event sweep failed: {e}")
        return 0
    logger.info(f"Past-event sweep completed: {len(concluded)} concluded")
    return len(concluded)


def start_scheduler(events: EventRepository):
    """Start the background scheduler, unless the sweep is disabled."""
    if not settings.past_event_sweep_enabled:
        logger.info("Past-event sweep disabled")
        return
    scheduler.add_job(
        sweep_past_events,
        trigger=IntervalTrigger(minutes=settings.past_event_sweep_minutes),
        args=[events],
        id="past_event_sweep",
        replace_existing=True,
    )
    scheduler.start()
    logger.info(
        f"Scheduler started, sweeping past events every {settings.past_event_sweep_minutes} minutes"
    )


def shutdown_scheduler():
    """Graceful shutdown."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler shut down")
