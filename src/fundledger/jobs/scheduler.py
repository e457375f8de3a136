"""APScheduler setup for background jobs."""

import logging
from typing import Optional

from apscheduler.executors.pool import ThreadPoolExecutor
from apscheduler.jobstores.memory import MemoryJobStore
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from fundledger.config.settings import Settings, get_settings
from fundledger.core.timezone import market_tz
from fundledger.jobs.settlement_job import run_settlement_job

logger = logging.getLogger(__name__)

SETTLEMENT_JOB_ID = "fund_settlement"

_scheduler: Optional[BackgroundScheduler] = None


def get_scheduler() -> BackgroundScheduler:
    """Return the scheduler created by init_scheduler()."""
    if _scheduler is None:
        raise RuntimeError("Scheduler not initialized. Call init_scheduler() first.")
    return _scheduler


def init_scheduler() -> BackgroundScheduler:
    """
    Create the process-wide scheduler.

    Missed runs are coalesced into one and a job never overlaps itself:
    settlement must stay single-writer.
    """
    global _scheduler
    if _scheduler is not None:
        logger.warning("Scheduler already initialized")
        return _scheduler

    _scheduler = BackgroundScheduler(
        jobstores={"default": MemoryJobStore()},
        executors={"default": ThreadPoolExecutor(max_workers=2)},
        job_defaults={
            "coalesce": True,
            "max_instances": 1,
            "misfire_grace_time": 600,
        },
        timezone=market_tz(),
    )
    logger.info("Scheduler initialized")
    return _scheduler


def register_settlement_job(settings: Optional[Settings] = None) -> None:
    """Schedule the daily settlement run at the configured market time."""
    settings = settings or get_settings()
    scheduler = get_scheduler()
    scheduler.add_job(
        run_settlement_job,
        trigger=CronTrigger(
            hour=settings.settlement_cron_hour,
            minute=settings.settlement_cron_minute,
            timezone=market_tz(),
        ),
        id=SETTLEMENT_JOB_ID,
        name="Settle pending fund orders",
        replace_existing=True,
    )
    logger.info(
        "Settlement job scheduled daily at %02d:%02d %s",
        settings.settlement_cron_hour,
        settings.settlement_cron_minute,
        settings.market_timezone,
    )


def start_scheduler() -> None:
    scheduler = get_scheduler()
    if not scheduler.running:
        scheduler.start()
        logger.info("Scheduler started")
    else:
        logger.warning("Scheduler already running")


def shutdown_scheduler(wait: bool = True) -> None:
    """Stop the scheduler and forget it."""
    global _scheduler
    if _scheduler is not None:
        if _scheduler.running:
            _scheduler.shutdown(wait=wait)
            logger.info("Scheduler shut down")
        _scheduler = None
