"""APScheduler configuration for drive housekeeping."""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import SessionLocal
from app.services.drive import DriveService

logger = logging.getLogger(__name__)

# Global scheduler instance
scheduler: AsyncIOScheduler | None = None


def get_db_session() -> Session:
    """Get a database session for scheduler jobs."""
    return SessionLocal()


def expire_past_drives_job():
    """
    Job to flag drives whose date has passed as expired.
    Runs shortly after midnight every day.
    """
    logger.info("Starting drive expiry job")

    db = get_db_session()
    try:
        count = DriveService(db).expire_past_drives()
        db.commit()
        logger.info(f"Marked {count} past drives as expired")
    except Exception as e:
        logger.exception(f"Error expiring past drives: {e}")
        db.rollback()
    finally:
        db.close()


def init_scheduler() -> AsyncIOScheduler:
    """Initialize and configure the scheduler."""
    global scheduler

    scheduler = AsyncIOScheduler(
        timezone=settings.SCHEDULER_TIMEZONE,
        job_defaults={
            "coalesce": True,  # Combine missed runs
            "max_instances": 1,  # Only one instance of each job at a time
            "misfire_grace_time": 3600,  # Allow 1 hour grace period for missed jobs
        }
    )

    scheduler.add_job(
        expire_past_drives_job,
        trigger=CronTrigger(hour=0, minute=5),
        id="expire_past_drives",
        name="Expire past vaccination drives",
        replace_existing=True,
    )

    logger.info(f"Scheduler initialized with drive expiry job ({settings.SCHEDULER_TIMEZONE})")
    return scheduler


def start_scheduler():
    """Start the scheduler."""
    global scheduler
    if scheduler is None:
        scheduler = init_scheduler()

    if not scheduler.running:
        scheduler.start()
        logger.info("Scheduler started")


def stop_scheduler():
    """Stop the scheduler gracefully."""
    global scheduler
    if scheduler and scheduler.running:
        scheduler.shutdown(wait=True)
        logger.info("Scheduler stopped")
