"""Scheduler configuration using SQLAlchemy job store."""

import uuid
from typing import Optional

from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_EXECUTED
from apscheduler.executors.pool import ThreadPoolExecutor
from apscheduler.jobstores.sqlalchemy import SQLAlchemyJobStore
from apscheduler.schedulers.background import BackgroundScheduler

from .config.logging import get_logger
from .config.settings import Settings, get_settings
from .ormdb.database import get_database_url

logger = get_logger(__name__)

ALERT_MONITORING_JOB_ID = "alert_monitoring"
# Referenced by path so the SQLAlchemy job store can serialize it
ALERT_MONITORING_FUNC = "pricewatch.alerts.job:run_alert_monitoring_sync"


def create_scheduler(settings: Optional[Settings] = None) -> BackgroundScheduler:
    """
    Create and configure a BackgroundScheduler with SQLAlchemy job store.

    Returns:
        Configured BackgroundScheduler instance
    """
    settings = settings or get_settings()

    # Job store shares the application database
    jobstores = {
        "default": SQLAlchemyJobStore(
            url=get_database_url(), tablename="apscheduler_jobs"
        )
    }

    executors = {
        "default": ThreadPoolExecutor(max_workers=settings.scheduler_max_workers)
    }

    job_defaults = {
        "coalesce": True,  # Collapse a backlog of missed runs into one
        "max_instances": 1,  # Monitoring runs never overlap
        "misfire_grace_time": 300,
    }

    scheduler = BackgroundScheduler(
        jobstores=jobstores,
        executors=executors,
        job_defaults=job_defaults,
        timezone="UTC",
    )

    scheduler.add_listener(job_executed_listener, EVENT_JOB_EXECUTED)
    scheduler.add_listener(job_error_listener, EVENT_JOB_ERROR)

    return scheduler


def job_executed_listener(event):
    """Log successful job executions."""
    logger.info(
        "Scheduled job executed",
        job_id=event.job_id,
        scheduled_run_time=str(event.scheduled_run_time),
    )


def job_error_listener(event):
    """Log job execution errors."""
    logger.error(
        "Scheduled job crashed",
        job_id=event.job_id,
        error=str(event.exception),
        traceback=event.traceback,
    )


def get_global_scheduler() -> BackgroundScheduler:
    """
    Get or create the global scheduler instance.

    Returns:
        Global BackgroundScheduler instance
    """
    if not hasattr(get_global_scheduler, "_scheduler"):
        get_global_scheduler._scheduler = create_scheduler()

    return get_global_scheduler._scheduler


def start_scheduler():
    """Start the global scheduler."""
    scheduler = get_global_scheduler()
    if not scheduler.running:
        scheduler.start()
        logger.info("Scheduler started with SQLAlchemy job store")


def shutdown_scheduler():
    """Shutdown the global scheduler."""
    scheduler = get_global_scheduler()
    if scheduler.running:
        scheduler.shutdown(wait=True)
        logger.info("Scheduler shutdown complete")


def add_alert_monitoring_job(settings: Optional[Settings] = None):
    """
    Add the price alert monitoring job to the scheduler.

    Runs daily at ``alert_check_hour:alert_check_minute`` UTC, or every
    ``alert_check_interval_minutes`` when that is set.
    """
    settings = settings or get_settings()
    scheduler = get_global_scheduler()

    if settings.alert_check_interval_minutes:
        trigger_args = {
            "trigger": "interval",
            "minutes": settings.alert_check_interval_minutes,
        }
    else:
        trigger_args = {
            "trigger": "cron",
            "hour": settings.alert_check_hour,
            "minute": settings.alert_check_minute,
        }

    scheduler.add_job(
        func=ALERT_MONITORING_FUNC,
        id=ALERT_MONITORING_JOB_ID,
        name="Price Alert Monitoring",
        replace_existing=True,
        **trigger_args,
    )

    logger.info("Added alert monitoring job", **trigger_args)


def trigger_alert_monitoring_now() -> str:
    """
    Schedule an immediate one-off monitoring run.

    Returns:
        Job ID of the scheduled run
    """
    scheduler = get_global_scheduler()
    job_id = f"{ALERT_MONITORING_JOB_ID}_manual_{uuid.uuid4().hex[:8]}"

    scheduler.add_job(
        func=ALERT_MONITORING_FUNC,
        id=job_id,
        name="Price Alert Monitoring (manual)",
        replace_existing=False,
    )

    logger.info("Triggered manual alert monitoring run", job_id=job_id)
    return job_id


def list_scheduled_jobs():
    """List all currently scheduled jobs."""
    scheduler = get_global_scheduler()
    jobs = scheduler.get_jobs()

    if not jobs:
        print("No scheduled jobs")
        return

    print("Scheduled jobs:")
    for job in jobs:
        print(f"  - {job.id}: {job.name} (next run: {job.next_run_time})")
