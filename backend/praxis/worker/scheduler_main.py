"""Dedicated APScheduler worker process."""
from __future__ import annotations

import logging
import signal
import threading

from apscheduler.schedulers.background import BackgroundScheduler

from praxis.core.config import settings
from praxis.core.logging import configure_logging
from praxis.db.session import SessionLocal
from praxis.services.job_runner import backfill_missing_sessions

logger = logging.getLogger(__name__)

BACKFILL_JOB_ID = "backfill_sessions_job"


def main() -> None:
    configure_logging(log_level=settings.log_level)
    logger.info("Scheduler worker starting (enabled=%s)", settings.scheduler_enabled)

    scheduler = build_scheduler()
    if settings.scheduler_enabled:
        scheduler.start()
        if settings.jobs_run_on_startup:
            logger.info("Running backfill once on startup")
            run_backfill_job()
    else:
        logger.warning("Scheduler disabled via config; worker will idle")

    stop_event = threading.Event()

    def shutdown(signum, frame):  # pragma: no cover - signal handler
        logger.info("Scheduler worker shutting down (signal=%s)", signum)
        if scheduler.running:
            scheduler.shutdown(wait=False)
        stop_event.set()

    signal.signal(signal.SIGINT, shutdown)
    signal.signal(signal.SIGTERM, shutdown)

    try:
        stop_event.wait()
    except KeyboardInterrupt:  # pragma: no cover - manual stop
        shutdown(signal.SIGINT, None)


def build_scheduler() -> BackgroundScheduler:
    scheduler = BackgroundScheduler(timezone=settings.scheduler_timezone)
    scheduler.add_job(
        run_backfill_job,
        trigger="cron",
        hour=settings.backfill_job_hour,
        minute=settings.backfill_job_minute,
        id=BACKFILL_JOB_ID,
        replace_existing=True,
    )
    logger.info(
        "Registered backfill job (daily at %02d:%02d %s)",
        settings.backfill_job_hour,
        settings.backfill_job_minute,
        settings.scheduler_timezone,
    )
    return scheduler


def run_backfill_job() -> None:
    session = SessionLocal()
    try:
        result = backfill_missing_sessions(session)
        logger.info(
            "Backfill job complete: users=%s, sessions=%s",
            result.users_processed,
            result.sessions_created,
        )
    except Exception:
        session.rollback()
        logger.exception("Backfill job failed")
    finally:
        session.close()


if __name__ == "__main__":  # pragma: no cover - manual launch
    main()
