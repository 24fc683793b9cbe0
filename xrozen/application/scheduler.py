"""
Background scheduler: periodic snapshot refresh inside the FastAPI process.

Jobs:
  - Snapshot refresh (every REFRESH_INTERVAL_SECONDS, service token only)

The refresh policy lives here, outside the finance engine: the engine is
called with whatever snapshot is current and does not know when or how
often it was fetched.
"""
import logging

from apscheduler.schedulers.background import BackgroundScheduler

from xrozen.application.snapshot import SnapshotLoader, SnapshotStore

logger = logging.getLogger(__name__)

scheduler = BackgroundScheduler(daemon=True)

SNAPSHOT_REFRESH_JOB = "snapshot_refresh"


def _run_snapshot_refresh(store: SnapshotStore, loader: SnapshotLoader):
    try:
        store.refresh(loader)
    except Exception:
        logger.exception("Snapshot refresh job failed")


def start_snapshot_refresh(store: SnapshotStore, loader: SnapshotLoader, interval_seconds: int):
    """Schedule periodic refreshes of store (replaces a previously scheduled job)."""
    scheduler.add_job(
        _run_snapshot_refresh,
        "interval",
        seconds=interval_seconds,
        args=[store, loader],
        id=SNAPSHOT_REFRESH_JOB,
        replace_existing=True,
    )
    if not scheduler.running:
        scheduler.start()
    logger.info("Scheduler started: snapshot_refresh (every %d s)", interval_seconds)


def cancel_snapshot_refresh():
    """Stop refreshing; an in-flight fetch may finish but nothing new is scheduled."""
    if scheduler.get_job(SNAPSHOT_REFRESH_JOB) is not None:
        scheduler.remove_job(SNAPSHOT_REFRESH_JOB)
        logger.info("Snapshot refresh cancelled")


def shutdown_scheduler():
    """Gracefully stop the scheduler."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
