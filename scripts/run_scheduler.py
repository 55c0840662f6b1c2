"""Standalone scheduler process for rate alerts and cache eviction."""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from filelock import FileLock

from employee_directory.config import Settings, get_settings
from employee_directory.container import get_container
from employee_directory.database import run_migrations
from employee_directory.logging_config import LOG_FORMAT, configure_logging
from employee_directory.models.alerts import DispatchSummary


logger = logging.getLogger("scheduler")

DISPATCH_JOB_ID = "rate-alert-dispatch"
EVICTION_JOB_ID = "rate-cache-eviction"


def acquire_lock(lock_path: Path) -> FileLock:
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    lock = FileLock(str(lock_path))
    lock.acquire(timeout=0)
    return lock


def run_dispatch_cycle() -> DispatchSummary:
    """Collect, fetch and notify once for every registration group."""
    return get_container().dispatcher.run_dispatch_cycle()


def run_cache_eviction() -> None:
    """Clear every cached rate and country lookup."""
    get_container().cache_invalidator.evict_all()


async def run_dispatch_job() -> None:
    start = datetime.now(timezone.utc)
    logger.info("Rate alert dispatch job started")

    try:
        summary = await asyncio.to_thread(run_dispatch_cycle)
    except Exception:
        logger.exception("Rate alert dispatch failed")
        return

    elapsed = (datetime.now(timezone.utc) - start).total_seconds()
    logger.info(
        "Rate alert dispatch job finished in %.2fs | groups=%d | sent=%d | failed=%d | skipped=%s",
        elapsed,
        summary.groups,
        summary.sent,
        summary.failed,
        summary.skipped,
    )
    for failure in summary.failures:
        logger.debug("Dispatch failure -> %s", failure)


async def run_cache_eviction_job() -> None:
    try:
        await asyncio.to_thread(run_cache_eviction)
    except Exception:
        logger.exception("Cache eviction failed")


def build_scheduler(settings: Settings) -> AsyncIOScheduler:
    """Register the dispatch cron job and the eviction interval job."""

    scheduler = AsyncIOScheduler()
    # One dispatch at a time; a missed trigger is folded into the next run.
    scheduler.add_job(
        run_dispatch_job,
        CronTrigger.from_crontab(settings.dispatch_cron),
        id=DISPATCH_JOB_ID,
        max_instances=1,
        coalesce=True,
    )
    scheduler.add_job(
        run_cache_eviction_job,
        "interval",
        seconds=settings.cache_evict_seconds,
        id=EVICTION_JOB_ID,
        max_instances=1,
        coalesce=True,
    )
    return scheduler


async def main(run_now: bool) -> None:
    configure_logging()
    settings = get_settings()
    run_migrations()

    scheduler_log = settings.log_dir / "scheduler.log"
    if not any(isinstance(h, logging.FileHandler) and getattr(h, "baseFilename", "") == str(scheduler_log) for h in logger.handlers):
        handler = logging.FileHandler(scheduler_log, encoding="utf-8")
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    lock_path = settings.scheduler_lock_file
    lock = acquire_lock(lock_path)
    logger.info("Acquired scheduler lock at %s", lock_path)
    try:
        if run_now:
            await run_dispatch_job()
            return

        scheduler = build_scheduler(settings)
        scheduler.start()

        logger.info(
            "Scheduler running (dispatch cron '%s', cache eviction every %ds). Press Ctrl+C to exit.",
            settings.dispatch_cron,
            settings.cache_evict_seconds,
        )
        await asyncio.Event().wait()
    finally:
        lock.release()
        logger.info("Released scheduler lock at %s", lock_path)
        if lock_path.exists():
            lock_path.unlink()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run rate alert scheduler process")
    parser.add_argument("--run-now", action="store_true", help="Dispatch alerts immediately and exit")
    args = parser.parse_args()

    try:
        asyncio.run(main(run_now=args.run_now))
    except TimeoutError:
        logger.warning("Scheduler already running; exiting.")
