"""Periodic re-extraction of the vault into a live snapshot."""

import logging
from datetime import datetime

from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .config import Config
from .extraction import refresh
from .ports import NoteStore
from .snapshot import Subscriber, TaskSnapshot

logger = logging.getLogger(__name__)


def refresh_job(store: NoteStore, config: Config, snapshot: TaskSnapshot) -> None:
    """Scheduled job: re-extract tasks, logging instead of raising."""
    try:
        if refresh(store, config, snapshot):
            logger.debug(f"Snapshot refreshed with {len(snapshot.current())} tasks")
    except Exception as e:
        logger.error(f"Error refreshing tasks: {e}")


def setup_scheduler(
    store: NoteStore,
    config: Config,
    snapshot: TaskSnapshot,
    interval: int | None = None,
) -> BlockingScheduler:
    """Set up the refresh job. The first run happens immediately."""
    scheduler = BlockingScheduler()
    seconds = interval or config.refresh_interval
    scheduler.add_job(
        refresh_job,
        IntervalTrigger(seconds=seconds),
        args=[store, config, snapshot],
        id="refresh_tasks",
        max_instances=1,
        coalesce=True,
        next_run_time=datetime.now(),
    )
    logger.info(f"Scheduled task refresh every {seconds}s")
    return scheduler


def run_watch(
    store: NoteStore,
    config: Config,
    on_change: Subscriber,
    interval: int | None = None,
) -> None:
    """Watch the vault until interrupted, calling on_change for each snapshot."""
    snapshot = TaskSnapshot()
    snapshot.subscribe(on_change)
    scheduler = setup_scheduler(store, config, snapshot, interval)
    logger.info(f"Watching {config.vault_path}")
    scheduler.start()
