import logging
from contextlib import contextmanager
from datetime import date
from enum import Enum
from threading import Lock
from typing import Callable, Iterator, List

from apscheduler.schedulers.base import BaseScheduler

from padpool.clock import utc_today
from padpool.config import ServerConfig
from padpool.domain.pool_rules import current_identifier
from padpool.domain.retention import select_identifiers_to_delete
from padpool.errors import CreationError, DeleteError
from padpool.models.dc_models import ServerDataMode
from padpool.pool_store import PoolStore

ROTATION_JOB_ID = "pool_rotation"


class SchedulerState(str, Enum):
    idle = "idle"
    rotating = "rotating"


class PoolScheduler:
    """Creates the current pool and evicts old ones, at startup and every UTC midnight."""

    def __init__(
        self,
        config: ServerConfig,
        store: PoolStore,
        today: Callable[[], date] = utc_today,
    ):
        self.config = config
        self.store = store
        self.today = today
        self.state = SchedulerState.idle
        self._rotation_lock = Lock()

    @property
    def is_daily(self) -> bool:
        return self.config.server_data_mode == ServerDataMode.daily

    def current_identifier(self) -> str:
        return current_identifier(self.config.server_data_mode, self.today())

    def ensure_current_pool(self) -> bool:
        """Create the current pool if it is missing

        Returns:
            bool: True if the pool exists afterwards, False if creation failed
        """
        identifier = self.current_identifier()
        if self.store.is_complete(identifier):
            logging.info(f"Pool '{identifier}' found.")
            return True
        try:
            self.store.create(identifier)
        except CreationError as e:
            logging.error(f"Error creating pool: {e}")
            return False
        return True

    def apply_retention(self) -> List[str]:
        """Delete the daily pools that fall outside the retention window

        Returns:
            List[str]: Identifiers that were actually deleted
        """
        if not self.is_daily:
            logging.info(f"Server mode is '{self.config.server_data_mode.value}'. Skipping daily file cleanup.")
            return []

        try:
            identifiers = self.store.list()
        except OSError as e:
            logging.error(f"Error during daily file cleanup: {e}")
            return []
        to_delete = select_identifiers_to_delete(
            identifiers, self.config.server_data_mode, self.config.days_to_keep
        )
        if not to_delete:
            logging.info(f"Daily Mode: Found {len(identifiers)} pools, within retention. No pools deleted.")
            return []

        logging.info(f"Daily Mode: Found {len(identifiers)} pools. Deleting {len(to_delete)} oldest pools.")
        deleted = []
        for identifier in to_delete:
            try:
                self.store.delete(identifier)
            except DeleteError as e:
                logging.error(f"Error deleting pool: {e}")
                continue
            deleted.append(identifier)
        return deleted

    def run_startup(self):
        """Startup pass: make sure the current pool exists, then trim stale daily pools"""
        logging.info(f"Server starting in '{self.config.server_data_mode.value}' mode.")
        with self._rotating() as acquired:
            if not acquired:
                logging.info("Rotation already in progress. Startup pass skipped.")
                return
            self.store.remove_stale_temporaries()
            self.ensure_current_pool()
            if self.is_daily:
                self.apply_retention()

    def run_once(self) -> bool:
        """Rotation pass: retention, then today's pool. Never overlaps itself.

        Returns:
            bool: False if the pass was skipped because another one was running
        """
        with self._rotating() as acquired:
            if not acquired:
                logging.warning("Rotation already in progress. Trigger skipped.")
                return False
            logging.info("Running daily pool management...")
            self.apply_retention()
            self.ensure_current_pool()
            return True

    def start(self, scheduler: BaseScheduler):
        """Register the daily rotation on the scheduler (daily mode only)

        Args:
            scheduler (BaseScheduler): APScheduler instance owned by the caller
        """
        if not self.is_daily:
            logging.info("Daily task scheduling skipped for 'single' mode.")
            return
        scheduler.add_job(
            self.run_once,
            "cron",
            hour=0,
            minute=0,
            timezone="UTC",
            id=ROTATION_JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        logging.info("Scheduled daily task for 'daily' mode.")

    @contextmanager
    def _rotating(self) -> Iterator[bool]:
        acquired = self._rotation_lock.acquire(blocking=False)
        if acquired:
            self.state = SchedulerState.rotating
        try:
            yield acquired
        finally:
            if acquired:
                self.state = SchedulerState.idle
                self._rotation_lock.release()
