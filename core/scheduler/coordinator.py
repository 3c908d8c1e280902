"""Decides when unattended runs occur."""

import random
from collections.abc import Callable
from datetime import datetime

from core.constants import ALREADY_RUNNING
from core.controller.execution_controller import ExecutionController, utc_now
from core.log import get_logger
from core.models.domain.schedule import ScheduleConfig, ScheduleStatus
from core.periodic_task import PeriodicTask, PeriodicTaskManager
from core.scheduler.rules import compute_next_run

logger = get_logger(__name__)


class ScheduleTick(PeriodicTask):
    """Periodic task that evaluates whether a scheduled run is due."""

    name = "schedule tick"

    def __init__(self, coordinator: "ScheduleCoordinator") -> None:
        self.coordinator = coordinator

    async def execute(self) -> None:
        await self.coordinator.tick()


class ScheduleCoordinator:
    """Triggers the execution controller when a scheduled run is due.

    The coordinator never bypasses the controller: an "already running"
    answer is a normal outcome that only moves the next run forward.
    """

    def __init__(
        self,
        controller: ExecutionController,
        config: ScheduleConfig,
        clock: Callable[[], datetime] = utc_now,
        rng: random.Random | None = None,
    ) -> None:
        self.controller = controller
        self.config = config
        self.clock = clock
        self.rng = rng or random.Random()

        self._active = False
        self._next_run: datetime | None = None
        self._last_run: datetime | None = None
        self._ticker: PeriodicTaskManager | None = None

    @property
    def active(self) -> bool:
        return self._active

    @property
    def next_run(self) -> datetime | None:
        return self._next_run

    @property
    def last_run(self) -> datetime | None:
        return self._last_run

    def activate(self) -> bool:
        """Compute the first run time if scheduling is enabled.

        Returns:
            True if the schedule is now active
        """
        if not self.config.enabled:
            logger.info("Scheduler disabled in configuration")
            self._active = False
            self._next_run = None
            return False

        self._active = True
        self._next_run = compute_next_run(
            self.config, self._last_run, self.clock(), self.rng
        )
        logger.info(f"Scheduler active, next run at {self._next_run.isoformat()}")
        return True

    async def start(self) -> None:
        """Activate the schedule and begin ticking."""
        if not self.activate():
            return

        self._ticker = PeriodicTaskManager(
            ScheduleTick(self),
            interval_seconds=self.config.tick_interval_seconds,
        )
        await self._ticker.start()

    async def stop(self) -> None:
        """Stop ticking. Does not touch a run that is in progress."""
        if self._ticker is not None:
            await self._ticker.stop()
            self._ticker = None
        self._active = False
        logger.info("Scheduler stopped")

    def reconfigure(self, config: ScheduleConfig) -> None:
        """Replace the scheduling rule; the next run may move backward."""
        self.config = config
        if not config.enabled:
            self._active = False
            self._next_run = None
            logger.info("Scheduler disabled by reconfiguration")
            return

        self._active = True
        self._next_run = compute_next_run(
            config, self._last_run, self.clock(), self.rng
        )
        logger.info(f"Scheduler reconfigured, next run at {self._next_run.isoformat()}")

    async def tick(self) -> bool:
        """Start a run if one is due.

        Returns:
            True if a run was started by this tick
        """
        if not self._active or self._next_run is None:
            return False

        now = self.clock()
        if now < self._next_run:
            logger.debug(f"Next scheduled run at {self._next_run.isoformat()}")
            return False

        result = await self.controller.start()
        if result.success:
            self._last_run = now
            logger.info("Scheduled run started")
        elif result.error == ALREADY_RUNNING:
            logger.info("Scheduled run skipped: automation is already running")
        else:
            logger.error(f"Scheduled run failed to start: {result.error}")

        self._next_run = compute_next_run(self.config, now, now, self.rng)
        logger.info(f"Next scheduled run at {self._next_run.isoformat()}")
        return result.success

    def get_status(self) -> ScheduleStatus:
        """Current schedule; ``is_running`` mirrors the controller."""
        return ScheduleStatus(
            active=self._active,
            is_running=self.controller.get_status().running,
            next_run=self._next_run,
            last_run=self._last_run,
        )
