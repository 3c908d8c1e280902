"""Fixed-interval background loop; drives the scheduler tick."""

import asyncio
from abc import ABC, abstractmethod
from datetime import datetime
from enum import Enum
from typing import Any

from core.log import get_logger
from core.models.domain.task import TaskManagerStatus, TaskStats

logger = get_logger(__name__)


class TaskStatus(Enum):
    """Lifecycle of a periodic task manager."""

    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"
    ERROR = "error"


class PeriodicTask(ABC):
    """A unit of work executed on every iteration of the manager's loop."""

    name: str = "periodic task"

    @abstractmethod
    async def execute(self) -> None:
        """Execute one iteration of the task."""

    async def on_start(self) -> None:
        """Called once before the first iteration."""

    async def on_stop(self) -> None:
        """Called once after the loop has stopped."""

    async def on_error(self, error: Exception) -> None:
        """Called when an iteration raises."""
        logger.error(f"Error in {self.name}: {error}")


class PeriodicTaskManager:
    """Runs a ``PeriodicTask`` at a fixed interval until stopped."""

    def __init__(
        self,
        task: PeriodicTask,
        interval_seconds: float = 60,
        max_consecutive_errors: int | None = None,
    ):
        """Initialize the periodic task manager.

        Args:
            task: The periodic task to execute
            interval_seconds: Interval between task executions in seconds
            max_consecutive_errors: Stop the loop after this many failed
                iterations in a row; None keeps it running
        """
        self.task = task
        self.interval_seconds = interval_seconds
        self.max_consecutive_errors = max_consecutive_errors

        self.status = TaskStatus.IDLE
        self.stats = TaskStats()
        self._background_task: asyncio.Task[None] | None = None
        self._stop_event = asyncio.Event()

    async def __aenter__(self) -> "PeriodicTaskManager":
        await self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        await self.stop()

    @property
    def is_running(self) -> bool:
        return self._background_task is not None and not self._background_task.done()

    async def start(self) -> None:
        """Start the periodic loop."""
        if self.is_running:
            logger.warning(f"{self.task.name} is already running")
            return

        await self.task.on_start()
        self._stop_event.clear()
        self.stats.start_time = datetime.now()
        self.status = TaskStatus.RUNNING
        self._background_task = asyncio.create_task(self._periodic_loop())
        logger.info(f"{self.task.name} started ({self.interval_seconds}s interval)")

    async def stop(self) -> None:
        """Stop the periodic loop and wait for it to finish."""
        self._stop_event.set()

        if self._background_task and not self._background_task.done():
            self._background_task.cancel()
            try:
                await self._background_task
            except asyncio.CancelledError:
                pass
        self._background_task = None

        try:
            await self.task.on_stop()
        except Exception as e:
            logger.error(f"Error during {self.task.name} cleanup: {e}")

        if self.status != TaskStatus.ERROR:
            self.status = TaskStatus.STOPPED
        logger.info(f"{self.task.name} stopped")

    async def execute_once(self) -> None:
        """Run a single iteration outside the loop."""
        await self._run_iteration()

    def get_status(self) -> TaskManagerStatus:
        """Get current status and statistics."""
        return TaskManagerStatus(
            name=self.task.name,
            status=self.status.value,
            periodic_running=self.is_running,
            interval_seconds=self.interval_seconds,
            max_consecutive_errors=self.max_consecutive_errors,
            stats=self.stats,
        )

    async def _run_iteration(self) -> bool:
        try:
            await self.task.execute()
        except Exception as e:
            self.stats.errors += 1
            self.stats.consecutive_errors += 1
            self.stats.last_error = str(e)
            self.stats.last_error_time = datetime.now()
            try:
                await self.task.on_error(e)
            except Exception as handler_error:
                logger.error(f"Error in {self.task.name} error handler: {handler_error}")
            return False

        self.stats.executions += 1
        self.stats.consecutive_errors = 0
        self.stats.last_execution_time = datetime.now()
        return True

    async def _periodic_loop(self) -> None:
        while not self._stop_event.is_set():
            succeeded = await self._run_iteration()

            if (
                not succeeded
                and self.max_consecutive_errors is not None
                and self.stats.consecutive_errors >= self.max_consecutive_errors
            ):
                logger.error(
                    f"Too many consecutive errors ({self.max_consecutive_errors}), "
                    f"stopping {self.task.name}"
                )
                self.status = TaskStatus.ERROR
                return

            try:
                await asyncio.wait_for(
                    self._stop_event.wait(), timeout=self.interval_seconds
                )
            except asyncio.TimeoutError:
                pass
