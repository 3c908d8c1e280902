"""Single authority over the supervised automation run."""

import asyncio
import threading
from collections.abc import Callable, Sequence
from datetime import UTC, datetime

from core.constants import (
    ALREADY_RUNNING,
    ALREADY_STOPPING,
    DEFAULT_RESTART_TIMEOUT_SECONDS,
    NOT_RUNNING,
    RESTART_TIMEOUT,
    START_IN_PROGRESS,
)
from core.controller.launcher import ProcessHandle, ProcessLauncher
from core.log import get_logger
from core.models.domain.run import OperationResult, RunStatus
from core.types import ControllerState

logger = get_logger(__name__)


def utc_now() -> datetime:
    return datetime.now(UTC)


class ExecutionController:
    """Owns the lifecycle of the one automation run.

    State moves ``IDLE -> STARTING -> RUNNING -> STOPPING -> IDLE``. Leaving
    ``IDLE`` is a locked check-and-set, so of two concurrent ``start()``
    calls exactly one proceeds. ``get_status()`` returns the last committed
    ``RunStatus`` snapshot and never blocks on a transition.
    """

    def __init__(
        self,
        launcher: ProcessLauncher,
        command: Sequence[str],
        restart_timeout_seconds: float = DEFAULT_RESTART_TIMEOUT_SECONDS,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize the controller.

        Args:
            launcher: Starts the supervised automation process
            command: Command line of the automation process
            restart_timeout_seconds: Max wait for the old run to exit on restart
            clock: Source of timestamps
        """
        self.launcher = launcher
        self.command = list(command)
        self.restart_timeout_seconds = restart_timeout_seconds
        self.clock = clock

        self._lock = threading.Lock()
        self._state = ControllerState.IDLE
        self._status = RunStatus()
        self._handle: ProcessHandle | None = None
        self._watch_task: asyncio.Task[None] | None = None
        self._idle = asyncio.Event()
        self._idle.set()

    @property
    def state(self) -> ControllerState:
        return self._state

    def get_status(self) -> RunStatus:
        """Last fully committed run status."""
        return self._status

    async def start(self) -> OperationResult:
        """Launch the automation process unless a run is already active."""
        with self._lock:
            if self._state != ControllerState.IDLE:
                logger.info(f"Start rejected: automation is {self._state.value}")
                return OperationResult.fail(ALREADY_RUNNING)
            self._state = ControllerState.STARTING
            self._idle.clear()

        logger.info("Starting automation run")
        try:
            handle = await self.launcher.launch(self.command)
        except Exception as e:
            error = str(e) or type(e).__name__
            logger.error(f"Failed to launch automation process: {error}")
            self._commit_idle(error)
            return OperationResult.fail(error)

        with self._lock:
            self._handle = handle
            self._status = RunStatus(
                running=True,
                process_id=handle.pid,
                started_at=self.clock(),
            )
            self._state = ControllerState.RUNNING

        self._watch_task = asyncio.create_task(self._watch(handle))
        logger.info(f"Automation run started (pid {handle.pid})")
        return OperationResult.ok()

    def stop(self) -> OperationResult:
        """Ask the running automation to finish its current task and exit.

        Returns as soon as the stop signal is delivered; the transition to
        ``IDLE`` happens when the process actually exits.
        """
        with self._lock:
            if self._state == ControllerState.IDLE:
                return OperationResult.fail(NOT_RUNNING)
            if self._state == ControllerState.STARTING:
                return OperationResult.fail(START_IN_PROGRESS)
            if self._state == ControllerState.STOPPING:
                return OperationResult.fail(ALREADY_STOPPING)
            handle = self._handle
            if handle is None:
                return OperationResult.fail(NOT_RUNNING)
            self._state = ControllerState.STOPPING

        try:
            handle.request_stop()
        except Exception as e:
            error = str(e) or type(e).__name__
            logger.error(f"Failed to signal automation process {handle.pid}: {error}")
            with self._lock:
                if self._state == ControllerState.STOPPING:
                    self._state = ControllerState.RUNNING
            return OperationResult.fail(error)

        logger.info(f"Stop requested for automation process {handle.pid}")
        return OperationResult.ok()

    async def restart(self) -> OperationResult:
        """Stop the current run (if any), wait for it to exit, start again."""
        if self._state == ControllerState.RUNNING:
            result = self.stop()
            if not result.success:
                return result
        elif self._state == ControllerState.STARTING:
            return OperationResult.fail(START_IN_PROGRESS)

        if not await self.wait_until_idle(self.restart_timeout_seconds):
            logger.error(
                f"Restart aborted: run did not stop within "
                f"{self.restart_timeout_seconds}s"
            )
            return OperationResult.fail(RESTART_TIMEOUT)

        return await self.start()

    async def wait_until_idle(self, timeout: float | None = None) -> bool:
        """Wait until no run is active.

        Returns:
            False if ``timeout`` elapsed first
        """
        try:
            await asyncio.wait_for(self._idle.wait(), timeout=timeout)
        except asyncio.TimeoutError:
            return False
        return True

    async def _watch(self, handle: ProcessHandle) -> None:
        """Track the process until it exits, then return to ``IDLE``."""
        error: str | None = None
        try:
            returncode = await handle.wait()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            error = f"lost track of automation process {handle.pid}: {e}"
            logger.error(error)
        else:
            if self._state == ControllerState.STOPPING:
                logger.info(
                    f"Automation process {handle.pid} stopped (exit code {returncode})"
                )
            elif returncode != 0:
                error = f"automation process exited with code {returncode}"
                logger.error(f"Automation process {handle.pid}: {error}")
            else:
                logger.info(f"Automation process {handle.pid} finished")

        self._commit_idle(error)

    def _commit_idle(self, error: str | None) -> None:
        with self._lock:
            self._handle = None
            self._status = RunStatus(running=False, error_message=error)
            self._state = ControllerState.IDLE
            self._idle.set()
