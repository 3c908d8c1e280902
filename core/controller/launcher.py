"""Launching and signalling the supervised automation process."""

import asyncio
import signal
import subprocess
import sys
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from core.exceptions import ProcessLaunchError
from core.log import get_logger

logger = get_logger(__name__)


class ProcessHandle(ABC):
    """A launched process as seen by the execution controller."""

    @property
    @abstractmethod
    def pid(self) -> int:
        """Operating system process id."""

    @abstractmethod
    async def wait(self) -> int:
        """Wait for the process to exit and return its exit code."""

    @abstractmethod
    def request_stop(self) -> None:
        """Ask the process to finish its current work and exit."""


class ProcessLauncher(ABC):
    """Starts supervised processes."""

    @abstractmethod
    async def launch(self, command: Sequence[str]) -> ProcessHandle:
        """Start ``command`` and return a handle once it is running.

        Raises:
            ProcessLaunchError: If the process could not be started
        """


class SubprocessHandle(ProcessHandle):
    """Handle around an ``asyncio.subprocess.Process``."""

    def __init__(self, process: asyncio.subprocess.Process) -> None:
        self._process = process

    @property
    def pid(self) -> int:
        return self._process.pid

    async def wait(self) -> int:
        return await self._process.wait()

    def request_stop(self) -> None:
        if self._process.returncode is not None:
            raise ProcessLookupError(f"process {self.pid} has already exited")

        # The runner treats SIGTERM (CTRL_BREAK on Windows) as "finish the
        # current activity, then exit".
        if sys.platform == "win32":
            self._process.send_signal(signal.CTRL_BREAK_EVENT)
        else:
            self._process.send_signal(signal.SIGTERM)


class SubprocessLauncher(ProcessLauncher):
    """Launches the automation runner as a child process."""

    def __init__(self, cwd: str | None = None) -> None:
        self.cwd = cwd

    async def launch(self, command: Sequence[str]) -> ProcessHandle:
        if not command:
            raise ProcessLaunchError("empty runner command")

        kwargs: dict[str, Any] = {}
        if sys.platform == "win32":
            kwargs["creationflags"] = subprocess.CREATE_NEW_PROCESS_GROUP

        try:
            process = await asyncio.create_subprocess_exec(
                *command, cwd=self.cwd, **kwargs
            )
        except OSError as e:
            raise ProcessLaunchError(f"could not start {command[0]}: {e}") from e

        logger.info(f"Launched automation process {process.pid}: {' '.join(command)}")
        return SubprocessHandle(process)
