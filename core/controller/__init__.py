"""Execution control plane."""

from .execution_controller import ExecutionController
from .launcher import (
    ProcessHandle,
    ProcessLauncher,
    SubprocessHandle,
    SubprocessLauncher,
)

__all__ = [
    "ExecutionController",
    "ProcessHandle",
    "ProcessLauncher",
    "SubprocessHandle",
    "SubprocessLauncher",
]
