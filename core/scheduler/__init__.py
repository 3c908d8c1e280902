"""Unattended run scheduling."""

from .coordinator import ScheduleCoordinator, ScheduleTick
from .rules import compute_next_run

__all__ = ["ScheduleCoordinator", "ScheduleTick", "compute_next_run"]
