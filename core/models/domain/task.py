"""Models describing the background ticker loop."""

from datetime import datetime

from pydantic import BaseModel


class TaskStats(BaseModel):
    """Counters kept across iterations of a periodic loop."""

    executions: int = 0
    errors: int = 0
    consecutive_errors: int = 0
    last_error: str | None = None
    last_execution_time: datetime | None = None
    last_error_time: datetime | None = None
    start_time: datetime | None = None


class TaskManagerStatus(BaseModel):
    """Snapshot of a periodic task manager."""

    name: str
    status: str
    periodic_running: bool
    interval_seconds: float
    max_consecutive_errors: int | None = None
    stats: TaskStats
