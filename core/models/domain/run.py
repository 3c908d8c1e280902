"""Run lifecycle domain models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class RunStatus(BaseModel):
    """Last committed state of the supervised automation run."""

    model_config = ConfigDict(frozen=True)

    running: bool = False
    process_id: int | None = None
    started_at: datetime | None = None
    error_message: str | None = None

    def uptime_ms(self, now: datetime) -> int | None:
        """Milliseconds elapsed since the run started, if it is running."""
        if not self.running or self.started_at is None:
            return None
        return max(0, int((now - self.started_at).total_seconds() * 1000))


class OperationResult(BaseModel):
    """Outcome of a control-plane operation.

    ``error`` is only populated when ``success`` is false.
    """

    model_config = ConfigDict(frozen=True)

    success: bool
    error: str | None = None

    @classmethod
    def ok(cls) -> "OperationResult":
        return cls(success=True)

    @classmethod
    def fail(cls, error: str) -> "OperationResult":
        return cls(success=False, error=error)
