"""API response models."""

from datetime import datetime

from pydantic import BaseModel

from core.models.domain.account import Account
from core.models.domain.run import RunStatus
from core.models.domain.schedule import ScheduleStatus


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str
    timestamp: str


class RunStatusResponse(BaseModel):
    """Run status as rendered to remote surfaces."""

    running: bool
    state: str
    process_id: int | None = None
    started_at: datetime | None = None
    uptime_ms: int | None = None
    error_message: str | None = None

    @classmethod
    def from_status(
        cls, status: RunStatus, state: str, now: datetime
    ) -> "RunStatusResponse":
        return cls(
            running=status.running,
            state=state,
            process_id=status.process_id,
            started_at=status.started_at,
            uptime_ms=status.uptime_ms(now),
            error_message=status.error_message,
        )


class ScheduleStatusResponse(BaseModel):
    """Schedule status as rendered to remote surfaces."""

    active: bool
    is_running: bool
    next_run: str | None = None
    last_run: str | None = None

    @classmethod
    def from_status(cls, status: ScheduleStatus) -> "ScheduleStatusResponse":
        return cls(
            active=status.active,
            is_running=status.is_running,
            next_run=status.next_run.isoformat() if status.next_run else None,
            last_run=status.last_run.isoformat() if status.last_run else None,
        )


class AccountSummary(BaseModel):
    """Redacted projection of an account."""

    email: str
    enabled: bool

    @classmethod
    def from_account(cls, account: Account) -> "AccountSummary":
        return cls(email=account.redacted_email, enabled=account.enabled)


class AccountListResponse(BaseModel):
    """Response model for the account listing."""

    accounts: list[AccountSummary]
    count: int


class AuthError(BaseModel):
    """Authentication error response."""

    detail: str
    error: str
    environment: str
