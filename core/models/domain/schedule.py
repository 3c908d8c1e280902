"""Scheduling domain models."""

import re
from datetime import datetime, time
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from core.constants import DEFAULT_TICK_INTERVAL_SECONDS

_TIME_OF_DAY = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


class ScheduleConfig(BaseModel):
    """When unattended runs should happen.

    Exactly one rule is used: a fixed ``interval_minutes`` or a list of
    ``daily_times`` (``HH:MM``). A random jitter between
    ``jitter_min_minutes`` and ``jitter_max_minutes`` is added to every
    computed run time.
    """

    model_config = ConfigDict(frozen=True)

    enabled: bool = Field(default=False, description="Whether the scheduler runs")
    interval_minutes: int | None = Field(
        default=None, ge=1, description="Fixed interval between runs"
    )
    daily_times: list[str] = Field(
        default_factory=list, description="Times of day (HH:MM) to run at"
    )
    jitter_min_minutes: int = Field(default=0, ge=0)
    jitter_max_minutes: int = Field(default=0, ge=0)
    timezone: str | None = Field(
        default=None, description="IANA timezone for daily_times (default: local)"
    )
    tick_interval_seconds: float = Field(
        default=DEFAULT_TICK_INTERVAL_SECONDS,
        gt=0,
        description="How often the scheduler checks whether a run is due",
    )

    @field_validator("daily_times")
    @classmethod
    def _check_daily_times(cls, value: list[str]) -> list[str]:
        for entry in value:
            if not _TIME_OF_DAY.match(entry):
                raise ValueError(f"Invalid time of day '{entry}', expected HH:MM")
        return sorted(set(value))

    @field_validator("timezone")
    @classmethod
    def _check_timezone(cls, value: str | None) -> str | None:
        if value is None:
            return value
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone '{value}'") from e
        return value

    @model_validator(mode="after")
    def _check_rule(self) -> "ScheduleConfig":
        if self.jitter_min_minutes > self.jitter_max_minutes:
            raise ValueError("jitter_min_minutes must not exceed jitter_max_minutes")
        if self.interval_minutes is not None and self.daily_times:
            raise ValueError("Use either interval_minutes or daily_times, not both")
        if self.enabled and self.interval_minutes is None and not self.daily_times:
            raise ValueError(
                "An enabled schedule needs interval_minutes or daily_times"
            )
        return self

    @property
    def zone(self) -> ZoneInfo | None:
        return ZoneInfo(self.timezone) if self.timezone else None

    @property
    def times_of_day(self) -> list[time]:
        return [time.fromisoformat(entry) for entry in self.daily_times]


class ScheduleStatus(BaseModel):
    """Snapshot of the scheduler, recomputed on every query."""

    active: bool
    is_running: bool
    next_run: datetime | None = None
    last_run: datetime | None = None
