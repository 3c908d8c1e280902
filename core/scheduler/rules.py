"""Next-run computation for the scheduler."""

import random
from datetime import datetime, timedelta

from core.models.domain.schedule import ScheduleConfig


def jitter(config: ScheduleConfig, rng: random.Random) -> timedelta:
    """Random offset within the configured jitter bounds."""
    if config.jitter_max_minutes <= 0:
        return timedelta(0)
    minutes = rng.uniform(config.jitter_min_minutes, config.jitter_max_minutes)
    return timedelta(minutes=minutes)


def next_daily_occurrence(config: ScheduleConfig, after: datetime) -> datetime:
    """Earliest configured time of day strictly later than ``after``."""
    # No configured zone means the host's local time
    local = after.astimezone(config.zone)
    for day_offset in (0, 1):
        day = (local + timedelta(days=day_offset)).date()
        for time_of_day in config.times_of_day:
            candidate = datetime.combine(day, time_of_day, tzinfo=local.tzinfo)
            if candidate > local:
                return candidate
    raise ValueError("Schedule has no daily times configured")


def compute_next_run(
    config: ScheduleConfig,
    last_run: datetime | None,
    now: datetime,
    rng: random.Random | None = None,
) -> datetime:
    """When the next unattended run is due.

    Interval rules count from the later of ``last_run`` and ``now``; daily
    rules pick the next configured time of day after ``now``. Jitter is
    added on top. The result is always later than ``now``.

    Raises:
        ValueError: If the config carries no scheduling rule
    """
    rng = rng or random.Random()
    anchor = max(last_run, now) if last_run else now

    if config.interval_minutes is not None:
        base = anchor + timedelta(minutes=config.interval_minutes)
    elif config.daily_times:
        base = next_daily_occurrence(config, anchor)
    else:
        raise ValueError("Schedule has neither interval_minutes nor daily_times")

    next_run = base + jitter(config, rng)
    if next_run <= now:
        next_run = now + timedelta(minutes=1)
    return next_run
