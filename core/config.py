"""Configuration management for the rewardpilot system."""

import logging
import os
import sys
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from .constants import (
    DEFAULT_ALLOWED_DOMAINS,
    DEFAULT_BASE_URL,
    DEFAULT_NAVIGATION_TIMEOUT_MS,
    DEFAULT_PAGE_READY_TIMEOUT_MS,
    DEFAULT_PROBE_TIMEOUT_MS,
    DEFAULT_RESTART_TIMEOUT_SECONDS,
    DEFAULT_TICK_INTERVAL_SECONDS,
)
from .models.domain.schedule import ScheduleConfig
from .types import Environment

ENV_PREFIX = "REWARDPILOT_"
TRUTHY = ("true", "1", "yes", "on")


def default_runner_command() -> list[str]:
    """Command line of the supervised automation process."""
    return [sys.executable, "-m", "automation"]


class Settings(BaseModel):
    """Application settings."""

    # Environment
    version: str = Field(default="0.1.0", description="Application version")
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment (development/production/testing)",
    )

    # API Settings
    api_title: str = Field(default="RewardPilot API", description="API title")
    api_version: str = Field(default="1.0.0", description="API version")
    cors_allow_origins: list[str] = Field(
        default=["*"], description="Allowed CORS origins"
    )

    # Auth Settings
    auth_required: bool = Field(
        default=False, description="Whether authentication is required"
    )
    auth_header_name: str = Field(
        default="Authorization", description="Authentication header name"
    )
    api_token: str | None = Field(
        default=None, description="Bearer token expected when auth is required"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    # Browser automation
    base_url: str = Field(default=DEFAULT_BASE_URL, description="Rewards home page")
    allowed_domains: list[str] = Field(
        default_factory=lambda: list(DEFAULT_ALLOWED_DOMAINS),
        description="Domain substrings an activity may end up on",
    )
    activity_urls: list[str] = Field(
        default_factory=list, description="URL-reward activities to visit"
    )
    accounts_path: str = Field(
        default="accounts.json", description="Path of the accounts file"
    )
    clusters: int = Field(default=1, ge=1, description="Concurrent account flows")
    headless: bool = Field(default=True, description="Run the browser headless")
    navigation_timeout_ms: int = Field(default=DEFAULT_NAVIGATION_TIMEOUT_MS, gt=0)
    page_ready_timeout_ms: int = Field(default=DEFAULT_PAGE_READY_TIMEOUT_MS, gt=0)
    probe_timeout_ms: int = Field(default=DEFAULT_PROBE_TIMEOUT_MS, gt=0)

    # Execution control
    runner_command: list[str] = Field(
        default_factory=default_runner_command,
        description="Command launched for each automation run",
    )
    restart_timeout_seconds: float = Field(
        default=DEFAULT_RESTART_TIMEOUT_SECONDS,
        gt=0,
        description="How long restart waits for the current run to exit",
    )

    # Scheduling
    schedule: ScheduleConfig = Field(default_factory=ScheduleConfig)

    # Remote commands
    allowed_user_ids: list[str] = Field(
        default_factory=list, description="Users allowed to issue commands"
    )
    allow_all_users: bool = Field(
        default=False,
        description="Allow anyone to issue commands when no user ids are listed",
    )

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        if self.environment == Environment.PRODUCTION:
            self.auth_required = True

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == Environment.PRODUCTION

    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode."""
        return self.environment == Environment.TESTING


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = _env(name)
    if raw is None:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


def _env_bool(name: str, default: bool) -> bool:
    raw = _env(name)
    if raw is None:
        return default
    return raw.strip().lower() in TRUTHY


def _env_int(name: str) -> int | None:
    raw = _env(name)
    return int(raw) if raw not in (None, "") else None


def load_schedule_config() -> ScheduleConfig:
    """Load the scheduling rule from environment variables."""
    return ScheduleConfig(
        enabled=_env_bool("SCHEDULE_ENABLED", False),
        interval_minutes=_env_int("SCHEDULE_INTERVAL_MINUTES"),
        daily_times=_env_list("SCHEDULE_DAILY_TIMES", []),
        jitter_min_minutes=_env_int("SCHEDULE_JITTER_MIN_MINUTES") or 0,
        jitter_max_minutes=_env_int("SCHEDULE_JITTER_MAX_MINUTES") or 0,
        timezone=_env("SCHEDULE_TIMEZONE") or None,
        tick_interval_seconds=float(
            _env("SCHEDULE_TICK_SECONDS", str(DEFAULT_TICK_INTERVAL_SECONDS))
        ),
    )


def load_settings() -> Settings:
    """Load settings from environment variables.

    Raises:
        pydantic.ValidationError: If the configuration is inconsistent
        ValueError: If a numeric or enum variable cannot be parsed
    """
    load_dotenv()

    runner_command = _env("RUNNER_COMMAND")
    api_token = _env("API_TOKEN")

    return Settings(
        environment=Environment(_env("ENV", "development")),
        api_title=_env("API_TITLE", "RewardPilot API"),
        api_version=_env("API_VERSION", "1.0.0"),
        cors_allow_origins=_env_list("CORS_ORIGINS", ["*"]),
        auth_required=_env_bool("AUTH_REQUIRED", False),
        auth_header_name=_env("AUTH_HEADER", "Authorization"),
        api_token=api_token or None,
        log_level=(_env("LOG_LEVEL", "INFO") or "INFO").upper(),
        base_url=_env("BASE_URL", DEFAULT_BASE_URL),
        allowed_domains=_env_list("ALLOWED_DOMAINS", DEFAULT_ALLOWED_DOMAINS),
        activity_urls=_env_list("ACTIVITY_URLS", []),
        accounts_path=_env("ACCOUNTS_PATH", "accounts.json"),
        clusters=_env_int("CLUSTERS") or 1,
        headless=_env_bool("HEADLESS", True),
        navigation_timeout_ms=_env_int("NAVIGATION_TIMEOUT_MS")
        or DEFAULT_NAVIGATION_TIMEOUT_MS,
        page_ready_timeout_ms=_env_int("PAGE_READY_TIMEOUT_MS")
        or DEFAULT_PAGE_READY_TIMEOUT_MS,
        probe_timeout_ms=_env_int("PROBE_TIMEOUT_MS") or DEFAULT_PROBE_TIMEOUT_MS,
        runner_command=(
            runner_command.split() if runner_command else default_runner_command()
        ),
        restart_timeout_seconds=float(
            _env("RESTART_TIMEOUT_SECONDS", str(DEFAULT_RESTART_TIMEOUT_SECONDS))
        ),
        schedule=load_schedule_config(),
        allowed_user_ids=_env_list("ALLOWED_USER_IDS", []),
        allow_all_users=_env_bool("ALLOW_ALL_USERS", False),
    )
