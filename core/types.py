"""Common type definitions for the rewardpilot system."""

from enum import Enum


class Environment(str, Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class ControllerState(str, Enum):
    """Lifecycle states of the execution controller."""

    IDLE = "idle"
    STARTING = "starting"
    RUNNING = "running"
    STOPPING = "stopping"


class OutcomeKind(str, Enum):
    """Tags of a recovery-protected activity outcome."""

    COMPLETED = "completed"
    SKIPPED_INVALID_PAGE = "skipped_invalid_page"
    REDIRECTED_AND_ABORTED = "redirected_and_aborted"
    DOMAIN_MISMATCH = "domain_mismatch"
    FAILED = "failed"


class CommandName(str, Enum):
    """Commands accepted by the remote command surface."""

    RUN = "run"
    STATUS = "status"
    ACCOUNTS = "accounts"
    STOP = "stop"
    RESTART = "restart"
    SCHEDULE = "schedule"
    HELP = "help"
