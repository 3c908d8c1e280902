"""Application constants and configuration values."""

from typing import Final

# Rewards site
DEFAULT_BASE_URL: Final[str] = "https://rewards.bing.com"
DEFAULT_ALLOWED_DOMAINS: Final[list[str]] = [
    "rewards.bing.com",
    "rewards.microsoft.com",
    "bing.com",
]

# Timeouts (milliseconds)
DEFAULT_NAVIGATION_TIMEOUT_MS: Final[int] = 15_000
DEFAULT_PAGE_READY_TIMEOUT_MS: Final[int] = 10_000
DEFAULT_PROBE_TIMEOUT_MS: Final[int] = 500
URL_REWARD_DWELL_MS: Final[int] = 2_000

# Page health classification
BLANK_PAGE_URLS: Final[frozenset[str]] = frozenset({"", "about:blank"})
BROWSER_ERROR_URL_PREFIXES: Final[tuple[str, ...]] = (
    "chrome-error://",
    "edge://",
    "about:neterror",
)
MIN_PAGE_CONTENT_LENGTH: Final[int] = 100
NETWORK_ERROR_BODY_SELECTOR: Final[str] = "body.neterror"

HTTP_ERROR_SIGNATURES: Final[tuple[str, ...]] = (
    "HTTP ERROR 400",
    "HTTP ERROR 403",
    "HTTP ERROR 404",
    "HTTP ERROR 500",
    "HTTP ERROR 502",
    "HTTP ERROR 503",
    "This page isn't working",
    "This page is not working",
    "This site can't be reached",
    "ERR_CONNECTION_REFUSED",
    "ERR_NAME_NOT_RESOLVED",
    "ERR_INTERNET_DISCONNECTED",
    "ERR_NETWORK_CHANGED",
    "ERR_CONNECTION_RESET",
    "ERR_CONNECTION_TIMED_OUT",
)

# Structural markers of an interactive activity. The first
# ASYNC_PROBE_SELECTOR_COUNT entries are also probed live for elements
# rendered after the initial document.
ACTIVITY_SELECTORS: Final[tuple[str, ...]] = (
    "#rqStartQuiz",
    "#rqAnswerOption0",
    "#btoption0",
    ".wk_OptionClickClass",
    ".rqOption",
    "mee-card",
    '[data-bi-area="quiz"]',
    ".quizPlayground",
    ".btOptionCard",
)
ASYNC_PROBE_SELECTOR_COUNT: Final[int] = 4

# Control plane results
ALREADY_RUNNING: Final[str] = "already running"
NOT_RUNNING: Final[str] = "not running"
START_IN_PROGRESS: Final[str] = "start in progress"
ALREADY_STOPPING: Final[str] = "already stopping"
RESTART_TIMEOUT: Final[str] = "timed out waiting for automation to stop"
DEFAULT_RESTART_TIMEOUT_SECONDS: Final[float] = 120.0

# Scheduler
DEFAULT_TICK_INTERVAL_SECONDS: Final[int] = 60
