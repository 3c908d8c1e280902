"""Logging configuration for the rewardpilot system."""

import logging
import logging.handlers
import sys
from pathlib import Path

import colorlog

BASE_LOG_FORMAT = (
    "%(asctime)s %(levelname)8s [%(processName)s] %(message)s "
    "(%(name)s@%(filename)s:%(lineno)d)"
)

LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}


def setup_logging(
    level: int | str = logging.INFO,
    format_string: str | None = None,
    use_colors: bool = True,
    enable_file_logging: bool = False,
    log_dir: Path | None = None,
    log_name: str = "rewardpilot",
    is_test_env: bool = False,
) -> None:
    """Configure logging for the rewardpilot system.

    The control plane and the supervised automation process both call this;
    they differ only in ``log_name`` so each gets its own rotating file.

    Args:
        level: Logging level, either numeric or a name such as ``"DEBUG"``
        format_string: Custom format string for console messages
        use_colors: Whether to use colored output for console
        enable_file_logging: Whether to enable file logging
        log_dir: Directory for log files (defaults to ./logs or ./logs/test)
        log_name: Base name of the log file
        is_test_env: Whether this is a test environment
    """
    if log_dir is None:
        log_dir = Path("logs")
        if is_test_env:
            log_dir = log_dir / "test"

    if enable_file_logging:
        log_dir.mkdir(parents=True, exist_ok=True)

    console_format = format_string or _get_console_format(use_colors)

    handlers = [_create_console_handler(console_format, use_colors)]

    if enable_file_logging:
        handlers.append(
            _create_file_handler(log_dir, log_name, BASE_LOG_FORMAT, is_test_env)
        )

    logging.basicConfig(
        level=_resolve_level(level),
        handlers=handlers,
        force=True,
    )


def _resolve_level(level: int | str) -> int:
    """Translate a level name into its numeric value."""
    if isinstance(level, int):
        return level

    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    return resolved


def _get_console_format(use_colors: bool) -> str:
    """Get console format string based on color preference."""
    if use_colors:
        return (
            "%(asctime)s %(log_color)s%(levelname)8s%(reset)s "
            "[%(processName)s] %(message)s "
            "\033[90m(%(name)s@%(filename)s:%(lineno)d)\033[0m"
        )
    return BASE_LOG_FORMAT


def _create_console_handler(format_string: str, use_colors: bool) -> logging.Handler:
    """Create console handler with appropriate formatter."""
    console_handler = logging.StreamHandler(sys.stdout)

    if use_colors:
        console_formatter: logging.Formatter = colorlog.ColoredFormatter(
            format_string,
            datefmt="%m-%d %H:%M:%S",
            log_colors=LOG_COLORS,
            style="%",
        )
    else:
        console_formatter = logging.Formatter(format_string, datefmt="%m-%d %H:%M:%S")

    console_handler.setFormatter(console_formatter)
    return console_handler


def _create_file_handler(
    log_dir: Path, log_name: str, format_string: str, is_test_env: bool
) -> logging.Handler:
    """Create file handler; tests overwrite, everything else rotates."""
    file_formatter = logging.Formatter(format_string, datefmt="%m-%d %H:%M:%S")

    if is_test_env:
        file_handler: logging.Handler = logging.FileHandler(
            log_dir / "test.log", mode="w"
        )
    else:
        file_handler = logging.handlers.RotatingFileHandler(
            log_dir / f"{log_name}.log",
            maxBytes=5 * 1024 * 1024,
            backupCount=4,
            encoding="utf-8",
        )

    file_handler.setFormatter(file_formatter)
    return file_handler


def get_logger(name: str) -> logging.Logger:
    """Get a configured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)


def setup_production_logging(
    level: int | str = logging.INFO, log_name: str = "rewardpilot"
) -> None:
    """Setup logging for production environment with file rotation."""
    setup_logging(level=level, enable_file_logging=True, log_name=log_name)


def setup_test_logging(level: int | str = logging.DEBUG) -> None:
    """Setup logging for test environment with file overwrite."""
    setup_logging(level=level, enable_file_logging=True, is_test_env=True)
