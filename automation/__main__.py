"""Entry point of the supervised automation process: ``python -m automation``."""

import asyncio
import multiprocessing
import sys

from pydantic import ValidationError

from automation.runner import AutomationRunner
from core.accounts import load_accounts
from core.config import load_settings
from core.exceptions import AccountLoadError
from core.log import get_logger, setup_logging

logger = get_logger("automation")


RUNNER_PROCESS_NAME = "runner"


def main() -> int:
    # Shows up as [runner] in every log line of this process
    multiprocessing.current_process().name = RUNNER_PROCESS_NAME
    setup_logging()
    try:
        settings = load_settings()
    except (ValidationError, ValueError) as e:
        logger.critical(f"Invalid configuration: {e}")
        return 2

    setup_logging(
        level=settings.log_level,
        enable_file_logging=not settings.is_testing,
        log_name=RUNNER_PROCESS_NAME,
    )

    try:
        accounts = load_accounts(settings.accounts_path)
    except AccountLoadError as e:
        logger.error(str(e))
        return 1

    try:
        asyncio.run(AutomationRunner(settings, accounts).run())
    except Exception:
        logger.exception("Automation run crashed")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
