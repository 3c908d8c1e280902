"""Read-only access to the accounts file."""

import json
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from core.exceptions import AccountLoadError
from core.log import get_logger
from core.models.domain.account import Account

logger = get_logger(__name__)

_ACCOUNT_LIST = TypeAdapter(list[Account])


def load_accounts(path: str | Path) -> list[Account]:
    """Load accounts from a JSON file.

    The file holds either a list of account objects or an object with an
    ``accounts`` list.

    Raises:
        AccountLoadError: If the file cannot be read or parsed
    """
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise AccountLoadError(str(path), "file not found")
    except (OSError, json.JSONDecodeError) as e:
        raise AccountLoadError(str(path), str(e)) from e

    if isinstance(raw, dict):
        raw = raw.get("accounts", [])

    try:
        accounts = _ACCOUNT_LIST.validate_python(raw)
    except ValidationError as e:
        raise AccountLoadError(str(path), f"invalid account entry: {e}") from e

    logger.debug(f"Loaded {len(accounts)} account(s) from {path}")
    return accounts


def enabled_accounts(accounts: list[Account]) -> list[Account]:
    """Accounts that should be processed by a run."""
    return [account for account in accounts if account.enabled]
