"""Account listing router."""

from fastapi import APIRouter, Depends

from api.dependencies import get_settings
from api.literals import ACCOUNTS_BASE_PATH
from api.utils.error_handler import handle_api_operation
from core.accounts import load_accounts
from core.config import Settings
from core.models import AccountListResponse, AccountSummary

router = APIRouter(prefix=ACCOUNTS_BASE_PATH, tags=["accounts"])


@router.get("", response_model=AccountListResponse)
async def list_accounts(
    settings: Settings = Depends(get_settings),
) -> AccountListResponse:
    """Configured accounts with redacted emails."""
    accounts = handle_api_operation(
        lambda: load_accounts(settings.accounts_path), "Failed to load accounts"
    )
    return AccountListResponse(
        accounts=[AccountSummary.from_account(account) for account in accounts],
        count=len(accounts),
    )
