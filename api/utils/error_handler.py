"""Error handling utilities for API endpoints."""

from collections.abc import Callable
from typing import TypeVar

from fastapi import HTTPException, status

from core.exceptions import AccountLoadError

T = TypeVar("T")


def handle_api_operation(
    operation: Callable[[], T],
    error_message: str = "Operation failed",
) -> T:
    """Handle API operations with consistent error handling.

    Account file problems are reported as 503 with the loader's message,
    since the service is up but cannot read its configuration.
    """
    try:
        return operation()
    except AccountLoadError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"{error_message}: {str(e)}",
        )
