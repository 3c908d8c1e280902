"""Bearer-token authentication middleware for the control API."""

import hmac
from typing import Any, Callable

from fastapi import Request, status
from fastapi.responses import JSONResponse

from api.literals import SKIP_AUTH_PATHS
from core.config import Settings
from core.log import get_logger
from core.models import AuthError

logger = get_logger(__name__)


class AuthMiddleware:
    """Rejects requests without the configured bearer token."""

    def __init__(self, app: Callable[..., Any], settings: Settings) -> None:
        self.app = app
        self.settings = settings

        if settings.auth_required and not settings.api_token:
            logger.warning("Authentication required but no API token configured")

    async def __call__(
        self,
        scope: dict[str, Any],
        receive: Callable[..., Any],
        send: Callable[..., Any],
    ) -> None:
        if scope["type"] != "http" or not self.settings.auth_required:
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive)
        if request.url.path in SKIP_AUTH_PATHS or self._is_authorized(request):
            await self.app(scope, receive, send)
            return

        logger.warning(f"Rejected unauthenticated request to {request.url.path}")
        response = JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content=AuthError(
                detail="Authentication required",
                error="invalid_or_missing_token",
                environment=self.settings.environment.value,
            ).model_dump(),
        )
        await response(scope, receive, send)

    def _is_authorized(self, request: Request) -> bool:
        """Check the auth header against the configured token."""
        expected = self.settings.api_token
        if not expected:
            return False

        header = request.headers.get(self.settings.auth_header_name, "").strip()
        scheme, _, token = header.partition(" ")
        if scheme.lower() != "bearer" or not token:
            return False
        return hmac.compare_digest(token.strip(), expected)
