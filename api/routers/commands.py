"""Remote command router.

Exposes the same commands a chat front end would offer. The caller
identifies itself with the ``X-User-Id`` header, which is checked against
the configured allow-list.
"""

from fastapi import APIRouter, Depends, Header

from api.dependencies import get_command_service
from api.literals import COMMANDS_BASE_PATH, USER_ID_HEADER
from core.services.command_service import CommandReply, CommandService
from core.types import CommandName

router = APIRouter(prefix=COMMANDS_BASE_PATH, tags=["commands"])


@router.post("/{command}", response_model=CommandReply)
async def dispatch_command(
    command: CommandName,
    user_id: str | None = Header(default=None, alias=USER_ID_HEADER),
    service: CommandService = Depends(get_command_service),
) -> CommandReply:
    """Run a named command on behalf of the calling user."""
    return await service.dispatch(command, user_id)
