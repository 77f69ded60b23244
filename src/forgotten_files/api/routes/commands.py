"""
Command service endpoint.

Accepts ``{"c": <command>, "key"?: <key field>}`` and answers with the
command's JSON envelope. Error codes are in-band; the HTTP status is 200
unless storage is unavailable.
"""

import asyncio
import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from forgotten_files.api.schemas.exceptions import ServiceUnavailableError
from forgotten_files.core.exceptions import StorageUnavailableError

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/CommandService.ashx")
async def command_service(request: Request) -> JSONResponse:
    """
    Execute a forgotten-files command.

    The body is read as raw JSON rather than through a pydantic model so
    that malformed key fields reach the command validator and are answered
    with ``error: 1`` instead of a 422.

    Raises:
        ServiceUnavailableError: If the storage backend fails
    """
    try:
        payload = await request.json()
    except ValueError:
        logger.warning("Command body is not valid JSON")
        payload = None

    dispatcher = request.app.state.dispatcher
    try:
        result = await asyncio.to_thread(dispatcher.dispatch, payload, str(request.base_url))
    except StorageUnavailableError as e:
        logger.error(f"Storage unavailable while handling command: {e}")
        raise ServiceUnavailableError(detail=str(e))

    return JSONResponse(content=result)
