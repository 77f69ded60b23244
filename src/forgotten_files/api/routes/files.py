"""
Serving route for issued forgotten-file URLs.

Paths have the form ``{docId}/{file}/{downloadName}``; everything before the
last segment is the storage key. The signature from the query string must
match the path and must not have expired.
"""

import asyncio
import logging
import mimetypes
from urllib.parse import quote

from fastapi import APIRouter, Query, Request, Response

from forgotten_files.api.schemas.exceptions import (
    ForbiddenError,
    NotFoundError,
    ServiceUnavailableError,
)
from forgotten_files.commands.signing import forgotten_path
from forgotten_files.core.exceptions import (
    InvalidKeyError,
    ObjectNotFoundError,
    StorageUnavailableError,
)

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/{object_path:path}")
async def download_forgotten_file(
    object_path: str,
    request: Request,
    expires: int | None = Query(None, description="Expiry timestamp (Unix epoch)"),
    signature: str | None = Query(None, description="URL signature"),
) -> Response:
    """
    Stream a forgotten artifact to the holder of a signed URL.

    Raises:
        ForbiddenError: If the signature is missing, invalid or expired
        NotFoundError: If the artifact no longer exists
        ServiceUnavailableError: If the storage backend fails
    """
    storage_key, _, download_name = object_path.rpartition("/")
    if not storage_key or not download_name:
        raise NotFoundError(detail=object_path)

    if expires is None or not signature:
        raise ForbiddenError()
    signer = request.app.state.signer
    if not signer.verify(forgotten_path(storage_key, download_name), expires, signature):
        logger.warning(f"Rejected download of {storage_key}: bad or expired signature")
        raise ForbiddenError()

    storage = request.app.state.storage
    try:
        content = await asyncio.to_thread(storage.get, storage_key)
    except (ObjectNotFoundError, InvalidKeyError):
        raise NotFoundError(message="Forgotten file not found", detail=storage_key)
    except StorageUnavailableError as e:
        raise ServiceUnavailableError(detail=str(e))

    media_type = mimetypes.guess_type(download_name)[0] or "application/octet-stream"
    return Response(
        content=content,
        media_type=media_type,
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(download_name)}",
        },
    )
