"""
Health check endpoints.
"""

import asyncio
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Request

from forgotten_files.api.schemas.responses import HealthResponse
from forgotten_files.core.exceptions import StorageError
from forgotten_files.version import __version__

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=HealthResponse)
@router.get("/", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """
    Report service health.

    The storage component is healthy when the forgotten-files namespace
    can be listed.
    """
    components: dict[str, str] = {}
    status = "healthy"

    try:
        keys = await asyncio.to_thread(request.app.state.storage.list, "")
        components["storage"] = f"healthy ({len(keys)} objects)"
    except StorageError as e:
        components["storage"] = f"unhealthy: {e}"
        status = "unhealthy"
        logger.warning(f"Storage health check failed: {e}")

    return HealthResponse(
        status=status,
        version=__version__,
        timestamp=datetime.now(timezone.utc).isoformat(),
        components=components,
    )


@router.get("/live")
async def liveness() -> dict[str, str]:
    """Liveness check; always succeeds while the process is running."""
    return {
        "alive": "true",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
