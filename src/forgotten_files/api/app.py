"""
FastAPI Application Setup.

Main application factory for the forgotten files command service.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from forgotten_files.api.middleware.logging import RequestLoggingMiddleware
from forgotten_files.api.routes import commands, files, health
from forgotten_files.api.schemas.exceptions import APIException
from forgotten_files.api.schemas.responses import ServiceInfo
from forgotten_files.commands.dispatcher import CommandDispatcher
from forgotten_files.commands.signing import HmacUrlSigner, UrlSigner
from forgotten_files.config import Settings, load_settings
from forgotten_files.storage.base import StorageGateway
from forgotten_files.storage.filesystem import FileSystemStorage
from forgotten_files.version import __version__

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Log startup and shutdown of the service."""
    settings: Settings = app.state.settings
    logger.info("Forgotten files service starting up...")
    logger.info(f"Version: {__version__}")
    logger.info(f"Storage root: {settings.storage_root}")

    yield

    logger.info("Forgotten files service shutting down...")


def create_app(
    settings: Settings | None = None,
    storage: StorageGateway | None = None,
    signer: UrlSigner | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Service settings (default: load_settings())
        storage: Storage gateway (default: filesystem at settings.storage_root)
        signer: URL signer (default: HMAC keyed by settings.url_secret)

    Returns:
        Configured FastAPI application instance
    """
    settings = settings or load_settings()
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)

    storage = storage or FileSystemStorage(settings.storage_root)
    signer = signer or HmacUrlSigner(settings.url_secret)

    app = FastAPI(
        title="Forgotten Files Command Service",
        description="Retrieve, delete and list forgotten conversion outputs",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.storage = storage
    app.state.signer = signer
    app.state.dispatcher = CommandDispatcher.from_settings(settings, storage=storage, signer=signer)

    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(
        health.router,
        prefix="/health",
        tags=["Health"],
    )
    app.include_router(
        commands.router,
        prefix="/coauthoring",
        tags=["Commands"],
    )
    app.include_router(
        files.router,
        prefix="/cache/files/forgotten",
        tags=["Files"],
    )

    # Exception handlers
    @app.exception_handler(APIException)
    async def api_exception_handler(request, exc: APIException) -> JSONResponse:
        """Handle API exceptions with proper error responses."""
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": {
                    "type": exc.error_type,
                    "message": exc.message,
                    "detail": exc.detail,
                }
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception(f"Unhandled exception: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "type": "internal_error",
                    "message": "An unexpected error occurred",
                    "detail": str(exc) if logger.isEnabledFor(logging.DEBUG) else None,
                }
            },
        )

    @app.get("/", tags=["Root"], response_model=ServiceInfo)
    async def root() -> ServiceInfo:
        """Root endpoint with service information."""
        return ServiceInfo(
            name="Forgotten Files Command Service",
            version=__version__,
            status="operational",
            command_endpoint="/coauthoring/CommandService.ashx",
            health="/health",
        )

    return app
