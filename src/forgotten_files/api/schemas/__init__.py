"""
Pydantic schemas and exceptions for the HTTP layer.
"""

from forgotten_files.api.schemas.exceptions import (
    APIException,
    ForbiddenError,
    NotFoundError,
    ServiceUnavailableError,
)
from forgotten_files.api.schemas.responses import HealthResponse, ServiceInfo

__all__ = [
    "APIException",
    "ForbiddenError",
    "NotFoundError",
    "ServiceUnavailableError",
    "HealthResponse",
    "ServiceInfo",
]
