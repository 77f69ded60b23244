"""
Exception classes for API error handling.

Command failures are reported in-band by the dispatcher; these exceptions
cover transport-level outcomes only.
"""


class APIException(Exception):
    """
    Base exception for API errors.

    All API exceptions should inherit from this class to ensure
    consistent error response formatting.
    """

    status_code: int = 500
    error_type: str = "api_error"
    message: str = "An error occurred"
    detail: str | None = None

    def __init__(
        self,
        message: str | None = None,
        detail: str | None = None,
        status_code: int | None = None,
    ) -> None:
        self.message = message or self.message
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class NotFoundError(APIException):
    """Exception raised when a requested forgotten file does not exist."""

    status_code = 404
    error_type = "not_found"
    message = "Resource not found"


class ForbiddenError(APIException):
    """Exception raised when a download signature is missing, wrong or expired."""

    status_code = 403
    error_type = "forbidden"
    message = "Invalid or expired download link"


class ServiceUnavailableError(APIException):
    """Exception raised when the storage backend is unavailable."""

    status_code = 503
    error_type = "service_unavailable"
    message = "Service temporarily unavailable"
