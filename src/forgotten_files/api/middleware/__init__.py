"""
API middleware components.
"""

from forgotten_files.api.middleware.logging import RequestLoggingMiddleware

__all__ = ["RequestLoggingMiddleware"]
