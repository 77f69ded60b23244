"""
API route handlers.

This package contains all route definitions for the forgotten files API.
"""

from forgotten_files.api.routes import commands, files, health

__all__ = [
    "commands",
    "files",
    "health",
]
