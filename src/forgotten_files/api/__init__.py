"""
Forgotten Files HTTP API.

FastAPI application exposing the command endpoint and the serving route
for issued download URLs.
"""

from forgotten_files.api.app import create_app

__all__ = ["create_app"]
