"""Core types shared across the forgotten files service."""

from forgotten_files.core.exceptions import (
    ConfigurationError,
    ForgottenFilesError,
    FormatError,
    InvalidKeyError,
    ObjectNotFoundError,
    StorageError,
    StorageUnavailableError,
    UnknownCommandError,
)

__all__ = [
    "ForgottenFilesError",
    "FormatError",
    "UnknownCommandError",
    "StorageError",
    "StorageUnavailableError",
    "InvalidKeyError",
    "ObjectNotFoundError",
    "ConfigurationError",
]
