"""
Forgotten Files Exception Hierarchy.

Defines the custom exceptions used across the service. Command-level
failures (FormatError, UnknownCommandError) are turned into in-band
``error: 1`` responses by the dispatcher; storage failures propagate
to the transport layer.
"""

from typing import Any


class ForgottenFilesError(Exception):
    """
    Base exception for all forgotten files errors.

    All custom exceptions inherit from this class, allowing
    generic catch blocks and consistent error handling.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None):
        """
        Initialize a ForgottenFilesError.

        Args:
            message: Human-readable error message
            details: Optional structured data for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation with details."""
        base = self.message
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{base} ({details_str})"
        return base

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class FormatError(ForgottenFilesError):
    """
    Raised when a command's ``key`` field has the wrong shape.

    Covers a missing or null field where one is required, values that are
    not arrays, and empty arrays. The original field is kept so the
    response can echo it back unchanged.
    """

    def __init__(
        self,
        message: str,
        *,
        command: str,
        key: Any = None,
        key_present: bool = True,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize a FormatError.

        Args:
            message: Human-readable error message
            command: Command whose key field was rejected
            key: The raw key field as supplied by the caller
            key_present: False when the caller supplied no key field at all
            details: Optional structured data for debugging
        """
        details = details or {}
        details["command"] = command
        details["key_type"] = type(key).__name__ if key_present else "absent"
        super().__init__(message, details=details)
        self.command = command
        self.key = key
        self.key_present = key_present


class UnknownCommandError(ForgottenFilesError):
    """Raised when the command name is not one of the known commands."""

    def __init__(self, command: Any, *, details: dict[str, Any] | None = None):
        details = details or {}
        details["command"] = command
        super().__init__(f"Unknown command: {command!r}", details=details)
        self.command = command


class StorageError(ForgottenFilesError):
    """
    Base class for storage gateway failures.

    Raised by storage backends; never retried by the command layer.
    """

    def __init__(
        self,
        message: str,
        *,
        key: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if key is not None:
            details["key"] = key
        super().__init__(message, details=details)
        self.key = key


class StorageUnavailableError(StorageError):
    """
    Raised when the storage backend cannot be reached or fails an I/O call.

    Propagated to the transport layer, which reports it as a service
    availability problem rather than an in-band command failure.
    """


class InvalidKeyError(StorageError):
    """Raised when an object key would escape the storage namespace."""


class ObjectNotFoundError(StorageError):
    """Raised when reading an object that does not exist."""


class ConfigurationError(ForgottenFilesError):
    """
    Raised when configuration is invalid or cannot be loaded.

    Includes the offending source (file path or environment variable)
    in the details when known.
    """

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if source:
            details["source"] = source
        super().__init__(message, details=details)
        self.source = source
