"""Storage gateway protocol and key helpers."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class StorageGateway(Protocol):
    """
    Interface to the forgotten-files object namespace.

    Keys are ``/``-separated strings relative to the namespace root; the
    first segment is the docId of the forgotten artifact. Implementations
    raise StorageUnavailableError on backend failures.
    """

    def put(self, key: str, data: bytes) -> None:
        """Store data under the given key, replacing any existing object."""
        ...

    def get(self, key: str) -> bytes:
        """Return the object's bytes. Raises ObjectNotFoundError if missing."""
        ...

    def list(self, prefix: str = "") -> list[str]:
        """Return all object keys starting with prefix, sorted."""
        ...

    def delete(self, key: str) -> None:
        """Remove an object. Deleting a missing object is a no-op."""
        ...


def split_doc_id(key: str) -> str:
    """Return the docId (leading path segment) of an object key."""
    return key.split("/", 1)[0]
