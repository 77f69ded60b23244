"""
Filesystem storage backend.

Stores forgotten artifacts as plain files below a root directory:
- {root}/{docId}/{artifactName}.{ext}

Thread-safe for the put/delete/list mix issued by the command service.
"""

import logging
import threading
from pathlib import Path, PurePosixPath

from forgotten_files.core.exceptions import (
    InvalidKeyError,
    ObjectNotFoundError,
    StorageUnavailableError,
)

logger = logging.getLogger(__name__)


class FileSystemStorage:
    """
    Filesystem-backed storage gateway.

    Object keys map one-to-one onto relative file paths under the root.
    Directories left empty by a delete are pruned so that a removed docId
    disappears from listings.
    """

    def __init__(self, root: Path | None = None):
        """
        Initialize filesystem storage.

        Args:
            root: Namespace root directory (default: var/forgotten/)
        """
        self._root = root or Path("var/forgotten")
        self._lock = threading.RLock()

        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageUnavailableError(f"Cannot create storage root: {e}")

    @property
    def root(self) -> Path:
        """Namespace root directory."""
        return self._root

    @staticmethod
    def _is_safe_key(key: str) -> bool:
        """Return True if key is a plain relative path below the root."""
        if not key or "\\" in key or "\x00" in key:
            return False
        return not any(part in ("", ".", "..") for part in key.split("/"))

    def _object_path(self, key: str) -> Path:
        """Map an object key to a file path, rejecting keys that escape the root."""
        if not self._is_safe_key(key):
            raise InvalidKeyError("Object key must be a plain relative path", key=key)

        return self._root.joinpath(*PurePosixPath(key).parts)

    def put(self, key: str, data: bytes) -> None:
        """
        Store an object.

        Args:
            key: Object key ({docId}/{file})
            data: Object content

        Raises:
            InvalidKeyError: If the key is not a safe relative path
            StorageUnavailableError: On I/O failure
        """
        path = self._object_path(key)
        with self._lock:
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                with open(path, "wb") as f:
                    f.write(data)
            except OSError as e:
                raise StorageUnavailableError(f"I/O error writing object: {e}", key=key)

        logger.debug(f"Stored object {key} ({len(data)} bytes)")

    def get(self, key: str) -> bytes:
        """
        Read an object.

        Raises:
            ObjectNotFoundError: If the object does not exist
            StorageUnavailableError: On I/O failure
        """
        path = self._object_path(key)
        with self._lock:
            if not path.is_file():
                raise ObjectNotFoundError("Object not found", key=key)
            try:
                return path.read_bytes()
            except OSError as e:
                raise StorageUnavailableError(f"I/O error reading object: {e}", key=key)

    def list(self, prefix: str = "") -> list[str]:
        """
        List object keys starting with prefix.

        The prefix is matched as a plain string against the full key, so
        ``"doc/"`` selects every object of ``doc``. Only the directory named
        by the part of the prefix up to its last ``/`` is walked.

        Listing does not take the write lock; files removed during the walk
        are skipped.
        """
        directory, _, _ = prefix.rpartition("/")
        if directory:
            if not self._is_safe_key(directory):
                # Stored keys never contain such segments
                return []
            base = self._root.joinpath(*directory.split("/"))
        else:
            base = self._root

        try:
            if not base.is_dir():
                return []
            keys = [
                path.relative_to(self._root).as_posix()
                for path in base.rglob("*")
                if path.is_file()
            ]
        except OSError as e:
            raise StorageUnavailableError(f"I/O error listing objects: {e}")

        return sorted(key for key in keys if key.startswith(prefix))

    def delete(self, key: str) -> None:
        """
        Delete an object and prune directories it leaves empty.

        Raises:
            StorageUnavailableError: On I/O failure
        """
        path = self._object_path(key)
        with self._lock:
            try:
                path.unlink(missing_ok=True)
                self._prune_empty_parents(path.parent)
            except OSError as e:
                raise StorageUnavailableError(f"I/O error deleting object: {e}", key=key)

        logger.debug(f"Deleted object {key}")

    def _prune_empty_parents(self, directory: Path) -> None:
        """Remove empty directories between directory and the root."""
        while directory != self._root and self._root in directory.parents:
            if not directory.exists() or any(directory.iterdir()):
                break
            directory.rmdir()
            directory = directory.parent
