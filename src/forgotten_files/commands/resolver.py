"""
Artifact resolution against the storage gateway.

Existence checks for the entries of one batch run concurrently; every
verdict waits for all lookups to finish. Deletion is only ever applied to
a batch that resolved completely.
"""

import logging
from concurrent.futures import ThreadPoolExecutor

from forgotten_files.commands.models import (
    KeyBatch,
    ResolutionStatus,
    ResolvedArtifact,
    is_well_formed_key,
)
from forgotten_files.core.exceptions import StorageUnavailableError
from forgotten_files.storage.base import StorageGateway, split_doc_id

logger = logging.getLogger(__name__)


class ArtifactResolver:
    """
    Resolves batch entries to stored artifacts.

    An entry is found when at least one object exists under ``{key}/``.
    The artifact location is the object named after the configured artifact
    stem when present, otherwise the first object in key order.
    """

    def __init__(
        self,
        storage: StorageGateway,
        artifact_name: str = "output",
        max_workers: int = 8,
    ):
        """
        Initialize the resolver.

        Args:
            storage: Gateway to the forgotten-files namespace
            artifact_name: File name stem conversion outputs are stored under
            max_workers: Upper bound on concurrent existence checks
        """
        self._storage = storage
        self._artifact_name = artifact_name
        self._max_workers = max_workers

    def _lookup(self, key: str) -> ResolvedArtifact:
        """Check a single well-formed key."""
        objects = self._storage.list(f"{key}/")
        if not objects:
            return ResolvedArtifact(key=key, status=ResolutionStatus.NOT_FOUND)

        preferred = f"{key}/{self._artifact_name}."
        location = next((obj for obj in objects if obj.startswith(preferred)), objects[0])
        return ResolvedArtifact(
            key=key,
            status=ResolutionStatus.FOUND,
            location=location,
            objects=objects,
        )

    def resolve(self, batch: KeyBatch) -> list[ResolvedArtifact]:
        """
        Resolve every entry of a batch, preserving input order.

        Non-string entries are never looked up and resolve as malformed.
        Duplicate keys are looked up once and reported at each position.

        Raises:
            StorageUnavailableError: If any lookup fails (after all lookups
                have finished)
        """
        keys = batch.string_keys()
        lookups: dict[str, ResolvedArtifact] = {}

        if keys:
            workers = min(self._max_workers, len(keys))
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="resolver") as executor:
                futures = {key: executor.submit(self._lookup, key) for key in keys}
            # Executor shutdown has joined every lookup at this point
            for key, future in futures.items():
                lookups[key] = future.result()

        return [
            lookups[entry]
            if is_well_formed_key(entry)
            else ResolvedArtifact(key=entry, status=ResolutionStatus.MALFORMED)
            for entry in batch.raw
        ]

    def delete_resolved(self, resolved: list[ResolvedArtifact]) -> list[str]:
        """
        Delete every object of a fully resolved batch.

        All-or-nothing only covers resolution. If the backend fails partway
        through, keys deleted before the failure stay deleted; they are
        logged and the storage error propagates.

        Args:
            resolved: Output of resolve(); every entry must be found

        Returns:
            Distinct keys whose objects were deleted, in first-seen order

        Raises:
            ValueError: If any entry is not found
            StorageUnavailableError: If the backend fails during deletion
        """
        if not all(entry.found for entry in resolved):
            raise ValueError("Refusing to delete a partially resolved batch")

        deleted: dict[str, None] = {}
        for entry in resolved:
            if entry.key in deleted:
                continue
            try:
                for obj in entry.objects:
                    self._storage.delete(obj)
            except StorageUnavailableError:
                logger.error(
                    f"Batch delete interrupted at {entry.key}; "
                    f"already deleted: {list(deleted) or 'none'}"
                )
                raise
            deleted[entry.key] = None
            logger.info(f"Deleted forgotten artifact {entry.key} ({len(entry.objects)} object(s))")

        return list(deleted)

    def list_doc_ids(self) -> list[str]:
        """Return the distinct docIds present in the namespace."""
        return list(dict.fromkeys(split_doc_id(key) for key in self._storage.list("")))
