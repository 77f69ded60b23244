"""
Command dispatcher.

Maps a decoded request payload to its handler and assembles the JSON
response envelope. Malformed input never raises: every validation outcome
becomes a normal response with ``error: 1``. Only storage failures escape.
"""

import logging
from typing import Any

from forgotten_files.commands.models import (
    CommandRequest,
    CommandResponse,
    DeleteForgottenRequest,
    DeleteForgottenResponse,
    ErrorCode,
    GetForgottenListResponse,
    GetForgottenRequest,
    GetForgottenResponse,
    ResolutionStatus,
)
from forgotten_files.commands.resolver import ArtifactResolver
from forgotten_files.commands.signing import HmacUrlSigner, SignedUrlIssuer, UrlSigner
from forgotten_files.commands.validation import parse_request
from forgotten_files.config import Settings
from forgotten_files.core.exceptions import FormatError, UnknownCommandError
from forgotten_files.storage.base import StorageGateway
from forgotten_files.storage.filesystem import FileSystemStorage

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8000"


class CommandDispatcher:
    """Routes forgotten-files commands to their handlers."""

    def __init__(
        self,
        resolver: ArtifactResolver,
        issuer: SignedUrlIssuer,
        public_base_url: str | None = None,
    ):
        """
        Initialize the dispatcher.

        Args:
            resolver: Artifact resolver bound to the forgotten-files namespace
            issuer: Signed URL issuer for getForgotten
            public_base_url: Fixed base for issued URLs; when None the
                caller-supplied base URL is used
        """
        self._resolver = resolver
        self._issuer = issuer
        self._public_base_url = public_base_url

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        storage: StorageGateway | None = None,
        signer: UrlSigner | None = None,
    ) -> "CommandDispatcher":
        """Build a dispatcher wired to the configured storage and signer."""
        storage = storage or FileSystemStorage(settings.storage_root)
        signer = signer or HmacUrlSigner(settings.url_secret)
        resolver = ArtifactResolver(
            storage,
            artifact_name=settings.artifact_name,
            max_workers=settings.resolver_workers,
        )
        issuer = SignedUrlIssuer(signer, expiry_seconds=settings.url_expiry_seconds)
        return cls(resolver, issuer, public_base_url=settings.public_base_url)

    def dispatch(self, payload: Any, base_url: str | None = None) -> dict[str, Any]:
        """
        Handle one command.

        Args:
            payload: Decoded JSON request body
            base_url: Scheme and host of the incoming request

        Returns:
            JSON-serializable response

        Raises:
            StorageUnavailableError: If the storage backend fails
        """
        try:
            request = parse_request(payload)
        except UnknownCommandError as e:
            logger.warning(f"Rejected command: {e}")
            return CommandResponse(error=ErrorCode.ERROR).to_payload()
        except FormatError as e:
            logger.warning(f"Rejected key field: {e}")
            if e.key_present:
                return CommandResponse(key=e.key, error=ErrorCode.ERROR).to_payload()
            return CommandResponse(error=ErrorCode.ERROR).to_payload()

        response = self._handle(request, base_url or DEFAULT_BASE_URL)
        logger.info(
            f"Command {request.command.value} finished with error={response.error.value}"
        )
        return response.to_payload()

    def _handle(self, request: CommandRequest, base_url: str) -> CommandResponse:
        if isinstance(request, GetForgottenRequest):
            return self.get_forgotten(request, base_url)
        if isinstance(request, DeleteForgottenRequest):
            return self.delete_forgotten(request)
        return self.get_forgotten_list()

    def get_forgotten(self, request: GetForgottenRequest, base_url: str) -> GetForgottenResponse:
        """Issue URLs for every resolved entry; fail if any entry did not resolve."""
        resolved = self._resolver.resolve(request.batch)
        base = self._public_base_url or base_url

        urls = [self._issuer.issue(entry.location, base) for entry in resolved if entry.found]
        missing = [entry.key for entry in resolved if entry.status == ResolutionStatus.NOT_FOUND]
        if missing:
            logger.info(f"getForgotten: {len(missing)} key(s) not found")

        error = ErrorCode.NO_ERROR if len(urls) == len(resolved) else ErrorCode.ERROR
        return GetForgottenResponse(key=request.batch.raw, error=error, url=urls)

    def delete_forgotten(self, request: DeleteForgottenRequest) -> DeleteForgottenResponse:
        """Delete the whole batch, or nothing if any entry did not resolve."""
        resolved = self._resolver.resolve(request.batch)

        if not all(entry.found for entry in resolved):
            unresolved = sum(1 for entry in resolved if not entry.found)
            logger.info(f"deleteForgotten: batch rejected, {unresolved} entry(ies) unresolved")
            return DeleteForgottenResponse(key=request.batch.raw, error=ErrorCode.ERROR, deleted=[])

        # No lock spans resolve and delete; a concurrent writer can change the
        # namespace between the two phases. A backend failure mid-delete leaves
        # the keys deleted so far removed.
        self._resolver.delete_resolved(resolved)
        return DeleteForgottenResponse(
            key=request.batch.raw,
            error=ErrorCode.NO_ERROR,
            deleted=request.batch.raw,
        )

    def get_forgotten_list(self) -> GetForgottenListResponse:
        """List distinct forgotten artifact identifiers."""
        return GetForgottenListResponse(error=ErrorCode.NO_ERROR, keys=self._resolver.list_doc_ids())
