"""
Command request and response models.

Requests are parsed into one variant per command so that handlers never
see a key field in a shape they do not accept. Responses are pydantic
models dumped with ``exclude_unset`` so an absent ``key`` stays absent
while an explicit ``null`` is echoed.
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any

from pydantic import BaseModel, Field


class CommandName(str, Enum):
    """Commands understood by the command service."""

    GET_FORGOTTEN = "getForgotten"
    DELETE_FORGOTTEN = "deleteForgotten"
    GET_FORGOTTEN_LIST = "getForgottenList"


class ErrorCode(IntEnum):
    """In-band status carried by every response."""

    NO_ERROR = 0
    ERROR = 1


class ResolutionStatus(str, Enum):
    """Outcome of resolving one batch entry."""

    FOUND = "found"
    NOT_FOUND = "not_found"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class KeyBatch:
    """
    A validated ``key`` array.

    ``raw`` is the array exactly as received, echoed in responses. Order and
    duplicates are preserved. Entries may still be non-strings; those are
    resolved as malformed and fail the batch.
    """

    raw: list[Any]

    def __len__(self) -> int:
        return len(self.raw)

    def string_keys(self) -> list[str]:
        """Distinct well-formed string entries, in first-seen order."""
        return list(dict.fromkeys(entry for entry in self.raw if is_well_formed_key(entry)))


def is_well_formed_key(entry: Any) -> bool:
    """Return True if a batch entry can name an artifact."""
    return isinstance(entry, str) and entry != ""


@dataclass(frozen=True)
class GetForgottenRequest:
    """Retrieve signed download URLs for a batch of artifacts."""

    batch: KeyBatch
    command: CommandName = CommandName.GET_FORGOTTEN


@dataclass(frozen=True)
class DeleteForgottenRequest:
    """Delete a batch of artifacts, all or nothing."""

    batch: KeyBatch
    command: CommandName = CommandName.DELETE_FORGOTTEN


@dataclass(frozen=True)
class GetForgottenListRequest:
    """List every forgotten artifact identifier. Takes no key."""

    command: CommandName = CommandName.GET_FORGOTTEN_LIST


CommandRequest = GetForgottenRequest | DeleteForgottenRequest | GetForgottenListRequest


@dataclass(frozen=True)
class ResolvedArtifact:
    """A batch entry paired with its existence status and storage location."""

    key: Any
    status: ResolutionStatus
    location: str | None = None
    objects: list[str] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.status == ResolutionStatus.FOUND


class CommandResponse(BaseModel):
    """Base response: echoed key (when supplied) and the error flag."""

    key: Any = Field(default=None, description="Key field exactly as supplied")
    error: ErrorCode = Field(default=ErrorCode.ERROR, description="0 on success, 1 on failure")

    def to_payload(self) -> dict[str, Any]:
        """Serialize, omitting fields that were never set."""
        return self.model_dump(mode="json", exclude_unset=True)


class GetForgottenResponse(CommandResponse):
    """Signed URLs for the entries that resolved, in request order."""

    url: list[str] = Field(default_factory=list)


class DeleteForgottenResponse(CommandResponse):
    """Deleted keys: the whole batch on success, empty on failure."""

    deleted: list[Any] = Field(default_factory=list)


class GetForgottenListResponse(CommandResponse):
    """Distinct forgotten artifact identifiers."""

    keys: list[str] = Field(default_factory=list)
