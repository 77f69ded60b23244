"""
Forgotten Files Commands Module.

Key format validation, artifact resolution, signed URL issuing and the
dispatcher tying them together.
"""

from .models import (
    CommandName,
    CommandRequest,
    DeleteForgottenRequest,
    ErrorCode,
    GetForgottenListRequest,
    GetForgottenRequest,
    KeyBatch,
    ResolutionStatus,
    ResolvedArtifact,
)
from .validation import parse_request, validate_key_field
from .resolver import ArtifactResolver
from .signing import HmacUrlSigner, SignedUrlIssuer, UrlSigner
from .dispatcher import CommandDispatcher

__all__ = [
    # Models
    "CommandName",
    "CommandRequest",
    "GetForgottenRequest",
    "DeleteForgottenRequest",
    "GetForgottenListRequest",
    "KeyBatch",
    "ErrorCode",
    "ResolutionStatus",
    "ResolvedArtifact",
    # Validation
    "parse_request",
    "validate_key_field",
    # Resolution
    "ArtifactResolver",
    # Signing
    "UrlSigner",
    "HmacUrlSigner",
    "SignedUrlIssuer",
    # Dispatch
    "CommandDispatcher",
]
