"""
Signed download URLs for forgotten artifacts.

Issued URLs have the shape::

    {base}/cache/files/forgotten/{docId}/{file}/{file}?expires=..&signature=..

The file name appears twice: once as the storage path segment, once as the
name the serving layer offers the download under. The signing scheme is
pluggable through the UrlSigner protocol.
"""

import base64
import hashlib
import hmac
import logging
import time
from typing import Callable, Protocol
from urllib.parse import quote, urlencode

logger = logging.getLogger(__name__)

FORGOTTEN_URL_PREFIX = "/cache/files/forgotten"


class UrlSigner(Protocol):
    """Signing capability: produces and checks tokens for a URL path."""

    def sign(self, path: str, expires: int) -> str:
        """Return the signature for path valid until the expires timestamp."""
        ...

    def verify(self, path: str, expires: int, signature: str) -> bool:
        """Return True if signature matches path and has not expired."""
        ...


def _base64url_encode(data: bytes) -> str:
    """Encode bytes to base64url format."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


class HmacUrlSigner:
    """HMAC-SHA256 signer keyed by a shared secret."""

    def __init__(self, secret: str, clock: Callable[[], float] = time.time):
        if not secret:
            raise ValueError("Signing secret cannot be empty")
        self._secret = secret.encode("utf-8")
        self._clock = clock

    def sign(self, path: str, expires: int) -> str:
        message = f"{path}\n{expires}".encode("utf-8")
        digest = hmac.new(self._secret, message, hashlib.sha256).digest()
        return _base64url_encode(digest)

    def verify(self, path: str, expires: int, signature: str) -> bool:
        if int(self._clock()) >= expires:
            return False
        # Use constant-time comparison to prevent timing attacks
        return hmac.compare_digest(self.sign(path, expires), signature)


def forgotten_path(storage_key: str, download_name: str) -> str:
    """Unencoded URL path serving storage_key under download_name."""
    return f"{FORGOTTEN_URL_PREFIX}/{storage_key}/{download_name}"


class SignedUrlIssuer:
    """
    Builds signed retrieval URLs for resolved artifact locations.

    The path portion is a pure function of the location; only the query
    string depends on the clock.
    """

    def __init__(
        self,
        signer: UrlSigner,
        expiry_seconds: int = 300,
        clock: Callable[[], float] = time.time,
    ):
        self._signer = signer
        self._expiry_seconds = expiry_seconds
        self._clock = clock

    def issue(self, location: str, base_url: str) -> str:
        """
        Issue a signed URL for a stored artifact.

        Args:
            location: Storage key of the artifact ({docId}/{file})
            base_url: Scheme and host the URL should point at

        Returns:
            Absolute URL with an expiring signature in the query string
        """
        download_name = location.rsplit("/", 1)[-1]
        expires = int(self._clock()) + self._expiry_seconds
        signature = self._signer.sign(forgotten_path(location, download_name), expires)

        encoded_path = "/".join(quote(segment, safe="") for segment in location.split("/"))
        query = urlencode({"expires": expires, "signature": signature})
        return (
            f"{base_url.rstrip('/')}{FORGOTTEN_URL_PREFIX}/"
            f"{encoded_path}/{quote(download_name, safe='')}?{query}"
        )
