"""Abstract base class for storage service clients.

This module defines the StorageClient interface the console uses to talk
to the remote object store. The console only ever sees this surface; the
service's own protocol lives behind an implementation.
"""

from abc import ABC, abstractmethod

from blobctl.models.page import Page
from blobctl.models.store import Blob, RateLimit, RemovalResult, Space, Upload


class StorageClient(ABC):
    """Abstract base class for storage service clients.

    Listing and lookup methods raise RemoteError when the call fails or the
    service answers with an error payload. Removal methods report rejected
    removals as ``RemovalResult(ok=False)`` and raise RemoteError only for
    transport failures; callers treat both as item-level failures.

    Example:
        >>> client = HttpStorageClient(config)
        >>> space = client.list_spaces()[0]
        >>> page = client.list_uploads(space, cursor=None, size=50)
        >>> for upload in page.items:
        ...     print(upload.root)
    """

    @abstractmethod
    def list_spaces(self) -> list[Space]:
        """Return the spaces known to this agent."""

    @abstractmethod
    def space_usage(self, space: Space) -> int:
        """Return the number of bytes stored in a space."""

    @abstractmethod
    def list_uploads(self, space: Space, cursor: str | None, size: int) -> Page[Upload]:
        """Fetch one page of uploads.

        Args:
            space: Space to list.
            cursor: Continuation token from a previous page, or None.
            size: Page size, already clamped to 1-500.
        """

    @abstractmethod
    def list_blobs(self, space: Space, cursor: str | None, size: int) -> Page[Blob]:
        """Fetch one page of blobs.

        Args:
            space: Space to list.
            cursor: Continuation token from a previous page, or None.
            size: Page size, already clamped to 1-500.
        """

    @abstractmethod
    def remove_upload(self, space: Space, root: str, shards: bool = False) -> RemovalResult:
        """Remove an upload by root CID.

        Args:
            space: Space holding the upload.
            root: Root CID of the upload.
            shards: If True, remove the upload's shards as well.
        """

    @abstractmethod
    def remove_blob(self, space: Space, digest: str) -> RemovalResult:
        """Remove a blob by digest."""

    @abstractmethod
    def get_blob(self, space: Space, digest: str) -> Blob | None:
        """Look up a single blob, returning None when it is unknown."""

    @abstractmethod
    def list_rate_limits(self, subject: str, provider: str | None = None) -> list[RateLimit]:
        """Return the rate limits applied to a subject.

        Args:
            subject: Subject DID (e.g. did:mailto:example.com:alice).
            provider: Optional provider DID the limits are scoped to.
        """

    def close(self) -> None:  # noqa: B027
        """Release transport resources. Default is a no-op."""
