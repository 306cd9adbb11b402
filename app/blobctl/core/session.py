"""Per-invocation console session.

A ConsoleSession carries the storage client, the effective configuration
and the space the operator is working on. It replaces any process-wide
"active screen" state: whoever runs the console owns the session and
passes it down.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from blobctl.core.details import BlobInfoCache
from blobctl.core.errors import BlobctlError
from blobctl.remote.sources import BlobPageSource, UploadPageSource

if TYPE_CHECKING:
    from types import TracebackType

    from blobctl.core.config import ConsoleConfig
    from blobctl.models.store import Space
    from blobctl.remote.base import StorageClient

logger = logging.getLogger(__name__)


class NoSpaceSelected(BlobctlError):
    """Raised when an operation needs a space and none is selected."""


class ConsoleSession:
    """Client, config and current space for one console run.

    The current space only changes through :meth:`select_space`. Page
    sources and blob lookups bind the space at creation time, so a later
    selection never redirects an in-progress browse or purge.
    """

    def __init__(self, client: StorageClient, config: ConsoleConfig) -> None:
        self.client = client
        self.config = config
        self._space: Space | None = None
        self._blob_info: dict[str, BlobInfoCache] = {}

    def __enter__(self) -> ConsoleSession:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Release the storage client."""
        self.client.close()

    @property
    def space(self) -> Space:
        """The selected space.

        Raises:
            NoSpaceSelected: If no space has been selected yet.
        """
        if self._space is None:
            msg = "No space selected"
            raise NoSpaceSelected(msg)
        return self._space

    @property
    def has_space(self) -> bool:
        return self._space is not None

    def select_space(self, space: Space) -> None:
        """Make ``space`` the current space."""
        if self._space is not None and self._space.did == space.did:
            return
        logger.debug("Selected space %s", space.did)
        self._space = space

    def upload_source(self) -> UploadPageSource:
        """Upload pages of the current space."""
        return UploadPageSource(self.client, self.space)

    def blob_source(self) -> BlobPageSource:
        """Blob pages of the current space."""
        return BlobPageSource(self.client, self.space)

    def blob_info(self) -> BlobInfoCache:
        """Blob lookup cache of the current space, kept for the session."""
        space = self.space
        cache = self._blob_info.get(space.did)
        if cache is None:
            cache = self._blob_info[space.did] = BlobInfoCache(self.client, space)
        return cache
