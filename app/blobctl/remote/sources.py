"""Page sources over a remote collection.

A PageSource fetches one page given an opaque cursor. Each source is bound
to one client and one space when it is created, so a cursor it hands out
is only ever passed back to the configuration that produced it.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Generic, TypeVar

from blobctl.models.page import Page, clamp_page_size
from blobctl.models.store import Blob, Upload

if TYPE_CHECKING:
    from blobctl.models.store import Space
    from blobctl.remote.base import StorageClient

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PageSource(ABC, Generic[T]):
    """Fetches pages of one remote collection.

    Failures surface as RemoteError and are never retried here; the
    navigator and the bulk orchestrator apply their own policies.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short collection name for titles and logs (e.g. "uploads")."""

    @abstractmethod
    def _fetch(self, cursor: str | None, size: int) -> Page[T]:
        """Fetch one page with an already-clamped size."""

    def fetch(self, cursor: str | None, page_size: int) -> Page[T]:
        """Fetch one page.

        Args:
            cursor: None for the first page, otherwise a cursor previously
                returned by this source.
            page_size: Requested size, clamped to 1-500.

        Returns:
            Page holding at most ``page_size`` items.

        Raises:
            RemoteError: If the service call fails.
        """
        size = clamp_page_size(page_size)
        logger.debug("Fetching %s page (size=%d, cursor=%s)", self.name, size, cursor)
        page = self._fetch(cursor, size)
        if len(page.items) > size:
            logger.warning(
                "Service returned %d %s for page size %d, truncating",
                len(page.items),
                self.name,
                size,
            )
            page = Page(items=tuple(page.items)[:size], cursor=page.cursor)
        return page


class UploadPageSource(PageSource[Upload]):
    """Pages over the uploads of one space."""

    def __init__(self, client: StorageClient, space: Space) -> None:
        self._client = client
        self._space = space

    @property
    def name(self) -> str:
        return "uploads"

    @property
    def space(self) -> Space:
        """Space this source is bound to."""
        return self._space

    def _fetch(self, cursor: str | None, size: int) -> Page[Upload]:
        return self._client.list_uploads(self._space, cursor, size)


class BlobPageSource(PageSource[Blob]):
    """Pages over the blobs of one space."""

    def __init__(self, client: StorageClient, space: Space) -> None:
        self._client = client
        self._space = space

    @property
    def name(self) -> str:
        return "blobs"

    @property
    def space(self) -> Space:
        """Space this source is bound to."""
        return self._space

    def _fetch(self, cursor: str | None, size: int) -> Page[Blob]:
        return self._client.list_blobs(self._space, cursor, size)
