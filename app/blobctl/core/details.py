"""Row and detail views for uploads and blobs.

Rows are the fixed-width lines of the browser table; details are the
modal frames opened from a row. Upload details drill down into per-shard
frames whose size is looked up lazily when the listing did not carry it.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING

from blobctl.core.errors import RemoteError
from blobctl.core.modal import LineHandler, ModalFrame
from blobctl.utils.digest import shard_digest
from blobctl.utils.formatting import (
    format_bytes,
    format_time,
    pick_timestamp,
    sum_shard_sizes,
)

if TYPE_CHECKING:
    from blobctl.models.store import Blob, Space, Upload
    from blobctl.remote.base import StorageClient

logger = logging.getLogger(__name__)

UPLOAD_COLUMNS = ("#", "ROOT", "SIZE", "AT", "SHARDS")
BLOB_COLUMNS = ("#", "DIGEST", "SIZE", "AT", "CAUSE")
UPLOAD_HEADER = f"  {'#':>3} {'ROOT':<58} {'SIZE':>10}  {'AT':<22} SHARDS"
BLOB_HEADER = f"  {'#':>3} {'DIGEST':<52} {'SIZE':>10}  {'AT':<22} CAUSE"
SHARD_LIST_HEADER = "Shard list:"

# Blob lookups fall back to scanning the listing, bounded to this many pages.
BLOB_SCAN_PAGES = 5
BLOB_SCAN_PAGE_SIZE = 200


@dataclass(frozen=True, slots=True)
class RowView:
    """One rendered table row.

    Attributes:
        header_columns: Column titles of the table the row belongs to.
        header: Header line aligned with ``line``.
        line: The row as fixed-width text.
        columns: Raw cell values, in ``header_columns`` order.
    """

    header_columns: tuple[str, ...]
    header: str
    line: str
    columns: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class DetailView:
    """Content of the modal opened for a row."""

    title: str
    content: str
    on_line_enter: LineHandler | None = None

    def to_frame(self) -> ModalFrame:
        """Build the modal frame showing this view."""
        return ModalFrame.from_text(self.title, self.content, self.on_line_enter)


# === Rows ===


def _upload_size(upload: Upload) -> int | None:
    if upload.size is not None:
        return upload.size
    return sum_shard_sizes(upload.shards)


def render_upload_row(upload: Upload, index: int) -> RowView:
    """Render an upload as a table row; ``index`` is zero-based within the page."""
    size = format_bytes(_upload_size(upload))
    time = format_time(pick_timestamp(upload))
    shards = str(len(upload.shards))
    number = str(index + 1)
    return RowView(
        header_columns=UPLOAD_COLUMNS,
        header=UPLOAD_HEADER,
        line=f"  {number:>3} {upload.root:<58} {size:>10}  {time:<22} {shards:>6}",
        columns=(number, upload.root, size, time, shards),
    )


def render_blob_row(blob: Blob, index: int) -> RowView:
    """Render a blob as a table row; ``index`` is zero-based within the page."""
    size = format_bytes(blob.size)
    time = format_time(pick_timestamp(blob))
    cause = blob.cause or "--"
    number = str(index + 1)
    return RowView(
        header_columns=BLOB_COLUMNS,
        header=BLOB_HEADER,
        line=f"  {number:>3} {blob.digest:<52} {size:>10}  {time:<22} {cause}",
        columns=(number, blob.digest, size, time, cause),
    )


# === Blob lookup ===


class BlobInfoCache:
    """Per-session cache of blob lookups by digest.

    A lookup asks the service for the blob directly, then scans at most
    ``BLOB_SCAN_PAGES`` listing pages for a matching digest. Misses are
    cached too, so each digest costs at most one round of requests.
    """

    def __init__(self, client: StorageClient, space: Space) -> None:
        self._client = client
        self._space = space
        self._cache: dict[str, Blob | None] = {}
        self._lock = threading.Lock()

    def __contains__(self, digest: object) -> bool:
        with self._lock:
            return digest in self._cache

    def lookup(self, digest: str) -> Blob | None:
        """Return blob info for ``digest``, or None when it cannot be found."""
        with self._lock:
            if digest in self._cache:
                return self._cache[digest]

        result = self._get(digest) or self._scan(digest)
        with self._lock:
            self._cache[digest] = result
        return result

    def _get(self, digest: str) -> Blob | None:
        try:
            return self._client.get_blob(self._space, digest)
        except RemoteError as e:
            logger.debug("Blob get failed for %s: %s", digest, e)
            return None

    def _scan(self, digest: str) -> Blob | None:
        cursor: str | None = None
        for _ in range(BLOB_SCAN_PAGES):
            try:
                page = self._client.list_blobs(self._space, cursor, BLOB_SCAN_PAGE_SIZE)
            except RemoteError as e:
                logger.debug("Blob scan stopped for %s: %s", digest, e)
                return None
            for blob in page.items:
                if blob.digest == digest:
                    return blob
            cursor = page.cursor
            if cursor is None:
                return None
        return None


# === Details ===


def upload_detail(upload: Upload, blob_info: BlobInfoCache | None = None) -> DetailView:
    """Build the detail view of an upload.

    Lines under "Shard list:" open a frame for the shard. When the listing
    did not report a shard's size it is looked up through ``blob_info``.
    """
    shards = list(upload.shards)
    info = [
        f"Root: {upload.root}",
        f"Size: {format_bytes(_upload_size(upload))}",
        f"At: {format_time(pick_timestamp(upload))}",
        f"Shards: {len(shards)}",
    ]
    if shards:
        info.extend(["", SHARD_LIST_HEADER])
        for idx, shard in enumerate(shards, start=1):
            size = f" ({format_bytes(shard.size)})" if shard.size is not None else ""
            info.append(f"  {idx}. {shard.cid}{size}")

    first_shard_line = len(info) - len(shards)
    known_sizes: dict[int, int] = {}

    def open_shard(line_index: int) -> ModalFrame | None:
        shard_idx = line_index - first_shard_line
        if not shards or not 0 <= shard_idx < len(shards):
            return None
        shard = shards[shard_idx]
        digest = shard_digest(shard.cid, shard.digest)
        size = shard.size if shard.size is not None else known_sizes.get(shard_idx)
        if size is None and digest and blob_info is not None:
            blob = blob_info.lookup(digest)
            if blob is not None and blob.size is not None:
                size = known_sizes[shard_idx] = blob.size
        lines = [f"CID: {shard.cid or '--'}", f"Size: {format_bytes(size)}"]
        if digest:
            lines.append(f"Digest: {digest}")
        return ModalFrame(title=f"Shard {shard_idx + 1}", lines=lines)

    return DetailView(title="Upload Details", content="\n".join(info), on_line_enter=open_shard)


def blob_detail(blob: Blob) -> DetailView:
    """Build the detail view of a blob."""
    lines = [
        f"Digest: {blob.digest}",
        f"Size: {format_bytes(blob.size)}",
        f"At: {format_time(pick_timestamp(blob))}",
        f"Cause: {blob.cause or '--'}",
    ]
    return DetailView(title="Blob Details", content="\n".join(lines))
