"""Removal operations on uploads and blobs.

Single deletions, current-page purges and all-pages purges share the same
removal actions; multi-item runs go through the BulkOrchestrator and are
recorded in the run journal.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from blobctl.core.bulk import BulkOrchestrator, ProgressSink
from blobctl.core.errors import ItemError, RemoteError
from blobctl.core.state import RunJournal
from blobctl.models.run import BulkRun, RunKind, create_run_record
from blobctl.remote.sources import BlobPageSource, UploadPageSource

if TYPE_CHECKING:
    from blobctl.models.store import Blob, RemovalResult, Space, Upload
    from blobctl.remote.base import StorageClient

logger = logging.getLogger(__name__)

RemoveAction = Callable[[str], "RemovalResult"]


def upload_remover(client: StorageClient, space: Space, shards: bool = False) -> RemoveAction:
    """Action removing an upload by root CID, optionally with its shards."""

    def remove(root: str) -> RemovalResult:
        return client.remove_upload(space, root, shards=shards)

    return remove


def blob_remover(client: StorageClient, space: Space) -> RemoveAction:
    """Action removing a blob by digest."""

    def remove(digest: str) -> RemovalResult:
        return client.remove_blob(space, digest)

    return remove


def upload_target(upload: Upload) -> str | None:
    """Root CID of an upload, the removal target."""
    return upload.root or None


def blob_target(blob: Blob) -> str | None:
    """Digest of a blob, the removal target."""
    return blob.digest or None


def delete_one(action: RemoveAction, item_id: str) -> RemovalResult:
    """Remove a single item.

    Raises:
        ItemError: If the service rejected the removal or the call failed.
    """
    try:
        result = action(item_id)
    except RemoteError as e:
        raise ItemError(item_id, e.message) from e
    if result.failed:
        raise ItemError(item_id, result.error or "Unknown error")
    logger.info("Removed %s", item_id)
    return result


def upload_purge(
    client: StorageClient,
    space: Space,
    *,
    shards: bool,
    page_size: int,
    concurrency: int,
    sink: ProgressSink | None = None,
) -> BulkOrchestrator[Upload, str]:
    """Build the orchestrator that removes uploads of a space."""
    return BulkOrchestrator(
        UploadPageSource(client, space),
        upload_remover(client, space, shards=shards),
        page_size=page_size,
        concurrency=concurrency,
        target=upload_target,
        sink=sink,
    )


def blob_purge(
    client: StorageClient,
    space: Space,
    *,
    page_size: int,
    concurrency: int,
    sink: ProgressSink | None = None,
) -> BulkOrchestrator[Blob, str]:
    """Build the orchestrator that removes blobs of a space."""
    return BulkOrchestrator(
        BlobPageSource(client, space),
        blob_remover(client, space),
        page_size=page_size,
        concurrency=concurrency,
        target=blob_target,
        sink=sink,
    )


def record_run(
    kind: RunKind,
    space: Space,
    run: BulkRun,
    journal: RunJournal | None = None,
    metadata: dict[str, object] | None = None,
) -> str | None:
    """Append a finished run to the journal.

    Journal failures never fail the run; they are logged and None is
    returned.

    Returns:
        The run record ID, or None if it could not be written.
    """
    journal = journal if journal is not None else RunJournal()
    entry = create_run_record(kind, space.did, run, metadata=metadata)
    try:
        journal.record(entry)
    except (OSError, RuntimeError) as e:
        logger.warning("Failed to record run %s: %s", entry.id, e)
        return None
    return entry.id
