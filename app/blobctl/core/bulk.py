"""Apply a mutation to every item of every page of a collection.

The orchestrator walks a PageSource from the first page to exhaustion and
feeds each page's items into the bounded-concurrency executor. Pages are
processed strictly one after another: page N+1 is only fetched once every
mutation for page N has finished, which keeps in-flight mutations bounded
by ``concurrency`` and avoids walking a collection that is shrinking under
the cursor.

Termination:
- a page fetch fails (page-level failure, fatal to the run)
- a page comes back empty (collection exhausted)
- a processed page carries no continuation cursor (last page)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Generic, Protocol, TypeVar

from blobctl.core.errors import RemoteError
from blobctl.core.executor import run_with_concurrency
from blobctl.models.page import clamp_page_size
from blobctl.models.run import BulkRun, ItemFailure
from blobctl.remote.sources import PageSource

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class ProgressSink(Protocol):
    """Receives progress of a bulk run as it happens.

    Calls for ``item_done`` arrive from worker threads but never overlap.
    """

    def page_started(self, page_number: int, count: int, scanned: int) -> None:
        """A page with ``count`` items is about to be processed."""

    def item_done(self, target: Any, error: str | None) -> None:
        """One item finished; ``error`` is None on success."""

    def page_failed(self, page_number: int, message: str) -> None:
        """Fetching a page failed and the run stops."""

    def run_finished(self, run: BulkRun) -> None:
        """The run reached a terminal condition."""


class NullSink:
    """ProgressSink that discards everything."""

    def page_started(self, page_number: int, count: int, scanned: int) -> None:
        pass

    def item_done(self, target: Any, error: str | None) -> None:
        pass

    def page_failed(self, page_number: int, message: str) -> None:
        pass

    def run_finished(self, run: BulkRun) -> None:
        pass


def _identity(item: Any) -> Any:
    return item


class BulkOrchestrator(Generic[T, R]):
    """Runs one "apply to all pages" operation.

    Attributes:
        source: Collection to walk.
        action: Mutation applied to each derived target.
        target: Derives the mutation target from a page item (for example
            an upload's root CID). Returning None or raising ValueError
            marks the item as failed without calling the action.
    """

    def __init__(
        self,
        source: PageSource[T],
        action: Callable[[R], object],
        *,
        page_size: int,
        concurrency: int,
        target: Callable[[T], R | None] = _identity,
        sink: ProgressSink | None = None,
    ) -> None:
        self.source = source
        self.action = action
        self.target = target
        self._page_size = clamp_page_size(page_size)
        self._concurrency = concurrency
        self._sink: ProgressSink = sink or NullSink()

    def _derive_targets(self, items: list[T], run: BulkRun) -> list[R]:
        targets: list[R] = []
        for item in items:
            try:
                derived = self.target(item)
            except ValueError as e:
                derived = None
                reason = str(e)
            else:
                reason = "no removable reference"
            if derived is None:
                run.failed += 1
                run.errors.append(ItemFailure(item=item, error=reason))
                self._sink.item_done(item, reason)
                continue
            targets.append(derived)
        return targets

    def run(self) -> BulkRun:
        """Walk every page and apply the action to every item.

        Returns:
            The finished BulkRun. ``fatal_error`` is set when a page fetch
            failed; item failures are in ``errors``.

        Raises:
            ValueError: If page size or concurrency are out of bounds.
        """
        run = BulkRun(page_size=self._page_size, concurrency=self._concurrency)
        cursor: str | None = None

        while True:
            page_number = run.pages + 1
            try:
                page = self.source.fetch(cursor, run.page_size)
            except RemoteError as e:
                logger.warning("Failed to list %s page %d: %s", self.source.name, page_number, e)
                run.fatal_error = e.message
                self._sink.page_failed(page_number, e.message)
                break
            except Exception as e:
                logger.exception(
                    "Unexpected error listing %s page %d", self.source.name, page_number
                )
                run.fatal_error = f"Unexpected error: {e}"
                self._sink.page_failed(page_number, run.fatal_error)
                break

            items = list(page.items)
            if not items:
                logger.debug("Empty %s page %d, stopping", self.source.name, page_number)
                break

            self._process_page(items, run)

            if page.is_last:
                break
            cursor = page.cursor

        return self._finish(run)

    def run_items(self, items: list[T]) -> BulkRun:
        """Apply the action to one already-fetched page of items.

        Used when the operator reviewed the page before confirming.
        """
        run = BulkRun(page_size=self._page_size, concurrency=self._concurrency)
        if items:
            self._process_page(list(items), run)
        return self._finish(run)

    def _process_page(self, items: list[T], run: BulkRun) -> None:
        run.pages += 1
        run.scanned += len(items)
        self._sink.page_started(run.pages, len(items), run.scanned)

        targets = self._derive_targets(items, run)
        result = run_with_concurrency(
            targets,
            run.concurrency,
            self.action,
            on_result=self._sink.item_done,
        )
        run.removed += result.succeeded
        run.failed += result.failed
        run.errors.extend(result.errors)

    def _finish(self, run: BulkRun) -> BulkRun:
        logger.info(
            "Bulk run over %s finished: pages=%d %s failed=%d",
            self.source.name,
            run.pages,
            run.summary(),
            run.failed,
        )
        self._sink.run_finished(run)
        return run
