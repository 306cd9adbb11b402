"""Bounded-concurrency execution of per-item actions.

Runs a fixed pool of worker threads over a list of items. Workers claim
items through one shared, monotonically increasing index and call the
action on each claim before claiming again, so at most ``concurrency``
actions are outstanding at any time.

A failing item (raised exception or a result reporting failure) is
recorded and never cancels its siblings. Once started, a run cannot be
cancelled; ``run_with_concurrency`` returns after every worker has
finished its last claim.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Any, TypeVar

from blobctl.models.run import ExecutionResult, ItemFailure

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Called once per item with the failure message, or None on success.
ResultCallback = Callable[[Any, str | None], None]


def _failure_message(outcome: object) -> str | None:
    """Return the failure message of an explicit error result, if any."""
    if outcome is None or not getattr(outcome, "failed", False):
        return None
    return getattr(outcome, "error", None) or "Unknown error"


class _ClaimCounter:
    """Shared claim index handed out under a lock."""

    def __init__(self, limit: int) -> None:
        self._next = 0
        self._limit = limit
        self._lock = threading.Lock()

    def claim(self) -> int | None:
        with self._lock:
            if self._next >= self._limit:
                return None
            idx = self._next
            self._next += 1
            return idx


def run_with_concurrency(
    items: Sequence[T],
    concurrency: int,
    action: Callable[[T], object],
    on_result: ResultCallback | None = None,
) -> ExecutionResult:
    """Apply an action to every item with at most ``concurrency`` in flight.

    Args:
        items: Items to process. Order of processing and completion is not
            guaranteed.
        concurrency: Maximum number of simultaneously running actions.
            Values below 1 are treated as 1.
        action: Called once per item. A raised exception, or a returned
            object whose ``failed`` attribute is true, marks the item as
            failed; anything else counts as success.
        on_result: Optional progress callback, called once per item as it
            completes with the failure message or None. Calls are
            serialized.

    Returns:
        ExecutionResult with succeeded/failed counts and per-item errors.
    """
    limit = max(1, int(concurrency))
    total = len(items)
    if total == 0:
        return ExecutionResult()

    counter = _ClaimCounter(total)
    lock = threading.Lock()
    succeeded = 0
    errors: list[ItemFailure] = []

    def record(item: T, error: str | None) -> None:
        nonlocal succeeded
        with lock:
            if error is None:
                succeeded += 1
            else:
                errors.append(ItemFailure(item=item, error=error))
            if on_result is not None:
                try:
                    on_result(item, error)
                except Exception:
                    logger.exception("Progress callback failed")

    def worker() -> None:
        while (idx := counter.claim()) is not None:
            item = items[idx]
            try:
                error = _failure_message(action(item))
            except Exception as e:  # noqa: BLE001
                error = str(e) or type(e).__name__
                logger.debug("Action failed for item %d: %s", idx, error)
            record(item, error)

    workers = min(limit, total)
    logger.debug("Running %d item(s) with %d worker(s)", total, workers)
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="blobctl-worker") as pool:
        futures = [pool.submit(worker) for _ in range(workers)]
        wait(futures)

    return ExecutionResult(
        succeeded=succeeded,
        failed=len(errors),
        errors=tuple(errors),
    )
