"""Unit tests for the bounded-concurrency executor."""

import threading
import time

import pytest
from blobctl.core.executor import run_with_concurrency
from blobctl.models.store import RemovalResult


class _Tracker:
    """Action that records how many calls overlap."""

    def __init__(self, delay: float = 0.01) -> None:
        self.delay = delay
        self.in_flight = 0
        self.max_in_flight = 0
        self.seen: list[int] = []
        self._lock = threading.Lock()

    def __call__(self, item: int) -> None:
        with self._lock:
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        time.sleep(self.delay)
        with self._lock:
            self.in_flight -= 1
            self.seen.append(item)


class TestConcurrencyBound:
    """Tests for the in-flight limit."""

    @pytest.mark.parametrize("concurrency", [1, 2, 4])
    def test_never_exceeds_concurrency(self, concurrency: int) -> None:
        """At most `concurrency` actions run at the same time."""
        tracker = _Tracker()

        result = run_with_concurrency(list(range(12)), concurrency, tracker)

        assert result.succeeded == 12
        assert 1 <= tracker.max_in_flight <= concurrency

    def test_every_item_processed_once(self) -> None:
        """Each item is claimed exactly once."""
        tracker = _Tracker(delay=0)

        run_with_concurrency(list(range(50)), 5, tracker)

        assert sorted(tracker.seen) == list(range(50))

    def test_concurrency_below_one_runs_serially(self) -> None:
        """Concurrency values below 1 are treated as 1."""
        tracker = _Tracker()

        result = run_with_concurrency([1, 2, 3], 0, tracker)

        assert result.succeeded == 3
        assert tracker.max_in_flight == 1

    def test_empty_items(self) -> None:
        """No items yields an empty result without calling the action."""
        calls: list[object] = []

        result = run_with_concurrency([], 3, calls.append)

        assert result.total == 0
        assert calls == []


class TestFaultIsolation:
    """Tests for per-item failure handling."""

    def test_raised_exception_counts_as_failure(self) -> None:
        """An exception fails only its own item."""

        def action(item: int) -> None:
            if item == 3:
                raise RuntimeError("boom")

        result = run_with_concurrency([1, 2, 3, 4, 5], 2, action)

        assert result.succeeded == 4
        assert result.failed == 1
        assert result.errors[0].item == 3
        assert result.errors[0].error == "boom"

    def test_failed_result_counts_as_failure(self) -> None:
        """A returned result with failed=True is a failure."""

        def action(item: str) -> RemovalResult:
            if item == "b":
                return RemovalResult(ok=False, error="not found")
            return RemovalResult(ok=True)

        result = run_with_concurrency(["a", "b", "c"], 3, action)

        assert result.succeeded == 2
        assert result.failed == 1
        assert result.errors[0].error == "not found"

    def test_failed_result_without_message(self) -> None:
        """A failure without a message gets a generic one."""
        result = run_with_concurrency(["a"], 1, lambda _: RemovalResult(ok=False))

        assert result.errors[0].error == "Unknown error"

    def test_exception_without_message_uses_type_name(self) -> None:
        """An exception with an empty message reports its class name."""

        def action(item: int) -> None:
            raise ValueError

        result = run_with_concurrency([1], 1, action)

        assert result.errors[0].error == "ValueError"

    def test_all_items_fail(self) -> None:
        """Every failure is collected and the run still completes."""

        def action(item: int) -> None:
            raise RuntimeError(f"fail {item}")

        result = run_with_concurrency(list(range(6)), 3, action)

        assert result.failed == 6
        assert sorted(f.item for f in result.errors) == list(range(6))


class TestProgressCallback:
    """Tests for the on_result callback."""

    def test_called_once_per_item(self) -> None:
        """The callback sees every item with its outcome."""
        seen: dict[int, str | None] = {}

        def action(item: int) -> None:
            if item % 2:
                raise RuntimeError("odd")

        run_with_concurrency(list(range(6)), 3, action, on_result=seen.__setitem__)

        assert seen == {0: None, 1: "odd", 2: None, 3: "odd", 4: None, 5: "odd"}

    def test_failing_callback_does_not_stop_run(self) -> None:
        """Errors raised by the callback are logged, not propagated."""

        def broken(item: int, error: str | None) -> None:
            raise RuntimeError("display gone")

        result = run_with_concurrency([1, 2, 3], 2, lambda _: None, on_result=broken)

        assert result.succeeded == 3
