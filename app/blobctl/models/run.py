"""Models for concurrent executions and bulk runs.

ExecutionResult is produced once per executor run. BulkRun accumulates
across every page of one orchestrated operation. RunRecord is the
journal entry written once a bulk run finishes.
"""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from blobctl.models.page import MAX_PAGE_SIZE, MIN_PAGE_SIZE

# Operator-facing limits for bulk runs.
MAX_CONCURRENCY = 10
DEFAULT_CONCURRENCY = 3
DEFAULT_PAGE_SIZE = 50


@dataclass(frozen=True, slots=True)
class ItemFailure:
    """A failed item and the message explaining why.

    Attributes:
        item: The item the action was invoked on.
        error: Human-readable failure message.
    """

    item: Any
    error: str


@dataclass(frozen=True, slots=True)
class ExecutionResult:
    """Aggregate outcome of one executor run.

    Attributes:
        succeeded: Number of items whose action completed successfully.
        failed: Number of items whose action raised or reported failure.
        errors: One entry per failed item, in completion order.
    """

    succeeded: int = 0
    failed: int = 0
    errors: tuple[ItemFailure, ...] = ()

    @property
    def total(self) -> int:
        """Number of items processed."""
        return self.succeeded + self.failed


class RunKind(str, Enum):
    """What a bulk run removed."""

    UPLOADS = "uploads"
    BLOBS = "blobs"


@dataclass(slots=True)
class BulkRun:
    """Running totals of one bulk operation across all pages.

    Attributes:
        page_size: Items requested per page (1-500).
        concurrency: Maximum in-flight mutations (1-10).
        scanned: Items seen across all fetched pages.
        removed: Items whose mutation succeeded.
        failed: Items whose mutation failed.
        pages: Pages fetched with at least one item.
        errors: Item-level failures in the order they were reported.
        fatal_error: Page-level failure that ended the run early.
    """

    page_size: int
    concurrency: int
    scanned: int = 0
    removed: int = 0
    failed: int = 0
    pages: int = 0
    errors: list[ItemFailure] = field(default_factory=list)
    fatal_error: str | None = None

    def __post_init__(self) -> None:
        """Validate run limits after initialization."""
        if not MIN_PAGE_SIZE <= self.page_size <= MAX_PAGE_SIZE:
            msg = (
                f"Page size must be between {MIN_PAGE_SIZE} and {MAX_PAGE_SIZE}, "
                f"got {self.page_size}"
            )
            raise ValueError(msg)
        if not 1 <= self.concurrency <= MAX_CONCURRENCY:
            msg = f"Concurrency must be between 1 and {MAX_CONCURRENCY}, got {self.concurrency}"
            raise ValueError(msg)

    @property
    def aborted(self) -> bool:
        """Check if a page-level failure stopped the run."""
        return self.fatal_error is not None

    def summary(self) -> str:
        """One-line totals, printed regardless of failures."""
        return f"removed={self.removed} scanned={self.scanned}"


@dataclass(frozen=True, slots=True)
class RunRecord:
    """Journal entry for a finished bulk run.

    Attributes:
        id: Unique identifier (12-character hex string from UUID).
        timestamp: When the run finished (ISO 8601 with timezone).
        kind: What was removed.
        space: DID of the space the run operated on.
        scanned: Items seen.
        removed: Items removed.
        failed: Items that failed.
        aborted_reason: Page-level failure message, if the run stopped early.
        metadata: Additional context (page size, concurrency, command).
    """

    id: str
    timestamp: str
    kind: RunKind
    space: str
    scanned: int
    removed: int
    failed: int = 0
    aborted_reason: str | None = None
    metadata: dict[str, Any] = field(default_factory=lambda: {})

    def __post_init__(self) -> None:
        """Validate record data after initialization."""
        if not self.id:
            msg = "Run record ID cannot be empty"
            raise ValueError(msg)
        if not self.space:
            msg = "Run record space cannot be empty"
            raise ValueError(msg)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON storage."""
        result: dict[str, Any] = {
            "id": self.id,
            "timestamp": self.timestamp,
            "kind": self.kind.value,
            "space": self.space,
            "scanned": self.scanned,
            "removed": self.removed,
            "failed": self.failed,
            "metadata": self.metadata,
        }
        if self.aborted_reason is not None:
            result["aborted_reason"] = self.aborted_reason
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RunRecord:
        """Deserialize from dictionary.

        Raises:
            KeyError: If required fields are missing.
            ValueError: If kind or other data is invalid.
        """
        return cls(
            id=data["id"],
            timestamp=data["timestamp"],
            kind=RunKind(data["kind"]),
            space=data["space"],
            scanned=int(data["scanned"]),
            removed=int(data["removed"]),
            failed=int(data.get("failed", 0)),
            aborted_reason=data.get("aborted_reason"),
            metadata=data.get("metadata", {}),
        )

    def to_json_line(self) -> str:
        """Serialize to a single JSON line (no trailing newline)."""
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_json_line(cls, line: str) -> RunRecord:
        """Deserialize from a JSON line.

        Raises:
            json.JSONDecodeError: If line is not valid JSON.
            KeyError: If required fields are missing.
            ValueError: If data is invalid.
        """
        return cls.from_dict(json.loads(line.strip()))


def create_run_record(
    kind: RunKind,
    space: str,
    run: BulkRun,
    metadata: dict[str, Any] | None = None,
) -> RunRecord:
    """Build a journal entry from a finished run.

    Automatically generates a unique ID and current timestamp.
    """
    return RunRecord(
        id=uuid.uuid4().hex[:12],
        timestamp=datetime.now(UTC).isoformat(),
        kind=kind,
        space=space,
        scanned=run.scanned,
        removed=run.removed,
        failed=run.failed,
        aborted_reason=run.fatal_error,
        metadata={
            "page_size": run.page_size,
            "concurrency": run.concurrency,
            **(metadata or {}),
        },
    )
