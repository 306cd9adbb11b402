"""Data models for blobctl.

This module exports the core data structures used throughout the application.
"""

from blobctl.models.page import MAX_PAGE_SIZE, MIN_PAGE_SIZE, Page, clamp_page_size
from blobctl.models.run import (
    BulkRun,
    ExecutionResult,
    ItemFailure,
    RunKind,
    RunRecord,
    create_run_record,
)
from blobctl.models.store import Blob, RateLimit, RemovalResult, Shard, Space, Upload

__all__ = [
    "MAX_PAGE_SIZE",
    "MIN_PAGE_SIZE",
    "Blob",
    "BulkRun",
    "ExecutionResult",
    "ItemFailure",
    "Page",
    "RateLimit",
    "RemovalResult",
    "RunKind",
    "RunRecord",
    "Shard",
    "Space",
    "Upload",
    "clamp_page_size",
    "create_run_record",
]
