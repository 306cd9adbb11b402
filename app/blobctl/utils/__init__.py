"""Utility modules for blobctl.

This module exports commonly used utility functions.
"""

from blobctl.utils.digest import parse_blob_id, shard_digest
from blobctl.utils.formatting import (
    console,
    create_table,
    err_console,
    format_bytes,
    format_time,
    parse_number_input,
    pick_timestamp,
    print_error,
    print_info,
    print_success,
    print_warning,
    sum_shard_sizes,
)

__all__ = [
    "console",
    "create_table",
    "err_console",
    "format_bytes",
    "format_time",
    "parse_blob_id",
    "parse_number_input",
    "pick_timestamp",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "shard_digest",
    "sum_shard_sizes",
]
