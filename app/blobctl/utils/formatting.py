"""Rich console output and value formatting helpers.

Provides the shared consoles, status printers, and the byte/time helpers
used by both the Rich tables and the full-screen browser rows.
"""

from __future__ import annotations

import math
import sys
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from typing import Any

from rich.console import Console
from rich.table import Table

from blobctl.core.theme import get_theme

UNKNOWN = "--"
_BYTE_UNITS = ("B", "KB", "MB", "GB", "TB")
_TIMESTAMP_FIELDS = (
    "created_at",
    "created",
    "inserted_at",
    "updated_at",
    "uploaded_at",
    "timestamp",
    "ts",
)


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def create_table(title: str | None = None) -> Table:
    """Create a pre-configured table with the console's header and border styles."""
    return Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")


# === Value formatting ===


def _normalize_bytes(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return math.floor(value) if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def format_bytes(value: Any) -> str:
    """Format a byte count with binary units and two decimals.

    Examples:
        >>> format_bytes(0)
        '0 B'
        >>> format_bytes(1536)
        '1.50 KB'
        >>> format_bytes(None)
        '--'
    """
    n = _normalize_bytes(value)
    if n is None:
        return UNKNOWN
    unit_index = 0
    size = n
    while size >= 1024 and unit_index < len(_BYTE_UNITS) - 1:
        size //= 1024
        unit_index += 1
    if unit_index == 0:
        return f"{n} B"
    # Truncate (not round) to two decimals using integer math.
    scaled = (n * 100) // (1024**unit_index)
    return f"{scaled // 100}.{scaled % 100:02d} {_BYTE_UNITS[unit_index]}"


def _to_datetime(value: Any) -> datetime | None:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        if not math.isfinite(value):
            return None
        # Numeric timestamps are milliseconds since the epoch.
        return datetime.fromtimestamp(value / 1000, tz=UTC)
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            pass
        try:
            return _to_datetime(float(value))
        except ValueError:
            return None
    return None


def format_time(value: Any) -> str:
    """Format a timestamp in local time, or ``--`` when unknown."""
    try:
        dt = _to_datetime(value)
    except (OverflowError, OSError, ValueError):
        return UNKNOWN
    if dt is None:
        return UNKNOWN
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone().strftime("%Y-%m-%d %H:%M:%S")


def pick_timestamp(record: Any) -> Any:
    """Return the first timestamp-like field a record carries."""
    for name in _TIMESTAMP_FIELDS:
        if isinstance(record, Mapping):
            value = record.get(name)
        else:
            value = getattr(record, name, None)
        if value is not None:
            return value
    return None


def sum_shard_sizes(shards: Iterable[Any] | None) -> int | None:
    """Total size of shards whose size is known; None when none is."""
    if shards is None:
        return None
    total = 0
    has_size = False
    for shard in shards:
        size = _normalize_bytes(getattr(shard, "size", None))
        if size is None:
            continue
        total += size
        has_size = True
    return total if has_size else None


def parse_number_input(value: Any, fallback: int, minimum: int, maximum: int) -> int:
    """Parse an operator-entered number, floored and clamped.

    Blank or non-numeric input yields ``fallback`` unchanged.
    """
    if value is None:
        return fallback
    text = str(value).strip()
    if not text:
        return fallback
    try:
        parsed = float(text)
    except ValueError:
        return fallback
    if not math.isfinite(parsed):
        return fallback
    return max(minimum, min(maximum, math.floor(parsed)))
