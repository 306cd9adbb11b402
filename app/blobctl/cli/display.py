"""Shared Rich display functions for listings and bulk runs.

Provides the table builders used by the listing commands and the console
progress sink that streams bulk run progress line by line.
"""

from typing import Any

from blobctl.models.run import BulkRun
from blobctl.models.store import Blob, RateLimit, Space, Upload
from blobctl.utils.formatting import (
    console,
    create_table,
    format_bytes,
    print_error,
    print_success,
)


def item_label(item: Any) -> str:
    """Identifier of a page item or removal target for progress lines."""
    if isinstance(item, str):
        return item
    if isinstance(item, Upload):
        return item.root
    if isinstance(item, Blob):
        return item.digest
    return str(item)


def print_spaces_table(spaces: list[Space], numbered: bool = False) -> None:
    """Print known spaces as a table."""
    table = create_table("Spaces")
    if numbered:
        table.add_column("#", justify="right", style="muted")
    table.add_column("Name", style="item.id")
    table.add_column("DID", no_wrap=True)
    table.add_column("Access", style="muted")
    for idx, space in enumerate(spaces, start=1):
        row = [space.display_name, space.did, space.access or ""]
        if numbered:
            row.insert(0, str(idx))
        table.add_row(*row)
    console.print(table)


def print_rate_limits(subject: str, limits: list[RateLimit]) -> None:
    """Print the rate limits of a subject."""
    if not limits:
        console.print(f"Rate limits for {subject}:\n(none)")
        return
    table = create_table(f"Rate limits for {subject}")
    table.add_column("ID", no_wrap=True)
    table.add_column("Rate", justify="right", style="info")
    for limit in limits:
        rate = "(unknown)" if limit.limit is None else str(limit.limit)
        table.add_row(limit.id or "(unknown)", rate)
    console.print(table)


def print_upload_preview(uploads: list[Upload], page_size: int) -> None:
    """List the uploads a current-page purge is about to remove."""
    table = create_table(f"Uploads to purge (showing up to {page_size}): {len(uploads)}")
    table.add_column("Root", no_wrap=True)
    table.add_column("Shards", justify="right", style="muted")
    for upload in uploads:
        table.add_row(upload.root, str(len(upload.shards)))
    console.print(table)


class ConsoleProgressSink:
    """ProgressSink that prints bulk run progress to the Rich console."""

    def __init__(self, name: str) -> None:
        self.name = name

    def page_started(self, page_number: int, count: int, scanned: int) -> None:
        console.print(f"[muted]Page {page_number}: {count} {self.name} (scanned {scanned})[/]")

    def item_done(self, target: Any, error: str | None) -> None:
        label = item_label(target)
        if error is None:
            console.print(f"[item.removed]Removed:[/] {label}")
        else:
            console.print(f"[item.failed]Failed:[/] {label} ({error})")

    def page_failed(self, page_number: int, message: str) -> None:
        print_error(f"Failed to list {self.name} (page {page_number}): {message}")

    def run_finished(self, run: BulkRun) -> None:
        print_run_summary(run)


def print_run_summary(run: BulkRun) -> None:
    """Print the final totals of a bulk run, whatever its outcome."""
    if run.scanned == 0 and not run.aborted:
        console.print("[muted]No items found.[/]")
    message = f"Purge complete: {run.summary()}"
    if run.aborted or run.failed:
        console.print(f"\n{message} [error]failed={run.failed}[/]")
        if run.aborted:
            print_error(f"Run stopped early: {run.fatal_error}")
    else:
        print_success(f"\n{message}")


def print_removal(item_id: str, freed_bytes: int | None = None) -> None:
    """Report a single successful removal."""
    if freed_bytes is None:
        print_success(f"Removed {item_id}.")
    else:
        print_success(f"Removed {item_id}. Freed: {format_bytes(freed_bytes)}.")
