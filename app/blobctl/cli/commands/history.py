"""History command for viewing past bulk runs.

This module provides the `blobctl history` command for viewing the
journal of purge runs.
"""

import json
from datetime import datetime
from typing import Annotated

import typer

from blobctl.core.state import RunJournal
from blobctl.models.run import RunKind, RunRecord
from blobctl.utils.formatting import console, create_table, print_error, print_info

app = typer.Typer(
    name="history",
    help="View the journal of bulk runs.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def history(
    ctx: typer.Context,
    limit: Annotated[
        int,
        typer.Option(
            "--limit",
            "-n",
            min=1,
            help="Maximum number of entries to show.",
        ),
    ] = 20,
    since: Annotated[
        str | None,
        typer.Option(
            "--since",
            help="Show entries since date (YYYY-MM-DD).",
        ),
    ] = None,
    kind: Annotated[
        RunKind | None,
        typer.Option(
            "--kind",
            "-k",
            case_sensitive=False,
            help="Only show runs of this kind.",
        ),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output as JSON.",
        ),
    ] = False,
) -> None:
    """Show past purge runs.

    Each entry shows when the run finished, what it removed, from which
    space, and whether it stopped early.

    Examples:
        blobctl history              # Show last 20 runs
        blobctl history -n 50        # Show last 50 runs
        blobctl history --kind blobs
        blobctl history --since 2026-01-01
        blobctl history --json       # JSON output for scripting
    """
    if ctx.invoked_subcommand is not None:
        return

    entries = RunJournal().entries(kind=kind)

    if since:
        try:
            since_parsed = datetime.fromisoformat(since)
        except ValueError:
            print_error(f"Invalid date format: {since}. Use YYYY-MM-DD.")
            raise typer.Exit(code=1) from None
        if since_parsed.tzinfo is None:
            since_date = since_parsed.strftime("%Y-%m-%d")
            entries = [e for e in entries if e.timestamp[:10] >= since_date]
        else:
            entries = [
                e
                for e in entries
                if datetime.fromisoformat(e.timestamp.replace("Z", "+00:00")) >= since_parsed
            ]

    entries = entries[:limit]
    if not entries:
        print_info("No runs recorded.")
        return

    if json_output:
        console.print(json.dumps([entry.to_dict() for entry in entries], indent=2))
    else:
        _print_table(entries)


def _print_table(entries: list[RunRecord]) -> None:
    """Print runs as a Rich table."""
    table = create_table("Purge Runs")
    table.add_column("ID", style="dim")
    table.add_column("Finished", style="info")
    table.add_column("Kind")
    table.add_column("Space")
    table.add_column("Scanned", justify="right")
    table.add_column("Removed", justify="right", style="success")
    table.add_column("Failed", justify="right")
    table.add_column("Status")

    for entry in entries:
        failed = f"[error]{entry.failed}[/]" if entry.failed else "0"
        status = "[warning]stopped[/]" if entry.aborted_reason else "[success]complete[/]"
        table.add_row(
            entry.id[:8],
            _format_timestamp(entry.timestamp),
            entry.kind.value,
            entry.space,
            str(entry.scanned),
            str(entry.removed),
            failed,
            status,
        )

    console.print(table)


def _format_timestamp(iso_timestamp: str) -> str:
    """Format an ISO timestamp as YYYY-MM-DD HH:MM."""
    dt = datetime.fromisoformat(iso_timestamp.replace("Z", "+00:00"))
    return dt.strftime("%Y-%m-%d %H:%M")
