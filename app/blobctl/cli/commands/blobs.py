"""Blob commands: browse, purge and delete blobs of a space."""

from typing import Annotated

import typer

from blobctl.cli.display import ConsoleProgressSink, print_removal
from blobctl.cli.prompts import (
    ask_concurrency,
    ask_page_size,
    ask_required,
    confirm,
    confirm_danger,
    pick_space,
)
from blobctl.cli.session import cli_errors, open_session, run_browser
from blobctl.cli.types import ConcurrencyOption, PageSizeOption, SpaceOption, YesOption
from blobctl.core.details import BLOB_HEADER, blob_detail, render_blob_row
from blobctl.core.errors import ItemError
from blobctl.core.purge import blob_purge, blob_remover, delete_one, record_run
from blobctl.core.session import ConsoleSession
from blobctl.models.run import BulkRun, RunKind
from blobctl.tui.browser import PageBrowser
from blobctl.utils.digest import parse_blob_id
from blobctl.utils.formatting import console, print_info, print_warning

app = typer.Typer(
    name="blobs",
    help="Browse, purge and delete blobs.",
    no_args_is_help=True,
)


def browse_blobs(
    session: ConsoleSession,
    space_key: str | None = None,
    page_size: int | None = None,
) -> None:
    """Open the blob browser for a space."""
    space = pick_space(session, space_key)
    if space is None:
        return
    size = page_size if page_size is not None else ask_page_size(session.config.page_size)
    browser = PageBrowser(
        title=f"Blobs ({space.label})",
        source=session.blob_source(),
        page_size=size,
        render_row=render_blob_row,
        header=BLOB_HEADER,
        render_detail=blob_detail,
    )
    run_browser(browser)


def purge_blobs(
    session: ConsoleSession,
    *,
    space_key: str | None = None,
    page_size: int | None = None,
    concurrency: int | None = None,
) -> BulkRun | None:
    """Remove every blob of a space, page by page.

    Raises:
        EmptyInput: If a prompt was cancelled.
        ConfirmationMismatch: If the wrong token was typed.
    """
    space = pick_space(session, space_key)
    if space is None:
        return None
    config = session.config
    size = page_size if page_size is not None else ask_page_size(config.page_size)
    workers = concurrency if concurrency is not None else ask_concurrency(config.concurrency)

    confirm_danger(
        f'This will purge ALL blobs from space "{space.display_name}" ({space.did}). '
        "This is irreversible.",
        config.confirm_token,
    )
    console.print(f"Space: {space.display_name} ({space.did})")
    console.print(f"Mode: ALL pages  size={size} concurrency={workers}")

    run = blob_purge(
        session.client,
        space,
        page_size=size,
        concurrency=workers,
        sink=ConsoleProgressSink("blobs"),
    ).run()

    run_id = record_run(RunKind.BLOBS, space, run, metadata={"mode": "all"})
    if run_id is None:
        print_warning("Run could not be recorded in the journal.")
    else:
        console.print(f"[muted]Recorded run {run_id}[/]")
    return run


def delete_blob(
    session: ConsoleSession,
    digest: str | None = None,
    space_key: str | None = None,
    yes: bool = False,
) -> bool:
    """Remove one blob by shard CID or digest.

    Returns:
        True if the blob was removed, False if the operator declined.

    Raises:
        ItemError: If the id is not a CID or digest, or the service
            rejected the removal.
    """
    space = pick_space(session, space_key)
    if space is None:
        return False
    blob_id = digest or ask_required("Blob to remove (shard CID or base58btc digest)")
    try:
        digest = parse_blob_id(blob_id)
    except ValueError as e:
        raise ItemError(blob_id.strip(), "not a CID or multihash digest") from e
    if not yes and not confirm(f"Confirm remove blob {digest} from space {space.label}?"):
        print_info("Aborted.")
        return False

    console.print(f"Space: {space.display_name} ({space.did})")
    result = delete_one(blob_remover(session.client, space), digest)
    print_removal(digest, result.freed_bytes if result.freed_bytes is not None else 0)
    return True


@app.command()
def browse(
    ctx: typer.Context,
    space: SpaceOption = None,
    page_size: PageSizeOption = None,
) -> None:
    """Browse blobs page by page."""
    with cli_errors(), open_session(ctx) as session:
        browse_blobs(session, space, page_size or session.config.page_size)


@app.command()
def purge(
    ctx: typer.Context,
    space: SpaceOption = None,
    page_size: PageSizeOption = None,
    concurrency: ConcurrencyOption = None,
) -> None:
    """Remove every blob from a space (type PURGE to confirm)."""
    with cli_errors(), open_session(ctx) as session:
        run = purge_blobs(
            session,
            space_key=space,
            page_size=page_size or session.config.page_size,
            concurrency=concurrency or session.config.concurrency,
        )
    if run is not None and (run.aborted or run.failed):
        raise typer.Exit(code=1)


@app.command("rm")
def remove(
    ctx: typer.Context,
    digest: Annotated[
        str, typer.Argument(help="Shard CID or base58btc multihash digest of the blob.")
    ],
    space: SpaceOption = None,
    yes: YesOption = False,
) -> None:
    """Delete one blob by shard CID or digest."""
    with cli_errors(), open_session(ctx) as session:
        delete_blob(session, digest, space, yes)
