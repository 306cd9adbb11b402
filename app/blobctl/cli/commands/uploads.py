"""Upload commands: browse, purge and delete uploads of a space.

The flow functions take a ConsoleSession and are shared with the main
menu; the Typer commands only translate options and exit codes.
"""

from typing import Annotated

import typer

from blobctl.cli.display import (
    ConsoleProgressSink,
    print_removal,
    print_upload_preview,
)
from blobctl.cli.prompts import (
    ask_concurrency,
    ask_page_size,
    ask_required,
    confirm,
    confirm_danger,
    pick_space,
)
from blobctl.cli.session import cli_errors, open_session, run_browser
from blobctl.cli.types import (
    ConcurrencyOption,
    PageSizeOption,
    ShardsOption,
    SpaceOption,
    YesOption,
)
from blobctl.core.details import UPLOAD_HEADER, render_upload_row, upload_detail
from blobctl.core.purge import delete_one, record_run, upload_purge, upload_remover
from blobctl.core.session import ConsoleSession
from blobctl.models.run import BulkRun, RunKind
from blobctl.models.store import Space
from blobctl.tui.browser import PageBrowser
from blobctl.utils.formatting import console, print_info, print_warning

app = typer.Typer(
    name="uploads",
    help="Browse, purge and delete uploads.",
    no_args_is_help=True,
)

SHARDS_QUESTION = "Delete shards together with {what}? (Keep shards = safer)"


def _ask_shards(shards: bool | None, what: str) -> bool:
    if shards is not None:
        return shards
    return confirm(SHARDS_QUESTION.format(what=what))


def _print_run_header(space: Space, shards: bool, mode: str, page_size: int, workers: int) -> None:
    console.print(f"Space: {space.display_name} ({space.did})")
    console.print(f"Remove shards: {'yes' if shards else 'no'}")
    console.print(f"Mode: {mode}  size={page_size} concurrency={workers}")


def _record(space: Space, run: BulkRun, shards: bool, mode: str) -> None:
    run_id = record_run(RunKind.UPLOADS, space, run, metadata={"shards": shards, "mode": mode})
    if run_id is None:
        print_warning("Run could not be recorded in the journal.")
    else:
        console.print(f"[muted]Recorded run {run_id}[/]")


def browse_uploads(
    session: ConsoleSession,
    space_key: str | None = None,
    page_size: int | None = None,
) -> None:
    """Open the upload browser for a space."""
    space = pick_space(session, space_key)
    if space is None:
        return
    size = page_size if page_size is not None else ask_page_size(session.config.page_size)
    blob_info = session.blob_info()
    browser = PageBrowser(
        title=f"Uploads ({space.label})",
        source=session.upload_source(),
        page_size=size,
        render_row=render_upload_row,
        header=UPLOAD_HEADER,
        render_detail=lambda upload: upload_detail(upload, blob_info),
    )
    run_browser(browser)


def purge_uploads(
    session: ConsoleSession,
    *,
    all_pages: bool,
    space_key: str | None = None,
    shards: bool | None = None,
    page_size: int | None = None,
    concurrency: int | None = None,
) -> BulkRun | None:
    """Remove the uploads of the current page, or of every page.

    The current-page mode lists the page and asks for a yes/no
    confirmation; the all-pages mode requires the confirmation token.

    Returns:
        The finished run, or None if nothing was removed.

    Raises:
        EmptyInput: If a prompt was cancelled.
        ConfirmationMismatch: If the wrong token was typed.
        RemoteError: If the current page could not be listed.
    """
    space = pick_space(session, space_key)
    if space is None:
        return None
    config = session.config
    shards = _ask_shards(shards, "uploads while purging")
    size = page_size if page_size is not None else ask_page_size(config.page_size)
    workers = concurrency if concurrency is not None else ask_concurrency(config.concurrency)

    orchestrator = upload_purge(
        session.client,
        space,
        shards=shards,
        page_size=size,
        concurrency=workers,
        sink=ConsoleProgressSink("uploads"),
    )

    if all_pages:
        confirm_danger(
            f'This will purge ALL uploads from space "{space.display_name}" ({space.did}). '
            "This is irreversible.",
            config.confirm_token,
        )
        _print_run_header(space, shards, "ALL pages", size, workers)
        run = orchestrator.run()
        _record(space, run, shards, "all")
        return run

    uploads = list(orchestrator.source.fetch(None, size).items)
    if not uploads:
        print_info("No uploads found on this page.")
        return None
    print_upload_preview(uploads, size)
    if not confirm(f"Confirm purge {len(uploads)} upload(s) from space {space.label}?"):
        print_info("Aborted.")
        return None
    _print_run_header(space, shards, "current page", size, workers)
    run = orchestrator.run_items(uploads)
    _record(space, run, shards, "page")
    return run


def delete_upload(
    session: ConsoleSession,
    root: str | None = None,
    space_key: str | None = None,
    shards: bool | None = None,
    yes: bool = False,
) -> bool:
    """Remove one upload by root CID.

    Returns:
        True if the upload was removed, False if the operator declined.

    Raises:
        ItemError: If the service rejected the removal.
    """
    space = pick_space(session, space_key)
    if space is None:
        return False
    root = root or ask_required("Upload root CID to remove")
    shards = _ask_shards(shards, "this upload")
    if not yes and not confirm(f"Confirm remove upload {root} from space {space.label}?"):
        print_info("Aborted.")
        return False

    console.print(f"Space: {space.display_name} ({space.did})")
    console.print(f"Remove shards: {'yes' if shards else 'no'}")
    result = delete_one(upload_remover(session.client, space, shards=shards), root)
    print_removal(root, result.freed_bytes)
    return True


@app.command()
def browse(
    ctx: typer.Context,
    space: SpaceOption = None,
    page_size: PageSizeOption = None,
) -> None:
    """Browse uploads page by page.

    Keys: up/down (j/k) select, left/right (h/l) page, Enter details,
    q/Esc back, Ctrl-C quit.
    """
    with cli_errors(), open_session(ctx) as session:
        browse_uploads(session, space, page_size or session.config.page_size)


@app.command()
def purge(
    ctx: typer.Context,
    all_pages: Annotated[
        bool,
        typer.Option(
            "--all/--page",
            help="Purge every page, or only the first page.",
        ),
    ] = False,
    space: SpaceOption = None,
    shards: ShardsOption = None,
    page_size: PageSizeOption = None,
    concurrency: ConcurrencyOption = None,
) -> None:
    """Remove uploads from a space.

    Examples:
        blobctl uploads purge --page          # First page, yes/no confirmation
        blobctl uploads purge --all           # Every page, type PURGE to confirm
        blobctl uploads purge --all --shards -c 5
    """
    with cli_errors(), open_session(ctx) as session:
        run = purge_uploads(
            session,
            all_pages=all_pages,
            space_key=space,
            shards=shards,
            page_size=page_size or session.config.page_size,
            concurrency=concurrency or session.config.concurrency,
        )
    if run is not None and (run.aborted or run.failed):
        raise typer.Exit(code=1)


@app.command("rm")
def remove(
    ctx: typer.Context,
    root: Annotated[str, typer.Argument(help="Root CID of the upload.")],
    space: SpaceOption = None,
    shards: ShardsOption = None,
    yes: YesOption = False,
) -> None:
    """Delete one upload by root CID."""
    with cli_errors(), open_session(ctx) as session:
        delete_upload(session, root, space, shards, yes)
