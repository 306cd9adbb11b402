"""Interactive main menu.

`blobctl` without a subcommand (or `blobctl menu`) loops over a numbered
menu until the operator picks Exit or closes the prompt. Each entry runs
the same flow as the matching subcommand, with every setting prompted.
"""

import logging
from collections.abc import Callable
from typing import NamedTuple

import typer

from blobctl.cli.commands.blobs import browse_blobs, delete_blob, purge_blobs
from blobctl.cli.commands.limits import show_rate_limits
from blobctl.cli.commands.spaces import show_spaces, show_usage
from blobctl.cli.commands.uploads import browse_uploads, delete_upload, purge_uploads
from blobctl.cli.prompts import ask
from blobctl.cli.session import cli_errors, open_session
from blobctl.core.errors import BlobctlError, EmptyInput
from blobctl.core.session import ConsoleSession
from blobctl.utils.formatting import console, parse_number_input, print_error, print_info

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="menu",
    help="Open the interactive main menu.",
    invoke_without_command=True,
)


class MenuEntry(NamedTuple):
    label: str
    action: Callable[[ConsoleSession], object] | None


MENU: tuple[MenuEntry, ...] = (
    MenuEntry("List spaces", show_spaces),
    MenuEntry("Space usage", show_usage),
    MenuEntry("Rate limits", lambda s: show_rate_limits(s, prompt_provider=True)),
    MenuEntry("Purge uploads (current page)", lambda s: purge_uploads(s, all_pages=False)),
    MenuEntry("Purge uploads (ALL pages)", lambda s: purge_uploads(s, all_pages=True)),
    MenuEntry("Purge blobs (ALL pages)", purge_blobs),
    MenuEntry("Delete upload", delete_upload),
    MenuEntry("Delete blob (by shard CID or digest)", delete_blob),
    MenuEntry("Browse uploads", browse_uploads),
    MenuEntry("Browse blobs", browse_blobs),
    MenuEntry("Exit", None),
)


def print_menu(session: ConsoleSession) -> None:
    current = session.space.label if session.has_space else "none"
    console.print()
    console.print(
        f"[bold_header]blobctl[/]  [muted]endpoint={session.config.endpoint} space={current}[/]"
    )
    for number, entry in enumerate(MENU, start=1):
        console.print(f"  [info]{number:>2}[/]. {entry.label}")


def choose(raw: str) -> MenuEntry | None:
    """Map the operator's answer to a menu entry; None if out of range."""
    index = parse_number_input(raw, 0, 0, len(MENU))
    if index < 1:
        return None
    return MENU[index - 1]


def run_menu(session: ConsoleSession) -> None:
    """Run the menu loop until Exit or a cancelled prompt.

    Errors raised by an entry are reported and the loop continues; the
    process only ends on Exit, a cancelled top-level prompt, or Ctrl-C
    inside a browser.
    """
    while True:
        print_menu(session)
        try:
            raw = ask("Select")
        except EmptyInput:
            return
        entry = choose(raw)
        if entry is None:
            print_error(f"Unknown choice: {raw.strip() or '(blank)'}")
            continue
        if entry.action is None:
            return
        logger.debug("Menu action: %s", entry.label)
        try:
            entry.action(session)
        except EmptyInput:
            print_info("Aborted.")
        except BlobctlError as e:
            print_error(str(e))


@app.callback(invoke_without_command=True)
def menu(ctx: typer.Context) -> None:
    """Open the interactive main menu."""
    if ctx.invoked_subcommand is not None:
        return
    with cli_errors(), open_session(ctx) as session:
        run_menu(session)
