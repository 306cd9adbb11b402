"""Interactive prompts used by commands and the main menu.

Prompts read through Typer so they work the same under CliRunner. A
cancelled prompt (Ctrl-D / Ctrl-C at the prompt) surfaces as EmptyInput.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import typer

from blobctl.cli.display import print_spaces_table
from blobctl.core.confirm import check_confirmation
from blobctl.core.errors import EmptyInput
from blobctl.core.session import NoSpaceSelected
from blobctl.models.page import MAX_PAGE_SIZE, MIN_PAGE_SIZE
from blobctl.models.run import MAX_CONCURRENCY
from blobctl.utils.formatting import parse_number_input, print_info, print_warning

if TYPE_CHECKING:
    from blobctl.core.session import ConsoleSession
    from blobctl.models.store import Space


def ask(message: str, default: str | None = None) -> str:
    """Prompt for text.

    Raises:
        EmptyInput: If the prompt was cancelled.
    """
    try:
        value: str = typer.prompt(
            message,
            default=default if default is not None else "",
            show_default=default is not None,
        )
    except typer.Abort:
        raise EmptyInput(message) from None
    return value


def ask_required(message: str, default: str | None = None) -> str:
    """Prompt for text that may not be blank.

    Raises:
        EmptyInput: If the prompt was cancelled or left blank.
    """
    value = ask(message, default).strip()
    if not value:
        raise EmptyInput(message)
    return value


def ask_number(message: str, default: int, minimum: int, maximum: int) -> int:
    """Prompt for a number; blank or invalid input keeps ``default``."""
    return parse_number_input(ask(message, str(default)), default, minimum, maximum)


def ask_page_size(default: int) -> int:
    return ask_number(
        f"Page size (default {default}, max {MAX_PAGE_SIZE})",
        default,
        MIN_PAGE_SIZE,
        MAX_PAGE_SIZE,
    )


def ask_concurrency(default: int) -> int:
    return ask_number(f"Delete concurrency (default {default})", default, 1, MAX_CONCURRENCY)


def confirm(message: str, default: bool = False) -> bool:
    """Yes/no confirmation, "no" unless the operator says otherwise."""
    try:
        return bool(typer.confirm(message, default=default))
    except typer.Abort:
        return False


def confirm_danger(message: str, token: str) -> None:
    """Require the operator to type ``token`` before an irreversible run.

    Raises:
        EmptyInput: If the prompt was cancelled or left blank.
        ConfirmationMismatch: If anything other than ``token`` was typed.
    """
    print_warning(message)
    try:
        value = typer.prompt(f"Confirm: type {token} then Enter", default="", show_default=False)
    except typer.Abort:
        value = None
    check_confirmation(value, token)


def _match_space(spaces: list[Space], key: str) -> Space | None:
    for space in spaces:
        if key in (space.did, space.name):
            return space
    return None


def pick_space(session: ConsoleSession, key: str | None = None) -> Space | None:
    """Select the space to work on and make it current.

    Args:
        session: Console session.
        key: DID or name given on the command line; prompts when None.

    Returns:
        The selected space, or None if the agent knows no spaces.

    Raises:
        RemoteError: If listing spaces failed.
        NoSpaceSelected: If ``key`` matches no space.
        EmptyInput: If the operator cancelled the choice.
    """
    spaces = session.client.list_spaces()
    if not spaces:
        print_info("No spaces known to this agent.")
        return None

    if key is not None:
        space = _match_space(spaces, key)
        if space is None:
            raise NoSpaceSelected(f"Unknown space: {key}")
    elif len(spaces) == 1:
        space = spaces[0]
    else:
        print_spaces_table(spaces, numbered=True)
        default = 1
        if session.has_space:
            current = _match_space(spaces, session.space.did)
            if current is not None:
                default = spaces.index(current) + 1
        raw = ask("Choose a space", str(default))
        index = parse_number_input(raw, 0, 0, len(spaces))
        if index < 1:
            raise EmptyInput("Choose a space")
        space = spaces[index - 1]

    session.select_space(space)
    return space
