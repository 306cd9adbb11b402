"""Space listing and usage commands.

Provides `blobctl spaces` and `blobctl usage`.
"""

import json
from typing import Annotated

import typer

from blobctl.cli.display import print_spaces_table
from blobctl.cli.prompts import pick_space
from blobctl.cli.session import cli_errors, open_session
from blobctl.cli.types import SpaceOption
from blobctl.core.session import ConsoleSession
from blobctl.utils.formatting import console, format_bytes, print_info

app = typer.Typer(
    name="spaces",
    help="List spaces known to the agent.",
    invoke_without_command=True,
)

usage_app = typer.Typer(
    name="usage",
    help="Show the storage used by a space.",
    invoke_without_command=True,
)


def show_spaces(session: ConsoleSession, json_output: bool = False) -> None:
    """List the spaces known to the agent."""
    spaces = session.client.list_spaces()
    if json_output:
        console.print(json.dumps([s.model_dump() for s in spaces], indent=2))
        return
    if not spaces:
        print_info("No spaces known to this agent.")
        return
    print_spaces_table(spaces)


def show_usage(session: ConsoleSession, space_key: str | None = None) -> int | None:
    """Print the bytes stored in a space.

    Returns:
        The usage in bytes, or None if no space was selected.
    """
    space = pick_space(session, space_key)
    if space is None:
        return None
    used = session.client.space_usage(space)
    console.print(f"Usage for {space.display_name} ({space.did}): [info]{format_bytes(used)}[/]")
    return used


@app.callback(invoke_without_command=True)
def spaces(
    ctx: typer.Context,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output as JSON.",
        ),
    ] = False,
) -> None:
    """List spaces known to the agent.

    Examples:
        blobctl spaces
        blobctl spaces --json
    """
    if ctx.invoked_subcommand is not None:
        return
    with cli_errors(), open_session(ctx) as session:
        show_spaces(session, json_output)


@usage_app.callback(invoke_without_command=True)
def usage(ctx: typer.Context, space: SpaceOption = None) -> None:
    """Show the storage used by a space.

    Examples:
        blobctl usage
        blobctl usage --space did:key:z6Mk...
    """
    if ctx.invoked_subcommand is not None:
        return
    with cli_errors(), open_session(ctx) as session:
        show_usage(session, space)
