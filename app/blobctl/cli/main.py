"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.logging import RichHandler

from blobctl import __version__
from blobctl.cli.commands import blobs, config, history, limits, menu, spaces, uploads
from blobctl.cli.session import cli_errors, open_session
from blobctl.utils.formatting import err_console

app = typer.Typer(
    name="blobctl",
    help="Admin console for a content-addressed storage service.",
    invoke_without_command=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"blobctl version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Route library logging through Rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=verbose, rich_tracebacks=True)],
        force=True,
    )
    if not verbose:
        logging.getLogger("httpx").setLevel(logging.WARNING)


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable debug logging.",
        ),
    ] = False,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            dir_okay=False,
            help="Config file to use instead of ~/.config/blobctl/config.toml.",
        ),
    ] = None,
) -> None:
    """blobctl - admin console for a content-addressed storage service.

    Browse uploads and blobs page by page, inspect usage and rate limits,
    and purge content in bulk. Run without a command for the menu.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config_path"] = config_path
    configure_logging(verbose)

    if ctx.invoked_subcommand is None:
        with cli_errors(), open_session(ctx) as session:
            menu.run_menu(session)


# Register commands
app.add_typer(spaces.app, name="spaces")
app.add_typer(spaces.usage_app, name="usage")
app.add_typer(limits.app, name="limits")
app.add_typer(uploads.app, name="uploads")
app.add_typer(blobs.app, name="blobs")
app.add_typer(history.app, name="history")
app.add_typer(config.app, name="config")
app.add_typer(menu.app, name="menu")


if __name__ == "__main__":
    app()
