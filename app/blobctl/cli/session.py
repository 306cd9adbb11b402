"""Session setup and error translation shared by CLI commands."""

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import typer

from blobctl.core.config import ConsoleConfig, load_config
from blobctl.core.errors import BlobctlError, ConfigError, EmptyInput
from blobctl.core.session import ConsoleSession
from blobctl.remote.base import StorageClient
from blobctl.remote.http import HttpStorageClient
from blobctl.tui.browser import PageBrowser
from blobctl.utils.formatting import print_error, print_info


def create_client(config: ConsoleConfig) -> StorageClient:
    """Create the storage client for a configuration."""
    return HttpStorageClient(config)


def get_config_path_option(ctx: typer.Context) -> Path | None:
    """Config path given with the global ``--config`` option, if any."""
    obj = ctx.find_root().obj
    if isinstance(obj, dict):
        return obj.get("config_path")
    return None


def load_console_config(ctx: typer.Context) -> ConsoleConfig:
    """Load configuration or exit with an error message."""
    try:
        return load_config(get_config_path_option(ctx))
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from None


def open_session(ctx: typer.Context) -> ConsoleSession:
    """Create a ConsoleSession from the effective configuration."""
    config = load_console_config(ctx)
    return ConsoleSession(create_client(config), config)


@contextmanager
def cli_errors() -> Iterator[None]:
    """Translate console errors into messages and exit codes.

    A cancelled prompt exits 0 with "Aborted."; every other console error
    prints its message and exits 1.
    """
    try:
        yield
    except EmptyInput:
        print_info("Aborted.")
        raise typer.Exit(code=0) from None
    except BlobctlError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from None


def run_browser(browser: PageBrowser) -> None:
    """Run a full-screen browser; Ctrl-C leaves the program with status 0."""
    try:
        browser.run()
    except KeyboardInterrupt:
        raise typer.Exit(code=0) from None
