"""Configuration commands.

Provides `blobctl config init`, `blobctl config show` and
`blobctl config path`.
"""

from typing import Annotated

import typer

from blobctl.cli.session import get_config_path_option, load_console_config
from blobctl.core.config import ConsoleConfig, redacted, save_config
from blobctl.core.errors import ConfigError
from blobctl.core.paths import get_config_path
from blobctl.utils.formatting import console, create_table, print_error, print_info, print_success

app = typer.Typer(
    name="config",
    help="Create and inspect the console configuration.",
    no_args_is_help=True,
)


@app.command()
def init(
    ctx: typer.Context,
    endpoint: Annotated[
        str | None,
        typer.Option("--endpoint", help="Base URL of the storage gateway."),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing config file."),
    ] = False,
) -> None:
    """Write a config file with default values.

    Examples:
        blobctl config init
        blobctl config init --endpoint https://gateway.example --force
    """
    path = get_config_path_option(ctx) or get_config_path()
    if path.exists() and not force:
        print_error(f"Config already exists: {path}")
        print_info("Use --force to overwrite.")
        raise typer.Exit(code=1)

    try:
        config = ConsoleConfig(endpoint=endpoint) if endpoint else ConsoleConfig()
        saved = save_config(config, path)
    except (ConfigError, ValueError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from None
    print_success(f"Config written to {saved}")


@app.command()
def show(ctx: typer.Context) -> None:
    """Show the effective configuration (service key masked)."""
    config = load_console_config(ctx)
    table = create_table("Configuration")
    table.add_column("Key", style="info")
    table.add_column("Value")
    for key, value in redacted(config).items():
        table.add_row(key, str(value))
    if config.service_key is None:
        table.add_row("service_key", "[muted]not set[/]")
    console.print(table)


@app.command()
def path(ctx: typer.Context) -> None:
    """Print the config file location."""
    console.print(str(get_config_path_option(ctx) or get_config_path()))
