"""Shared option types for CLI commands.

Annotated aliases keep option names and bounds identical across the
uploads, blobs and usage commands.
"""

from typing import Annotated

import typer

from blobctl.models.page import MAX_PAGE_SIZE, MIN_PAGE_SIZE
from blobctl.models.run import MAX_CONCURRENCY

SpaceOption = Annotated[
    str | None,
    typer.Option(
        "--space",
        "-s",
        help="Space DID or name. Prompts when omitted.",
    ),
]

PageSizeOption = Annotated[
    int | None,
    typer.Option(
        "--page-size",
        "-p",
        min=MIN_PAGE_SIZE,
        max=MAX_PAGE_SIZE,
        help="Items per page (default from config).",
    ),
]

ConcurrencyOption = Annotated[
    int | None,
    typer.Option(
        "--concurrency",
        "-c",
        min=1,
        max=MAX_CONCURRENCY,
        help="Removals in flight at once (default from config).",
    ),
]

ShardsOption = Annotated[
    bool | None,
    typer.Option(
        "--shards/--keep-shards",
        help="Delete shards together with uploads. Prompts when omitted.",
    ),
]

YesOption = Annotated[
    bool,
    typer.Option(
        "--yes",
        "-y",
        help="Skip the yes/no confirmation.",
    ),
]
