"""CLI commands for blobctl.

This package contains all subcommand implementations.
"""

from blobctl.cli.commands import blobs, config, history, limits, menu, spaces, uploads

__all__ = ["blobs", "config", "history", "limits", "menu", "spaces", "uploads"]
