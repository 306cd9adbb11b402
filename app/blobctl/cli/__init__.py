"""Command-line interface for blobctl."""

from blobctl.cli.main import app

__all__ = ["app"]
