"""Full-screen terminal views for blobctl."""

from blobctl.tui.browser import PageBrowser, osc52_sequence

__all__ = ["PageBrowser", "osc52_sequence"]
