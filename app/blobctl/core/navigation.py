"""Cursor-paginated navigation state for the interactive browser.

The navigator owns which page is on screen and which row is selected. It
pulls pages from a PageSource on demand, keeps a stack of cursors already
used so it can walk back, and never lets two fetches overlap.

States:
    IDLE -> LOADING       first load, or next/prev while no modal is open
    LOADING -> LOADED     fetch succeeded; page, cursors and index committed
    LOADING -> FAILED     fetch failed; the previous page stays on screen
    LOADED/FAILED -> LOADING on any navigation input

Row 0 is the header row and means "nothing selected"; item rows start at 1.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Generic, TypeVar

from blobctl.core.errors import RemoteError
from blobctl.models.page import clamp_page_size

if TYPE_CHECKING:
    from blobctl.core.modal import ModalStack
    from blobctl.remote.sources import PageSource

logger = logging.getLogger(__name__)

T = TypeVar("T")


class NavState(Enum):
    """Lifecycle of the navigator."""

    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


class NavOutcome(Enum):
    """What a navigation request did.

    Attributes:
        LOADED: A page was fetched and is now displayed.
        FAILED: The fetch failed; the previous page is still displayed.
        BELL: Nothing to navigate to; the caller should alert the user.
        IGNORED: Input arrived while a modal was open or a fetch was running.
    """

    LOADED = "loaded"
    FAILED = "failed"
    BELL = "bell"
    IGNORED = "ignored"


@dataclass(frozen=True, slots=True)
class NavigationState:
    """Snapshot of the navigator.

    Attributes:
        current_cursor: Cursor that fetched the displayed page (None for
            the first page).
        cursor_history: Cursors of the pages before this one, oldest first.
        page_index: Zero-based page number; equals len(cursor_history).
        selection_index: Selected row, 0 being the header.
    """

    current_cursor: str | None
    cursor_history: tuple[str | None, ...]
    page_index: int
    selection_index: int


class PageNavigator(Generic[T]):
    """Forward/backward navigation over a PageSource.

    Args:
        source: Collection to page through.
        page_size: Items per page, clamped to 1-500.
        modals: Modal stack of the same session; navigation input is
            ignored while it holds any frame.
    """

    def __init__(
        self,
        source: PageSource[T],
        page_size: int,
        modals: ModalStack | None = None,
    ) -> None:
        self._source = source
        self._page_size = clamp_page_size(page_size)
        self._modals = modals
        self._lock = threading.Lock()

        self._state = NavState.IDLE
        self._cursor: str | None = None
        self._next_cursor: str | None = None
        self._history: list[str | None] = []
        self._items: list[T] = []
        self._selection = 0
        self._error: str | None = None

    # === Read-only view ===

    @property
    def source(self) -> PageSource[T]:
        return self._source

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def state(self) -> NavState:
        return self._state

    @property
    def items(self) -> list[T]:
        """Items of the displayed page."""
        return list(self._items)

    @property
    def page_index(self) -> int:
        return len(self._history)

    @property
    def cursor(self) -> str | None:
        """Cursor that fetched the displayed page."""
        return self._cursor

    @property
    def next_cursor(self) -> str | None:
        """Forward cursor returned with the displayed page."""
        return self._next_cursor

    @property
    def at_end(self) -> bool:
        """Check if the displayed page is the last one."""
        return self._state in (NavState.LOADED, NavState.FAILED) and self._next_cursor is None

    @property
    def selection(self) -> int:
        return self._selection

    @property
    def error(self) -> str | None:
        """Message of the last failed fetch, cleared on success."""
        return self._error

    @property
    def selected_item(self) -> T | None:
        """Item under the selection, or None on the header row."""
        if 1 <= self._selection <= len(self._items):
            return self._items[self._selection - 1]
        return None

    def snapshot(self) -> NavigationState:
        """Return an immutable snapshot of the navigation state."""
        return NavigationState(
            current_cursor=self._cursor,
            cursor_history=tuple(self._history),
            page_index=self.page_index,
            selection_index=self._selection,
        )

    # === Transitions ===

    def _blocked(self) -> bool:
        return self._modals is not None and self._modals.active

    def _begin(self) -> bool:
        """Enter LOADING unless input must be ignored."""
        with self._lock:
            if self._blocked() or self._state is NavState.LOADING:
                return False
            self._state = NavState.LOADING
            return True

    def _fetch(self, cursor: str | None) -> tuple[list[T], str | None] | None:
        try:
            page = self._source.fetch(cursor, self._page_size)
        except RemoteError as e:
            logger.warning("Failed to load %s page: %s", self._source.name, e)
            with self._lock:
                self._error = e.message
                self._state = NavState.FAILED
            return None
        except Exception as e:
            logger.exception("Unexpected error loading %s page", self._source.name)
            with self._lock:
                self._error = f"Unexpected error: {e}"
                self._state = NavState.FAILED
            return None
        return list(page.items), page.cursor

    def _commit(
        self,
        cursor: str | None,
        history: list[str | None],
        items: list[T],
        next_cursor: str | None,
    ) -> None:
        with self._lock:
            self._cursor = cursor
            self._history = history
            self._items = items
            self._next_cursor = next_cursor
            self._error = None
            if items:
                self._selection = max(1, min(self._selection, len(items)))
            else:
                self._selection = 0
            self._state = NavState.LOADED

    def load(self) -> NavOutcome:
        """Fetch (or re-fetch) the page at the current cursor."""
        if not self._begin():
            return NavOutcome.IGNORED
        fetched = self._fetch(self._cursor)
        if fetched is None:
            return NavOutcome.FAILED
        items, next_cursor = fetched
        self._commit(self._cursor, list(self._history), items, next_cursor)
        return NavOutcome.LOADED

    def go_next(self) -> NavOutcome:
        """Advance to the next page.

        Without a forward cursor this is a no-op reported as BELL; no fetch
        is issued.
        """
        if self._blocked() or self._state is NavState.LOADING:
            return NavOutcome.IGNORED
        if self._state is NavState.IDLE:
            return self.load()
        if self._next_cursor is None:
            return NavOutcome.BELL
        if not self._begin():
            return NavOutcome.IGNORED

        target = self._next_cursor
        fetched = self._fetch(target)
        if fetched is None:
            return NavOutcome.FAILED
        items, next_cursor = fetched
        self._commit(target, [*self._history, self._cursor], items, next_cursor)
        return NavOutcome.LOADED

    def go_prev(self) -> NavOutcome:
        """Return to the previous page; BELL when already on the first."""
        if self._blocked() or self._state is NavState.LOADING:
            return NavOutcome.IGNORED
        if not self._history:
            return NavOutcome.BELL
        if not self._begin():
            return NavOutcome.IGNORED

        target = self._history[-1]
        fetched = self._fetch(target)
        if fetched is None:
            return NavOutcome.FAILED
        items, next_cursor = fetched
        self._commit(target, self._history[:-1], items, next_cursor)
        return NavOutcome.LOADED

    def move_selection(self, delta: int) -> int:
        """Move the selected row within the displayed page."""
        if self._blocked() or not self._items:
            return self._selection
        self._selection = max(1, min(len(self._items), self._selection + delta))
        return self._selection
