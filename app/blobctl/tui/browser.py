"""Full-screen paginated browser with nested detail frames.

The browser renders the page held by a PageNavigator as a table and
overlays the top frame of a ModalStack when one is open. Page fetches and
line activations that may hit the network run in a worker thread so the
"Loading..." footer gets drawn while they are in flight.
"""

from __future__ import annotations

import base64
import logging
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from prompt_toolkit.application import Application
from prompt_toolkit.data_structures import Point
from prompt_toolkit.eventloop import run_in_executor_with_context
from prompt_toolkit.filters import Condition
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.layout import (
    ConditionalContainer,
    Float,
    FloatContainer,
    HSplit,
    Layout,
    Window,
)
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.widgets import Frame

from blobctl.core.details import DetailView, RowView
from blobctl.core.errors import BlobctlError
from blobctl.core.modal import LineResult, ModalStack
from blobctl.core.navigation import NavOutcome, NavState, PageNavigator
from blobctl.core.theme import get_prompt_style
from blobctl.remote.sources import PageSource

logger = logging.getLogger(__name__)

T = TypeVar("T")

PAGE_JUMP = 10


def osc52_sequence(text: str) -> str:
    """Terminal escape sequence that puts ``text`` on the clipboard."""
    payload = base64.b64encode(text.encode("utf-8")).decode("ascii")
    return f"\x1b]52;c;{payload}\x07"


class PageBrowser(Generic[T]):
    """Interactive table over a cursor-paginated collection.

    Args:
        title: Frame title.
        source: Collection to browse.
        page_size: Items per page, clamped to 1-500.
        render_row: Renders an item and its zero-based page index.
        header: Header line of the table.
        render_detail: Builds the frame opened with Enter on a row.
        select_label: Footer label of the Enter action.
    """

    def __init__(
        self,
        *,
        title: str,
        source: PageSource[T],
        page_size: int,
        render_row: Callable[[T, int], RowView],
        header: str,
        render_detail: Callable[[T], DetailView] | None = None,
        select_label: str = "view details",
        input: Any = None,  # noqa: A002
        output: Any = None,
    ) -> None:
        self._title = title
        self._render_row = render_row
        self._header = header
        self._render_detail = render_detail
        self._select_label = select_label
        self._notice: str | None = None
        self._resolving = False

        self._table_control = FormattedTextControl(
            self._table_fragments,
            focusable=True,
            get_cursor_position=lambda: Point(0, self._nav.selection),
        )
        self._table_window = Window(self._table_control, wrap_lines=False)
        self._modal_control = FormattedTextControl(
            self._modal_fragments,
            focusable=True,
            get_cursor_position=lambda: Point(0, self.modals.line),
        )
        self._modal_window = Window(self._modal_control, wrap_lines=False)

        self.modals = ModalStack(
            get_focus=lambda: self._app.layout.current_window,
            set_focus=lambda target: self._app.layout.focus(target),
        )
        self._nav: PageNavigator[T] = PageNavigator(source, page_size, modals=self.modals)

        modal_open = Condition(lambda: self.modals.active)
        modal = HSplit(
            [
                self._modal_window,
                Window(
                    FormattedTextControl(self._modal_hint),
                    height=1,
                    style="class:footer",
                ),
            ]
        )
        body = FloatContainer(
            content=HSplit(
                [
                    Frame(self._table_window, title=title),
                    Window(
                        FormattedTextControl(self._footer_fragments),
                        height=1,
                    ),
                ]
            ),
            floats=[
                Float(
                    ConditionalContainer(
                        Frame(modal, title=self._modal_title, style="class:modal"),
                        filter=modal_open,
                    ),
                    top=2,
                    bottom=2,
                    left=4,
                    right=4,
                )
            ],
        )
        self._app: Application[None] = Application(
            layout=Layout(body, focused_element=self._table_window),
            key_bindings=self._bindings(),
            style=get_prompt_style(),
            full_screen=True,
            input=input,
            output=output,
        )

    @property
    def navigator(self) -> PageNavigator[T]:
        return self._nav

    # === Rendering ===

    def _table_fragments(self) -> StyleAndTextTuples:
        fragments: StyleAndTextTuples = [("class:header", self._header + "\n")]
        items = self._nav.items
        if not items and self._nav.state is not NavState.LOADING:
            fragments.append(("class:row", "  (no items)\n"))
        for idx, item in enumerate(items):
            style = "class:row.selected" if idx + 1 == self._nav.selection else "class:row"
            fragments.append((style, self._render_row(item, idx).line + "\n"))
        return fragments

    def footer_text(self) -> str:
        """Status line under the table."""
        if self._nav.state is NavState.LOADING:
            return "Loading..."
        if self._nav.state is NavState.FAILED and self._nav.error:
            return f"Failed to load page: {self._nav.error}"
        parts = [f"page {self._nav.page_index + 1} ({len(self._nav.items)})"]
        parts.append("↑↓ select  ←→ page")
        if self._render_detail is not None:
            parts.append(f"Enter: {self._select_label}")
        parts.append("q: back")
        text = "  ".join(parts)
        if self._nav.at_end:
            text += "  [end]"
        if self._notice:
            text += f"  {self._notice}"
        return text

    def _footer_fragments(self) -> StyleAndTextTuples:
        if self._nav.state is NavState.LOADING:
            style = "class:footer.loading"
        elif self._nav.state is NavState.FAILED:
            style = "class:footer.error"
        else:
            style = "class:footer"
        return [(style, self.footer_text())]

    def _modal_title(self) -> str:
        top = self.modals.top
        return top.title if top is not None else ""

    def _modal_fragments(self) -> StyleAndTextTuples:
        top = self.modals.top
        if top is None:
            return []
        cursor = self.modals.line
        return [
            ("class:modal.line.selected" if idx == cursor else "class:modal.line", line + "\n")
            for idx, line in enumerate(top.lines)
        ]

    def modal_hint(self) -> str:
        """Hint line of the open frame."""
        top = self.modals.top
        if top is None:
            return ""
        text = f"line {self.modals.line + 1}/{len(top.lines)}"
        if self._resolving:
            text += "  Loading..."
        text += "  Enter: open  g/G: top/bottom  y: copy line  a: copy all  q: close"
        if self._notice:
            text += f"  {self._notice}"
        return text

    def _modal_hint(self) -> StyleAndTextTuples:
        return [("class:footer", self.modal_hint())]

    # === Actions ===

    def open_selected(self) -> bool:
        """Open the detail frame of the selected row."""
        if self.modals.active or self._render_detail is None:
            return False
        item = self._nav.selected_item
        if item is None:
            return False
        self.modals.push(self._render_detail(item).to_frame())
        self._focus_modal()
        return True

    def close_view(self) -> bool:
        """Close the top frame; returns False when none is open."""
        if not self.modals.active:
            return False
        self.modals.pop()
        self._notice = None
        return True

    def move(self, delta: int) -> None:
        """Move within the top frame, or the table selection."""
        if self.modals.active:
            self.modals.move(delta)
        else:
            self._nav.move_selection(delta)

    def _focus_modal(self) -> None:
        try:
            self._app.layout.focus(self._modal_window)
        except ValueError:
            logger.debug("Modal window not focusable yet")

    def _apply_line(self, detail: LineResult) -> None:
        frame = self.modals.apply(detail)
        if frame is not None:
            self._focus_modal()

    def _copy(self, text: str, label: str) -> None:
        output = self._app.output
        output.write_raw(osc52_sequence(text))
        output.flush()
        self._notice = label

    def _bell(self) -> None:
        self._app.output.bell()
        self._app.output.flush()

    async def _navigate(self, step: Callable[[], NavOutcome]) -> None:
        self._notice = None
        self._app.invalidate()
        outcome = await run_in_executor_with_context(step)
        if outcome is NavOutcome.BELL:
            self._bell()
        self._app.invalidate()

    async def _activate_line(self) -> None:
        if self._resolving:
            return
        self._resolving = True
        self._app.invalidate()
        try:
            detail = await run_in_executor_with_context(self.modals.resolve_line)
        except BlobctlError as e:
            self._notice = f"Error: {e}"
        else:
            self._apply_line(detail)
        finally:
            self._resolving = False
            self._app.invalidate()

    def _spawn(self, coro: Any) -> None:
        self._app.create_background_task(coro)

    def _bindings(self) -> KeyBindings:
        kb = KeyBindings()

        @kb.add("up")
        @kb.add("k")
        def _(event: Any) -> None:
            self.move(-1)

        @kb.add("down")
        @kb.add("j")
        def _(event: Any) -> None:
            self.move(1)

        @kb.add("pageup")
        def _(event: Any) -> None:
            self.move(-PAGE_JUMP)

        @kb.add("pagedown")
        def _(event: Any) -> None:
            self.move(PAGE_JUMP)

        @kb.add("g")
        def _(event: Any) -> None:
            if self.modals.active:
                self.modals.first()

        @kb.add("G")
        def _(event: Any) -> None:
            if self.modals.active:
                self.modals.last()

        @kb.add("left")
        @kb.add("h")
        def _(event: Any) -> None:
            if not self.modals.active:
                self._spawn(self._navigate(self._nav.go_prev))

        @kb.add("right")
        @kb.add("l")
        def _(event: Any) -> None:
            if not self.modals.active:
                self._spawn(self._navigate(self._nav.go_next))

        @kb.add("enter")
        def _(event: Any) -> None:
            if self.modals.active:
                self._spawn(self._activate_line())
            else:
                self.open_selected()

        @kb.add("y")
        @kb.add("c")
        def _(event: Any) -> None:
            if self.modals.active:
                self._copy(self.modals.current_line(), "Copied line")
            else:
                item = self._nav.selected_item
                if item is not None:
                    self._copy(self._render_row(item, self._nav.selection - 1).columns[1], "Copied")

        @kb.add("a")
        def _(event: Any) -> None:
            if self.modals.active:
                self._copy(self.modals.all_text(), "Copied all")

        @kb.add("q")
        @kb.add("escape")
        def _(event: Any) -> None:
            if not self.close_view():
                event.app.exit()

        @kb.add("c-c")
        def _(event: Any) -> None:
            event.app.exit(exception=KeyboardInterrupt)

        return kb

    # === Lifecycle ===

    def _start(self) -> None:
        self._spawn(self._navigate(self._nav.load))

    def run(self) -> None:
        """Show the browser until the operator leaves it.

        Raises:
            KeyboardInterrupt: If the operator pressed Ctrl-C.
        """
        self._app.run(pre_run=self._start)
