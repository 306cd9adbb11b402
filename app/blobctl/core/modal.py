"""Stack of detail frames layered over the browser.

Only the top frame is interactive. Every push records the focus target
that was active right before it, and the matching pop hands exactly that
target back, since a frame fully covers its parent on a single-focus
terminal. The stack is strictly LIFO.

Frames drill down lazily: activating a line calls the frame's handler,
which may return a child frame (or plain text) to push, or None to close
the frame.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Union

logger = logging.getLogger(__name__)

DEFAULT_DETAIL_TITLE = "Details"

LineResult = Union["ModalFrame", str, None]
LineHandler = Callable[[int], LineResult]


@dataclass(slots=True)
class ModalFrame:
    """One detail view.

    Attributes:
        title: Frame title shown in the border.
        lines: Content, one entry per selectable line.
        on_line_enter: Optional handler called with the activated line
            index; returns a child frame, text for a child frame, or None.
    """

    title: str
    lines: list[str] = field(default_factory=list)
    on_line_enter: LineHandler | None = None

    @classmethod
    def from_text(
        cls,
        title: str | None,
        content: str | None,
        on_line_enter: LineHandler | None = None,
    ) -> ModalFrame:
        """Build a frame from multi-line text."""
        return cls(
            title=title or DEFAULT_DETAIL_TITLE,
            lines=str(content or "").split("\n"),
            on_line_enter=on_line_enter,
        )

    def text(self) -> str:
        """All lines joined with newlines."""
        return "\n".join(self.lines)


def as_frame(detail: LineResult) -> ModalFrame | None:
    """Normalize a handler result into a frame (or None)."""
    if detail is None:
        return None
    if isinstance(detail, ModalFrame):
        return detail
    return ModalFrame.from_text(DEFAULT_DETAIL_TITLE, detail)


@dataclass(slots=True)
class _Entry:
    frame: ModalFrame
    restore_focus: Any
    line: int = 0


class ModalStack:
    """LIFO of detail frames with per-frame focus restoration.

    Args:
        get_focus: Returns the currently focused element; called on push.
        set_focus: Restores a previously captured element; called on pop.
    """

    def __init__(
        self,
        get_focus: Callable[[], Any] | None = None,
        set_focus: Callable[[Any], None] | None = None,
    ) -> None:
        self._entries: list[_Entry] = []
        self._get_focus = get_focus or (lambda: None)
        self._set_focus = set_focus

    @property
    def depth(self) -> int:
        """Number of open frames."""
        return len(self._entries)

    @property
    def active(self) -> bool:
        """Check if any frame is open."""
        return bool(self._entries)

    @property
    def top(self) -> ModalFrame | None:
        """The interactive frame, if any."""
        return self._entries[-1].frame if self._entries else None

    @property
    def line(self) -> int:
        """Cursor line of the top frame (0 when no frame is open)."""
        return self._entries[-1].line if self._entries else 0

    def push(self, frame: ModalFrame, focus: Any = None) -> None:
        """Open a frame on top, capturing the focus it replaces.

        Args:
            frame: Frame to show.
            focus: Focus target to restore on pop. Defaults to whatever the
                ``get_focus`` callback reports.
        """
        if focus is None:
            focus = self._get_focus()
        self._entries.append(_Entry(frame=frame, restore_focus=focus))
        logger.debug("Pushed modal '%s' (depth=%d)", frame.title, self.depth)

    def pop(self) -> Any:
        """Close the top frame and restore the focus captured by its push.

        Returns:
            The focus target that was active before the frame was pushed.

        Raises:
            IndexError: If no frame is open.
        """
        if not self._entries:
            msg = "pop from empty modal stack"
            raise IndexError(msg)
        entry = self._entries.pop()
        if self._set_focus is not None and entry.restore_focus is not None:
            self._set_focus(entry.restore_focus)
        logger.debug("Popped modal '%s' (depth=%d)", entry.frame.title, self.depth)
        return entry.restore_focus

    def clear(self) -> None:
        """Pop every frame, restoring focus at each step."""
        while self._entries:
            self.pop()

    # === Line activation ===

    def resolve_line(self, index: int | None = None) -> LineResult:
        """Call the top frame's handler without touching the stack.

        The handler may do remote work, so callers with an event loop run
        this off-loop and apply the result with :meth:`apply`.

        Raises:
            IndexError: If no frame is open.
        """
        if not self._entries:
            msg = "no active modal frame"
            raise IndexError(msg)
        entry = self._entries[-1]
        if entry.frame.on_line_enter is None:
            return None
        return entry.frame.on_line_enter(entry.line if index is None else index)

    def apply(self, detail: LineResult) -> ModalFrame | None:
        """Push the child frame for ``detail``, or pop when there is none.

        Returns:
            The pushed frame, or None if the top frame was closed.
        """
        frame = as_frame(detail)
        if frame is None:
            self.pop()
            return None
        self.push(frame)
        return frame

    def activate_line(self, index: int | None = None) -> ModalFrame | None:
        """Activate a line of the top frame (defaults to the cursor line)."""
        return self.apply(self.resolve_line(index))

    # === Cursor within the top frame ===

    def move(self, delta: int) -> int:
        """Move the top frame's cursor, clamped to its lines."""
        if not self._entries:
            return 0
        entry = self._entries[-1]
        last = max(0, len(entry.frame.lines) - 1)
        entry.line = max(0, min(last, entry.line + delta))
        return entry.line

    def first(self) -> int:
        """Jump to the first line."""
        return self.move(-self.line)

    def last(self) -> int:
        """Jump to the last line."""
        top = self.top
        if top is None:
            return 0
        return self.move(len(top.lines))

    def current_line(self) -> str:
        """Text of the cursor line of the top frame."""
        top = self.top
        if top is None or not top.lines:
            return ""
        return top.lines[self.line]

    def all_text(self) -> str:
        """All lines of the top frame."""
        top = self.top
        return top.text() if top is not None else ""
