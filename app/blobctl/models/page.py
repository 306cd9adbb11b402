"""Page model for cursor-paginated collections."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")

# Service-side bounds for a single page request.
MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 500


@dataclass(frozen=True, slots=True)
class Page(Generic[T]):
    """One page of a remote collection.

    Attributes:
        items: Items on this page, in service order.
        cursor: Opaque continuation token. None marks the end of the
            collection.
    """

    items: Sequence[T] = field(default_factory=tuple)
    cursor: str | None = None

    @property
    def is_last(self) -> bool:
        """Check if no further page follows this one."""
        return self.cursor is None

    def __len__(self) -> int:
        return len(self.items)


def clamp_page_size(size: int) -> int:
    """Clamp a requested page size to the service bounds."""
    return max(MIN_PAGE_SIZE, min(MAX_PAGE_SIZE, int(size)))
