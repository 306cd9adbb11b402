"""Unit tests for the Page model."""

import pytest
from blobctl.models.page import MAX_PAGE_SIZE, MIN_PAGE_SIZE, Page, clamp_page_size


class TestPage:
    """Tests for Page."""

    def test_empty_page(self) -> None:
        """A default page is empty and last."""
        page: Page[str] = Page()

        assert len(page) == 0
        assert page.is_last

    def test_cursor_means_more(self) -> None:
        """A page with a cursor is not the last one."""
        page = Page(items=("a", "b"), cursor="c2")

        assert len(page) == 2
        assert not page.is_last


class TestClampPageSize:
    """Tests for clamp_page_size."""

    @pytest.mark.parametrize(
        ("requested", "expected"),
        [
            (0, MIN_PAGE_SIZE),
            (-5, MIN_PAGE_SIZE),
            (1, 1),
            (50, 50),
            (500, 500),
            (9999, MAX_PAGE_SIZE),
        ],
    )
    def test_clamps(self, requested: int, expected: int) -> None:
        """Sizes outside 1-500 are clamped to the nearest bound."""
        assert clamp_page_size(requested) == expected
