"""Unit tests for the full-screen page browser.

The application is built against a pipe input and a dummy output and is
never run; navigation is driven synchronously through the navigator.
"""

import base64
from collections.abc import Iterator
from typing import Any

import pytest
from blobctl.core.details import UPLOAD_HEADER, render_upload_row, upload_detail
from blobctl.models.store import Shard, Space, Upload
from blobctl.remote.sources import UploadPageSource
from blobctl.tui.browser import PageBrowser, osc52_sequence
from prompt_toolkit.input import create_pipe_input
from prompt_toolkit.output import DummyOutput


@pytest.fixture
def browser(fake_client: Any, space: Space) -> Iterator[PageBrowser[Upload]]:
    fake_client.uploads[space.did] = [
        Upload(root="bafyA", shards=[Shard(cid="bag1", size=10)]),
        Upload(root="bafyB"),
        Upload(root="bafyC"),
        Upload(root="bafyD"),
    ]
    with create_pipe_input() as pipe:
        yield PageBrowser(
            title="Uploads (photos)",
            source=UploadPageSource(fake_client, space),
            page_size=3,
            render_row=render_upload_row,
            header=UPLOAD_HEADER,
            render_detail=upload_detail,
            input=pipe,
            output=DummyOutput(),
        )


class TestFooter:
    """Tests for the status line."""

    def test_before_load(self, browser: PageBrowser[Upload]) -> None:
        """Nothing is fetched until the browser starts."""
        assert browser.navigator.items == []

    def test_first_page(self, browser: PageBrowser[Upload]) -> None:
        """The footer shows page number, count and the Enter action."""
        browser.navigator.load()

        text = browser.footer_text()

        assert text.startswith("page 1 (3)")
        assert "Enter: view details" in text
        assert "[end]" not in text

    def test_last_page_marked(self, browser: PageBrowser[Upload]) -> None:
        """The last page is marked as the end."""
        browser.navigator.load()
        browser.navigator.go_next()

        text = browser.footer_text()

        assert text.startswith("page 2 (1)")
        assert text.endswith("[end]")

    def test_failed_load(self, browser: PageBrowser[Upload], fake_client: Any) -> None:
        """A failed fetch is shown in the footer."""
        fake_client.list_errors[None] = "503 Service Unavailable"

        browser.navigator.load()

        assert browser.footer_text() == "Failed to load page: 503 Service Unavailable"


class TestDetails:
    """Tests for detail frames."""

    def test_open_and_close(self, browser: PageBrowser[Upload]) -> None:
        """Enter opens the selected row's details; close pops it."""
        browser.navigator.load()

        assert browser.open_selected()
        assert browser.modals.depth == 1
        assert browser.modals.top is not None
        assert browser.modals.top.lines[0] == "Root: bafyA"
        assert browser.modal_hint().startswith("line 1/")

        assert browser.close_view()
        assert not browser.modals.active
        assert not browser.close_view()

    def test_only_one_row_frame(self, browser: PageBrowser[Upload]) -> None:
        """A row frame cannot be opened while another frame is open."""
        browser.navigator.load()
        browser.open_selected()

        assert not browser.open_selected()
        assert browser.modals.depth == 1

    def test_move_targets_top_frame(self, browser: PageBrowser[Upload]) -> None:
        """With a frame open, movement scrolls the frame and not the table."""
        browser.navigator.load()
        browser.open_selected()

        browser.move(1)

        assert browser.modals.line == 1
        assert browser.navigator.selection == 1

    def test_move_selection(self, browser: PageBrowser[Upload]) -> None:
        """Without a frame, movement changes the row selection."""
        browser.navigator.load()

        browser.move(1)
        browser.open_selected()

        assert browser.modals.top is not None
        assert browser.modals.top.lines[0] == "Root: bafyB"

    def test_shard_drill_down(self, browser: PageBrowser[Upload]) -> None:
        """Activating a shard line stacks the shard frame."""
        browser.navigator.load()
        browser.open_selected()
        browser.modals.last()

        child = browser.modals.activate_line()

        assert child is not None
        assert child.title == "Shard 1"
        assert browser.modals.depth == 2

    def test_without_detail_renderer(self, fake_client: Any, space: Space) -> None:
        """Browsers without details never open frames."""
        fake_client.fill_uploads(space, 2)
        with create_pipe_input() as pipe:
            plain = PageBrowser(
                title="Uploads",
                source=UploadPageSource(fake_client, space),
                page_size=5,
                render_row=render_upload_row,
                header=UPLOAD_HEADER,
                input=pipe,
                output=DummyOutput(),
            )
            plain.navigator.load()

            assert not plain.open_selected()
            assert "Enter:" not in plain.footer_text()


class TestClipboard:
    """Tests for the OSC 52 clipboard sequence."""

    def test_sequence(self) -> None:
        """Text is base64 encoded inside the OSC 52 escape."""
        sequence = osc52_sequence("bafyA")

        assert sequence.startswith("\x1b]52;c;")
        assert sequence.endswith("\x07")
        assert base64.b64decode(sequence[7:-1]) == b"bafyA"
