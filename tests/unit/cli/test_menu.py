"""Unit tests for the interactive main menu."""

from typing import Any
from unittest.mock import patch

from blobctl.cli.commands.menu import MENU, choose
from blobctl.cli.main import app
from blobctl.core.errors import RemoteError
from blobctl.models.store import Space
from typer.testing import CliRunner

runner = CliRunner()

EXIT = str(len(MENU))


class TestChoose:
    """Tests for mapping answers to entries."""

    def test_valid_numbers(self) -> None:
        """Numbers select entries from one."""
        assert choose("1") == MENU[0]
        assert choose(f" {EXIT} ") == MENU[-1]

    def test_invalid(self) -> None:
        """Zero, blanks and junk select nothing."""
        assert choose("0") is None
        assert choose("") is None
        assert choose("abc") is None

    def test_last_entry_is_exit(self) -> None:
        """The last entry leaves the menu."""
        assert MENU[-1].label == "Exit"
        assert MENU[-1].action is None


class TestMenuLoop:
    """Tests for the menu loop started without a subcommand."""

    def test_list_spaces_then_exit(self, cli_client: Any, space: Space) -> None:
        """An entry runs and the menu comes back until Exit."""
        result = runner.invoke(app, [], input=f"1\n{EXIT}\n")

        assert result.exit_code == 0
        assert "photos" in result.output
        assert result.output.count("List spaces") == 2

    def test_closed_input_leaves(self, cli_client: Any, space: Space) -> None:
        """End of input at the menu prompt ends the program."""
        result = runner.invoke(app, ["menu"])

        assert result.exit_code == 0
        assert "endpoint=http://127.0.0.1:8787" in result.output

    def test_unknown_choice(self, cli_client: Any, space: Space) -> None:
        """Unknown answers are reported and the menu is shown again."""
        result = runner.invoke(app, [], input=f"99\n{EXIT}\n")

        assert result.exit_code == 0
        assert "Unknown choice: 99" in result.output

    def test_errors_do_not_end_loop(self, cli_client: Any, space: Space) -> None:
        """A failing entry reports the error and returns to the menu."""
        with patch.object(cli_client, "list_spaces", side_effect=RemoteError("gateway down")):
            result = runner.invoke(app, [], input=f"1\n{EXIT}\n")

        assert result.exit_code == 0
        assert "gateway down" in result.output
        assert result.output.count("List spaces") == 2

    def test_cancelled_prompt_returns_to_menu(self, cli_client: Any, space: Space) -> None:
        """A blank required answer aborts the entry only."""
        result = runner.invoke(app, [], input=f"7\n\n{EXIT}\n")

        assert result.exit_code == 0
        assert "Aborted." in result.output
        assert cli_client.removed == []

    def test_purge_blobs_with_prompted_settings(self, cli_client: Any, space: Space) -> None:
        """Menu purges prompt for page size and concurrency, blank keeps defaults."""
        cli_client.fill_blobs(space, 4)

        result = runner.invoke(app, [], input=f"6\n\n\nPURGE\n{EXIT}\n")

        assert result.exit_code == 0
        assert "size=50 concurrency=3" in result.output
        assert len(cli_client.removed) == 4

    def test_ctrl_c_in_browser_exits(self, cli_client: Any, space: Space) -> None:
        """Ctrl-C inside a browser ends the whole program with status 0."""
        with patch("blobctl.cli.commands.uploads.PageBrowser") as browser_cls:
            browser_cls.return_value.run.side_effect = KeyboardInterrupt
            result = runner.invoke(app, [], input="9\n\n1\n")

        assert result.exit_code == 0
        assert cli_client.list_calls == []
        assert result.output.count("List spaces") == 1
