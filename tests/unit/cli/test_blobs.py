"""Unit tests for blob commands.

Tests for the CLI blobs browse, purge and rm commands.
"""

from pathlib import Path
from typing import Any
from unittest.mock import patch

from blobctl.cli.main import app
from blobctl.core.state import RunJournal
from blobctl.models.run import RunKind
from blobctl.models.store import Space
from multiformats import CID, multibase, multihash
from typer.testing import CliRunner

runner = CliRunner()

MULTIHASH = multihash.digest(b"blob bytes", "sha2-256")
DIGEST = multibase.encode(MULTIHASH, "base58btc")
SHARD_CID = str(CID("base32", 1, "raw", MULTIHASH))


class TestPurge:
    """Tests for purging all blobs."""

    def test_purge_every_page(self, cli_client: Any, space: Space) -> None:
        """Every blob is removed after typing the token."""
        cli_client.fill_blobs(space, 7)

        result = runner.invoke(app, ["blobs", "purge", "-p", "3", "-c", "3"], input="PURGE\n")

        assert result.exit_code == 0
        assert "Purge complete: removed=7 scanned=7" in result.output
        assert len(cli_client.removed) == 7
        assert [call[2] for call in cli_client.list_calls] == [3, 3, 3]
        entry = RunJournal().entries()[0]
        assert entry.kind is RunKind.BLOBS
        assert entry.removed == 7

    def test_token_mismatch(self, cli_client: Any, space: Space) -> None:
        """Anything but the exact token removes nothing."""
        cli_client.fill_blobs(space, 2)

        result = runner.invoke(app, ["blobs", "purge"], input="yes\n")

        assert result.exit_code == 1
        assert 'Expected "PURGE"' in result.output
        assert cli_client.removed == []

    def test_custom_token(self, cli_client: Any, space: Space, tmp_path: Path) -> None:
        """The token comes from configuration."""
        config_file = tmp_path / "custom.toml"
        config_file.write_text('confirm_token = "DELETE-ALL"\n')
        cli_client.fill_blobs(space, 1)

        result = runner.invoke(
            app, ["--config", str(config_file), "blobs", "purge"], input="DELETE-ALL\n"
        )

        assert result.exit_code == 0
        assert cli_client.removed == ["zQmdigest1"]

    def test_empty_space(self, cli_client: Any, space: Space) -> None:
        """Purging an empty space reports that nothing was found."""
        result = runner.invoke(app, ["blobs", "purge"], input="PURGE\n")

        assert result.exit_code == 0
        assert "No items found." in result.output


class TestRemove:
    """Tests for removing one blob."""

    def test_remove(self, cli_client: Any, space: Space) -> None:
        """A confirmed removal reports the freed bytes."""
        result = runner.invoke(app, ["blobs", "rm", DIGEST], input="y\n")

        assert result.exit_code == 0
        assert f"Removed {DIGEST}. Freed: 1.00 KB." in result.output
        assert cli_client.removed == [DIGEST]

    def test_remove_by_shard_cid(self, cli_client: Any, space: Space) -> None:
        """A shard CID is reduced to the digest it carries."""
        result = runner.invoke(app, ["blobs", "rm", SHARD_CID, "--yes"])

        assert result.exit_code == 0
        assert cli_client.removed == [DIGEST]

    def test_invalid_id(self, cli_client: Any, space: Space) -> None:
        """An id that is neither a CID nor a digest is rejected before any call."""
        result = runner.invoke(app, ["blobs", "rm", "not-a-cid", "--yes"])

        assert result.exit_code == 1
        assert "not a CID or multihash digest" in result.output
        assert cli_client.removed == []

    def test_transport_failure(self, cli_client: Any, space: Space) -> None:
        """A failed call exits 1 with the message."""
        cli_client.remove_raises.add(DIGEST)

        result = runner.invoke(app, ["blobs", "rm", DIGEST, "--yes"])

        assert result.exit_code == 1
        assert "connection reset" in result.output


class TestBrowse:
    """Tests for the blob browser command."""

    def test_browse(self, cli_client: Any, space: Space) -> None:
        """browse opens a browser over blobs of the chosen space."""
        with patch("blobctl.cli.commands.blobs.PageBrowser") as browser_cls:
            result = runner.invoke(app, ["blobs", "browse", "--space", "photos", "-p", "10"])

        assert result.exit_code == 0
        kwargs = browser_cls.call_args.kwargs
        assert kwargs["title"] == "Blobs (photos)"
        assert kwargs["source"].name == "blobs"
        assert kwargs["page_size"] == 10
