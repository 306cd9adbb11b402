"""Unit tests for history command.

Tests for the CLI history command implementation.
"""

import json
from pathlib import Path

import pytest
from blobctl.cli.main import app
from blobctl.core.state import RunJournal
from blobctl.models.run import RunKind, RunRecord
from typer.testing import CliRunner

runner = CliRunner()


def _entry(run_id: str, timestamp: str, kind: RunKind, **kwargs: object) -> RunRecord:
    return RunRecord(
        id=run_id,
        timestamp=timestamp,
        kind=kind,
        space="did:key:z6MkSpaceOne",
        scanned=10,
        removed=10,
        **kwargs,  # type: ignore[arg-type]
    )


@pytest.fixture
def journal(xdg_dirs: Path) -> RunJournal:
    """Journal in the isolated state directory, oldest entry first."""
    journal = RunJournal()
    journal.record(_entry("aaa111111111", "2026-01-20T10:00:00+00:00", RunKind.UPLOADS))
    journal.record(
        _entry(
            "bbb222222222",
            "2026-01-25T10:00:00+00:00",
            RunKind.BLOBS,
            failed=2,
            aborted_reason="rate limited",
        )
    )
    journal.record(_entry("ccc333333333", "2026-01-26T10:00:00+00:00", RunKind.UPLOADS))
    return journal


class TestHistoryCommand:
    """Tests for the history command."""

    def test_empty(self, xdg_dirs: Path) -> None:
        """Without runs a message is shown."""
        result = runner.invoke(app, ["history"])

        assert result.exit_code == 0
        assert "No runs recorded." in result.output

    def test_table(self, journal: RunJournal) -> None:
        """Runs are listed newest first with short IDs and status."""
        result = runner.invoke(app, ["history"])

        assert result.exit_code == 0
        assert "Purge Runs" in result.output
        assert result.output.index("ccc33333") < result.output.index("aaa11111")
        assert "stopped" in result.output
        assert "complete" in result.output

    def test_limit(self, journal: RunJournal) -> None:
        """-n limits the number of rows."""
        result = runner.invoke(app, ["history", "-n", "1"])

        assert result.exit_code == 0
        assert "ccc33333" in result.output
        assert "bbb22222" not in result.output

    def test_kind_filter(self, journal: RunJournal) -> None:
        """--kind keeps only runs of that kind."""
        result = runner.invoke(app, ["history", "--kind", "BLOBS"])

        assert result.exit_code == 0
        assert "bbb22222" in result.output
        assert "aaa11111" not in result.output

    def test_since(self, journal: RunJournal) -> None:
        """--since drops older runs."""
        result = runner.invoke(app, ["history", "--since", "2026-01-25"])

        assert result.exit_code == 0
        assert "bbb22222" in result.output
        assert "aaa11111" not in result.output

    def test_invalid_since(self, journal: RunJournal) -> None:
        """An invalid date is an error."""
        result = runner.invoke(app, ["history", "--since", "last week"])

        assert result.exit_code == 1
        assert "Invalid date format" in result.output

    def test_json(self, journal: RunJournal) -> None:
        """--json prints full entries."""
        result = runner.invoke(app, ["history", "--json", "--kind", "blobs"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert len(data) == 1
        assert data[0]["id"] == "bbb222222222"
        assert data[0]["aborted_reason"] == "rate limited"
