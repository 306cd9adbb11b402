"""Unit tests for the limits command."""

from typing import Any

import pytest
from blobctl.cli.main import app
from blobctl.models.store import RateLimit
from typer.testing import CliRunner

runner = CliRunner()

SUBJECT = "did:mailto:example.com:alice"


class TestLimits:
    """Tests for rate-limit lookups."""

    def test_with_options(self, cli_client: Any) -> None:
        """Subject and provider are passed through and limits listed."""
        cli_client.limits[SUBJECT] = [RateLimit(id="rl-1", limit=0)]

        result = runner.invoke(
            app, ["limits", "--subject", SUBJECT, "--provider", "did:web:up.example"]
        )

        assert result.exit_code == 0
        assert cli_client.rate_limit_calls == [(SUBJECT, "did:web:up.example")]
        assert "rl-1" in result.output

    def test_subject_prompted(self, cli_client: Any) -> None:
        """Without --subject the operator is asked."""
        result = runner.invoke(app, ["limits"], input=f"{SUBJECT}\n")

        assert result.exit_code == 0
        assert cli_client.rate_limit_calls == [(SUBJECT, None)]
        assert "(none)" in result.output

    def test_blank_subject_cancels(self, cli_client: Any) -> None:
        """A blank subject cancels the lookup."""
        result = runner.invoke(app, ["limits"], input="\n")

        assert result.exit_code == 0
        assert "Aborted." in result.output
        assert cli_client.rate_limit_calls == []

    def test_provider_from_environment(
        self, cli_client: Any, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """The configured provider is used when --provider is omitted."""
        monkeypatch.setenv("STORACHA_PROVIDER", "did:web:env.example")

        result = runner.invoke(app, ["limits", "--subject", SUBJECT])

        assert result.exit_code == 0
        assert cli_client.rate_limit_calls == [(SUBJECT, "did:web:env.example")]

    def test_unknown_limit_value(self, cli_client: Any) -> None:
        """Limits without a value are shown as unknown."""
        cli_client.limits[SUBJECT] = [RateLimit(id="rl-2")]

        result = runner.invoke(app, ["limits", "--subject", SUBJECT])

        assert result.exit_code == 0
        assert "(unknown)" in result.output
