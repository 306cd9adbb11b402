"""Rate limit lookup command."""

from typing import Annotated

import typer

from blobctl.cli.display import print_rate_limits
from blobctl.cli.prompts import ask, ask_required
from blobctl.cli.session import cli_errors, open_session
from blobctl.core.session import ConsoleSession
from blobctl.models.store import RateLimit

app = typer.Typer(
    name="limits",
    help="Check rate limits applied to a subject.",
    invoke_without_command=True,
)


def show_rate_limits(
    session: ConsoleSession,
    subject: str | None = None,
    provider: str | None = None,
    prompt_provider: bool = False,
) -> list[RateLimit]:
    """Query and print the rate limits of a subject.

    Args:
        session: Console session.
        subject: Subject DID; prompted for when None.
        provider: Provider DID; defaults to the configured provider.
        prompt_provider: Ask for the provider, offering the default.
    """
    if subject is None:
        subject = ask_required("Subject (e.g. did:mailto:alice@example.com)")
    provider = provider or session.config.provider_did
    if prompt_provider:
        provider = ask("Provider DID (resource)", provider or "").strip() or None

    limits = session.client.list_rate_limits(subject, provider)
    print_rate_limits(subject, limits)
    return limits


@app.callback(invoke_without_command=True)
def limits(
    ctx: typer.Context,
    subject: Annotated[
        str | None,
        typer.Option(
            "--subject",
            help="Subject DID, e.g. did:mailto:alice@example.com. Prompts when omitted.",
        ),
    ] = None,
    provider: Annotated[
        str | None,
        typer.Option(
            "--provider",
            help="Provider DID (defaults to provider_did from config).",
        ),
    ] = None,
) -> None:
    """Check rate limits applied to a subject.

    Examples:
        blobctl limits --subject did:mailto:alice@example.com
        blobctl limits --subject did:mailto:alice@example.com --provider did:web:up.example
    """
    if ctx.invoked_subcommand is not None:
        return
    with cli_errors(), open_session(ctx) as session:
        show_rate_limits(session, subject, provider)
