"""Typed confirmation for irreversible bulk operations."""

from blobctl.core.errors import ConfirmationMismatch, EmptyInput

DEFAULT_CONFIRM_TOKEN = "PURGE"


def check_confirmation(value: str | None, token: str = DEFAULT_CONFIRM_TOKEN) -> None:
    """Accept the operator's input only if it is exactly ``token``.

    Surrounding whitespace is ignored; case is not.

    Raises:
        EmptyInput: If the prompt was cancelled or left blank.
        ConfirmationMismatch: If the trimmed input differs from ``token``.
    """
    if value is None:
        raise EmptyInput("Confirmation cancelled")
    typed = value.strip()
    if not typed:
        raise EmptyInput("Confirmation left empty")
    if typed != token:
        raise ConfirmationMismatch(token)
