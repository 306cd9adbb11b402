"""Error taxonomy for blobctl.

Every failure the console reports falls into one of these classes:

- RemoteError: a storage service call failed or returned an error payload.
- ItemError: one item's mutation failed; recorded, siblings unaffected.
- ConfirmationMismatch: the typed confirmation token did not match.
- EmptyInput: the operator cancelled a prompt.
- ConfigError: the configuration file could not be read or validated.
"""


class BlobctlError(Exception):
    """Base exception for all blobctl errors."""


class RemoteError(BlobctlError):
    """Raised when the storage service call errors or returns an error payload.

    Attributes:
        message: Human-readable failure message from the service or transport.
        status_code: HTTP status code, when the failure came with one.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ItemError(BlobctlError):
    """Raised when a single item's mutation fails.

    Attributes:
        item_id: Identifier of the failing item (root CID or digest).
        message: Underlying failure message.
    """

    def __init__(self, item_id: str, message: str) -> None:
        super().__init__(f"{item_id}: {message}")
        self.item_id = item_id
        self.message = message


class ConfirmationMismatch(BlobctlError):
    """Raised when the typed confirmation token does not match."""

    def __init__(self, expected: str) -> None:
        super().__init__(f'Confirmation token mismatch. Expected "{expected}".')
        self.expected = expected


class EmptyInput(BlobctlError):
    """Raised when the operator cancels or leaves a required prompt empty."""


class ConfigError(BlobctlError):
    """Base exception for configuration errors."""


class ConfigParseError(ConfigError):
    """Raised when the configuration file has invalid TOML syntax."""
