"""Records returned by the storage service.

These pydantic models parse the gateway's JSON payloads (camelCase keys)
into the objects the console renders and mutates. Unknown keys are
ignored so the console keeps working when the service adds fields.
"""

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

_RECORD_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    extra="ignore",
    frozen=True,
)


class Space(BaseModel):
    """An administrative scope holding uploads and blobs.

    Attributes:
        did: Decentralized identifier of the space.
        name: Optional human-readable name.
        access: Access type reported by the agent (e.g. "public").
    """

    model_config = _RECORD_CONFIG

    did: str
    name: str | None = None
    access: str | None = None

    @property
    def label(self) -> str:
        """Name if set, otherwise the DID."""
        return self.name or self.did

    @property
    def display_name(self) -> str:
        """Name for listings, with a placeholder when the space has none."""
        return self.name or "(no name)"


class Shard(BaseModel):
    """One stored shard of an upload."""

    model_config = _RECORD_CONFIG

    cid: str
    size: int | None = None
    digest: str | None = None


class Upload(BaseModel):
    """An upload: a content root and the shards that hold its bytes."""

    model_config = _RECORD_CONFIG

    root: str
    shards: list[Shard] = []
    size: int | None = None
    inserted_at: str | None = None
    updated_at: str | None = None

    @field_validator("shards", mode="before")
    @classmethod
    def coerce_shard_refs(cls, value: Any) -> Any:
        """Accept bare CID strings as shard entries."""
        if not isinstance(value, list):
            return value
        return [{"cid": entry} if isinstance(entry, str) else entry for entry in value]


class Blob(BaseModel):
    """A stored blob addressed by its multihash digest (base58btc)."""

    model_config = _RECORD_CONFIG

    digest: str
    size: int | None = None
    cause: str | None = None
    inserted_at: str | None = None


class RateLimit(BaseModel):
    """A rate limit applied to a subject."""

    model_config = _RECORD_CONFIG

    id: str
    limit: int | str | None = None


@dataclass(frozen=True, slots=True)
class RemovalResult:
    """Outcome of a single removal call.

    Mirrors the service's ``{ok: {size}} | {error: {message}}`` union.

    Attributes:
        ok: Whether the service accepted the removal.
        freed_bytes: Bytes released, when the service reports it.
        error: Error message when the removal was rejected.
    """

    ok: bool
    freed_bytes: int | None = None
    error: str | None = None

    @property
    def failed(self) -> bool:
        """Check if the removal was rejected."""
        return not self.ok
