"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules, most
importantly an in-memory storage client with offset-based cursors.
"""

import threading
import time
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest
from blobctl.core.config import ENV_OVERRIDES, ConsoleConfig
from blobctl.core.errors import RemoteError
from blobctl.models.page import Page
from blobctl.models.store import Blob, RateLimit, RemovalResult, Space, Upload
from blobctl.remote.base import StorageClient


class FakeStorageClient(StorageClient):
    """In-memory StorageClient.

    Listings are static: removals are recorded but do not shrink the
    collections, so cursors stay stable across a bulk run. Cursors are
    ``"c<offset>"`` strings.

    Attributes:
        list_errors: Cursor -> message; listing at that cursor raises.
        remove_errors: Item id -> message; removal reports failure.
        remove_raises: Item ids whose removal raises RemoteError.
        delay: Seconds each removal takes, to observe concurrency.
    """

    def __init__(self) -> None:
        self.spaces: list[Space] = []
        self.uploads: dict[str, list[Upload]] = {}
        self.blobs: dict[str, list[Blob]] = {}
        self.usage: dict[str, int] = {}
        self.limits: dict[str, list[RateLimit]] = {}
        self.list_errors: dict[str | None, str] = {}
        self.remove_errors: dict[str, str] = {}
        self.remove_raises: set[str] = set()
        self.get_blob_error: str | None = None
        self.delay = 0.0

        self.list_calls: list[tuple[str, str | None, int]] = []
        self.get_blob_calls: list[str] = []
        self.removed: list[str] = []
        self.removed_shards: list[bool] = []
        self.rate_limit_calls: list[tuple[str, str | None]] = []
        self.closed = False

        self._lock = threading.Lock()
        self._in_flight = 0
        self.max_in_flight = 0

    # === Helpers ===

    def add_space(self, did: str, name: str | None = None) -> Space:
        space = Space(did=did, name=name)
        self.spaces.append(space)
        self.uploads.setdefault(did, [])
        self.blobs.setdefault(did, [])
        return space

    def fill_uploads(self, space: Space, count: int, prefix: str = "bafyroot") -> list[Upload]:
        """Store uploads ``<prefix>1`` .. ``<prefix><count>`` in ``space``."""
        uploads = [Upload(root=f"{prefix}{i}") for i in range(1, count + 1)]
        self.uploads[space.did] = uploads
        return uploads

    def fill_blobs(self, space: Space, count: int, prefix: str = "zQmdigest") -> list[Blob]:
        """Store blobs ``<prefix>1`` .. ``<prefix><count>`` in ``space``."""
        blobs = [Blob(digest=f"{prefix}{i}", size=i * 100) for i in range(1, count + 1)]
        self.blobs[space.did] = blobs
        return blobs

    def _page(self, kind: str, items: list, cursor: str | None, size: int) -> Page:
        self.list_calls.append((kind, cursor, size))
        if cursor in self.list_errors:
            raise RemoteError(self.list_errors[cursor])
        offset = int(cursor[1:]) if cursor else 0
        chunk = items[offset : offset + size]
        end = offset + size
        return Page(items=tuple(chunk), cursor=f"c{end}" if end < len(items) else None)

    def _remove(self, item_id: str) -> RemovalResult:
        with self._lock:
            self._in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self._in_flight)
        try:
            if self.delay:
                time.sleep(self.delay)
            if item_id in self.remove_raises:
                raise RemoteError(f"connection reset removing {item_id}")
            if item_id in self.remove_errors:
                return RemovalResult(ok=False, error=self.remove_errors[item_id])
            with self._lock:
                self.removed.append(item_id)
            return RemovalResult(ok=True, freed_bytes=1024)
        finally:
            with self._lock:
                self._in_flight -= 1

    # === StorageClient ===

    def list_spaces(self) -> list[Space]:
        return list(self.spaces)

    def space_usage(self, space: Space) -> int:
        return self.usage.get(space.did, 0)

    def list_uploads(self, space: Space, cursor: str | None, size: int) -> Page[Upload]:
        return self._page("uploads", self.uploads.get(space.did, []), cursor, size)

    def list_blobs(self, space: Space, cursor: str | None, size: int) -> Page[Blob]:
        return self._page("blobs", self.blobs.get(space.did, []), cursor, size)

    def remove_upload(self, space: Space, root: str, shards: bool = False) -> RemovalResult:
        with self._lock:
            self.removed_shards.append(shards)
        return self._remove(root)

    def remove_blob(self, space: Space, digest: str) -> RemovalResult:
        return self._remove(digest)

    def get_blob(self, space: Space, digest: str) -> Blob | None:
        self.get_blob_calls.append(digest)
        if self.get_blob_error is not None:
            raise RemoteError(self.get_blob_error)
        return None

    def list_rate_limits(self, subject: str, provider: str | None = None) -> list[RateLimit]:
        self.rate_limit_calls.append((subject, provider))
        return list(self.limits.get(subject, []))

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_client() -> FakeStorageClient:
    """Fake client with no spaces."""
    return FakeStorageClient()


@pytest.fixture
def space(fake_client: FakeStorageClient) -> Space:
    """A named space registered on ``fake_client``."""
    return fake_client.add_space("did:key:z6MkSpaceOne", "photos")


@pytest.fixture
def console_config() -> ConsoleConfig:
    """Default console configuration."""
    return ConsoleConfig()


@pytest.fixture
def xdg_dirs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG config and state directories at ``tmp_path``."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "state"))
    for names in ENV_OVERRIDES.values():
        for name in names:
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def cli_client(fake_client: FakeStorageClient, xdg_dirs: Path) -> Iterator[FakeStorageClient]:
    """Make CLI commands talk to ``fake_client`` with isolated XDG directories."""
    with patch("blobctl.cli.session.create_client", return_value=fake_client):
        yield fake_client


@pytest.fixture(autouse=True)
def wide_console(monkeypatch: pytest.MonkeyPatch) -> None:
    """Render Rich output wide enough that table cells never wrap."""
    monkeypatch.setenv("COLUMNS", "200")
