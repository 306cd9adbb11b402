"""HTTP storage client.

Talks to a JSON gateway in front of the object store:

    GET    /spaces
    GET    /spaces/{did}/usage
    GET    /spaces/{did}/uploads?size=&cursor=
    DELETE /spaces/{did}/uploads/{root}?shards=
    GET    /spaces/{did}/blobs?size=&cursor=
    GET    /spaces/{did}/blobs/{digest}
    DELETE /spaces/{did}/blobs/{digest}
    GET    /rate-limits?subject=&provider=

Successful responses carry ``{"ok": ...}`` (list endpoints may return
``{"results": [...], "cursor": ...}`` directly); failures carry
``{"error": {"message": ...}}``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from blobctl import __version__
from blobctl.core.errors import RemoteError
from blobctl.models.page import Page
from blobctl.models.store import Blob, RateLimit, RemovalResult, Space, Upload
from blobctl.remote.base import StorageClient

if TYPE_CHECKING:
    from blobctl.core.config import ConsoleConfig

logger = logging.getLogger(__name__)


def _error_message(payload: Any) -> str | None:
    """Extract the error message from an ``{"error": ...}`` payload."""
    if not isinstance(payload, dict) or "error" not in payload:
        return None
    error = payload["error"]
    if isinstance(error, dict):
        return str(error.get("message") or error.get("name") or error)
    return str(error)


def _unwrap(payload: Any) -> Any:
    """Return the ``ok`` value of a response, or the payload itself."""
    if isinstance(payload, dict) and "ok" in payload:
        return payload["ok"]
    return payload


class HttpStorageClient(StorageClient):
    """StorageClient backed by the JSON gateway over httpx."""

    def __init__(self, config: ConsoleConfig, transport: httpx.BaseTransport | None = None) -> None:
        """Initialize the client.

        Args:
            config: Console configuration (endpoint, key, profile, timeout).
            transport: Optional httpx transport, used by tests.
        """
        headers = {
            "User-Agent": f"blobctl/{__version__}",
            "X-Agent-Profile": config.profile,
        }
        if config.service_key:
            headers["Authorization"] = f"Bearer {config.service_key}"
        self._http = httpx.Client(
            base_url=config.endpoint,
            headers=headers,
            timeout=config.timeout_seconds,
            transport=transport,
        )

    def close(self) -> None:
        self._http.close()

    # === Transport ===

    def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Issue a request and return the decoded JSON body.

        Raises:
            RemoteError: On transport failure, non-JSON bodies, or HTTP
                error statuses. Error payloads on 2xx responses are left to
                the caller, since removals report them as results.
        """
        clean_params = {k: v for k, v in (params or {}).items() if v is not None}
        logger.debug("%s %s %s", method, path, clean_params)
        try:
            response = self._http.request(method, path, params=clean_params)
        except httpx.HTTPError as e:
            raise RemoteError(f"{method} {path} failed: {e}") from e

        try:
            payload = response.json() if response.content else {}
        except ValueError as e:
            raise RemoteError(
                f"{method} {path} returned invalid JSON", status_code=response.status_code
            ) from e

        if response.is_error:
            message = _error_message(payload) or response.reason_phrase
            raise RemoteError(message, status_code=response.status_code)
        return payload

    def _query(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """GET a resource, raising RemoteError on error payloads."""
        payload = self._request("GET", path, params)
        message = _error_message(payload)
        if message is not None:
            raise RemoteError(message)
        return _unwrap(payload)

    @staticmethod
    def _space_path(space: Space, *parts: str) -> str:
        segments = [quote(space.did, safe=":")] + [quote(p, safe="") for p in parts]
        return "/spaces/" + "/".join(segments)

    def _page(self, path: str, cursor: str | None, size: int, model: type[Any]) -> Page[Any]:
        body = self._query(path, {"size": size, "cursor": cursor})
        results = body.get("results", []) if isinstance(body, dict) else None
        if not isinstance(results, list):
            raise RemoteError(f"Unexpected page payload from {path}: results is not a list")
        try:
            items = tuple(model.model_validate(entry) for entry in results)
        except ValidationError as e:
            raise RemoteError(f"Unexpected page payload from {path}: {e}") from e
        return Page(items=items, cursor=body.get("cursor") or None)

    def _removal(self, path: str, params: dict[str, Any] | None = None) -> RemovalResult:
        try:
            payload = self._request("DELETE", path, params)
        except RemoteError as e:
            if e.status_code is None:
                raise
            return RemovalResult(ok=False, error=e.message)
        message = _error_message(payload)
        if message is not None:
            return RemovalResult(ok=False, error=message)
        ok = _unwrap(payload)
        freed = ok.get("size") if isinstance(ok, dict) else None
        return RemovalResult(ok=True, freed_bytes=int(freed) if freed is not None else None)

    # === StorageClient ===

    def list_spaces(self) -> list[Space]:
        body = self._query("/spaces")
        entries = body.get("spaces", []) if isinstance(body, dict) else body
        return [Space.model_validate(entry) for entry in entries]

    def space_usage(self, space: Space) -> int:
        body = self._query(self._space_path(space, "usage"))
        value = body.get("bytes", 0) if isinstance(body, dict) else body
        return int(value or 0)

    def list_uploads(self, space: Space, cursor: str | None, size: int) -> Page[Upload]:
        return self._page(self._space_path(space, "uploads"), cursor, size, Upload)

    def list_blobs(self, space: Space, cursor: str | None, size: int) -> Page[Blob]:
        return self._page(self._space_path(space, "blobs"), cursor, size, Blob)

    def remove_upload(self, space: Space, root: str, shards: bool = False) -> RemovalResult:
        params = {"shards": "true"} if shards else None
        return self._removal(self._space_path(space, "uploads", root), params)

    def remove_blob(self, space: Space, digest: str) -> RemovalResult:
        return self._removal(self._space_path(space, "blobs", digest))

    def get_blob(self, space: Space, digest: str) -> Blob | None:
        try:
            body = self._query(self._space_path(space, "blobs", digest))
        except RemoteError as e:
            if e.status_code == 404:
                return None
            raise
        if not body:
            return None
        return Blob.model_validate(body)

    def list_rate_limits(self, subject: str, provider: str | None = None) -> list[RateLimit]:
        if provider:
            try:
                return self._rate_limits({"subject": subject, "provider": provider})
            except RemoteError as e:
                logger.debug("Provider-scoped rate-limit query failed: %s", e.message)
        return self._rate_limits({"subject": subject})

    def _rate_limits(self, params: dict[str, Any]) -> list[RateLimit]:
        body = self._query("/rate-limits", params)
        entries = body.get("limits", []) if isinstance(body, dict) else body
        return [RateLimit.model_validate(entry) for entry in entries]
