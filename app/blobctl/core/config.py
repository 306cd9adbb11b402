"""Console configuration and settings.

This module provides the configuration model and I/O functions for the
console: which storage gateway to talk to, the credentials to present,
and the defaults offered by paging and bulk prompts.

Values are merged from, lowest priority first:
- built-in defaults
- ~/.config/blobctl/config.toml
- environment variables (a .env file in the working directory is loaded
  first, never overriding variables that are already set)
"""

import logging
import os
import tomllib
from pathlib import Path
from typing import Annotated, Any

import tomli_w
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from blobctl.core.confirm import DEFAULT_CONFIRM_TOKEN
from blobctl.core.errors import ConfigError, ConfigParseError
from blobctl.core.paths import ensure_config_dir, get_config_path
from blobctl.models.page import MAX_PAGE_SIZE, MIN_PAGE_SIZE
from blobctl.models.run import DEFAULT_CONCURRENCY, DEFAULT_PAGE_SIZE, MAX_CONCURRENCY

logger = logging.getLogger(__name__)

# Environment variables mapped onto config fields. Later names in each
# tuple are fallbacks.
ENV_OVERRIDES: dict[str, tuple[str, ...]] = {
    "endpoint": ("BLOBCTL_ENDPOINT",),
    "service_key": ("BLOBCTL_SERVICE_KEY", "STORACHA_SERVICE_KEY"),
    "profile": ("BLOBCTL_PROFILE", "STORACHA_PROFILE"),
    "provider_did": (
        "BLOBCTL_PROVIDER_DID",
        "STORACHA_PROVIDER_DID",
        "STORACHA_PROVIDER",
        "W3UP_PROVIDER_DID",
    ),
    "page_size": ("BLOBCTL_PAGE_SIZE",),
    "concurrency": ("BLOBCTL_CONCURRENCY",),
}


class ConsoleConfig(BaseModel):
    """Configuration for the admin console.

    Attributes:
        endpoint: Base URL of the storage gateway.
        service_key: Bearer token presented to the gateway.
        profile: Agent profile name sent with every request.
        provider_did: Default provider DID for rate-limit lookups.
        page_size: Default page size offered by prompts (1-500).
        concurrency: Default removal concurrency for bulk runs (1-10).
        confirm_token: Literal the operator must type before a bulk purge.
        timeout_seconds: Per-request timeout for the HTTP client.
    """

    model_config = ConfigDict(extra="forbid")

    endpoint: Annotated[
        str,
        Field(description="Base URL of the storage gateway"),
    ] = "http://127.0.0.1:8787"
    service_key: Annotated[
        str | None,
        Field(description="Bearer token for the gateway"),
    ] = None
    profile: Annotated[
        str,
        Field(min_length=1, description="Agent profile name"),
    ] = "blobctl"
    provider_did: Annotated[
        str | None,
        Field(description="Default provider DID for rate-limit queries"),
    ] = None
    page_size: Annotated[
        int,
        Field(ge=MIN_PAGE_SIZE, le=MAX_PAGE_SIZE, description="Default page size (1-500)"),
    ] = DEFAULT_PAGE_SIZE
    concurrency: Annotated[
        int,
        Field(ge=1, le=MAX_CONCURRENCY, description="Default bulk removal concurrency (1-10)"),
    ] = DEFAULT_CONCURRENCY
    confirm_token: Annotated[
        str,
        Field(min_length=1, description="Token typed to confirm bulk purges"),
    ] = DEFAULT_CONFIRM_TOKEN
    timeout_seconds: Annotated[
        float,
        Field(gt=0, description="HTTP request timeout in seconds"),
    ] = 30.0

    @field_validator("endpoint")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the endpoint so paths can be appended."""
        endpoint = v.strip().rstrip("/")
        if not endpoint.startswith(("http://", "https://")):
            msg = f"endpoint must be an http(s) URL, got '{v}'"
            raise ValueError(msg)
        return endpoint

    @field_validator("confirm_token")
    @classmethod
    def strip_token(cls, v: str) -> str:
        """Confirmation compares trimmed input, so the token is trimmed too."""
        token = v.strip()
        if not token:
            msg = "confirm_token cannot be blank"
            raise ValueError(msg)
        return token


def _read_toml(path: Path) -> dict[str, Any]:
    """Read a TOML file into a dictionary.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the file cannot be read.
    """
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config {path}: {e}") from e


def _env_overrides(environ: dict[str, str]) -> dict[str, str]:
    """Collect config values set through environment variables."""
    overrides: dict[str, str] = {}
    for field_name, names in ENV_OVERRIDES.items():
        for name in names:
            value = environ.get(name, "").strip()
            if value:
                overrides[field_name] = value
                break
    return overrides


def load_config(
    path: Path | None = None,
    environ: dict[str, str] | None = None,
    dotenv_path: Path | None = None,
) -> ConsoleConfig:
    """Load console configuration.

    A missing config file is not an error; defaults and environment
    variables still apply.

    Args:
        path: Path to the config file. If None, uses the default config path.
        environ: Environment mapping. If None, loads ``.env`` into
            ``os.environ`` and uses it.
        dotenv_path: Explicit ``.env`` location. Defaults to ``./.env``.

    Returns:
        Validated ConsoleConfig object.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the merged content doesn't match the schema.
    """
    config_path = path or get_config_path()

    if environ is None:
        env_file = dotenv_path or Path.cwd() / ".env"
        if env_file.is_file():
            load_dotenv(dotenv_path=env_file, override=False)
            logger.debug("Loaded environment from %s", env_file)
        environ = dict(os.environ)

    data: dict[str, Any] = {}
    if config_path.exists():
        data = _read_toml(config_path)
        logger.debug("Loaded config from %s", config_path)

    data.update(_env_overrides(environ))

    try:
        return ConsoleConfig.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise ConfigError(f"Invalid config content: {e}") from e


def save_config(config: ConsoleConfig, path: Path | None = None) -> Path:
    """Save console configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The ConsoleConfig object to save.
        path: Path to save the config. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    from tempfile import NamedTemporaryFile

    if path is None:
        try:
            ensure_config_dir()
        except RuntimeError as e:
            raise ConfigError(str(e)) from e
        config_path = get_config_path()
    else:
        config_path = path
        config_path.parent.mkdir(parents=True, exist_ok=True)

    data = _config_to_dict(config)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path


def _config_to_dict(config: ConsoleConfig) -> dict[str, object]:
    """Convert ConsoleConfig to a dictionary for TOML serialization.

    TOML has no null, so unset optional values are left out.
    """
    return config.model_dump(exclude_none=True)


def redacted(config: ConsoleConfig) -> dict[str, object]:
    """Config as a dictionary with the service key masked for display."""
    data = _config_to_dict(config)
    key = config.service_key
    if key:
        data["service_key"] = f"{key[:4]}…" if len(key) > 8 else "****"
    return data
