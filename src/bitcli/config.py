"""Configuration for bitcli.

Configuration is read from a TOML file, optionally split across several
files via a top-level ``import`` list, validated with Pydantic, and finally
overridden by command-line options.

Example config.toml::

    api_token = "..."
    domain = "bit.ly"
    import = ["~/.config/bitcli/secrets.toml"]
"""

from __future__ import annotations

import logging
import os
import sys
import tomllib
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    SecretStr,
    ValidationError,
    field_validator,
)

from bitcli.core.exceptions import ConfigurationError


logger = logging.getLogger(__name__)

APP = "bitcli"
DEFAULT_API_URL = "https://api-ssl.bitly.com"
DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_CONCURRENT = 16
CONFIG_FILE_NAME = "config.toml"


def _xdg_dir(variable: str, fallback: Path) -> Path:
    value = os.environ.get(variable)
    # Relative XDG paths are invalid and must be ignored
    if value and Path(value).is_absolute():
        return Path(value) / APP
    return fallback / APP


def user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no dependencies)."""
    if sys.platform.startswith("win"):
        return Path(os.environ.get("APPDATA", str(Path.home()))) / APP
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP
    return _xdg_dir("XDG_CONFIG_HOME", Path.home() / ".config")


def user_cache_dir() -> Path:
    """Per-user cache directory (cross-platform, no dependencies)."""
    if sys.platform.startswith("win"):
        return Path(os.environ.get("LOCALAPPDATA", str(Path.home()))) / APP / "Cache"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Caches" / APP
    return _xdg_dir("XDG_CACHE_HOME", Path.home() / ".cache")


def default_config_file() -> Path:
    """Location of config.toml when no explicit file is given."""
    return user_config_dir() / CONFIG_FILE_NAME


@dataclass
class Options:
    """Overrides from the command line; None means "keep the configured value"."""

    domain: str | None = None
    group_guid: str | None = None
    cache_dir: str | None = None
    offline: bool | None = None
    max_concurrent: int | None = None


class Config(BaseModel):
    """Resolved application configuration.

    Immutable once built; override_with() returns a new instance.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    api_url: HttpUrl = Field(
        default=DEFAULT_API_URL,
        validate_default=True,
        description="Base URL of the Bitly API.",
    )
    api_token: SecretStr = Field(
        ...,
        description="API access token.",
    )
    domain: str | None = Field(
        default=None,
        description="Domain to create bitlinks under (service default if unset).",
    )
    default_group_guid: str | None = Field(
        default=None,
        description="Group GUID for shorten requests (user's default if unset).",
    )
    cache_dir: str | None = Field(
        default=None,
        description="Cache directory; empty disables caching, unset uses the platform default.",
    )
    offline: bool = Field(
        default=False,
        description="Never issue API requests, rely on the local cache only.",
    )
    max_concurrent: int = Field(
        default=DEFAULT_MAX_CONCURRENT,
        ge=1,
        description="Maximum number of API requests in flight.",
    )
    timeout: float = Field(
        default=DEFAULT_TIMEOUT,
        gt=0,
        description="Per-request timeout (seconds).",
    )

    @field_validator("api_token")
    @classmethod
    def _token_not_empty(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value():
            raise ValueError("api_token cannot be empty")
        return value

    @property
    def caching_enabled(self) -> bool:
        """False when cache_dir is explicitly set to an empty path."""
        return self.cache_dir != ""

    def override_with(self, options: Options) -> Config:
        """Return a copy with every non-None option applied.

        Raises:
            ConfigurationError: If an override is invalid.
        """
        updates: dict[str, Any] = {
            key: value for key, value in asdict(options).items() if value is not None
        }
        if "group_guid" in updates:
            updates["default_group_guid"] = updates.pop("group_guid")
        if not updates:
            return self

        current = self.model_dump()
        current["api_url"] = str(self.api_url)
        try:
            return type(self).model_validate({**current, **updates})
        except ValidationError as e:
            raise ConfigurationError(f"Invalid option: {e}", cause=e) from e


def load_config(path: str | os.PathLike[str]) -> Config:
    """Load configuration from a TOML file and its imports.

    Imports listed under the top-level ``import`` key are resolved relative
    to the directory of the config file (``~`` expands to the home
    directory). Missing imports are skipped; values from imports override
    the main file, later imports overriding earlier ones.

    Args:
        path: Path to the main config file.

    Returns:
        The validated configuration.

    Raises:
        ConfigurationError: If a file cannot be read or parsed, or the merged
            values are invalid.
    """
    config_path = Path(path).expanduser()
    data = _read_toml(config_path)

    imports = data.pop("import", [])
    if not isinstance(imports, list) or not all(isinstance(i, str) for i in imports):
        raise ConfigurationError(
            f"'import' in {config_path} must be a list of paths", path=config_path
        )

    for entry in imports:
        resolved = _resolve_import(config_path.parent, entry)
        if resolved is None:
            logger.debug("skipping missing config import %s", entry)
            continue
        imported = _read_toml(resolved)
        imported.pop("import", None)
        data.update(imported)

    try:
        return Config.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration in {config_path}: {e}",
            path=config_path,
            cause=e,
        ) from e


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except OSError as e:
        raise ConfigurationError(
            f"Cannot read config file {path}: {e.strerror or e}", path=path, cause=e
        ) from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML in {path}: {e}", path=path, cause=e) from e


def _resolve_import(config_dir: Path, entry: str) -> Path | None:
    path = Path(entry).expanduser()
    if not path.is_absolute():
        path = config_dir / path
    if not path.is_file():
        return None
    return path.resolve()
