"""User configuration for binrc.

The optional ``config.toml`` in the user config directory looks like::

    store_path = ".binrc"          # relative paths live under $HOME
    release_host = "github.com"
    templates = "~/my-templates.toml"

Every key is optional; a missing file means defaults.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str

__all__ = [
    "Config",
    "ConfigError",
    "DEFAULT_RELEASE_HOST",
    "DEFAULT_STORE_PATH",
    "load_config",
    "load_config_or_default",
    "parse_toml",
]

DEFAULT_STORE_PATH = ".binrc"
DEFAULT_RELEASE_HOST = "github.com"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when a config or catalog file cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class Config:
    """binrc settings.

    Attributes:
        store_path: Cache store root, absolute or relative to the home directory
        release_host: Host serving ``/{owner}/{name}/releases/download/...``
        templates: Optional user catalog merged over the bundled one
    """

    store_path: str = DEFAULT_STORE_PATH
    release_host: str = DEFAULT_RELEASE_HOST
    templates: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML)."""
        return cls(
            store_path=get_str(data, "store_path") or DEFAULT_STORE_PATH,
            release_host=get_str(data, "release_host") or DEFAULT_RELEASE_HOST,
            templates=get_str(data, "templates"),
        )


def parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file into a string-keyed table."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"File not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading file: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to config.toml

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = parse_toml(path)
    if isinstance(result, Err):
        return result
    return Ok(Config.from_dict(result.value))


def load_config_or_default(path: Path) -> Result[Config, ConfigError]:
    """Load config, treating a missing file as all defaults.

    A file that exists but does not parse is still an error: silently
    ignoring it would install into an unexpected store.
    """
    if not path.exists():
        return Ok(Config())
    return load_config(path)
