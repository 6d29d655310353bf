"""Configuration loading with XDG paths and precedence resolution.

This module turns files and environment variables into a validated
:class:`~cacheaside.models.ClientConfig`:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.cacheaside/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_cache_dir`.
* **User config** -- ``<config_dir>/config.json``, read by
  :func:`load_config`.
* **Project config** -- ``./cacheaside.json``, read by
  :func:`load_project_config`.
* **Precedence resolution** -- :func:`resolve_config` merges explicit
  overrides, environment variables, project config and user config.

Any unreadable file or invalid value raises
:class:`~cacheaside.exceptions.ConfigurationError`.
"""

from __future__ import annotations

import json
import os
import platform
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from cacheaside.exceptions import ConfigurationError
from cacheaside.models import ClientConfig

_APP_NAME = "cacheaside"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "cacheaside.json"

# env var -> (section, field); section None means top level
_ENV_OVERRIDES: dict[str, tuple[Optional[str], str]] = {
    "CACHEASIDE_BASE_URL": (None, "base_url"),
    "CACHEASIDE_RETRY_COUNT": (None, "retry_count"),
    "CACHEASIDE_CACHE_TTL": (None, "cache_ttl"),
    "CACHEASIDE_CACHE_BACKEND": ("cache_store", "backend"),
    "CACHEASIDE_REDIS_URL": ("cache_store", "url"),
}


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/cacheaside/`` (default ``~/.config/cacheaside/``).
    On macOS/Windows: ``~/.cacheaside/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_cache_dir() -> Path:
    """Return the cache directory used by the disk store, creating it if necessary.

    Cached data can be safely deleted at any time.

    On Linux/BSD: ``$XDG_CACHE_HOME/cacheaside/`` (default ``~/.cache/cacheaside/``).
    On macOS/Windows: ``~/.cacheaside/cache/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CACHE_HOME", (".cache",)) / _APP_NAME
    else:
        path = _fallback_base_dir() / "cache"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- File loading ---


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Invalid config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Invalid config at {path}: expected a JSON object")
    return data


def _validate(data: dict[str, Any], source: str) -> ClientConfig:
    try:
        return ClientConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid config from {source}: {exc}") from exc


def load_config(path: Optional[str | Path] = None) -> ClientConfig:
    """Load a :class:`~cacheaside.models.ClientConfig` from a JSON file.

    Args:
        path: Explicit file to read. When omitted, the user config file in
            :func:`get_config_dir` is used if it exists.

    Returns:
        The validated config; defaults when no file is found.

    Raises:
        ConfigurationError: If an explicit *path* does not exist, or a file
            contains invalid JSON or invalid values.
    """
    if path is not None:
        explicit = Path(path)
        if not explicit.is_file():
            raise ConfigurationError(f"Config file not found: {explicit}")
        return _validate(_read_json(explicit), str(explicit))

    user_path = get_config_dir() / _CONFIG_FILENAME
    if not user_path.is_file():
        return ClientConfig()
    return _validate(_read_json(user_path), str(user_path))


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./cacheaside.json``.

    Returns:
        The parsed JSON object, or ``None`` if the file does not exist.

    Raises:
        ConfigurationError: If the file exists but is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    return _read_json(path)


def _env_overrides() -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for var, (section, name) in _ENV_OVERRIDES.items():
        value = os.environ.get(var)
        if not value:
            continue
        if section is None:
            overrides[name] = value
        else:
            overrides.setdefault(section, {})[name] = value
    return overrides


def _merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge *overlay* into a copy of *base*."""
    merged = dict(base)
    for key, value in overlay.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def resolve_config(
    overrides: Optional[dict[str, Any]] = None,
    config_path: Optional[str | Path] = None,
) -> ClientConfig:
    """Resolve config with full precedence chain.

    Precedence (high to low):
        1. *overrides* (CLI flags)
        2. Environment variables (``CACHEASIDE_BASE_URL``,
           ``CACHEASIDE_RETRY_COUNT``, ``CACHEASIDE_CACHE_TTL``,
           ``CACHEASIDE_CACHE_BACKEND``, ``CACHEASIDE_REDIS_URL``)
        3. Project config (``./cacheaside.json``)
        4. User config (``~/.config/cacheaside/config.json``) or *config_path*
        5. Defaults

    Raises:
        ConfigurationError: If any layer is unreadable or the merged result
            fails validation.
    """
    base = load_config(config_path).model_dump(mode="json", exclude_unset=True)

    project = load_project_config()
    if project is not None:
        base = _merge(base, _validate(project, _PROJECT_CONFIG_FILENAME).model_dump(
            mode="json", exclude_unset=True,
        ))

    base = _merge(base, _env_overrides())

    if overrides:
        base = _merge(base, overrides)

    return _validate(base, "merged configuration")
