"""Configuration management with XDG paths, atomic writes, and precedence resolution.

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.fetchcache/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_cache_dir`.
* **Config file** -- A single :class:`~fetchcache.models.ClientConfig`
  JSON file. See :func:`load_config` and :func:`save_config`.
* **Precedence resolution** -- :func:`resolve_config` merges explicit
  overrides, environment variables, and the config file into the final
  effective configuration.

File writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`).
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from fetchcache.exceptions import ConfigError
from fetchcache.models import ClientConfig

_APP_NAME = "fetchcache"
_CONFIG_FILENAME = "config.json"

ENV_CACHE_DIR = "FETCHCACHE_CACHE_DIR"
ENV_TIMEOUT = "FETCHCACHE_TIMEOUT"
ENV_STRICT_STORE = "FETCHCACHE_STRICT_STORE"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def _fallback_base_dir() -> Path:
    """``~/.fetchcache``, used where XDG directories are not the convention."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, *default: str) -> Path:
    """Value of *env_var*, or ``~/<default...>`` when it is unset or empty."""
    value = os.environ.get(env_var)
    return Path(value) if value else Path.home().joinpath(*default)


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/fetchcache/`` (default ``~/.config/fetchcache/``).
    On macOS/Windows: ``~/.fetchcache/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", ".config") / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_cache_dir() -> Path:
    """Return the default store directory, creating it if necessary.

    Values written here persist across process restarts but can be
    safely deleted at any time.

    On Linux/BSD: ``$XDG_CACHE_HOME/fetchcache/`` (default ``~/.cache/fetchcache/``).
    On macOS/Windows: ``~/.fetchcache/cache/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CACHE_HOME", ".cache") / _APP_NAME
    else:
        path = _fallback_base_dir() / "cache"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Replace *path* with *data* so readers never see a partial file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        mode="w",
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
        encoding="utf-8",
    ) as tmp:
        try:
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        except BaseException:
            tmp.close()
            os.unlink(tmp.name)
            raise
    try:
        os.replace(tmp.name, path)
    except BaseException:
        os.unlink(tmp.name)
        raise


# --- Config file ---


def config_path() -> Path:
    """Path to the config file inside :func:`get_config_dir`."""
    return get_config_dir() / _CONFIG_FILENAME


def load_config(path: Optional[Path] = None) -> ClientConfig:
    """Load the configuration file.

    Args:
        path: Explicit file to read.  Defaults to :func:`config_path`.

    Returns:
        The deserialised :class:`~fetchcache.models.ClientConfig`, or a
        default instance when the file does not exist.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = path or config_path()
    if not path.is_file():
        return ClientConfig()
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text)
        return ClientConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc


def save_config(config: ClientConfig, path: Optional[Path] = None) -> None:
    """Persist the configuration atomically.

    Args:
        config: The configuration to save.
        path: Explicit destination.  Defaults to :func:`config_path`.
    """
    data = config.model_dump(mode="json")
    _atomic_write(path or config_path(), json.dumps(data, indent=2) + "\n")


# --- Precedence resolution ---


def _env_bool(name: str) -> Optional[bool]:
    raw = os.environ.get(name)
    if raw is None:
        return None
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(f"Environment variable {name} must be a boolean, got {raw!r}")


def _env_float(name: str) -> Optional[float]:
    raw = os.environ.get(name)
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigError(f"Environment variable {name} must be a number, got {raw!r}") from exc


def resolve_config(
    cache_dir: Optional[str] = None,
    timeout: Optional[float] = None,
    strict_store: Optional[bool] = None,
    path: Optional[Path] = None,
) -> ClientConfig:
    """Resolve the effective configuration.

    Precedence (high to low):
        1. Explicit arguments (``cache_dir``, ``timeout``, ``strict_store``)
        2. Environment variables (``FETCHCACHE_CACHE_DIR``,
           ``FETCHCACHE_TIMEOUT``, ``FETCHCACHE_STRICT_STORE``)
        3. Config file (``~/.config/fetchcache/config.json``)
        4. Defaults

    Raises:
        ConfigError: If the config file or an environment variable is invalid.
    """
    # 4 + 3. File config (fills in defaults automatically)
    config = load_config(path)

    # 2. Environment
    overrides: dict[str, Any] = {}
    env_dir = os.environ.get(ENV_CACHE_DIR)
    if env_dir:
        overrides["directory"] = env_dir
    env_timeout = _env_float(ENV_TIMEOUT)
    if env_timeout is not None:
        overrides["timeout"] = env_timeout
    env_strict = _env_bool(ENV_STRICT_STORE)
    if env_strict is not None:
        overrides["strict_store"] = env_strict

    # 1. Explicit arguments
    if cache_dir is not None:
        overrides["directory"] = cache_dir
    if timeout is not None:
        overrides["timeout"] = timeout
    if strict_store is not None:
        overrides["strict_store"] = strict_store

    if "directory" in overrides:
        config.store.directory = str(overrides["directory"])
    if "timeout" in overrides:
        config.fetch.timeout = overrides["timeout"]
    if "strict_store" in overrides:
        config.strict_store = overrides["strict_store"]

    return config
