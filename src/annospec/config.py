"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for annospec:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.annospec/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **User config** -- A single :class:`~annospec.models.GeneratorConfig`
  JSON file storing defaults (document title, version, output format).
* **Project config** -- An optional ``./annospec.json`` holding the same
  keys for one repository.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project-local config, and user config into the
  final effective configuration.

All file writes use an atomic temp-file-then-rename strategy
(:func:`atomic_write`) so a crash never leaves a half-written config or
generated document behind.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from annospec.exceptions import ConfigError
from annospec.models import GeneratorConfig

_APP_NAME = "annospec"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "annospec.json"

# Environment variable -> GeneratorConfig field.
_ENV_OVERRIDES = {
    "ANNOSPEC_TITLE": "title",
    "ANNOSPEC_API_VERSION": "api_version",
    "ANNOSPEC_FORMAT": "format",
    "ANNOSPEC_KEEP_GOING": "keep_going",
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

    On Linux/BSD: ``$XDG_CONFIG_HOME/annospec/`` (default ``~/.config/annospec/``).
    On macOS/Windows: ``~/.annospec/``.

    Returns:
        Absolute path to the configuration directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        base = _xdg_base("XDG_CONFIG_HOME", (".config",))
        path = base / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/annospec/`` (default ``~/.local/share/annospec/``).
    On macOS/Windows: ``~/.annospec/logs/``.

    Returns:
        Absolute path to the data directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        base = _xdg_base("XDG_DATA_HOME", (".local", "share"))
        path = base / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is guaranteed to be an atomic rename on POSIX systems.
    On success the temp file is renamed over *path*; on any failure the temp
    file is cleaned up.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close in finally
        os.replace(tmp_path, path)
    except BaseException:
        # Clean up the temp file on any error (including KeyboardInterrupt).
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- User config ---


def _user_config_path() -> Path:
    """Path to the user config file."""
    return get_config_dir() / _CONFIG_FILENAME


def _read_json_object(path: Path, label: str) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid {label} at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid {label} at {path}: expected a JSON object")
    return data


def load_user_config() -> GeneratorConfig:
    """Load the user configuration from the XDG config directory.

    Returns:
        The deserialised :class:`~annospec.models.GeneratorConfig`. If the
        file does not exist, a default instance is returned.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = _user_config_path()
    if not path.is_file():
        return GeneratorConfig()
    data = _read_json_object(path, "user config")
    try:
        return GeneratorConfig.model_validate(data)
    except ValueError as exc:
        raise ConfigError(f"Invalid user config at {path}: {exc}") from exc


def save_user_config(config: GeneratorConfig) -> None:
    """Persist the user configuration atomically to disk."""
    data = config.model_dump(mode="json")
    atomic_write(_user_config_path(), json.dumps(data, indent=2) + "\n")


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./annospec.json``.

    Returns:
        The parsed JSON object, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    return _read_json_object(path, "project config")


# --- Precedence resolution ---


def _env_overrides() -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for var, field in _ENV_OVERRIDES.items():
        value = os.environ.get(var)
        if not value:
            continue
        if field == "keep_going":
            overrides[field] = value.lower() in ("true", "1", "yes")
        else:
            overrides[field] = value
    return overrides


def resolve_config(**cli_overrides: Any) -> GeneratorConfig:
    """Resolve config with full precedence chain.

    Precedence (high to low):
        1. CLI flags (keyword arguments whose value is not ``None``)
        2. Environment variables (``ANNOSPEC_TITLE``, ``ANNOSPEC_API_VERSION``,
           ``ANNOSPEC_FORMAT``, ``ANNOSPEC_KEEP_GOING``)
        3. Project config (``./annospec.json``)
        4. User config (``~/.config/annospec/config.json``)
        5. Defaults

    Raises:
        ConfigError: If any layer holds an unknown key or an invalid value.
    """
    merged = load_user_config().model_dump()

    project = load_project_config()
    if project is not None:
        unknown = sorted(set(project) - set(GeneratorConfig.model_fields))
        if unknown:
            raise ConfigError(f"Unknown project config keys: {', '.join(unknown)}")
        merged.update(project)

    merged.update(_env_overrides())
    merged.update({k: v for k, v in cli_overrides.items() if v is not None})

    try:
        return GeneratorConfig.model_validate(merged)
    except ValueError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
