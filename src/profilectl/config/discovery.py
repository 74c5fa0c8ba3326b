"""Locating ``profilectl.toml`` for one CLI invocation.

Resolution order:

1. ``--config PATH``: must name an existing file.
2. ``PROFILECTL_CONFIG``: must name an existing file.
3. Walk up from the start directory, like git looking for ``.git/``.

A config that is named explicitly but missing is an error, never a
fallback to defaults.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "profilectl.toml"
CONFIG_ENV_VAR = "PROFILECTL_CONFIG"


class ConfigNotFoundError(FileNotFoundError):
    """An explicitly named config file does not exist."""

    def __init__(self, path: Path, origin: str) -> None:
        super().__init__(f"Config file from {origin} not found: {path}")
        self.path = path
        self.origin = origin


def locate_config(
    explicit: str | Path | None = None,
    start: Path | None = None,
) -> Path | None:
    """Return the config file to use, or None when running on defaults.

    Raises:
        ConfigNotFoundError: If *explicit* or ``PROFILECTL_CONFIG`` names a
            file that does not exist.
    """
    if explicit:
        return _require_file(Path(explicit), "--config")

    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return _require_file(Path(env_path), CONFIG_ENV_VAR)

    return find_config(start)


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) to the nearest ``profilectl.toml``."""
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def _require_file(path: Path, origin: str) -> Path:
    path = path.expanduser()
    if not path.is_file():
        raise ConfigNotFoundError(path, origin)
    return path
