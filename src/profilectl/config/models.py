"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, profilectl.toml only contains
overrides. Field definitions (``[[fields]]``) live directly on
the settings object.
"""

from __future__ import annotations

from pydantic import BaseModel


class StoreConfig(BaseModel):
    """[store] section."""

    model_config = {"frozen": True}

    # Relative paths resolve against the project root.
    path: str = ".profilectl/profiles.db"


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    local_dir: str | None = ".profilectl/plugins"
