"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``PROFILECTL_*`` prefix
  3. TOML file    — ``profilectl.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource` that
reuses the walk-up discovery from :mod:`profilectl.config.discovery`.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from profilectl.config.discovery import ConfigNotFoundError, locate_config
from profilectl.config.models import PluginsConfig, StoreConfig
from profilectl.domain.fields import FieldDefinition


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``profilectl.toml`` file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# Thread-local storage for the TOML path during construction.
_tls = threading.local()


class ProfileSettings(BaseSettings):
    """Unified settings for profilectl.

    Attributes:
        project_root: Directory relative paths resolve against (parent of
            ``profilectl.toml``, or CWD if no config found).
        config_path: The TOML file in use, if any.
        fields: Additional-field definitions declared in ``[[fields]]``.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "PROFILECTL_",
        "env_nested_delimiter": "__",
    }

    project_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    store: StoreConfig = Field(default_factory=StoreConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
    fields: list[FieldDefinition] = Field(default_factory=list)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @property
    def db_path(self) -> Path:
        """Absolute path of the SQLite database."""
        path = Path(self.store.path).expanduser()
        return path if path.is_absolute() else self.project_root / path

    @property
    def local_plugin_dir(self) -> Path | None:
        if self.plugins.local_dir is None:
            return None
        path = Path(self.plugins.local_dir).expanduser()
        return path if path.is_absolute() else self.project_root / path

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        project_root: Path | None = None,
        **cli_flags: Any,
    ) -> ProfileSettings:
        """Construct settings from a CLI invocation.

        Locates ``profilectl.toml`` (see :func:`~profilectl.config.discovery.locate_config`),
        resolves *project_root* from the config file's parent directory,
        and merges CLI flags as highest-priority overrides.
        """
        try:
            toml_path = locate_config(config_path, project_root)
        except ConfigNotFoundError as exc:
            raise click.ClickException(str(exc)) from exc

        resolved_root = project_root
        if resolved_root is None:
            resolved_root = toml_path.parent if toml_path else Path.cwd()

        _tls.toml_path = toml_path
        try:
            return cls(
                project_root=resolved_root,
                config_path=toml_path,
                **cli_flags,
            )
        except ValidationError as exc:
            source = toml_path or "environment"
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
            )
            msg = f"Invalid configuration in {source}: {problems}"
            raise click.ClickException(msg) from exc
        finally:
            _tls.toml_path = None
