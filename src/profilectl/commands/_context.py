"""AppContext — shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``. The store, plugin manager, and field registry are
built lazily so ``--help`` and ``--version`` never touch the database.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from profilectl.output.formatters import format_result, format_warnings

if TYPE_CHECKING:
    from profilectl.config.settings import ProfileSettings
    from profilectl.domain.fields import FieldRegistry
    from profilectl.infrastructure.store import SqlUserStore
    from profilectl.plugins.manager import PluginManager
    from profilectl.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: ProfileSettings) -> None:
        self.settings = settings
        self._store: SqlUserStore | None = None
        self._plugins: PluginManager | None = None
        self._registry: FieldRegistry | None = None

        from profilectl.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from profilectl.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def store(self) -> SqlUserStore:
        """The user store (database initialized on first access)."""
        if self._store is None:
            from profilectl.infrastructure.database.engine import init_database
            from profilectl.infrastructure.store import SqlUserStore

            self._store = SqlUserStore(init_database(self.settings.db_path))
        return self._store

    @property
    def plugins(self) -> PluginManager | None:
        """Loaded plugin manager, or None when plugins are disabled."""
        if not self.settings.plugins.enabled:
            return None
        if self._plugins is None:
            from profilectl.plugins.manager import PluginManager

            pm = PluginManager()
            pm.discover_and_load(local_dir=self.settings.local_plugin_dir)
            self._plugins = pm
        return self._plugins

    @property
    def registry(self) -> FieldRegistry:
        """Frozen field registry assembled from config and plugins."""
        if self._registry is None:
            from profilectl.services.registry import build_field_registry

            self._registry = build_field_registry(self.settings.fields, self.plugins)
        return self._registry

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout. Warnings go to stderr in human mode.
        * Failure: writes to stderr, exits with code 1.
        """
        output = format_result(
            result,
            json_output=self.settings.json_output,
            verbose=self.settings.verbose,
        )
        if result.ok:
            click.echo(output)
            if result.warnings and not self.settings.json_output:
                click.echo(format_warnings(result.warnings), err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
