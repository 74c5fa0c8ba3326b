"""Plugin discovery, loading, and field-definition collection.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints
in the ``profilectl.plugins`` group, plus local directory discovery.
Capabilities: additional-field registration, lifecycle hooks.
"""

from __future__ import annotations

import importlib.util
import inspect
import logging
import sys
from pathlib import Path

import pluggy
from pydantic import ValidationError

from profilectl.domain.fields import FieldDefinition
from profilectl.plugins.hookspecs import PROJECT_NAME, ProfileHookSpec

ENTRY_POINT_GROUP = "profilectl.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages plugin discovery, loading, and hook dispatch."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(ProfileHookSpec)
        self._loaded: bool = False

    def discover_and_load(self, *, local_dir: Path | None = None) -> list[str]:
        """Discover plugins from entry points and an optional local directory.

        Returns a list of loaded plugin names.
        """
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._normalize_plugin_instances()
        if local_dir is not None:
            self._discover_local(local_dir)
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    @property
    def is_loaded(self) -> bool:
        """Whether discover_and_load() has been called."""
        return self._loaded

    @property
    def hook(self) -> pluggy.HookRelay:
        """Access the hook relay for dispatching events."""
        return self._pm.hook

    def get_plugins(self) -> list[object]:
        return list(self._pm.get_plugins())

    def list_plugin_names(self) -> list[str]:
        return [self._pm.get_name(p) or p.__class__.__name__ for p in self._pm.get_plugins()]

    # ------------------------------------------------------------------
    # Field definitions
    # ------------------------------------------------------------------

    def collect_field_definitions(self) -> list[FieldDefinition]:
        """Gather field definitions contributed by every registered plugin.

        Each plugin is called on its own so one failing plugin cannot hide
        the fields of the others. Invalid entries are skipped with a warning.
        """
        collected: list[FieldDefinition] = []
        for plugin in self._pm.get_plugins():
            plugin_name = self._pm.get_name(plugin) or plugin.__class__.__name__
            collected.extend(self._plugin_field_definitions(plugin, plugin_name))
        return collected

    @staticmethod
    def _plugin_field_definitions(plugin: object, plugin_name: str) -> list[FieldDefinition]:
        hook = getattr(plugin, "register_profile_fields", None)
        if hook is None:
            return []

        try:
            entries = hook()
        except Exception:
            logger.warning(
                "Failed to collect field definitions from plugin %s",
                plugin_name,
                exc_info=True,
            )
            return []

        if entries is None:
            return []
        if not isinstance(entries, list | tuple):
            logger.warning("Plugin %s returned non-list field definitions", plugin_name)
            return []

        definitions: list[FieldDefinition] = []
        for entry in entries:
            if isinstance(entry, FieldDefinition):
                definitions.append(entry)
                continue
            try:
                definitions.append(FieldDefinition.model_validate(entry))
            except ValidationError:
                logger.warning(
                    "Skipping invalid field definition %r from plugin %s",
                    entry,
                    plugin_name,
                    exc_info=True,
                )
        return definitions

    # ------------------------------------------------------------------
    # Local directory discovery
    # ------------------------------------------------------------------

    def _discover_local(self, local_dir: Path) -> None:
        """Load single-file plugins (``*.py``, not ``_``-prefixed) from *local_dir*.

        Classes carrying hookimpl-decorated methods are instantiated and
        registered. Broken files are logged and skipped.
        """
        if not local_dir.is_dir():
            return

        for py_file in sorted(local_dir.glob("*.py")):
            if py_file.name.startswith("_"):
                continue
            module_name = f"profilectl_local_plugin_{py_file.stem}"
            try:
                spec = importlib.util.spec_from_file_location(module_name, py_file)
                if spec is None or spec.loader is None:
                    logger.warning("Could not create module spec for %s", py_file)
                    continue
                module = importlib.util.module_from_spec(spec)
                sys.modules[module_name] = module
                spec.loader.exec_module(module)
            except Exception:
                logger.warning("Failed to load local plugin %s", py_file, exc_info=True)
                sys.modules.pop(module_name, None)
                continue

            for _attr_name, obj in inspect.getmembers(module, inspect.isclass):
                if obj.__module__ != module_name:
                    continue
                if not self._has_hook_impls(obj):
                    continue
                try:
                    self.register_plugin(obj(), name=f"{module_name}.{obj.__name__}")
                except Exception:
                    logger.warning(
                        "Failed to instantiate plugin class %s from %s",
                        obj.__name__,
                        py_file,
                        exc_info=True,
                    )

    def _normalize_plugin_instances(self) -> None:
        """Replace plugin classes registered by entry points with instances.

        Hook dispatch against a class object leaves ``self`` unbound.
        """
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin) or not self._has_hook_impls(plugin):
                continue

            plugin_name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)
            try:
                instance = plugin()
            except Exception:
                logger.warning(
                    "Failed to instantiate entry-point plugin %s",
                    plugin_name,
                    exc_info=True,
                )
                continue
            self._pm.register(instance, name=plugin_name)

    @staticmethod
    def _has_hook_impls(cls: type) -> bool:
        """Whether *cls* has methods marked by ``HookimplMarker("profilectl")``."""
        for name in dir(cls):
            if name.startswith("_"):
                continue
            method = getattr(cls, name, None)
            if callable(method) and getattr(method, f"{PROJECT_NAME}_impl", None):
                return True
        return False
