"""Startup assembly of the FieldRegistry from config and plugins, and its listing."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from profilectl.domain.fields import FieldDefinition, FieldRegistry
from profilectl.services.result import ServiceResult

if TYPE_CHECKING:
    from profilectl.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


def build_field_registry(
    configured: Iterable[FieldDefinition],
    plugin_manager: PluginManager | None = None,
) -> FieldRegistry:
    """Register *configured* definitions, then plugin-provided ones, and freeze.

    The first registration of a name wins; later duplicates are logged
    and skipped.
    """
    registry = FieldRegistry()
    sources: list[tuple[str, Iterable[FieldDefinition]]] = [("config", configured)]
    if plugin_manager is not None:
        sources.append(("plugins", plugin_manager.collect_field_definitions()))

    for source, definitions in sources:
        for definition in definitions:
            try:
                registry.register(definition)
            except ValueError:
                logger.warning(
                    "Skipping duplicate field %r from %s",
                    definition.name,
                    source,
                )

    registry.freeze()
    logger.debug("Field registry frozen with %d definitions", len(registry))
    return registry


def list_fields(registry: FieldRegistry) -> ServiceResult:
    """List registered additional-field definitions in registration order.

    Reads only the registry, so the user store is never opened.
    """
    items = [definition.describe() for definition in registry.all()]
    return ServiceResult(
        ok=True,
        op="list_fields",
        data={"count": len(items), "items": items},
    )
