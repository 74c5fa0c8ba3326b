"""BaseService — shared foundation for profilectl services.

Collaborators are injected at construction time: the user store, the
frozen field registry, and optionally the plugin manager used for
lifecycle events.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from profilectl.domain.fields import FieldRegistry
    from profilectl.infrastructure.store import UserStore
    from profilectl.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class ProfileUpdateService(BaseService):
            def update(self, user_id: str, changes: ProfileUpdate) -> ServiceResult:
                user = self._store.get_by_id(user_id)
                ...
    """

    def __init__(
        self,
        store: UserStore,
        registry: FieldRegistry,
        *,
        plugin_manager: PluginManager | None = None,
    ) -> None:
        self._store = store
        self._registry = registry
        self._plugins = plugin_manager

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str],
    ) -> None:
        """Call a lifecycle hook on all plugins. No-op without a plugin manager.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        if self._plugins is None:
            return
        hook_fn = getattr(self._plugins.hook, hook_name, None)
        if hook_fn is None:
            return
        try:
            hook_fn(**payload)
        except Exception:
            logger.debug("Event dispatch failed for %s", hook_name, exc_info=True)
            warnings.append(f"Event dispatch failed for {hook_name}")
