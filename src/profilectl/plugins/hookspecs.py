"""Pluggy hook specifications for profilectl.

One setup-time hook lets plugins contribute additional-field definitions
before the registry is frozen. Two lifecycle hooks observe completed
writes; they run synchronously after the write has committed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pluggy

if TYPE_CHECKING:
    from profilectl.domain.fields import FieldDefinition

PROJECT_NAME = "profilectl"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class ProfileHookSpec:
    """Hook specifications for the profilectl plugin system."""

    @hookspec
    def register_profile_fields(self) -> list[FieldDefinition | dict[str, Any]] | None:
        """Return field definitions (models or plain dicts) to register at startup."""

    @hookspec
    def post_user_create(self, user_id: str, email: str) -> None:
        """Called after a user is created."""

    @hookspec
    def post_profile_update(
        self,
        user_id: str,
        fields_changed: list[str],
        email_changed: bool,
    ) -> None:
        """Called after a profile update has been persisted."""
