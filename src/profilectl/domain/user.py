"""User record and partial-update input models."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field


class User(BaseModel):
    """A stored user profile.

    Frozen: updates build a new instance via :meth:`with_changes` and the
    store writes that instance back.
    """

    model_config = {"frozen": True}

    id: str
    email: str
    additional_fields: dict[str, Any] = Field(default_factory=dict)
    created: str = ""
    modified: str = ""

    def with_changes(
        self,
        *,
        email: str | None = None,
        additional_fields: Mapping[str, Any] | None = None,
        modified: str | None = None,
    ) -> User:
        """Return a copy with *email* replaced and fields merged key-wise.

        Existing keys not present in *additional_fields* are kept untouched.
        """
        merged = dict(self.additional_fields)
        if additional_fields:
            merged.update(additional_fields)
        update: dict[str, Any] = {"additional_fields": merged}
        if email is not None:
            update["email"] = email
        if modified is not None:
            update["modified"] = modified
        return self.model_copy(update=update)

    def to_profile(self) -> dict[str, Any]:
        """Public profile representation."""
        return {
            "id": self.id,
            "email": self.email,
            "additional_fields": dict(self.additional_fields),
            "created": self.created,
            "modified": self.modified,
        }


class ProfileUpdate(BaseModel):
    """Partial update payload: only the keys given are changed."""

    model_config = {"frozen": True, "extra": "forbid"}

    email: str | None = None
    additional_fields: dict[str, Any] = Field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return self.email is None and not self.additional_fields
