"""Additional-field definitions and the process-wide field registry.

A :class:`FieldDefinition` is pure data: its kind, required flag, and
validation rule (named rule, pattern, bounds, choices) are interpreted by
:mod:`profilectl.domain.validation`. Definitions never carry callables, so
they can be declared in ``profilectl.toml`` or returned by plugins alike.

The :class:`FieldRegistry` is populated once at startup and then frozen.
After :meth:`FieldRegistry.freeze` it is read-only and safe to share
between any number of concurrent readers.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from typing import Any, Self

from pydantic import BaseModel, Field, field_validator, model_validator

from profilectl.domain.types import FieldKind, FieldRule

_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_\-]*$")

# Reserved names cannot be registered as additional fields.
RESERVED_NAMES = frozenset({"id", "email", "created", "modified"})


class FieldDefinition(BaseModel):
    """Schema for one additional profile field.

    Attributes:
        name: Unique key in the user's additional-fields map.
        kind: Value kind (string, number, boolean, enum).
        required: Whether every user must carry a value for this field.
        rule: Optional named rule for string fields (``email``, ``url``,
            ``non_blank``).
        pattern: Optional regex a string value must fully match.
        min_length: Minimum string length (inclusive).
        max_length: Maximum string length (inclusive).
        minimum: Minimum numeric value (inclusive).
        maximum: Maximum numeric value (inclusive).
        choices: Allowed values for enum fields.
        description: Human-readable help text.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    name: str
    kind: FieldKind = FieldKind.STRING
    required: bool = False
    rule: FieldRule | None = None
    pattern: str | None = None
    min_length: int | None = Field(default=None, ge=0)
    max_length: int | None = Field(default=None, ge=0)
    minimum: float | None = None
    maximum: float | None = None
    choices: tuple[str, ...] = ()
    description: str = ""

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        value = value.strip()
        if not _NAME_RE.match(value):
            msg = f"Invalid field name: {value!r}"
            raise ValueError(msg)
        if value in RESERVED_NAMES:
            msg = f"Field name {value!r} is reserved"
            raise ValueError(msg)
        return value

    @field_validator("pattern")
    @classmethod
    def _check_pattern(cls, value: str | None) -> str | None:
        if value is not None:
            try:
                re.compile(value)
            except re.error as exc:
                msg = f"Invalid pattern {value!r}: {exc}"
                raise ValueError(msg) from exc
        return value

    @model_validator(mode="after")
    def _check_kind_options(self) -> Self:
        if self.kind == FieldKind.ENUM and not self.choices:
            msg = f"Enum field {self.name!r} must declare choices"
            raise ValueError(msg)
        if self.kind != FieldKind.ENUM and self.choices:
            msg = f"Only enum fields may declare choices (field {self.name!r})"
            raise ValueError(msg)
        string_only = (self.rule, self.pattern, self.min_length, self.max_length)
        if self.kind != FieldKind.STRING and any(opt is not None for opt in string_only):
            msg = f"rule/pattern/length options apply to string fields only ({self.name!r})"
            raise ValueError(msg)
        if self.kind != FieldKind.NUMBER and (
            self.minimum is not None or self.maximum is not None
        ):
            msg = f"minimum/maximum apply to number fields only ({self.name!r})"
            raise ValueError(msg)
        if (
            self.min_length is not None
            and self.max_length is not None
            and self.min_length > self.max_length
        ):
            msg = f"min_length > max_length for field {self.name!r}"
            raise ValueError(msg)
        if self.minimum is not None and self.maximum is not None and self.minimum > self.maximum:
            msg = f"minimum > maximum for field {self.name!r}"
            raise ValueError(msg)
        return self

    def describe(self) -> dict[str, Any]:
        """Compact dict view (unset options omitted) for display."""
        return self.model_dump(mode="json", exclude_defaults=True) | {
            "name": self.name,
            "kind": str(self.kind),
            "required": self.required,
        }


class FieldRegistry:
    """Registered additional-field definitions, keyed by name.

    Usage::

        registry = FieldRegistry()
        registry.register(FieldDefinition(name="nickname"))
        registry.freeze()
        registry.get("nickname")
    """

    def __init__(self) -> None:
        self._definitions: dict[str, FieldDefinition] = {}
        self._frozen = False

    @classmethod
    def from_definitions(cls, definitions: Iterable[FieldDefinition]) -> FieldRegistry:
        """Build a registry from *definitions* (left unfrozen)."""
        registry = cls()
        for definition in definitions:
            registry.register(definition)
        return registry

    def register(self, definition: FieldDefinition) -> None:
        """Add *definition* to the registry.

        Raises:
            RuntimeError: If the registry has been frozen.
            ValueError: If a field with the same name is already registered.
        """
        if self._frozen:
            msg = f"Cannot register field {definition.name!r}: registry is frozen"
            raise RuntimeError(msg)
        if definition.name in self._definitions:
            msg = f"Field already registered: {definition.name!r}"
            raise ValueError(msg)
        self._definitions[definition.name] = definition

    def get(self, name: str) -> FieldDefinition | None:
        """Return the definition registered under *name*, or None."""
        return self._definitions.get(name)

    def all(self) -> list[FieldDefinition]:
        """All definitions in registration order."""
        return list(self._definitions.values())

    def required(self) -> list[FieldDefinition]:
        """Definitions flagged as required."""
        return [d for d in self._definitions.values() if d.required]

    def freeze(self) -> None:
        """End the startup phase; further registration is rejected."""
        self._frozen = True

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)

    def __iter__(self) -> Iterator[FieldDefinition]:
        return iter(self.all())
