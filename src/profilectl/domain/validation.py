"""Field validation — pure coercion and rule checks against a FieldRegistry.

Every problem is collected before returning so callers can report all of
them at once. Nothing here performs I/O or mutates its inputs.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlsplit

import email_validator

from profilectl.domain.fields import FieldDefinition, FieldRegistry
from profilectl.domain.types import ErrorKind, FieldKind, FieldRule

_TRUE_STRINGS = frozenset({"true", "yes", "1"})
_FALSE_STRINGS = frozenset({"false", "no", "0"})


class _InvalidValueError(ValueError):
    """Raised internally when a raw value fails its definition."""


@dataclass(frozen=True)
class FieldValidation:
    """Outcome of validating a set of raw additional-field values.

    ``values`` holds the coerced values for every input key that passed.
    ``errors`` maps field name to :class:`ErrorKind`; when it is non-empty
    the whole update must be rejected.
    """

    values: dict[str, Any] = field(default_factory=dict)
    errors: dict[str, ErrorKind] = field(default_factory=dict)

    @property
    def valid(self) -> bool:
        return not self.errors


def is_valid_email(value: str) -> bool:
    """Check address shape only; no DNS or deliverability lookups."""
    try:
        email_validator.validate_email(value, check_deliverability=False)
    except email_validator.EmailNotValidError:
        return False
    return True


def validate_email(email: str | None) -> ErrorKind | None:
    """Return ``INVALID_EMAIL`` if *email* is blank or malformed, else None."""
    if email is None or not isinstance(email, str) or not email.strip():
        return ErrorKind.INVALID_EMAIL
    if not is_valid_email(email):
        return ErrorKind.INVALID_EMAIL
    return None


def validate_fields(
    raw: Mapping[str, Any],
    existing: Mapping[str, Any],
    registry: FieldRegistry,
) -> FieldValidation:
    """Validate and coerce *raw* additional-field values.

    Args:
        raw: Field name -> raw value, as submitted by the caller.
        existing: The user's current additional fields. Only consulted to
            decide whether a required field is already satisfied.
        registry: Registered field definitions.

    Returns:
        A :class:`FieldValidation` with coerced values and all errors.
    """
    values: dict[str, Any] = {}
    errors: dict[str, ErrorKind] = {}

    for name, value in raw.items():
        definition = registry.get(name)
        if definition is None:
            errors[name] = ErrorKind.UNKNOWN_FIELD
            continue
        try:
            values[name] = coerce_value(definition, value)
        except _InvalidValueError:
            errors[name] = ErrorKind.INVALID_VALUE

    for definition in registry.required():
        if definition.name not in raw and existing.get(definition.name) is None:
            errors[definition.name] = ErrorKind.MISSING_REQUIRED

    return FieldValidation(values=values, errors=errors)


def coerce_value(definition: FieldDefinition, value: Any) -> Any:
    """Coerce *value* to the kind declared by *definition*.

    Raises:
        _InvalidValueError: If the value cannot be accepted.
    """
    if value is None:
        if definition.required:
            raise _InvalidValueError(definition.name)
        return None

    match definition.kind:
        case FieldKind.STRING:
            return _coerce_string(definition, value)
        case FieldKind.NUMBER:
            return _coerce_number(definition, value)
        case FieldKind.BOOLEAN:
            return _coerce_boolean(value)
        case FieldKind.ENUM:
            return _coerce_enum(definition, value)
    raise _InvalidValueError(definition.name)  # pragma: no cover


def _coerce_string(definition: FieldDefinition, value: Any) -> str:
    if not isinstance(value, str):
        raise _InvalidValueError(definition.name)
    if (definition.required or definition.rule == FieldRule.NON_BLANK) and not value.strip():
        raise _InvalidValueError(definition.name)
    if definition.min_length is not None and len(value) < definition.min_length:
        raise _InvalidValueError(definition.name)
    if definition.max_length is not None and len(value) > definition.max_length:
        raise _InvalidValueError(definition.name)
    if definition.pattern is not None and re.fullmatch(definition.pattern, value) is None:
        raise _InvalidValueError(definition.name)
    if definition.rule == FieldRule.EMAIL and not is_valid_email(value):
        raise _InvalidValueError(definition.name)
    if definition.rule == FieldRule.URL and not _is_http_url(value):
        raise _InvalidValueError(definition.name)
    return value


def _coerce_number(definition: FieldDefinition, value: Any) -> int | float:
    # bool is an int subclass; reject it explicitly.
    if isinstance(value, bool):
        raise _InvalidValueError(definition.name)
    number: int | float
    if isinstance(value, int | float):
        number = value
    elif isinstance(value, str):
        text = value.strip()
        try:
            number = int(text)
        except ValueError:
            try:
                number = float(text)
            except ValueError:
                raise _InvalidValueError(definition.name) from None
    else:
        raise _InvalidValueError(definition.name)

    if isinstance(number, float) and not math.isfinite(number):
        raise _InvalidValueError(definition.name)
    if definition.minimum is not None and number < definition.minimum:
        raise _InvalidValueError(definition.name)
    if definition.maximum is not None and number > definition.maximum:
        raise _InvalidValueError(definition.name)
    return number


def _coerce_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise _InvalidValueError("boolean")


def _coerce_enum(definition: FieldDefinition, value: Any) -> str:
    # Scalars compare by their string form, so a CLI `tier=1` matches choice "1".
    if isinstance(value, bool) or not isinstance(value, str | int | float):
        raise _InvalidValueError(definition.name)
    text = str(value)
    if text not in definition.choices:
        raise _InvalidValueError(definition.name)
    return text


def _is_http_url(value: str) -> bool:
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    return parts.scheme in ("http", "https") and bool(parts.hostname)
