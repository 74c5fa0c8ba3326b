"""Classification enums for additional fields and validation outcomes."""

from __future__ import annotations

from enum import StrEnum


class FieldKind(StrEnum):
    """Value kinds an additional field can hold."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ENUM = "enum"


class FieldRule(StrEnum):
    """Named built-in rules applicable to string fields."""

    EMAIL = "email"
    URL = "url"
    NON_BLANK = "non_blank"


class ErrorKind(StrEnum):
    """Per-field error kinds reported in a validation error set."""

    INVALID_EMAIL = "invalid_email"
    UNKNOWN_FIELD = "unknown_field"
    INVALID_VALUE = "invalid_value"
    MISSING_REQUIRED = "missing_required"
    EMAIL_NOT_AVAILABLE = "email_not_available"
