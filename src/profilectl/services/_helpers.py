"""Shared service-layer helper functions."""

from __future__ import annotations

import secrets
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from profilectl.domain.types import ErrorKind
from profilectl.services.result import ServiceResult


def now_iso() -> str:
    """Current UTC time as standard ISO 8601."""
    return datetime.now(UTC).isoformat()


def generate_user_id() -> str:
    """Opaque user ID: ``usr_`` + 12 hex chars."""
    return f"usr_{secrets.token_hex(6)}"


def error_detail(errors: Mapping[str, ErrorKind]) -> dict[str, Any]:
    """Render a field -> ErrorKind map as the ``ServiceError.detail`` payload."""
    return {"errors": {name: str(kind) for name, kind in sorted(errors.items())}}


def validation_failed(op: str, errors: Mapping[str, ErrorKind]) -> ServiceResult:
    """Build the VALIDATION_FAILED result carrying every field error."""
    summary = ", ".join(f"{name} ({kind})" for name, kind in sorted(errors.items()))
    return ServiceResult.failure(
        op,
        "VALIDATION_FAILED",
        f"Validation failed: {summary}",
        detail=error_detail(errors),
    )


def email_not_available(op: str, email: str) -> ServiceResult:
    return ServiceResult.failure(
        op,
        "EMAIL_NOT_AVAILABLE",
        f"Email is not available: {email}",
        detail=error_detail({"email": ErrorKind.EMAIL_NOT_AVAILABLE}),
    )
