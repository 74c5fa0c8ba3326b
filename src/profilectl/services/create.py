"""UserCreateService — registration of new user profiles."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from profilectl.domain.types import ErrorKind
from profilectl.domain.user import User
from profilectl.domain.validation import validate_email, validate_fields
from profilectl.infrastructure.store import EmailConflictError, PersistenceError
from profilectl.services._helpers import (
    email_not_available,
    generate_user_id,
    now_iso,
    validation_failed,
)
from profilectl.services.base import BaseService
from profilectl.services.result import ServiceResult
from profilectl.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)


class UserCreateService(BaseService):
    """Creates users, enforcing the same field rules as profile updates."""

    @traced("create_user", bind=("email",))
    def create(
        self,
        email: str,
        additional_fields: Mapping[str, Any] | None = None,
    ) -> ServiceResult:
        """Create a user with *email* and optional additional fields.

        Required fields must be supplied here since a new user has no
        existing values to fall back on.
        """
        op = "create_user"
        warnings: list[str] = []
        raw_fields = dict(additional_fields or {})

        with trace_span("validate"):
            errors: dict[str, ErrorKind] = {}
            email_error = validate_email(email)
            if email_error is not None:
                errors["email"] = email_error
            validation = validate_fields(raw_fields, {}, self._registry)
            errors.update(validation.errors)
        if errors:
            return validation_failed(op, errors)

        try:
            if self._store.email_exists(email):
                return email_not_available(op, email)
        except PersistenceError as exc:
            return ServiceResult.failure(op, "PERSISTENCE_ERROR", str(exc))

        now = now_iso()
        user = User(
            id=generate_user_id(),
            email=email,
            additional_fields=validation.values,
            created=now,
            modified=now,
        )

        with trace_span("persist"):
            try:
                self._store.insert(user)
            except EmailConflictError:
                return email_not_available(op, email)
            except PersistenceError as exc:
                return ServiceResult.failure(op, "PERSISTENCE_ERROR", str(exc))

        logger.info("Created user %s", user.id)
        self._dispatch_event(
            "post_user_create",
            {"user_id": user.id, "email": user.email},
            warnings,
        )
        return ServiceResult(ok=True, op=op, data=user.to_profile(), warnings=warnings)
