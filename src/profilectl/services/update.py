"""ProfileUpdateService — partial updates of a user's email and additional fields.

Pipeline: LOAD → VALIDATE → CHECK UNIQUENESS → MERGE → PERSIST → RESPOND

Structural validation and the email uniqueness check are separate stages,
so a malformed email is always reported as ``invalid_email`` and never as
unavailable. Nothing is written unless both stages pass.
"""

from __future__ import annotations

import logging

from profilectl.domain.types import ErrorKind
from profilectl.domain.user import ProfileUpdate
from profilectl.domain.validation import validate_email, validate_fields
from profilectl.infrastructure.store import EmailConflictError, PersistenceError
from profilectl.services._helpers import email_not_available, now_iso, validation_failed
from profilectl.services.base import BaseService
from profilectl.services.result import ServiceResult
from profilectl.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)


class ProfileUpdateService(BaseService):
    """Applies partial profile updates for a single user at a time."""

    @traced("update_profile", bind=("user_id",))
    def update(self, user_id: str, changes: ProfileUpdate) -> ServiceResult:
        """Validate *changes* and apply them to the user's stored profile.

        Error codes: ``NOT_FOUND``, ``VALIDATION_FAILED`` (per-field kinds in
        ``error.detail["errors"]``), ``EMAIL_NOT_AVAILABLE``,
        ``PERSISTENCE_ERROR``.
        """
        op = "update_profile"
        warnings: list[str] = []

        # ── LOAD ─────────────────────────────────────────────
        try:
            user = self._store.get_by_id(user_id)
        except PersistenceError as exc:
            return ServiceResult.failure(op, "PERSISTENCE_ERROR", str(exc))
        if user is None:
            return ServiceResult.failure(
                op,
                "NOT_FOUND",
                f"No user found with ID: {user_id}",
            )

        # ── VALIDATE ─────────────────────────────────────────
        with trace_span("validate") as span:
            errors: dict[str, ErrorKind] = {}
            if changes.email is not None:
                email_error = validate_email(changes.email)
                if email_error is not None:
                    errors["email"] = email_error
            validation = validate_fields(
                changes.additional_fields,
                user.additional_fields,
                self._registry,
            )
            errors.update(validation.errors)
            if span:
                span.annotate("errors", len(errors))

        if errors:
            logger.debug("Rejected update: %s", sorted(errors))
            return validation_failed(op, errors)

        # ── CHECK UNIQUENESS ─────────────────────────────────
        email_changed = changes.email is not None and changes.email != user.email
        if email_changed:
            assert changes.email is not None
            with trace_span("check_email"):
                try:
                    taken = self._store.email_exists(changes.email)
                except PersistenceError as exc:
                    return ServiceResult.failure(op, "PERSISTENCE_ERROR", str(exc))
            if taken:
                return email_not_available(op, changes.email)

        # ── MERGE ────────────────────────────────────────────
        updated = user.with_changes(
            email=changes.email if email_changed else None,
            additional_fields=validation.values,
            modified=now_iso(),
        )

        # ── PERSIST ──────────────────────────────────────────
        with trace_span("persist"):
            try:
                self._store.update(updated)
            except EmailConflictError:
                # Lost a race with a concurrent writer; the unique constraint wins.
                return email_not_available(op, updated.email)
            except PersistenceError as exc:
                logger.warning("Failed to persist profile: %s", exc)
                return ServiceResult.failure(op, "PERSISTENCE_ERROR", str(exc))

        fields_changed = (["email"] if email_changed else []) + sorted(validation.values)
        logger.info("Updated profile (fields: %s)", fields_changed)

        self._dispatch_event(
            "post_profile_update",
            {
                "user_id": user_id,
                "fields_changed": fields_changed,
                "email_changed": email_changed,
            },
            warnings,
        )

        # ── RESPOND ──────────────────────────────────────────
        return ServiceResult(
            ok=True,
            op=op,
            data={**updated.to_profile(), "fields_changed": fields_changed},
            warnings=warnings,
        )
