"""ProfileQueryService — read-only profile views."""

from __future__ import annotations

from profilectl.infrastructure.store import PersistenceError
from profilectl.services.base import BaseService
from profilectl.services.result import ServiceResult
from profilectl.services.telemetry import traced


class ProfileQueryService(BaseService):
    """Read operations over stored users."""

    @traced("get_profile", bind=("user_id",))
    def get(self, user_id: str) -> ServiceResult:
        """Return the profile of *user_id*."""
        op = "get_profile"
        try:
            user = self._store.get_by_id(user_id)
        except PersistenceError as exc:
            return ServiceResult.failure(op, "PERSISTENCE_ERROR", str(exc))
        if user is None:
            return ServiceResult.failure(op, "NOT_FOUND", f"No user found with ID: {user_id}")
        return ServiceResult(ok=True, op=op, data=user.to_profile())
