"""User store — the persistence collaborator for profile services.

:class:`UserStore` is the boundary the services depend on.
:class:`SqlUserStore` implements it over the ``users`` table. Writes are
single statements inside ``engine.begin()``, so each one is atomic.
Unique-constraint violations on ``users.email`` surface as
:class:`EmailConflictError`; every other database failure surfaces as
:class:`PersistenceError`.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Protocol

from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from profilectl.domain.user import User
from profilectl.infrastructure.database.schema import users

if TYPE_CHECKING:
    from sqlalchemy import Row
    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Base class for user store failures."""


class PersistenceError(StoreError):
    """The store could not complete a read or write."""


class EmailConflictError(StoreError):
    """A write would duplicate an email owned by another user."""

    def __init__(self, email: str) -> None:
        super().__init__(f"Email already in use: {email}")
        self.email = email


class UserStore(Protocol):
    """Persistence operations required by the profile services."""

    def get_by_id(self, user_id: str) -> User | None: ...

    def email_exists(self, email: str) -> bool: ...

    def insert(self, user: User) -> None: ...

    def update(self, user: User) -> None: ...


class SqlUserStore:
    """:class:`UserStore` backed by a SQLAlchemy engine."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def get_by_id(self, user_id: str) -> User | None:
        """Load a user by ID, or None if no such user exists."""
        try:
            with self._engine.connect() as conn:
                row = conn.execute(select(users).where(users.c.id == user_id)).first()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to load user {user_id}: {exc}") from exc
        if row is None:
            return None
        return _row_to_user(row)

    def email_exists(self, email: str) -> bool:
        """Whether any user currently owns *email* (exact match)."""
        try:
            with self._engine.connect() as conn:
                row = conn.execute(select(users.c.id).where(users.c.email == email)).first()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to check email availability: {exc}") from exc
        return row is not None

    def insert(self, user: User) -> None:
        """Insert a new user row."""
        self._write(
            insert(users).values(**_user_to_values(user)),
            email=user.email,
        )

    def update(self, user: User) -> None:
        """Overwrite the stored row for ``user.id`` in one statement.

        Raises:
            EmailConflictError: If ``user.email`` belongs to another user.
            PersistenceError: On any other failure, including a missing row.
        """
        values = _user_to_values(user)
        del values["id"]
        del values["created"]
        rowcount = self._write(
            update(users).where(users.c.id == user.id).values(**values),
            email=user.email,
        )
        if rowcount == 0:
            raise PersistenceError(f"User {user.id} no longer exists")

    def _write(self, statement: Any, *, email: str) -> int:
        try:
            with self._engine.begin() as conn:
                result = conn.execute(statement)
        except IntegrityError as exc:
            if _is_email_violation(exc):
                raise EmailConflictError(email) from exc
            raise PersistenceError(f"Integrity violation: {exc.orig}") from exc
        except SQLAlchemyError as exc:
            logger.debug("User store write failed", exc_info=True)
            raise PersistenceError(f"Write failed: {exc}") from exc
        return result.rowcount


def _is_email_violation(exc: IntegrityError) -> bool:
    """SQLite reports ``UNIQUE constraint failed: users.email``."""
    message = str(exc.orig).lower()
    return "unique" in message and "users.email" in message


def _user_to_values(user: User) -> dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "additional_fields": json.dumps(user.additional_fields, sort_keys=True),
        "created": user.created,
        "modified": user.modified,
    }


def _row_to_user(row: Row[Any]) -> User:
    raw_fields = row.additional_fields
    fields: dict[str, Any] = json.loads(raw_fields) if raw_fields else {}
    return User(
        id=row.id,
        email=row.email,
        additional_fields=fields,
        created=row.created,
        modified=row.modified,
    )
