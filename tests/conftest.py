"""Shared pytest fixtures and test helpers for profilectl tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from profilectl.domain.fields import FieldDefinition, FieldRegistry
from profilectl.domain.user import User
from profilectl.infrastructure.database.engine import init_database
from profilectl.infrastructure.store import SqlUserStore

PROJECT_TOML = """\
[[fields]]
name = "display_name"
kind = "string"
max_length = 40

[[fields]]
name = "age"
kind = "number"
minimum = 0
maximum = 150

[[fields]]
name = "newsletter"
kind = "boolean"

[[fields]]
name = "plan"
kind = "enum"
choices = ["free", "pro"]
"""


def standard_definitions() -> list[FieldDefinition]:
    """The field set most tests run against."""
    return [
        FieldDefinition(name="display_name", kind="string", max_length=40),
        FieldDefinition(name="age", kind="number", minimum=0, maximum=150),
        FieldDefinition(name="newsletter", kind="boolean"),
        FieldDefinition(name="plan", kind="enum", choices=("free", "pro")),
        FieldDefinition(name="website", kind="string", rule="url"),
        FieldDefinition(name="backup_email", kind="string", rule="email"),
    ]


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_engine(tmp_path: Path) -> Iterator[Engine]:
    """Initialized SQLite engine with all tables created."""
    engine = init_database(tmp_path / "profiles.db")
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def store(db_engine: Engine) -> SqlUserStore:
    return SqlUserStore(db_engine)


@pytest.fixture
def registry() -> FieldRegistry:
    """Frozen registry holding :func:`standard_definitions`."""
    reg = FieldRegistry.from_definitions(standard_definitions())
    reg.freeze()
    return reg


@pytest.fixture
def _isolated_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run the CLI inside a temp project with a ``profilectl.toml``.

    Use via ``@pytest.mark.usefixtures("_isolated_project")``.
    """
    (tmp_path / "profilectl.toml").write_text(PROJECT_TOML, encoding="utf-8")
    monkeypatch.delenv("PROFILECTL_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def add_user(
    store: SqlUserStore,
    email: str,
    *,
    user_id: str | None = None,
    **fields: Any,
) -> User:
    """Insert a user directly through the store, bypassing validation."""
    user = User(
        id=user_id or f"usr_{email.split('@')[0]}",
        email=email,
        additional_fields=fields,
        created="2026-01-01T00:00:00+00:00",
        modified="2026-01-01T00:00:00+00:00",
    )
    store.insert(user)
    return user
