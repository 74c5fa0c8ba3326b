"""Tests for database engine setup."""

from __future__ import annotations

from pathlib import Path

from sqlalchemy import inspect, text

from profilectl.infrastructure.database.engine import init_database


class TestInitDatabase:
    def test_creates_parent_dirs_and_tables(self, tmp_path: Path) -> None:
        db_path = tmp_path / "nested" / "dir" / "profiles.db"
        engine = init_database(db_path)
        try:
            assert db_path.exists()
            assert "users" in inspect(engine).get_table_names()
        finally:
            engine.dispose()

    def test_idempotent(self, tmp_path: Path) -> None:
        db_path = tmp_path / "profiles.db"
        init_database(db_path).dispose()
        engine = init_database(db_path)
        try:
            assert "users" in inspect(engine).get_table_names()
        finally:
            engine.dispose()

    def test_wal_mode(self, tmp_path: Path) -> None:
        engine = init_database(tmp_path / "profiles.db")
        try:
            with engine.connect() as conn:
                mode = conn.execute(text("PRAGMA journal_mode")).scalar_one()
            assert str(mode).lower() == "wal"
        finally:
            engine.dispose()
