"""SQLite database engine and schema via SQLAlchemy Core."""

from profilectl.infrastructure.database.engine import create_db_engine, init_database
from profilectl.infrastructure.database.schema import metadata, users

__all__ = [
    "create_db_engine",
    "init_database",
    "metadata",
    "users",
]
