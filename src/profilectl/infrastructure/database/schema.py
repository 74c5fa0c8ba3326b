"""SQLAlchemy Core table definitions for the profile database.

The unique constraint on ``users.email`` is the source of truth for email
uniqueness; services only pre-check it to produce a clearer error.
"""

from __future__ import annotations

from sqlalchemy import Column, MetaData, Table, Text

metadata = MetaData()

users = Table(
    "users",
    metadata,
    Column("id", Text, primary_key=True),
    Column("email", Text, nullable=False, unique=True),
    Column("additional_fields", Text, nullable=False, default="{}", server_default="{}"),  # JSON
    Column("created", Text, nullable=False),
    Column("modified", Text, nullable=False),
)
