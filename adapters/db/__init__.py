"""
Database adapter

SQLite (WAL mode) connection management.
"""

from adapters.db.sqlite_adapter import (
    SQLiteAdapter,
    create_connection,
    init_schema,
)

__all__ = [
    "SQLiteAdapter",
    "create_connection",
    "init_schema",
]
