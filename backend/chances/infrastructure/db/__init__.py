"""
Database Infrastructure Package for the Chances Calculator

Exports database utilities.
"""

from chances.infrastructure.db.database import (
    DatabaseManager,
    get_db_manager,
    get_session_context,
    init_db,
    close_db,
    normalize_database_url,
)


__all__ = [
    "DatabaseManager",
    "get_db_manager",
    "get_session_context",
    "init_db",
    "close_db",
    "normalize_database_url",
]
