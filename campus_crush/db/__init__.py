"""
Database module - engine, sessions and table definitions.
"""
from campus_crush.db.database import get_db, get_db_session, init_db, test_database_connection

__all__ = [
    "get_db",
    "get_db_session",
    "init_db",
    "test_database_connection"
]
