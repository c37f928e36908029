"""
Database access (SQLAlchemy async)
"""

from .async_db import (
    check_database_connection,
    dispose_engine,
    get_async_db,
    get_async_engine,
    get_session_factory,
)

__all__ = [
    "check_database_connection",
    "dispose_engine",
    "get_async_db",
    "get_async_engine",
    "get_session_factory",
]
