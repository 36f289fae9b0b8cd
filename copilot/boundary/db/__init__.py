"""
Database layer: ORM base, models, CRUD and connection management.
"""

from copilot.boundary.db.base import Base
from copilot.boundary.db.connection import (
    create_tables,
    get_async_db,
    get_async_engine,
    get_async_session_factory,
)

__all__ = [
    "Base",
    "create_tables",
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
]
