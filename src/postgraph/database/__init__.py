"""
Database module for the postgraph backend
"""

from .connection import get_async_engine, get_session_factory, init_database
from .records import PostRecord, TagRecord
from .unit_of_work import SqlAlchemyUnitOfWork, UnitOfWork

__all__ = [
    "PostRecord",
    "SqlAlchemyUnitOfWork",
    "TagRecord",
    "UnitOfWork",
    "get_async_engine",
    "get_session_factory",
    "init_database",
]
