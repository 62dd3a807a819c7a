"""PostgreSQL DAL Implementations.

This package contains the concrete storage handle and schema inspector for PostgreSQL.
"""

from .schema_introspector import PostgresSchemaInspector
from .storage import PostgresSession, PostgresStorage

__all__ = [
    "PostgresSchemaInspector",
    "PostgresSession",
    "PostgresStorage",
]
