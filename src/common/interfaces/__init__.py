"""Storage and introspection protocols shared by the DAL and document service."""

from .schema_introspector import SchemaInspector
from .storage import NOT_NULL, StorageHandle, StorageSession, Where

__all__ = [
    "NOT_NULL",
    "SchemaInspector",
    "StorageHandle",
    "StorageSession",
    "Where",
]
