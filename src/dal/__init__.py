"""Data Abstraction Layer (DAL) for the content store.

Exposes the content-type registry, native type mapping and the provider
factory; concrete PostgreSQL implementations live in ``dal.postgres``.
"""

from dal.factory import create_storage, get_schema_inspector
from dal.index_parsing import IndexColumnParser, ParenthesizedIndexColumnParser
from dal.metadata import ContentTypeRegistry
from dal.type_normalization import SemanticColumnType, to_semantic_type

__all__ = [
    "ContentTypeRegistry",
    "IndexColumnParser",
    "ParenthesizedIndexColumnParser",
    "SemanticColumnType",
    "create_storage",
    "get_schema_inspector",
    "to_semantic_type",
]
