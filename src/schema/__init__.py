"""Portable schema and document models."""

from .column_def import SEMANTIC_TYPES, ColumnDef, SemanticType
from .content_type import AttributeDef, ContentTypeDef
from .document import (
    DOCUMENT_STATUSES,
    DRAFT,
    PUBLISHED,
    ComponentRef,
    DeleteResult,
    DocumentStatus,
    DocumentVersion,
)
from .foreign_key_def import ForeignKeyDef
from .index_def import IndexDef, IndexType
from .table_def import DatabaseSchema, TableDef

__all__ = [
    "AttributeDef",
    "ColumnDef",
    "ComponentRef",
    "ContentTypeDef",
    "DatabaseSchema",
    "DeleteResult",
    "DOCUMENT_STATUSES",
    "DRAFT",
    "DocumentStatus",
    "DocumentVersion",
    "ForeignKeyDef",
    "IndexDef",
    "IndexType",
    "PUBLISHED",
    "SEMANTIC_TYPES",
    "SemanticType",
    "TableDef",
]
