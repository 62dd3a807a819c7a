from typing import List, Protocol, runtime_checkable

from schema import ColumnDef, DatabaseSchema, ForeignKeyDef, IndexDef, TableDef


@runtime_checkable
class SchemaInspector(Protocol):
    """Protocol for introspecting database schema (tables, columns, constraints)."""

    def get_database_schema(self) -> str:
        """Name of the schema being inspected."""
        ...

    async def get_tables(self) -> List[str]:
        """List all user table names in the active schema."""
        ...

    async def get_columns(self, table_name: str) -> List[ColumnDef]:
        """Get the columns of a table, mapped to semantic types."""
        ...

    async def get_indexes(self, table_name: str) -> List[IndexDef]:
        """Get the indexes of a table."""
        ...

    async def get_foreign_keys(self, table_name: str) -> List[ForeignKeyDef]:
        """Get the foreign keys of a table."""
        ...

    async def get_table(self, table_name: str) -> TableDef:
        """Get the full definition of a table (columns, indexes, FKs)."""
        ...

    async def get_schema(self) -> DatabaseSchema:
        """Get the definitions of every table in the active schema."""
        ...
