from typing import List

from pydantic import BaseModel, Field

from .column_def import ColumnDef
from .foreign_key_def import ForeignKeyDef
from .index_def import IndexDef


class TableDef(BaseModel):
    """Canonical representation of a database table definition."""

    name: str
    columns: List[ColumnDef] = Field(default_factory=list)
    indexes: List[IndexDef] = Field(default_factory=list)
    foreign_keys: List[ForeignKeyDef] = Field(default_factory=list)


class DatabaseSchema(BaseModel):
    """All tables of one database schema, as consumed by schema-diff tooling."""

    tables: List[TableDef] = Field(default_factory=list)

    def get_table(self, name: str):
        """Return the table with the given name, or None."""
        return next((table for table in self.tables if table.name == name), None)
