from typing import List, Optional

from pydantic import BaseModel, Field


class ForeignKeyDef(BaseModel):
    """Canonical representation of a foreign key constraint.

    ``referenced_columns[i]`` is the column referenced by ``columns[i]``.
    """

    name: str
    columns: List[str] = Field(default_factory=list)
    referenced_table: Optional[str] = None
    referenced_columns: List[str] = Field(default_factory=list)
    on_update: Optional[str] = None
    on_delete: Optional[str] = None
