from typing import List, Literal

from pydantic import BaseModel, Field

IndexType = Literal["primary", "unique", "secondary"]


class IndexDef(BaseModel):
    """Portable representation of a table index."""

    name: str
    columns: List[str] = Field(default_factory=list)
    type: IndexType = "secondary"

    @property
    def is_unique(self) -> bool:
        """Primary indexes are unique as well."""
        return self.type in ("primary", "unique")
