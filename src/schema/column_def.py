from typing import Any, List, Literal, Optional, get_args

from pydantic import BaseModel, Field

SemanticType = Literal[
    "integer",
    "text",
    "boolean",
    "string",
    "datetime",
    "date",
    "time",
    "decimal",
    "double",
    "bigInteger",
    "json",
    "specificType",
]

SEMANTIC_TYPES = frozenset(get_args(SemanticType))


class ColumnDef(BaseModel):
    """Portable representation of a table column."""

    name: str
    type: SemanticType
    args: List[Any] = Field(default_factory=list)
    default_to: Optional[str] = None
    not_nullable: bool = False
    unsigned: bool = False
