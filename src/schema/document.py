"""Document and document-version models."""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

DocumentStatus = Literal["draft", "published"]

DRAFT = "draft"
PUBLISHED = "published"
DOCUMENT_STATUSES = (DRAFT, PUBLISHED)


class ComponentRef(BaseModel):
    """One owned component row, as recorded in the owner's join table."""

    id: int
    field: str
    component_type: str
    order: int = 0


class DocumentVersion(BaseModel):
    """One physical row of a document for a (locale, status) combination."""

    id: int
    document_id: str
    locale: str
    status: DocumentStatus
    published_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    fields: Dict[str, Any] = Field(default_factory=dict)
    component_refs: List[ComponentRef] = Field(default_factory=list)
    dynamic_zone_refs: List[ComponentRef] = Field(default_factory=list)


class DeleteResult(BaseModel):
    """Outcome of a cascade delete."""

    document_id: str
    deleted_version_ids: List[int] = Field(default_factory=list)
    deleted_rows: Dict[str, int] = Field(default_factory=dict)

    @property
    def total_rows(self) -> int:
        return sum(self.deleted_rows.values())
