"""Content-type metadata used to locate physical tables."""

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

ContentTypeKind = Literal["collectionType", "singleType", "component"]

COMPONENT = "component"
DYNAMIC_ZONE = "dynamiczone"


class AttributeDef(BaseModel):
    """One attribute of a content type.

    ``component`` attributes point at a single component uid and may be
    ``repeatable``; ``dynamiczone`` attributes accept any of ``components``.
    Every other type is stored as a scalar column of the owner's table.
    """

    type: str
    component: Optional[str] = None
    repeatable: bool = False
    components: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_targets(self):
        if self.type == COMPONENT and not self.component:
            raise ValueError("component attributes require a 'component' uid")
        if self.type == DYNAMIC_ZONE and not self.components:
            raise ValueError("dynamiczone attributes require at least one component uid")
        return self

    @property
    def is_component(self) -> bool:
        return self.type == COMPONENT

    @property
    def is_dynamic_zone(self) -> bool:
        return self.type == DYNAMIC_ZONE

    @property
    def owns_children(self) -> bool:
        return self.type in (COMPONENT, DYNAMIC_ZONE)


class ContentTypeDef(BaseModel):
    """Metadata for a content type or component: its table and attributes."""

    uid: str
    table_name: str
    kind: ContentTypeKind = "collectionType"
    attributes: Dict[str, AttributeDef] = Field(default_factory=dict)

    @property
    def join_table_name(self) -> str:
        """Table linking rows of this type to the component rows they own."""
        return f"{self.table_name}_cmps"

    @property
    def owns_children(self) -> bool:
        return any(attr.owns_children for attr in self.attributes.values())

    def scalar_attributes(self) -> List[str]:
        return [name for name, attr in self.attributes.items() if not attr.owns_children]

    def child_attributes(self) -> Dict[str, AttributeDef]:
        return {name: attr for name, attr in self.attributes.items() if attr.owns_children}
