"""Writing, rewriting and cloning component and dynamic-zone rows."""

import logging
from collections import defaultdict
from typing import Any, Dict, List, Mapping, Tuple

from common.errors import ValidationError
from common.interfaces.storage import StorageSession
from dal.metadata import ContentTypeRegistry
from documents.cascade import resolve_cascade_plan
from documents.params import split_data
from schema import AttributeDef, ComponentRef, ContentTypeDef

logger = logging.getLogger(__name__)

COMPONENT_KEY = "__component"


def _component_items(
    field_name: str, attr: AttributeDef, value: Any
) -> List[Tuple[str, Mapping[str, Any]]]:
    """Normalize a component/dynamic-zone value to (component uid, data) pairs."""
    if value is None:
        return []

    if attr.is_dynamic_zone:
        if not isinstance(value, list):
            raise ValidationError(f"Dynamic zone '{field_name}' expects a list")
        items = []
        for item in value:
            uid = item.get(COMPONENT_KEY) if isinstance(item, Mapping) else None
            if uid not in attr.components:
                raise ValidationError(
                    f"Invalid component '{uid}' for dynamic zone '{field_name}'",
                    details={"field": field_name, "component": uid},
                )
            items.append((uid, item))
        return items

    if attr.repeatable:
        if not isinstance(value, list):
            raise ValidationError(f"Repeatable component '{field_name}' expects a list")
        values = value
    else:
        if not isinstance(value, Mapping):
            raise ValidationError(f"Component '{field_name}' expects an object")
        values = [value]
    for item in values:
        if not isinstance(item, Mapping):
            raise ValidationError(f"Component '{field_name}' expects objects")
    return [(attr.component, item) for item in values]


class ComponentWriter:
    """Maintains the component rows owned by document versions and components."""

    def __init__(self, registry: ContentTypeRegistry) -> None:
        """Initialize with the registry used to locate component tables."""
        self._registry = registry

    async def write(
        self,
        session: StorageSession,
        owner: ContentTypeDef,
        entity_id: int,
        children: Mapping[str, Any],
    ) -> None:
        """Insert the components in ``children`` and link them to ``entity_id``."""
        for field_name, attr in owner.child_attributes().items():
            if field_name not in children:
                continue
            items = _component_items(field_name, attr, children[field_name])
            for order, (component_uid, item) in enumerate(items, start=1):
                component_id = await self._insert_component(session, component_uid, item)
                await session.insert(
                    owner.join_table_name,
                    {
                        "entity_id": entity_id,
                        "cmp_id": component_id,
                        "component_type": component_uid,
                        "field": field_name,
                        "order": order,
                    },
                )

    async def _insert_component(
        self, session: StorageSession, component_uid: str, item: Mapping[str, Any]
    ) -> int:
        component = self._registry.get(component_uid)
        scalars, children = split_data(component, item, ignore=("id", COMPONENT_KEY))
        row = await session.insert(component.table_name, scalars)
        if children:
            await self.write(session, component, row["id"], children)
        return row["id"]

    async def replace(
        self,
        session: StorageSession,
        owner: ContentTypeDef,
        entity_id: int,
        children: Mapping[str, Any],
    ) -> None:
        """Delete the components of every field in ``children``, then reinsert them."""
        if not children:
            return
        for field_name in children:
            join_rows = await session.select(
                owner.join_table_name,
                {"entity_id": entity_id, "field": field_name},
                columns=["cmp_id", "component_type"],
            )
            if not join_rows:
                continue
            by_type: Dict[str, List[int]] = defaultdict(list)
            for row in join_rows:
                by_type[row["component_type"]].append(row["cmp_id"])
            plan = await resolve_cascade_plan(session, self._registry, sorted(by_type.items()))
            await plan.execute(session)
            await session.delete(
                owner.join_table_name, {"entity_id": entity_id, "field": field_name}
            )
        await self.write(session, owner, entity_id, children)

    async def clone(
        self,
        session: StorageSession,
        owner: ContentTypeDef,
        source_id: int,
        target_id: int,
    ) -> None:
        """Deep-copy every component owned by ``source_id`` onto ``target_id``."""
        if not owner.owns_children:
            return
        join_rows = await session.select(
            owner.join_table_name,
            {"entity_id": source_id},
            order_by=["field", "order", "id"],
        )
        for link in join_rows:
            component = self._registry.get(link["component_type"])
            source = await session.first(component.table_name, {"id": link["cmp_id"]})
            if source is None:
                logger.warning(
                    "Dangling component link %s -> %s#%s",
                    owner.join_table_name,
                    component.table_name,
                    link["cmp_id"],
                )
                continue
            copy = await session.insert(
                component.table_name, {k: v for k, v in source.items() if k != "id"}
            )
            await self.clone(session, component, source["id"], copy["id"])
            await session.insert(
                owner.join_table_name,
                {
                    "entity_id": target_id,
                    "cmp_id": copy["id"],
                    "component_type": link["component_type"],
                    "field": link["field"],
                    "order": link["order"],
                },
            )

    async def load_refs(
        self, session: StorageSession, owner: ContentTypeDef, entity_id: int
    ) -> Tuple[List[ComponentRef], List[ComponentRef]]:
        """Return (component refs, dynamic-zone refs) owned by ``entity_id``."""
        if not owner.owns_children:
            return [], []
        join_rows = await session.select(
            owner.join_table_name,
            {"entity_id": entity_id},
            order_by=["field", "order", "id"],
        )
        component_refs: List[ComponentRef] = []
        dynamic_zone_refs: List[ComponentRef] = []
        for link in join_rows:
            ref = ComponentRef(
                id=link["cmp_id"],
                field=link["field"],
                component_type=link["component_type"],
                order=link["order"] or 0,
            )
            attr = owner.attributes.get(link["field"])
            if attr is not None and attr.is_dynamic_zone:
                dynamic_zone_refs.append(ref)
            else:
                component_refs.append(ref)
        return component_refs, dynamic_zone_refs
