"""Two-phase cascade delete: resolve every owned row first, then delete children first."""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence, Tuple

from common.interfaces.storage import StorageSession
from dal.metadata import ContentTypeRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeleteStep:
    """Delete rows of ``table`` whose ``column`` is in ``ids``."""

    table: str
    column: str
    ids: Tuple[int, ...]


@dataclass
class CascadePlan:
    """Ordered deletes; every child step precedes the step deleting its owner."""

    steps: List[DeleteStep] = field(default_factory=list)

    @property
    def tables(self) -> List[str]:
        return [step.table for step in self.steps]

    async def execute(self, session: StorageSession) -> Dict[str, int]:
        """Run the deletes in order and return deleted-row counts per table.

        Must run inside the caller's transaction so a failure leaves nothing deleted.
        """
        counts: Dict[str, int] = defaultdict(int)
        for step in self.steps:
            deleted = await session.delete(step.table, {step.column: list(step.ids)})
            counts[step.table] += deleted
        return dict(counts)


async def resolve_cascade_plan(
    session: StorageSession,
    registry: ContentTypeRegistry,
    roots: Iterable[Tuple[str, Sequence[int]]],
) -> CascadePlan:
    """Walk owned components breadth-first from ``roots`` and build the delete plan.

    ``roots`` are (content-type uid, row ids) pairs. Nothing is deleted here.
    """
    discovered: List[DeleteStep] = []
    frontier = [(uid, tuple(ids)) for uid, ids in roots if ids]

    while frontier:
        uid, ids = frontier.pop(0)
        content_type = registry.get(uid)
        discovered.append(DeleteStep(content_type.table_name, "id", ids))
        if not content_type.owns_children:
            continue

        join_rows = await session.select(
            content_type.join_table_name,
            {"entity_id": list(ids)},
            columns=["cmp_id", "component_type"],
            order_by=["id"],
        )
        if not join_rows:
            continue
        discovered.append(DeleteStep(content_type.join_table_name, "entity_id", ids))

        by_type: Dict[str, List[int]] = defaultdict(list)
        for row in join_rows:
            by_type[row["component_type"]].append(row["cmp_id"])
        for component_uid in sorted(by_type):
            frontier.append((component_uid, tuple(dict.fromkeys(by_type[component_uid]))))

    plan = CascadePlan(steps=list(reversed(discovered)))
    logger.debug("Resolved cascade plan: %s", plan.steps)
    return plan
