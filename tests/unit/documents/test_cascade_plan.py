import pytest

from documents import CascadePlan, DeleteStep, resolve_cascade_plan
from tests._support.fixtures.content_fixtures import (
    ARTICLE_JOIN_TABLE,
    ARTICLE_TABLE,
    ARTICLE_UID,
    COMP_JOIN_TABLE,
    COMP_TABLE,
    DZ_COMP_TABLE,
    DZ_OTHER_TABLE,
    NESTED_TABLE,
    TAG_UID,
    seed_articles,
)


@pytest.mark.asyncio
async def test_plan_orders_deepest_children_first(article_service, storage, registry):
    article1, _ = await seed_articles(article_service)
    ids = [v.id for v in await article_service.find_versions(article1)]

    async with storage.connection() as session:
        plan = await resolve_cascade_plan(session, registry, [(ARTICLE_UID, ids)])

    assert plan.tables == [
        NESTED_TABLE,
        DZ_OTHER_TABLE,
        DZ_COMP_TABLE,
        COMP_JOIN_TABLE,
        COMP_TABLE,
        ARTICLE_JOIN_TABLE,
        ARTICLE_TABLE,
    ]
    assert plan.steps[-1] == DeleteStep(ARTICLE_TABLE, "id", tuple(ids))
    assert plan.steps[-2].column == "entity_id"


@pytest.mark.asyncio
async def test_resolving_does_not_delete(article_service, storage, registry):
    article1, _ = await seed_articles(article_service)
    ids = [v.id for v in await article_service.find_versions(article1)]
    before = storage.snapshot()

    async with storage.connection() as session:
        await resolve_cascade_plan(session, registry, [(ARTICLE_UID, ids)])

    assert storage.snapshot() == before
    assert not [op for op, _ in storage.calls if op == "delete"]


@pytest.mark.asyncio
async def test_plan_for_type_without_children(storage, registry):
    async with storage.connection() as session:
        plan = await resolve_cascade_plan(session, registry, [(TAG_UID, [4, 5]), (ARTICLE_UID, [])])

    assert plan.steps == [DeleteStep("tags", "id", (4, 5))]


@pytest.mark.asyncio
async def test_execute_counts_rows_per_table(storage):
    async with storage.transaction() as session:
        for name in ("a", "b", "c"):
            await session.insert("tags", {"name": name})
        plan = CascadePlan([DeleteStep("tags", "id", (1, 2)), DeleteStep("tags", "id", (3,))])
        counts = await plan.execute(session)

    assert counts == {"tags": 3}
    assert storage.rows("tags") == []
