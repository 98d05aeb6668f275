# tests/test_seed_idempotent.py
from sqlalchemy import func, select

from app.models import Property, TenantScore
from app.services.demo_seed import DEMO_PROPERTIES, seed_demo


async def test_seed_idempotent_runs_twice(async_session_maker):
    async with async_session_maker() as session:
        first = await seed_demo(session, tenant_id=42)
        await session.commit()

    async with async_session_maker() as session:
        second = await seed_demo(session, tenant_id=42)
        await session.commit()

    assert first["created"] == len(DEMO_PROPERTIES)
    assert second["created"] == 0
    assert first["score_id"] == second["score_id"]

    async with async_session_maker() as session:
        n_props = (await session.execute(select(func.count(Property.id)))).scalar_one()
        n_scores = (await session.execute(select(func.count(TenantScore.id)))).scalar_one()

    assert n_props == len(DEMO_PROPERTIES)
    assert n_scores == 1
