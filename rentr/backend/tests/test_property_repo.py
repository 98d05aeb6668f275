# tests/test_property_repo.py
import pytest

from app.adapters.repos.properties import PropertyRepository
from app.domain.errors import ConflictError

LISTING = {
    "title": "Danforth 1BR",
    "address": "800 Danforth Ave",
    "city": "Toronto",
    "state": "ON",
    "zip_code": "M4J 1L6",
    "rent": 180000,
    "bedrooms": 1,
}


async def test_upsert_property_idempotent(async_session_maker):
    async with async_session_maker() as session:
        p1, created1 = await PropertyRepository(session).upsert(LISTING)
        await session.commit()

    async with async_session_maker() as session:
        p2, created2 = await PropertyRepository(session).upsert({**LISTING, "rent": 185000})
        await session.commit()

    assert p1.id == p2.id
    assert (created1, created2) == (True, False)
    assert p2.rent == 185000


async def test_create_duplicate_address_is_conflict(async_session_maker):
    async with async_session_maker() as session:
        await PropertyRepository(session).create(LISTING)
        await session.commit()

    async with async_session_maker() as session:
        with pytest.raises(ConflictError):
            await PropertyRepository(session).create({**LISTING, "address": "800  DANFORTH AVE"})


async def test_create_race_on_unique_index_is_conflict(async_session_maker, monkeypatch):
    async with async_session_maker() as session:
        await PropertyRepository(session).create(LISTING)
        await session.commit()

    async def not_found_yet(self, payload):
        # the concurrent insert is not visible to the pre-check
        return None

    monkeypatch.setattr(PropertyRepository, "get_by_address", not_found_yet)

    async with async_session_maker() as session:
        with pytest.raises(ConflictError):
            await PropertyRepository(session).create(LISTING)
        await session.rollback()
