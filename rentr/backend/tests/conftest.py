# tests/conftest.py
import httpx
import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.db import get_session
from app.entrypoints.fastapi_app import create_app
from app.models import Base, Property


@pytest.fixture
async def engine():
    """
    Fresh in-memory DB per test. StaticPool makes all connections share the same
    in-memory database for the lifetime of this engine fixture.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def async_session_maker(engine):
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=True)


@pytest.fixture
async def session(async_session_maker):
    async with async_session_maker() as session:
        yield session


@pytest.fixture
def app(async_session_maker):
    app = create_app()

    async def _get_session():
        async with async_session_maker() as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    return app


@pytest.fixture
async def client(app):
    # ASGITransport does not run startup events; the engine fixture already created the tables
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def toronto_listing(async_session_maker):
    async with async_session_maker() as session:
        p = Property(
            title="King West 2BR",
            address="120 PORTLAND ST",
            city="TORONTO",
            state="ON",
            zip_code="M5V 2N2",
            rent=200000,
            bedrooms=2,
            bathrooms=1,
            square_feet=850,
            amenities=["laundry", "parking"],
            available=True,
        )
        session.add(p)
        await session.commit()
        await session.refresh(p)
        return p
