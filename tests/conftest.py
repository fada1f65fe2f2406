"""Shared test fixtures for async database, sessions, HTTP client, and roll data."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")

from collections.abc import AsyncGenerator, Iterable
from typing import Optional

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from voter_roll.api.v1 import polling_stations, voters
from voter_roll.core import partitions
from voter_roll.core.security import encrypt_api_key, generate_api_key
from voter_roll.database import Base, get_db
from voter_roll.middleware.api_key import verify_api_key
from voter_roll.models.api_key import ApiKey, ApiKeyStatus
from voter_roll.models.legacy_part import LegacyPart


@pytest.fixture
async def async_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create an in-memory async SQLite engine with every table created."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def async_session(async_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Create a per-test async session."""
    session_factory = async_sessionmaker(async_engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session


async def add_voters(
    session: AsyncSession,
    partition,
    serials: Iterable[int],
    *,
    ac_no: int = 210,
    part_no: int = 5,
    ps_name: Optional[str] = None,
) -> None:
    """Insert one roll row per serial number into a partition table."""
    for serial in serials:
        session.add(
            partition(
                id=f"{partition.__tablename__}-{ac_no}-{part_no}-{serial}",
                ac_no=ac_no,
                part_no=part_no,
                sl_no_in_part=serial,
                fm_name_v2=f"Elector {serial}",
                rln_fm_nm_v2=f"Relative {serial}",
                rln_type="F",
                age=20 + serial,
                sex="M" if serial % 2 else "F",
                ps_name=ps_name,
            )
        )
    await session.commit()


async def add_legacy_part(
    session: AsyncSession,
    *,
    ac_no: int = 210,
    part_no: int = 5,
    part_name_v1: Optional[str] = "Government High School, Room 1",
    model=LegacyPart,
) -> None:
    session.add(
        model(
            ac_no=ac_no,
            part_no=part_no,
            part_name_v1=part_name_v1,
            part_name_tn="அரசு உயர்நிலைப் பள்ளி",
            locality_v1="Keelapalayam",
            locality_tn="கீழப்பாளையம்",
        )
    )
    await session.commit()


@pytest.fixture
def ac210():
    """The AC210 partition model."""
    return partitions.PARTITIONS["AC210"]


@pytest.fixture
async def issued_api_key(async_session: AsyncSession) -> str:
    """Store an active API key and return its plaintext value."""
    full_key, key_hash, key_prefix = generate_api_key()
    async_session.add(
        ApiKey(
            name="test key",
            key_hash=key_hash,
            key_prefix=key_prefix,
            status=ApiKeyStatus.ACTIVE,
            encrypted_key=encrypt_api_key(full_key),
        )
    )
    await async_session.commit()
    return full_key


def build_app(session: AsyncSession, *, authenticated: bool = True) -> FastAPI:
    """Minimal app with the voter roll routers bound to the test session."""
    app = FastAPI()
    app.include_router(voters.router, prefix="/api/v1")
    app.include_router(polling_stations.router, prefix="/api/v1")

    async def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db
    if authenticated:
        app.dependency_overrides[verify_api_key] = lambda: ApiKey(id="test-key", name="test key")
    return app


@pytest.fixture
def app(async_session: AsyncSession) -> FastAPI:
    return build_app(async_session)


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
def seed_voters(async_session: AsyncSession):
    """Insert roll rows: ``await seed_voters(partition, serials, ac_no=..., part_no=..., ps_name=...)``."""

    async def _seed(partition, serials, **kwargs) -> None:
        await add_voters(async_session, partition, serials, **kwargs)

    return _seed


@pytest.fixture
def seed_legacy_part(async_session: AsyncSession):
    """Insert a legacy part reference row: ``await seed_legacy_part(ac_no=..., part_no=..., part_name_v1=...)``."""

    async def _seed(**kwargs) -> None:
        await add_legacy_part(async_session, **kwargs)

    return _seed


@pytest.fixture
async def unauthenticated_client(async_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Client for an app that runs the real API key dependency."""
    app = build_app(async_session, authenticated=False)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
