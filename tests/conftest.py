"""Pytest configuration and shared fixtures"""
import os

# Settings are read at import time; point them at SQLite before placehub loads
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("DATABASE_URL", TEST_DATABASE_URL)
os.environ.setdefault("DATABASE_URL_SYNC", "sqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from typing import AsyncGenerator, Optional
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from placehub.core.billing.entitlements import EntitlementsService
from placehub.core.database import Base
from placehub.db.enums import Lang, PlacePlan, SubscriptionPlan, SubscriptionStatus
from placehub.schemas.places import PlaceCreate, PlaceTranslationInput
from placehub.schemas.sites import SiteCreate, SiteTranslationInput
from placehub.services.place_service import PlaceService
from placehub.services.site_service import SiteService

import placehub.db.models  # noqa: F401


def _enable_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless asked
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_test_engine() -> AsyncEngine:
    """In-memory SQLite engine shared by every session of one test"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine.sync_engine, "connect", _enable_foreign_keys)
    return engine


async def create_schema(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@pytest.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    engine = create_test_engine()
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def test_session_factory(test_engine) -> async_sessionmaker:
    return async_sessionmaker(test_engine, expire_on_commit=False)


@pytest.fixture
async def test_db_session(test_session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session"""
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def make_site(test_db_session):
    """Factory creating a site (with keys in every language) and optionally a subscription"""

    async def _make(
        slug: str = "etyek-budai",
        name: str = "Etyek-Budai borvidék",
        plan: Optional[SubscriptionPlan] = None,
        status: SubscriptionStatus = SubscriptionStatus.ACTIVE,
        **fields,
    ):
        site = await SiteService().create(
            test_db_session,
            SiteCreate(
                slug=slug,
                translations=[SiteTranslationInput(lang=Lang.HU, name=name, short_description=f"{name} röviden")],
                **fields,
            ),
        )
        if plan is not None:
            await EntitlementsService().upsert_subscription(test_db_session, site.id, plan, status)
        return site

    return _make


@pytest.fixture
def make_place(test_db_session):
    """Factory creating a place with a Hungarian translation (and its slug)"""

    async def _make(site_id, name: str = "Kovács Pincészet", plan: PlacePlan = PlacePlan.FREE, **fields):
        translations = fields.pop("translations", None) or [PlaceTranslationInput(lang=Lang.HU, name=name)]
        return await PlaceService().create(
            test_db_session,
            PlaceCreate(site_id=site_id, plan=plan, translations=translations, **fields),
        )

    return _make


@pytest.fixture
def client():
    """
    Test client with the database dependency pointed at a fresh in-memory schema.

    The engine is created and used on the client's event loop only.
    """
    from fastapi.testclient import TestClient

    from placehub.core.database import get_db, get_session_factory
    from placehub.main import app

    engine = create_test_engine()
    session_factory = async_sessionmaker(engine, expire_on_commit=False)

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    # Usage counts run sequentially on the single SQLite connection
    app.dependency_overrides[get_session_factory] = lambda: None

    with TestClient(app) as test_client:
        test_client.portal.call(create_schema, engine)
        yield test_client
        test_client.portal.call(engine.dispose)

    app.dependency_overrides.clear()
