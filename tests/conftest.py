# tests/conftest.py
import os

# Test environment: in-memory SQLite, before anything imports fieldplan.config
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from fieldplan.core.directory.static import StaticDirectoryProvider
from fieldplan.core.location.noop import NoOpGeocoder
from fieldplan.core.planning.orchestrator import PlanningOrchestrator
from fieldplan.core.planning.store import InMemoryPlanningStore
from fieldplan.db.base import create_db_and_tables
from fieldplan.workers.tasks import celery_app

celery_app.conf.task_always_eager = True
celery_app.conf.task_eager_propagates = True


RESOURCES = [
    {"id": "r1", "display_name": "Anna Berg"},
    {"id": "r2", "display_name": "Jonas Weber"},
]
PROJECTS = [
    {"id": "p1", "title": "Roof repair", "customer_label": "Mueller GmbH"},
    {"id": "p2", "title": "Heat pump", "customer_label": None},
]


@pytest.fixture
def directory() -> StaticDirectoryProvider:
    return StaticDirectoryProvider(resources=RESOURCES, projects=PROJECTS)


@pytest.fixture
def store() -> InMemoryPlanningStore:
    return InMemoryPlanningStore()


@pytest.fixture
def orchestrator(store, directory) -> PlanningOrchestrator:
    return PlanningOrchestrator(store, directory, NoOpGeocoder(), block_conflicts=False)


@pytest_asyncio.fixture
async def session_factory() -> async_sessionmaker[AsyncSession]:
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_db_and_tables(bind=engine)
    yield async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncSession:
    async with session_factory() as session:
        yield session
