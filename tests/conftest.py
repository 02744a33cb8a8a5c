"""
Shared test fixtures.

Uses an in-memory SQLite database (via aiosqlite) so tests run without
Docker / PostgreSQL.  The production models are portable (plain float
coordinates, JSON items), so the real metadata is created directly.
"""

from typing import AsyncGenerator, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from tms.domain.distance import DistanceProvider, DistanceService, RawDistance
from tms.domain.entities import GeoPoint
from tms.infrastructure.database import Base
from tms.infrastructure import models  # noqa: F401  (registers tables)


TEST_DB_URL = "sqlite+aiosqlite:///:memory:"


class StubProvider(DistanceProvider):
    """Provider returning a canned answer and recording its calls."""

    name = "stub"

    def __init__(
        self,
        answer: Optional[RawDistance] = None,
        exc: Optional[Exception] = None,
    ):
        self.answer = answer
        self.exc = exc
        self.calls: list[tuple[GeoPoint, GeoPoint]] = []

    async def fetch(self, origin, destination):
        self.calls.append((origin, destination))
        if self.exc is not None:
            raise self.exc
        return self.answer


# ── Fixtures ──────────────────────────────────────────────────────────


@pytest_asyncio.fixture
async def session_factory():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DB_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
def distance_provider() -> StubProvider:
    """Road-distance stub used by the API client; tests may reconfigure it."""
    return StubProvider(RawDistance(distance_km=2205.73, duration_minutes=2205.7))


@pytest_asyncio.fixture
async def client(session_factory, distance_provider) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient backed by SQLite and a stubbed distance provider."""
    from tms.api.app import create_app
    from tms.api.dependencies import get_db, get_distance_service
    from tms.api.middleware import limiter

    async def _test_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app = create_app()
    app.dependency_overrides[get_db] = _test_db
    app.dependency_overrides[get_distance_service] = lambda: DistanceService(
        [distance_provider]
    )

    limiter.enabled = False
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    limiter.enabled = True
