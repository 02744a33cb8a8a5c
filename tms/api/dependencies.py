"""FastAPI dependency injection helpers."""

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from tms.config import settings
from tms.domain.distance import DistanceService
from tms.infrastructure.database import async_session_factory
from tms.infrastructure.routing import build_distance_service


async def get_db() -> AsyncSession:  # type: ignore[misc]
    """Yield an async DB session; commit on success, rollback on error."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_distance_service(request: Request) -> DistanceService:
    """Distance service bound to the app-wide HTTP client."""
    return build_distance_service(request.app.state.http_client, settings)
