"""
FastAPI application factory.

* Registers routes for customers, locations, carriers, lanes, shipments,
  distance and admin.
* Opens / closes the shared outbound HTTP client via lifespan events.
* Applies rate-limiting middleware.
* Swagger / OpenAPI UI available at ``/docs``.
"""

from contextlib import asynccontextmanager
import logging

import httpx
from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from tms.api.middleware import limiter
from tms.api.routes import (
    admin,
    carriers,
    customers,
    distance,
    lanes,
    locations,
    shipments,
)
from tms.config import settings

logging.basicConfig(level=logging.INFO)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the client used by the distance providers; close on shutdown."""
    async with httpx.AsyncClient(
        timeout=settings.distance_timeout_seconds
    ) as client:
        app.state.http_client = client
        yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="Open TMS API",
        description=(
            "Transport management: customers, locations, carriers, lanes "
            "and shipments, plus road-distance estimates between locations "
            "with a straight-line fallback."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Routers
    for module in (customers, locations, carriers, lanes, shipments, distance, admin):
        app.include_router(module.router, prefix="/api/v1")

    return app
