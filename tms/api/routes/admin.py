"""
Admin / observability endpoints
===============================

GET /api/v1/admin/stats  -- counts of active records (dashboard tiles)
GET /api/v1/admin/health -- simple health check
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from tms.api.dependencies import get_db
from tms.api.middleware import RATE_LIMIT, limiter
from tms.api.schemas import HealthResponse, StatsResponse
from tms.infrastructure.repositories import (
    CarrierRepository,
    CustomerRepository,
    LaneRepository,
    LocationRepository,
    ShipmentRepository,
)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get(
    "/stats",
    response_model=StatsResponse,
    summary="Count active customers, locations, carriers, lanes and shipments",
)
@limiter.limit(RATE_LIMIT)
async def get_stats(request: Request, db: AsyncSession = Depends(get_db)):
    return StatsResponse(
        customers=await CustomerRepository(db).count_active(),
        locations=await LocationRepository(db).count_active(),
        carriers=await CarrierRepository(db).count(),
        lanes=await LaneRepository(db).count_active(),
        shipments=await ShipmentRepository(db).count_active(),
    )


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health():
    return HealthResponse()
