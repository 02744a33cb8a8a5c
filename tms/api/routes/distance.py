"""
Distance endpoint
=================

POST /api/v1/distance/calculate -- road distance between two saved locations

The answer always comes back with 200 once both locations exist and carry
coordinates.  A present ``error`` field means the value is a straight-line
estimate.
"""

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from tms.api.dependencies import get_db, get_distance_service
from tms.api.middleware import RATE_LIMIT, limiter
from tms.api.schemas import DistanceRequest, DistanceResponse
from tms.domain.distance import DistanceService
from tms.domain.entities import GeoPoint
from tms.infrastructure.repositories import LocationRepository

router = APIRouter(prefix="/distance", tags=["distance"])


@router.post(
    "/calculate",
    response_model=DistanceResponse,
    response_model_exclude_none=True,
    summary="Calculate the distance between two locations",
    responses={
        400: {"description": "A location has no coordinates."},
        404: {"description": "Origin or destination not found."},
    },
)
@limiter.limit(RATE_LIMIT)
async def calculate_distance(
    request: Request,
    body: DistanceRequest,
    db: AsyncSession = Depends(get_db),
    distance_service: DistanceService = Depends(get_distance_service),
):
    repo = LocationRepository(db)
    origin = await repo.get_by_id(body.origin_id)
    destination = await repo.get_by_id(body.destination_id)
    if not origin or not destination:
        raise HTTPException(
            status_code=404, detail="Origin or destination location not found"
        )

    if not (GeoPoint.of(origin).is_usable and GeoPoint.of(destination).is_usable):
        raise HTTPException(
            status_code=400,
            detail=(
                "Both locations must have latitude and longitude coordinates "
                "for distance calculation"
            ),
        )

    return await distance_service.compute_distance(origin, destination)
