"""
Carrier endpoints
=================

GET    /api/v1/carriers      -- list carriers
POST   /api/v1/carriers      -- create a carrier
GET    /api/v1/carriers/{id} -- fetch one carrier
PUT    /api/v1/carriers/{id} -- partial update
DELETE /api/v1/carriers/{id} -- hard delete (204)
"""

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from tms.api.dependencies import get_db
from tms.api.middleware import RATE_LIMIT, limiter
from tms.api.schemas import (
    CarrierCreateRequest,
    CarrierResponse,
    CarrierUpdateRequest,
)
from tms.infrastructure.repositories import CarrierRepository

router = APIRouter(prefix="/carriers", tags=["carriers"])


async def _get_or_404(repo: CarrierRepository, carrier_id: int):
    carrier = await repo.get_by_id(carrier_id)
    if not carrier:
        raise HTTPException(status_code=404, detail="Carrier not found")
    return carrier


@router.get("", response_model=list[CarrierResponse], summary="List carriers")
@limiter.limit(RATE_LIMIT)
async def list_carriers(request: Request, db: AsyncSession = Depends(get_db)):
    return await CarrierRepository(db).list_all()


@router.post(
    "", status_code=201, response_model=CarrierResponse, summary="Create a carrier"
)
@limiter.limit(RATE_LIMIT)
async def create_carrier(
    request: Request,
    body: CarrierCreateRequest,
    db: AsyncSession = Depends(get_db),
):
    return await CarrierRepository(db).create(**body.model_dump())


@router.get(
    "/{carrier_id}", response_model=CarrierResponse, summary="Get a carrier"
)
@limiter.limit(RATE_LIMIT)
async def get_carrier(
    request: Request, carrier_id: int, db: AsyncSession = Depends(get_db)
):
    return await _get_or_404(CarrierRepository(db), carrier_id)


@router.put(
    "/{carrier_id}", response_model=CarrierResponse, summary="Update a carrier"
)
@limiter.limit(RATE_LIMIT)
async def update_carrier(
    request: Request,
    carrier_id: int,
    body: CarrierUpdateRequest,
    db: AsyncSession = Depends(get_db),
):
    repo = CarrierRepository(db)
    carrier = await _get_or_404(repo, carrier_id)
    return await repo.update(
        carrier, body.model_dump(exclude_unset=True, exclude_none=True)
    )


@router.delete(
    "/{carrier_id}",
    status_code=204,
    response_class=Response,
    summary="Delete a carrier",
)
@limiter.limit(RATE_LIMIT)
async def delete_carrier(
    request: Request, carrier_id: int, db: AsyncSession = Depends(get_db)
):
    repo = CarrierRepository(db)
    carrier = await _get_or_404(repo, carrier_id)
    await repo.delete(carrier)
    return Response(status_code=204)
