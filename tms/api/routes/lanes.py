"""
Lane endpoints
==============

GET    /api/v1/lanes                               -- list active lanes
POST   /api/v1/lanes                               -- create a lane with stops
GET    /api/v1/lanes/{id}                          -- fetch one lane
PUT    /api/v1/lanes/{id}                          -- partial update / replace stops
DELETE /api/v1/lanes/{id}                          -- archive (soft delete)
POST   /api/v1/lanes/{id}/customers                -- assign a customer
DELETE /api/v1/lanes/{id}/customers/{customer_id}  -- unassign a customer
POST   /api/v1/lanes/{id}/carriers                 -- assign a carrier with a rate
PUT    /api/v1/lanes/{id}/carriers/{carrier_id}    -- update the carrier's rate
DELETE /api/v1/lanes/{id}/carriers/{carrier_id}    -- unassign a carrier
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from tms.api.dependencies import get_db
from tms.api.middleware import RATE_LIMIT, limiter
from tms.api.schemas import (
    LaneCarrierCreateRequest,
    LaneCarrierResponse,
    LaneCarrierUpdateRequest,
    LaneCreateRequest,
    LaneCustomerRequest,
    LaneCustomerResponse,
    LaneResponse,
    LaneStopRequest,
    LaneUpdateRequest,
    MessageResponse,
)
from tms.domain.entities import LaneStop
from tms.domain.lanes import InvalidLaneStops, lane_name, validate_lane_stops
from tms.infrastructure.repositories import (
    CarrierRepository,
    CustomerRepository,
    LaneRepository,
    LocationRepository,
)

router = APIRouter(prefix="/lanes", tags=["lanes"])


async def _get_or_404(repo: LaneRepository, lane_id: int):
    lane = await repo.get_by_id(lane_id)
    if not lane:
        raise HTTPException(status_code=404, detail="Lane not found")
    return lane


async def _checked_stops(
    db: AsyncSession,
    origin_id: int,
    destination_id: int,
    requested: list[LaneStopRequest],
) -> list[LaneStop]:
    """Validate sequencing, then that every stop location exists."""
    stops = [LaneStop(s.location_id, s.order, s.notes) for s in requested]
    try:
        validate_lane_stops(origin_id, destination_id, stops)
    except InvalidLaneStops as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    wanted = {s.location_id for s in stops}
    found = await LocationRepository(db).get_many_active(list(wanted))
    if len(found) != len(wanted):
        raise HTTPException(
            status_code=400,
            detail="One or more stop locations not found or are archived",
        )
    return stops


@router.get("", response_model=list[LaneResponse], summary="List lanes")
@limiter.limit(RATE_LIMIT)
async def list_lanes(request: Request, db: AsyncSession = Depends(get_db)):
    return await LaneRepository(db).list_active()


@router.post(
    "",
    status_code=201,
    response_model=LaneResponse,
    summary="Create a lane",
    description=(
        "Stops are numbered 1..n and may not include the origin or the "
        "destination. The lane is named after the two endpoint cities."
    ),
)
@limiter.limit(RATE_LIMIT)
async def create_lane(
    request: Request,
    body: LaneCreateRequest,
    db: AsyncSession = Depends(get_db),
):
    stops = await _checked_stops(db, body.origin_id, body.destination_id, body.stops)

    locations = LocationRepository(db)
    origin = await locations.get_by_id(body.origin_id)
    destination = await locations.get_by_id(body.destination_id)
    if not origin or not destination:
        raise HTTPException(
            status_code=400, detail="Origin or destination location not found"
        )

    return await LaneRepository(db).create(
        name=lane_name(origin.city, destination.city),
        origin_id=origin.id,
        destination_id=destination.id,
        distance=body.distance,
        notes=body.notes,
        stops=stops,
    )


@router.get("/{lane_id}", response_model=LaneResponse, summary="Get a lane")
@limiter.limit(RATE_LIMIT)
async def get_lane(request: Request, lane_id: int, db: AsyncSession = Depends(get_db)):
    return await _get_or_404(LaneRepository(db), lane_id)


@router.put("/{lane_id}", response_model=LaneResponse, summary="Update a lane")
@limiter.limit(RATE_LIMIT)
async def update_lane(
    request: Request,
    lane_id: int,
    body: LaneUpdateRequest,
    db: AsyncSession = Depends(get_db),
):
    repo = LaneRepository(db)
    lane = await _get_or_404(repo, lane_id)

    fields = body.model_dump(exclude_unset=True, exclude_none=True, exclude={"stops"})
    origin_id = body.origin_id or lane.origin_id
    destination_id = body.destination_id or lane.destination_id

    stops: Optional[list[LaneStop]] = None
    if body.stops is not None:
        stops = await _checked_stops(db, origin_id, destination_id, body.stops)

    if body.origin_id or body.destination_id:
        locations = LocationRepository(db)
        origin = await locations.get_by_id(origin_id)
        if not origin:
            raise HTTPException(status_code=400, detail="Origin location not found")
        destination = await locations.get_by_id(destination_id)
        if not destination:
            raise HTTPException(
                status_code=400, detail="Destination location not found"
            )
        fields["name"] = lane_name(origin.city, destination.city)

    return await repo.update(lane, fields, stops)


@router.delete("/{lane_id}", response_model=LaneResponse, summary="Archive a lane")
@limiter.limit(RATE_LIMIT)
async def archive_lane(
    request: Request, lane_id: int, db: AsyncSession = Depends(get_db)
):
    repo = LaneRepository(db)
    lane = await _get_or_404(repo, lane_id)
    return await repo.archive(lane)


# ── Customer assignments ──────────────────────────────────────────────


@router.post(
    "/{lane_id}/customers",
    status_code=201,
    response_model=LaneCustomerResponse,
    summary="Assign a customer to a lane",
)
@limiter.limit(RATE_LIMIT)
async def add_lane_customer(
    request: Request,
    lane_id: int,
    body: LaneCustomerRequest,
    db: AsyncSession = Depends(get_db),
):
    repo = LaneRepository(db)
    await _get_or_404(repo, lane_id)

    customer = await CustomerRepository(db).get_by_id(body.customer_id)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")

    if await repo.find_customer_lane(lane_id, customer.id):
        raise HTTPException(
            status_code=409, detail="Customer is already assigned to this lane"
        )
    return await repo.add_customer(lane_id, customer)


@router.delete(
    "/{lane_id}/customers/{customer_id}",
    response_model=MessageResponse,
    summary="Remove a customer from a lane",
)
@limiter.limit(RATE_LIMIT)
async def remove_lane_customer(
    request: Request,
    lane_id: int,
    customer_id: int,
    db: AsyncSession = Depends(get_db),
):
    repo = LaneRepository(db)
    link = await repo.find_customer_lane(lane_id, customer_id)
    if not link:
        raise HTTPException(
            status_code=404, detail="Customer-lane relationship not found"
        )
    await repo.remove_customer(link)
    return MessageResponse(message="Customer removed from lane")


# ── Carrier assignments ───────────────────────────────────────────────


@router.post(
    "/{lane_id}/carriers",
    status_code=201,
    response_model=LaneCarrierResponse,
    summary="Assign a carrier to a lane",
)
@limiter.limit(RATE_LIMIT)
async def add_lane_carrier(
    request: Request,
    lane_id: int,
    body: LaneCarrierCreateRequest,
    db: AsyncSession = Depends(get_db),
):
    repo = LaneRepository(db)
    await _get_or_404(repo, lane_id)

    carrier = await CarrierRepository(db).get_by_id(body.carrier_id)
    if not carrier:
        raise HTTPException(status_code=404, detail="Carrier not found")

    if await repo.find_lane_carrier(lane_id, carrier.id):
        raise HTTPException(
            status_code=409, detail="Carrier is already assigned to this lane"
        )
    return await repo.add_carrier(
        lane_id, carrier, **body.model_dump(exclude={"carrier_id"})
    )


@router.put(
    "/{lane_id}/carriers/{carrier_id}",
    response_model=LaneCarrierResponse,
    summary="Update a carrier's rate on a lane",
)
@limiter.limit(RATE_LIMIT)
async def update_lane_carrier(
    request: Request,
    lane_id: int,
    carrier_id: int,
    body: LaneCarrierUpdateRequest,
    db: AsyncSession = Depends(get_db),
):
    repo = LaneRepository(db)
    link = await repo.find_lane_carrier(lane_id, carrier_id)
    if not link:
        raise HTTPException(
            status_code=404, detail="Lane-carrier relationship not found"
        )
    return await repo.update_carrier(
        link, body.model_dump(exclude_unset=True, exclude_none=True)
    )


@router.delete(
    "/{lane_id}/carriers/{carrier_id}",
    response_model=MessageResponse,
    summary="Remove a carrier from a lane",
)
@limiter.limit(RATE_LIMIT)
async def remove_lane_carrier(
    request: Request,
    lane_id: int,
    carrier_id: int,
    db: AsyncSession = Depends(get_db),
):
    repo = LaneRepository(db)
    link = await repo.find_lane_carrier(lane_id, carrier_id)
    if not link:
        raise HTTPException(
            status_code=404, detail="Lane-carrier relationship not found"
        )
    await repo.remove_carrier(link)
    return MessageResponse(message="Carrier removed from lane")
