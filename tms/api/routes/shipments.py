"""
Shipment endpoints
==================

GET    /api/v1/shipments      -- list active shipments, newest first
POST   /api/v1/shipments      -- create a shipment on a lane or between two locations
GET    /api/v1/shipments/{id} -- fetch one shipment
PUT    /api/v1/shipments/{id} -- partial update (status follows the lifecycle)
DELETE /api/v1/shipments/{id} -- archive (soft delete)
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from tms.api.dependencies import get_db
from tms.api.middleware import RATE_LIMIT, limiter
from tms.api.schemas import (
    ShipmentCreateRequest,
    ShipmentResponse,
    ShipmentUpdateRequest,
)
from tms.domain.entities import InvalidStateTransition, Shipment
from tms.domain.enums import ShipmentStatus
from tms.infrastructure.repositories import (
    CustomerRepository,
    LaneRepository,
    LocationRepository,
    ShipmentRepository,
)

router = APIRouter(prefix="/shipments", tags=["shipments"])


async def _get_or_404(repo: ShipmentRepository, shipment_id: int):
    shipment = await repo.get_by_id(shipment_id)
    if not shipment:
        raise HTTPException(status_code=404, detail="Shipment not found")
    return shipment


async def _resolve_route(db: AsyncSession, fields: dict) -> None:
    """Fill origin/destination from the lane, or check the given endpoints."""
    if fields.get("lane_id") is not None:
        lane = await LaneRepository(db).get_by_id(fields["lane_id"])
        if not lane:
            raise HTTPException(status_code=400, detail="Lane not found")
        fields["origin_id"] = lane.origin_id
        fields["destination_id"] = lane.destination_id
        return

    if "origin_id" in fields:
        locations = LocationRepository(db)
        origin = await locations.get_by_id(fields["origin_id"])
        destination = await locations.get_by_id(fields["destination_id"])
        if not origin or not destination:
            raise HTTPException(
                status_code=400, detail="Origin or destination location not found"
            )
        fields["lane_id"] = None


async def _check_customer(db: AsyncSession, customer_id: int) -> None:
    if not await CustomerRepository(db).get_by_id(customer_id):
        raise HTTPException(status_code=400, detail="Customer not found")


@router.get("", response_model=list[ShipmentResponse], summary="List shipments")
@limiter.limit(RATE_LIMIT)
async def list_shipments(request: Request, db: AsyncSession = Depends(get_db)):
    return await ShipmentRepository(db).list_active()


@router.post(
    "",
    status_code=201,
    response_model=ShipmentResponse,
    summary="Create a shipment",
    description=(
        "Provide either ``lane_id`` or both ``origin_id`` and "
        "``destination_id``. New shipments start as ``draft``."
    ),
)
@limiter.limit(RATE_LIMIT)
async def create_shipment(
    request: Request,
    body: ShipmentCreateRequest,
    db: AsyncSession = Depends(get_db),
):
    await _check_customer(db, body.customer_id)

    fields = body.model_dump(exclude={"items"})
    await _resolve_route(db, fields)
    fields["items"] = [item.model_dump() for item in body.items]

    return await ShipmentRepository(db).create(
        **fields, status=ShipmentStatus.DRAFT
    )


@router.get(
    "/{shipment_id}", response_model=ShipmentResponse, summary="Get a shipment"
)
@limiter.limit(RATE_LIMIT)
async def get_shipment(
    request: Request, shipment_id: int, db: AsyncSession = Depends(get_db)
):
    return await _get_or_404(ShipmentRepository(db), shipment_id)


@router.put(
    "/{shipment_id}",
    response_model=ShipmentResponse,
    summary="Update a shipment",
    responses={409: {"description": "Status change not allowed."}},
)
@limiter.limit(RATE_LIMIT)
async def update_shipment(
    request: Request,
    shipment_id: int,
    body: ShipmentUpdateRequest,
    db: AsyncSession = Depends(get_db),
):
    repo = ShipmentRepository(db)
    shipment = await _get_or_404(repo, shipment_id)

    fields = body.model_dump(exclude_unset=True, exclude_none=True, exclude={"items"})
    if body.items is not None:
        fields["items"] = [item.model_dump() for item in body.items]

    if "status" in fields:
        entity = Shipment(id=shipment.id, status=ShipmentStatus(shipment.status))
        try:
            entity.transition_to(fields["status"])
        except InvalidStateTransition as exc:
            raise HTTPException(status_code=409, detail=str(exc))

    if "customer_id" in fields:
        await _check_customer(db, fields["customer_id"])
    await _resolve_route(db, fields)

    return await repo.update(shipment, fields)


@router.delete(
    "/{shipment_id}",
    response_model=ShipmentResponse,
    summary="Archive a shipment",
)
@limiter.limit(RATE_LIMIT)
async def archive_shipment(
    request: Request, shipment_id: int, db: AsyncSession = Depends(get_db)
):
    repo = ShipmentRepository(db)
    shipment = await _get_or_404(repo, shipment_id)
    return await repo.archive(shipment)
