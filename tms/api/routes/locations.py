"""
Location endpoints
==================

GET    /api/v1/locations          -- list active locations
POST   /api/v1/locations          -- create a location (coordinates optional)
GET    /api/v1/locations/search   -- free-text search, ``?q=`` (min 2 chars)
GET    /api/v1/locations/{id}     -- fetch one location
PUT    /api/v1/locations/{id}     -- partial update
DELETE /api/v1/locations/{id}     -- archive (soft delete)
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from tms.api.dependencies import get_db
from tms.api.middleware import RATE_LIMIT, limiter
from tms.api.schemas import (
    LocationCreateRequest,
    LocationResponse,
    LocationUpdateRequest,
)
from tms.infrastructure.repositories import LocationRepository

router = APIRouter(prefix="/locations", tags=["locations"])

MIN_SEARCH_LENGTH = 2


async def _get_or_404(repo: LocationRepository, location_id: int):
    location = await repo.get_by_id(location_id)
    if not location:
        raise HTTPException(status_code=404, detail="Location not found")
    return location


@router.get("", response_model=list[LocationResponse], summary="List locations")
@limiter.limit(RATE_LIMIT)
async def list_locations(request: Request, db: AsyncSession = Depends(get_db)):
    return await LocationRepository(db).list_active()


@router.post(
    "",
    status_code=201,
    response_model=LocationResponse,
    summary="Create a location",
)
@limiter.limit(RATE_LIMIT)
async def create_location(
    request: Request,
    body: LocationCreateRequest,
    db: AsyncSession = Depends(get_db),
):
    return await LocationRepository(db).create(**body.model_dump())


# Registered before "/{location_id}" so "search" is not parsed as an id
@router.get(
    "/search",
    response_model=list[LocationResponse],
    summary="Search locations by name or address",
)
@limiter.limit(RATE_LIMIT)
async def search_locations(
    request: Request,
    q: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    if not q or len(q.strip()) < MIN_SEARCH_LENGTH:
        return []
    return await LocationRepository(db).search(q)


@router.get(
    "/{location_id}", response_model=LocationResponse, summary="Get a location"
)
@limiter.limit(RATE_LIMIT)
async def get_location(
    request: Request, location_id: int, db: AsyncSession = Depends(get_db)
):
    return await _get_or_404(LocationRepository(db), location_id)


@router.put(
    "/{location_id}", response_model=LocationResponse, summary="Update a location"
)
@limiter.limit(RATE_LIMIT)
async def update_location(
    request: Request,
    location_id: int,
    body: LocationUpdateRequest,
    db: AsyncSession = Depends(get_db),
):
    repo = LocationRepository(db)
    location = await _get_or_404(repo, location_id)
    return await repo.update(
        location, body.model_dump(exclude_unset=True, exclude_none=True)
    )


@router.delete(
    "/{location_id}",
    response_model=LocationResponse,
    summary="Archive a location",
)
@limiter.limit(RATE_LIMIT)
async def archive_location(
    request: Request, location_id: int, db: AsyncSession = Depends(get_db)
):
    repo = LocationRepository(db)
    location = await _get_or_404(repo, location_id)
    return await repo.archive(location)
