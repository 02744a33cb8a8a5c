"""
Customer endpoints
==================

GET    /api/v1/customers      -- list active customers
POST   /api/v1/customers      -- create a customer
GET    /api/v1/customers/{id} -- fetch one customer
PUT    /api/v1/customers/{id} -- partial update
DELETE /api/v1/customers/{id} -- archive (soft delete)
"""

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from tms.api.dependencies import get_db
from tms.api.middleware import RATE_LIMIT, limiter
from tms.api.schemas import (
    CustomerCreateRequest,
    CustomerResponse,
    CustomerUpdateRequest,
)
from tms.infrastructure.repositories import CustomerRepository

router = APIRouter(prefix="/customers", tags=["customers"])


async def _get_or_404(repo: CustomerRepository, customer_id: int):
    customer = await repo.get_by_id(customer_id)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return customer


@router.get("", response_model=list[CustomerResponse], summary="List customers")
@limiter.limit(RATE_LIMIT)
async def list_customers(request: Request, db: AsyncSession = Depends(get_db)):
    return await CustomerRepository(db).list_active()


@router.post(
    "",
    status_code=201,
    response_model=CustomerResponse,
    summary="Create a customer",
)
@limiter.limit(RATE_LIMIT)
async def create_customer(
    request: Request,
    body: CustomerCreateRequest,
    db: AsyncSession = Depends(get_db),
):
    return await CustomerRepository(db).create(**body.model_dump())


@router.get(
    "/{customer_id}", response_model=CustomerResponse, summary="Get a customer"
)
@limiter.limit(RATE_LIMIT)
async def get_customer(
    request: Request, customer_id: int, db: AsyncSession = Depends(get_db)
):
    return await _get_or_404(CustomerRepository(db), customer_id)


@router.put(
    "/{customer_id}", response_model=CustomerResponse, summary="Update a customer"
)
@limiter.limit(RATE_LIMIT)
async def update_customer(
    request: Request,
    customer_id: int,
    body: CustomerUpdateRequest,
    db: AsyncSession = Depends(get_db),
):
    repo = CustomerRepository(db)
    customer = await _get_or_404(repo, customer_id)
    return await repo.update(
        customer, body.model_dump(exclude_unset=True, exclude_none=True)
    )


@router.delete(
    "/{customer_id}",
    response_model=CustomerResponse,
    summary="Archive a customer",
)
@limiter.limit(RATE_LIMIT)
async def archive_customer(
    request: Request, customer_id: int, db: AsyncSession = Depends(get_db)
):
    repo = CustomerRepository(db)
    customer = await _get_or_404(repo, customer_id)
    return await repo.archive(customer)
