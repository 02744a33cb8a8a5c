"""Pydantic request / response schemas for the REST API."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from tms.domain.enums import LaneStatus, ShipmentStatus

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
ROUTE_FIELDS_MESSAGE = (
    "Either lane_id or both origin_id and destination_id must be provided"
)


def _route_fields_ok(
    lane_id: Optional[int],
    origin_id: Optional[int],
    destination_id: Optional[int],
) -> bool:
    by_lane = lane_id is not None and origin_id is None and destination_id is None
    by_points = (
        lane_id is None and origin_id is not None and destination_id is not None
    )
    return by_lane or by_points


# ── Requests ──────────────────────────────────────────────────────────


class CustomerCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    contact_email: Optional[str] = Field(
        None, max_length=255, pattern=EMAIL_PATTERN
    )


class CustomerUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    contact_email: Optional[str] = Field(
        None, max_length=255, pattern=EMAIL_PATTERN
    )


class LocationCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    address1: str = Field(..., min_length=1, max_length=255)
    address2: Optional[str] = Field(None, max_length=255)
    city: str = Field(..., min_length=1, max_length=120)
    state: Optional[str] = Field(None, max_length=120)
    postal_code: Optional[str] = Field(None, max_length=20)
    country: str = Field(..., min_length=2, max_length=60)
    lat: Optional[float] = Field(None, ge=-90, le=90)
    lng: Optional[float] = Field(None, ge=-180, le=180)


class LocationUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    address1: Optional[str] = Field(None, min_length=1, max_length=255)
    address2: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, min_length=1, max_length=120)
    state: Optional[str] = Field(None, max_length=120)
    postal_code: Optional[str] = Field(None, max_length=20)
    country: Optional[str] = Field(None, min_length=2, max_length=60)
    lat: Optional[float] = Field(None, ge=-90, le=90)
    lng: Optional[float] = Field(None, ge=-180, le=180)


class CarrierCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    mc_number: Optional[str] = Field(None, max_length=20)
    dot_number: Optional[str] = Field(None, max_length=20)
    contact_name: Optional[str] = Field(None, max_length=120)
    contact_email: Optional[str] = Field(
        None, max_length=255, pattern=EMAIL_PATTERN
    )
    contact_phone: Optional[str] = Field(None, max_length=40)


class CarrierUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    mc_number: Optional[str] = Field(None, max_length=20)
    dot_number: Optional[str] = Field(None, max_length=20)
    contact_name: Optional[str] = Field(None, max_length=120)
    contact_email: Optional[str] = Field(
        None, max_length=255, pattern=EMAIL_PATTERN
    )
    contact_phone: Optional[str] = Field(None, max_length=40)


class LaneStopRequest(BaseModel):
    location_id: int
    order: int = Field(..., ge=1)
    notes: Optional[str] = None


class LaneCreateRequest(BaseModel):
    origin_id: int
    destination_id: int
    distance: Optional[float] = Field(None, gt=0, description="Kilometres")
    notes: Optional[str] = None
    stops: list[LaneStopRequest] = []


class LaneUpdateRequest(BaseModel):
    origin_id: Optional[int] = None
    destination_id: Optional[int] = None
    distance: Optional[float] = Field(None, gt=0)
    notes: Optional[str] = None
    status: Optional[LaneStatus] = None
    stops: Optional[list[LaneStopRequest]] = Field(
        None, description="Replaces the existing stops when present."
    )


class LaneCustomerRequest(BaseModel):
    customer_id: int


class LaneCarrierCreateRequest(BaseModel):
    carrier_id: int
    price: Optional[float] = Field(None, gt=0)
    currency: str = Field("USD", min_length=3, max_length=3)
    service_level: Optional[str] = Field(None, max_length=60)
    notes: Optional[str] = None


class LaneCarrierUpdateRequest(BaseModel):
    price: Optional[float] = Field(None, gt=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    service_level: Optional[str] = Field(None, max_length=60)
    notes: Optional[str] = None


class ShipmentItem(BaseModel):
    sku: str
    description: Optional[str] = None
    quantity: int = Field(..., gt=0)
    weight_kg: Optional[float] = Field(None, ge=0)
    volume_m3: Optional[float] = Field(None, ge=0)


class ShipmentCreateRequest(BaseModel):
    reference: str = Field(..., min_length=1, max_length=120)
    customer_id: int
    lane_id: Optional[int] = None
    origin_id: Optional[int] = None
    destination_id: Optional[int] = None
    pickup_date: Optional[datetime] = None
    delivery_date: Optional[datetime] = None
    items: list[ShipmentItem] = []

    @model_validator(mode="after")
    def _lane_or_endpoints(self):
        if not _route_fields_ok(self.lane_id, self.origin_id, self.destination_id):
            raise ValueError(ROUTE_FIELDS_MESSAGE)
        return self


class ShipmentUpdateRequest(BaseModel):
    reference: Optional[str] = Field(None, min_length=1, max_length=120)
    status: Optional[ShipmentStatus] = None
    pickup_date: Optional[datetime] = None
    delivery_date: Optional[datetime] = None
    customer_id: Optional[int] = None
    lane_id: Optional[int] = None
    origin_id: Optional[int] = None
    destination_id: Optional[int] = None
    items: Optional[list[ShipmentItem]] = None

    @model_validator(mode="after")
    def _lane_or_endpoints(self):
        route = (self.lane_id, self.origin_id, self.destination_id)
        if any(v is not None for v in route) and not _route_fields_ok(*route):
            raise ValueError(ROUTE_FIELDS_MESSAGE)
        return self


class DistanceRequest(BaseModel):
    origin_id: int
    destination_id: int


# ── Responses ─────────────────────────────────────────────────────────


class ORMModel(BaseModel):
    model_config = {"from_attributes": True}


class CustomerResponse(ORMModel):
    id: int
    name: str
    contact_email: Optional[str] = None
    archived: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class LocationResponse(ORMModel):
    id: int
    name: str
    address1: str
    address2: Optional[str] = None
    city: str
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: str
    lat: Optional[float] = None
    lng: Optional[float] = None
    archived: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CarrierResponse(ORMModel):
    id: int
    name: str
    mc_number: Optional[str] = None
    dot_number: Optional[str] = None
    contact_name: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class LaneStopResponse(ORMModel):
    id: int
    location_id: int
    order: int
    notes: Optional[str] = None
    location: LocationResponse


class LaneCustomerResponse(ORMModel):
    id: int
    lane_id: int
    customer_id: int
    customer: CustomerResponse


class LaneCarrierResponse(ORMModel):
    id: int
    lane_id: int
    carrier_id: int
    price: Optional[float] = None
    currency: str = "USD"
    service_level: Optional[str] = None
    notes: Optional[str] = None
    carrier: CarrierResponse


class LaneSummaryResponse(ORMModel):
    id: int
    name: str
    origin_id: int
    destination_id: int
    distance: Optional[float] = None
    status: LaneStatus
    origin: LocationResponse
    destination: LocationResponse


class LaneResponse(LaneSummaryResponse):
    notes: Optional[str] = None
    archived: bool = False
    stops: list[LaneStopResponse] = []
    customer_lanes: list[LaneCustomerResponse] = []
    lane_carriers: list[LaneCarrierResponse] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ShipmentResponse(ORMModel):
    id: int
    reference: str
    status: ShipmentStatus
    customer_id: int
    lane_id: Optional[int] = None
    origin_id: int
    destination_id: int
    pickup_date: Optional[datetime] = None
    delivery_date: Optional[datetime] = None
    items: list[ShipmentItem] = []
    archived: bool = False
    customer: CustomerResponse
    origin: LocationResponse
    destination: LocationResponse
    lane: Optional[LaneSummaryResponse] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class DistanceResponse(ORMModel):
    distance: float = Field(..., description="Kilometres, one decimal place")
    duration: Optional[int] = Field(None, description="Minutes")
    error: Optional[str] = Field(
        None, description="Present when the value is an estimate"
    )


class MessageResponse(BaseModel):
    message: str


class StatsResponse(BaseModel):
    customers: int
    locations: int
    carriers: int
    lanes: int
    shipments: int


class HealthResponse(BaseModel):
    status: str = "ok"


class ErrorResponse(BaseModel):
    detail: str
