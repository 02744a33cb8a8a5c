"""
Domain entities with business logic.

Patterns used
-------------
- **State Pattern** on ``Shipment``: enforces valid lifecycle transitions
  (draft -> planned -> in_transit -> delivered, with cancellation before
  the truck leaves).
- ``GeoPoint.is_usable`` is the single definition of "has coordinates"
  shared by the distance service and the API layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from .enums import SHIPMENT_TRANSITIONS, ShipmentStatus


class InvalidStateTransition(Exception):
    """Raised when a shipment status change violates the state machine."""


# ── Value Objects ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class GeoPoint:
    lat: Optional[float] = None
    lng: Optional[float] = None

    @property
    def is_usable(self) -> bool:
        # 0.0 is a real coordinate (equator / prime meridian)
        return self.lat is not None and self.lng is not None

    @classmethod
    def of(cls, location) -> "GeoPoint":
        """Build from anything exposing ``lat`` / ``lng`` attributes."""
        return cls(getattr(location, "lat", None), getattr(location, "lng", None))


@dataclass(frozen=True)
class LaneStop:
    location_id: int
    order: int
    notes: Optional[str] = None


# ── Entities ──────────────────────────────────────────────────────────


@dataclass
class Shipment:
    id: Optional[int] = None
    reference: str = ""
    customer_id: int = 0
    origin_id: int = 0
    destination_id: int = 0
    lane_id: Optional[int] = None
    status: ShipmentStatus = ShipmentStatus.DRAFT
    items: list[dict] = field(default_factory=list)
    pickup_date: Optional[datetime] = None
    delivery_date: Optional[datetime] = None

    def transition_to(self, new_status: ShipmentStatus) -> None:
        """Move to *new_status* if the transition is legal, else raise."""
        if new_status == self.status:
            return
        allowed = SHIPMENT_TRANSITIONS.get(self.status, set())
        if new_status not in allowed:
            raise InvalidStateTransition(
                f"Cannot transition from {self.status.value} to {new_status.value}"
            )
        self.status = new_status
