"""Domain enumerations and state-transition rules."""

import enum


class ShipmentStatus(str, enum.Enum):
    DRAFT = "draft"
    PLANNED = "planned"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


# State machine: maps current status -> set of valid next statuses
SHIPMENT_TRANSITIONS: dict[ShipmentStatus, set[ShipmentStatus]] = {
    ShipmentStatus.DRAFT: {ShipmentStatus.PLANNED, ShipmentStatus.CANCELLED},
    ShipmentStatus.PLANNED: {
        ShipmentStatus.DRAFT,
        ShipmentStatus.IN_TRANSIT,
        ShipmentStatus.CANCELLED,
    },
    ShipmentStatus.IN_TRANSIT: {ShipmentStatus.DELIVERED},
    ShipmentStatus.DELIVERED: set(),
    ShipmentStatus.CANCELLED: set(),
}


class LaneStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
