"""
Lane rules
==========

A lane is a reusable route: origin -> ordered intermediate stops ->
destination.  Stops are numbered 1..n with no gaps or duplicates and may
not revisit either endpoint.
"""

from __future__ import annotations

from collections.abc import Sequence

from .entities import LaneStop

STOPS_INCLUDE_ENDPOINT = "Stops cannot include the origin or destination locations"
STOPS_NOT_SEQUENTIAL = (
    "Stop orders must be sequential starting from 1 (1, 2, 3, ...)"
)


class InvalidLaneStops(Exception):
    """Raised when a lane's stop list breaks the sequencing rules."""


def lane_name(origin_city: str, destination_city: str) -> str:
    return f"{origin_city} → {destination_city}"


def validate_lane_stops(
    origin_id: int, destination_id: int, stops: Sequence[LaneStop]
) -> None:
    """
    Check a stop list against the lane's endpoints.

    Existence of the referenced locations is a persistence concern and is
    checked by the caller.
    """
    location_ids = {s.location_id for s in stops}
    if origin_id in location_ids or destination_id in location_ids:
        raise InvalidLaneStops(STOPS_INCLUDE_ENDPOINT)

    orders = sorted(s.order for s in stops)
    if orders != list(range(1, len(orders) + 1)):
        raise InvalidLaneStops(STOPS_NOT_SEQUENTIAL)
