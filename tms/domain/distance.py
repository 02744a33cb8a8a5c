"""
Distance resolution  (Strategy Pattern)
=======================================

A distance between two locations is resolved by walking an ordered list of
``DistanceProvider`` strategies (road-routing services) and taking the first
answer.  When every provider declines or fails, the great-circle
(Haversine) distance is used instead and the result is flagged with a
user-visible ``error`` so the UI can show a "straight-line estimate" badge.

Flow per call
-------------
  validate coordinates -> provider 1 -> provider 2 -> ... -> haversine

* Providers are awaited one after another; a lower-priority provider is
  never called once a higher-priority one has answered.
* Each provider call is bounded by the provider's ``timeout``; hitting it
  counts as an ordinary failure.
* Provider failures never reach the caller.  ``asyncio.CancelledError`` is
  not an ``Exception`` and therefore still propagates.
* Rounding happens here, once, for every path: distance to 0.1 km and
  duration to whole minutes (half-up).

Complexity: O(P) provider calls per request, O(1) for the fallback.
"""

from __future__ import annotations

import asyncio
import logging
import math
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional

from .entities import GeoPoint

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6_371.0

INVALID_COORDINATES = "Invalid coordinates provided"
STRAIGHT_LINE_FALLBACK = (
    "Using straight-line distance (external services unavailable)"
)


def haversine_km(
    lat1: float, lng1: float, lat2: float, lng2: float
) -> float:
    """Return the great-circle distance in **km** between two points."""
    lat1_r, lat2_r = math.radians(lat1), math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlng = math.radians(lng2 - lng1)

    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1_r) * math.cos(lat2_r) * math.sin(dlng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def _round_half_up(value: float, ndigits: int = 0) -> float:
    scale = 10**ndigits
    return math.floor(value * scale + 0.5) / scale


# ── Value objects ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class RawDistance:
    """A provider's answer before normalisation."""

    distance_km: float
    duration_minutes: Optional[float] = None


@dataclass(frozen=True)
class DistanceResult:
    distance: float
    duration: Optional[int] = None
    error: Optional[str] = None


# ── Strategy hierarchy ────────────────────────────────────────────────


class ProviderError(Exception):
    """Raised by a provider when the service answered but not usefully."""


class DistanceProvider(ABC):
    """One external routing service.

    Subclasses implement ``fetch`` and are free to raise; ``try_compute``
    turns every failure into ``None`` so the chain can move on.
    """

    name: str = "provider"
    # Upper bound on one whole fetch, in seconds; None means unbounded
    timeout: Optional[float] = None

    @abstractmethod
    async def fetch(
        self, origin: GeoPoint, destination: GeoPoint
    ) -> Optional[RawDistance]: ...

    async def try_compute(
        self, origin: GeoPoint, destination: GeoPoint
    ) -> Optional[RawDistance]:
        try:
            return await asyncio.wait_for(
                self.fetch(origin, destination), self.timeout
            )
        except Exception as exc:
            logger.warning("%s unavailable: %r", self.name, exc)
            return None


# ── Service facade ────────────────────────────────────────────────────


class DistanceService:
    """High-level API used by the distance endpoint.

    Stateless apart from the injected provider list, so one instance can
    serve concurrent requests.
    """

    def __init__(self, providers: Sequence[DistanceProvider] = ()):
        self.providers = list(providers)

    @staticmethod
    def normalize(raw: RawDistance, error: Optional[str] = None) -> DistanceResult:
        duration = None
        if raw.duration_minutes is not None:
            duration = int(_round_half_up(raw.duration_minutes))
        return DistanceResult(
            distance=_round_half_up(raw.distance_km, 1),
            duration=duration,
            error=error,
        )

    async def compute_distance(self, origin, destination) -> DistanceResult:
        """Resolve the distance between two location-like objects.

        *origin* and *destination* only need ``lat`` / ``lng`` attributes;
        address fields are ignored.
        """
        a, b = GeoPoint.of(origin), GeoPoint.of(destination)
        if not (a.is_usable and b.is_usable):
            return DistanceResult(distance=0.0, error=INVALID_COORDINATES)

        for provider in self.providers:
            raw = await provider.try_compute(a, b)
            if raw is not None:
                return self.normalize(raw)

        logger.info(
            "All distance providers unavailable, using straight-line distance"
        )
        straight = haversine_km(a.lat, a.lng, b.lat, b.lng)
        return self.normalize(RawDistance(straight), error=STRAIGHT_LINE_FALLBACK)
