"""
Road-distance providers backed by external HTTP APIs.

* ``OpenRouteServiceProvider`` -- primary; the free tier works without a key.
  Requests avoid highways (closer to truck routing) and border crossings.
* ``GoogleDistanceMatrixProvider`` -- secondary; skipped entirely when no
  API key is configured.

Both share one ``httpx.AsyncClient`` owned by the application. Each whole
call is bounded by ``distance_timeout_seconds``.
"""

from __future__ import annotations

import logging
import math
from typing import Optional

import httpx

from tms.config import Settings
from tms.domain.distance import (
    DistanceProvider,
    DistanceService,
    ProviderError,
    RawDistance,
)
from tms.domain.entities import GeoPoint

logger = logging.getLogger(__name__)


def _measured(distance_km, duration_minutes) -> RawDistance:
    """Build a ``RawDistance``, rejecting NaN, infinite or negative values."""
    distance_km, duration_minutes = float(distance_km), float(duration_minutes)
    for value in (distance_km, duration_minutes):
        if not (math.isfinite(value) and value >= 0):
            raise ProviderError(f"unusable value in response: {value!r}")
    return RawDistance(distance_km, duration_minutes)


class OpenRouteServiceProvider(DistanceProvider):
    name = "OpenRouteService"

    def __init__(
        self,
        client: httpx.AsyncClient,
        url: str,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.client = client
        self.url = url
        self.api_key = api_key
        self.timeout = timeout

    def _payload(self, origin: GeoPoint, destination: GeoPoint) -> dict:
        # ORS expects [longitude, latitude]
        return {
            "coordinates": [
                [origin.lng, origin.lat],
                [destination.lng, destination.lat],
            ],
            "units": "km",
            "options": {
                "avoid_features": ["highways"],
                "avoid_borders": "all",
            },
        }

    async def fetch(
        self, origin: GeoPoint, destination: GeoPoint
    ) -> Optional[RawDistance]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = self.api_key

        resp = await self.client.post(
            self.url, json=self._payload(origin, destination), headers=headers
        )
        if not resp.is_success:
            raise ProviderError(f"HTTP {resp.status_code}")

        features = resp.json().get("features") or []
        if not features:
            raise ProviderError("no route features in response")

        summary = features[0]["properties"]["summary"]
        return _measured(summary["distance"], float(summary["duration"]) / 60)


class GoogleDistanceMatrixProvider(DistanceProvider):
    name = "Google Distance Matrix"

    def __init__(
        self,
        client: httpx.AsyncClient,
        url: str,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.client = client
        self.url = url
        self.api_key = api_key
        self.timeout = timeout

    async def fetch(
        self, origin: GeoPoint, destination: GeoPoint
    ) -> Optional[RawDistance]:
        if not self.api_key:
            logger.debug("%s skipped: no API key configured", self.name)
            return None

        params = {
            "origins": f"{origin.lat},{origin.lng}",
            "destinations": f"{destination.lat},{destination.lng}",
            "units": "metric",
            "key": self.api_key,
        }
        resp = await self.client.get(self.url, params=params)
        if not resp.is_success:
            raise ProviderError(f"HTTP {resp.status_code}")

        rows = resp.json().get("rows") or []
        if not rows or not rows[0].get("elements"):
            raise ProviderError("no matrix elements in response")
        element = rows[0]["elements"][0]
        if element.get("status") != "OK":
            raise ProviderError(f"element status {element.get('status')}")

        return _measured(
            float(element["distance"]["value"]) / 1000,
            float(element["duration"]["value"]) / 60,
        )


def build_distance_service(
    client: httpx.AsyncClient, config: Settings
) -> DistanceService:
    """Wire the default provider chain: OpenRouteService, then Google."""
    timeout = config.distance_timeout_seconds
    return DistanceService(
        [
            OpenRouteServiceProvider(
                client,
                config.openroute_api_url,
                config.openroute_api_key,
                timeout=timeout,
            ),
            GoogleDistanceMatrixProvider(
                client,
                config.google_maps_api_url,
                config.google_maps_api_key,
                timeout=timeout,
            ),
        ]
    )
