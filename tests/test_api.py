"""
Integration tests for the REST API endpoints.

Runs the real app, routes and repositories against an in-memory SQLite
database.  The distance service is wired to a stub provider (see
``conftest.client``) so no outbound HTTP happens.
"""

from __future__ import annotations

import pytest
from httpx import AsyncClient

from tms.domain.distance import STRAIGHT_LINE_FALLBACK, RawDistance

DALLAS = {
    "name": "Head Office - Dallas",
    "address1": "1234 Commerce Street",
    "city": "Dallas",
    "state": "Texas",
    "postal_code": "75201",
    "country": "USA",
    "lat": 32.7767,
    "lng": -96.7970,
}
NEW_YORK = {
    "name": "Northeast Distribution",
    "address1": "1000 6th Ave",
    "city": "New York",
    "state": "New York",
    "postal_code": "10018",
    "country": "USA",
    "lat": 40.7128,
    "lng": -74.0060,
}
NASHVILLE = {
    "name": "Appalachian Distribution",
    "address1": "500 Broadway",
    "city": "Nashville",
    "country": "USA",
    "lat": 36.1627,
    "lng": -86.7816,
}
MEMPHIS_NO_COORDS = {
    "name": "Cross-Dock",
    "address1": "100 Airways Blvd",
    "city": "Memphis",
    "country": "USA",
}


async def _create(client: AsyncClient, path: str, body: dict) -> dict:
    resp = await client.post(f"/api/v1/{path}", json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()


async def _lane(client: AsyncClient, stops=()) -> tuple[dict, dict, dict]:
    origin = await _create(client, "locations", DALLAS)
    destination = await _create(client, "locations", NEW_YORK)
    lane = await _create(
        client,
        "lanes",
        {
            "origin_id": origin["id"],
            "destination_id": destination["id"],
            "stops": list(stops),
        },
    )
    return lane, origin, destination


# ── Admin ─────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    resp = await client.get("/api/v1/admin/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_stats_counts_active_records(client: AsyncClient):
    await _lane(client)
    await _create(client, "customers", {"name": "Walmart Inc."})
    await _create(client, "carriers", {"name": "Lone Star Freight LLC"})

    resp = await client.get("/api/v1/admin/stats")
    assert resp.status_code == 200
    assert resp.json() == {
        "customers": 1,
        "locations": 2,
        "carriers": 1,
        "lanes": 1,
        "shipments": 0,
    }


# ── Customers ─────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_customer_crud(client: AsyncClient):
    customer = await _create(
        client,
        "customers",
        {"name": "Walmart Inc.", "contact_email": "logistics@walmart.com"},
    )
    assert customer["archived"] is False

    resp = await client.put(
        f"/api/v1/customers/{customer['id']}", json={"name": "Walmart"}
    )
    assert resp.status_code == 200
    assert resp.json()["name"] == "Walmart"
    assert resp.json()["contact_email"] == "logistics@walmart.com"

    resp = await client.delete(f"/api/v1/customers/{customer['id']}")
    assert resp.status_code == 200
    assert resp.json()["archived"] is True

    assert (await client.get(f"/api/v1/customers/{customer['id']}")).status_code == 404
    assert (await client.get("/api/v1/customers")).json() == []


@pytest.mark.asyncio
async def test_customer_invalid_email_rejected(client: AsyncClient):
    resp = await client.post(
        "/api/v1/customers", json={"name": "Target", "contact_email": "not-an-email"}
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_customer_not_found(client: AsyncClient):
    resp = await client.get("/api/v1/customers/9999")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Customer not found"


# ── Locations ─────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_location_without_coordinates(client: AsyncClient):
    location = await _create(client, "locations", MEMPHIS_NO_COORDS)
    assert location["lat"] is None
    assert location["lng"] is None


@pytest.mark.asyncio
async def test_location_latitude_out_of_range(client: AsyncClient):
    resp = await client.post("/api/v1/locations", json={**DALLAS, "lat": 91})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_location_search(client: AsyncClient):
    await _create(client, "locations", DALLAS)
    await _create(client, "locations", NEW_YORK)

    resp = await client.get("/api/v1/locations/search", params={"q": "dall"})
    assert resp.status_code == 200
    assert [loc["city"] for loc in resp.json()] == ["Dallas"]

    resp = await client.get("/api/v1/locations/search", params={"q": "10018"})
    assert [loc["city"] for loc in resp.json()] == ["New York"]


@pytest.mark.asyncio
async def test_location_search_short_query_returns_empty(client: AsyncClient):
    await _create(client, "locations", DALLAS)
    resp = await client.get("/api/v1/locations/search", params={"q": "D"})
    assert resp.status_code == 200
    assert resp.json() == []


@pytest.mark.asyncio
async def test_archived_location_excluded_from_search(client: AsyncClient):
    location = await _create(client, "locations", DALLAS)
    await client.delete(f"/api/v1/locations/{location['id']}")

    resp = await client.get("/api/v1/locations/search", params={"q": "Dallas"})
    assert resp.json() == []


# ── Carriers ──────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_carrier_update_and_delete(client: AsyncClient):
    carrier = await _create(
        client, "carriers", {"name": "Great Lakes Transport", "mc_number": "MC-1"}
    )

    resp = await client.put(
        f"/api/v1/carriers/{carrier['id']}", json={"dot_number": "3456789"}
    )
    assert resp.status_code == 200
    assert resp.json()["dot_number"] == "3456789"
    assert resp.json()["mc_number"] == "MC-1"

    resp = await client.delete(f"/api/v1/carriers/{carrier['id']}")
    assert resp.status_code == 204
    assert (await client.get(f"/api/v1/carriers/{carrier['id']}")).status_code == 404


# ── Lanes ─────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_create_lane_named_after_cities(client: AsyncClient):
    lane, origin, destination = await _lane(client)
    assert lane["name"] == "Dallas → New York"
    assert lane["status"] == "active"
    assert lane["origin"]["id"] == origin["id"]
    assert lane["destination"]["id"] == destination["id"]
    assert lane["stops"] == []


@pytest.mark.asyncio
async def test_create_lane_with_stops(client: AsyncClient):
    nashville = await _create(client, "locations", NASHVILLE)
    memphis = await _create(client, "locations", MEMPHIS_NO_COORDS)
    lane, _, _ = await _lane(
        client,
        stops=[
            {"location_id": memphis["id"], "order": 2},
            {"location_id": nashville["id"], "order": 1, "notes": "fuel"},
        ],
    )
    assert [(s["order"], s["location"]["city"]) for s in lane["stops"]] == [
        (1, "Nashville"),
        (2, "Memphis"),
    ]
    assert lane["stops"][0]["notes"] == "fuel"


@pytest.mark.asyncio
async def test_lane_stop_at_endpoint_rejected(client: AsyncClient):
    origin = await _create(client, "locations", DALLAS)
    destination = await _create(client, "locations", NEW_YORK)
    resp = await client.post(
        "/api/v1/lanes",
        json={
            "origin_id": origin["id"],
            "destination_id": destination["id"],
            "stops": [{"location_id": origin["id"], "order": 1}],
        },
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == (
        "Stops cannot include the origin or destination locations"
    )


@pytest.mark.asyncio
async def test_lane_stop_gap_rejected(client: AsyncClient):
    origin = await _create(client, "locations", DALLAS)
    destination = await _create(client, "locations", NEW_YORK)
    stop = await _create(client, "locations", NASHVILLE)
    resp = await client.post(
        "/api/v1/lanes",
        json={
            "origin_id": origin["id"],
            "destination_id": destination["id"],
            "stops": [{"location_id": stop["id"], "order": 2}],
        },
    )
    assert resp.status_code == 400
    assert resp.json()["detail"].startswith("Stop orders must be sequential")


@pytest.mark.asyncio
async def test_lane_unknown_stop_location_rejected(client: AsyncClient):
    origin = await _create(client, "locations", DALLAS)
    destination = await _create(client, "locations", NEW_YORK)
    resp = await client.post(
        "/api/v1/lanes",
        json={
            "origin_id": origin["id"],
            "destination_id": destination["id"],
            "stops": [{"location_id": 9999, "order": 1}],
        },
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == (
        "One or more stop locations not found or are archived"
    )


@pytest.mark.asyncio
async def test_lane_unknown_origin_rejected(client: AsyncClient):
    destination = await _create(client, "locations", NEW_YORK)
    resp = await client.post(
        "/api/v1/lanes", json={"origin_id": 9999, "destination_id": destination["id"]}
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Origin or destination location not found"


@pytest.mark.asyncio
async def test_update_lane_replaces_stops(client: AsyncClient):
    nashville = await _create(client, "locations", NASHVILLE)
    memphis = await _create(client, "locations", MEMPHIS_NO_COORDS)
    lane, _, _ = await _lane(client, stops=[{"location_id": nashville["id"], "order": 1}])

    resp = await client.put(
        f"/api/v1/lanes/{lane['id']}",
        json={
            "status": "inactive",
            "stops": [
                {"location_id": memphis["id"], "order": 1},
                {"location_id": nashville["id"], "order": 2},
            ],
        },
    )
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["status"] == "inactive"
    assert [s["location_id"] for s in body["stops"]] == [memphis["id"], nashville["id"]]


@pytest.mark.asyncio
async def test_update_lane_endpoint_renames(client: AsyncClient):
    lane, _, _ = await _lane(client)
    nashville = await _create(client, "locations", NASHVILLE)

    resp = await client.put(
        f"/api/v1/lanes/{lane['id']}", json={"destination_id": nashville["id"]}
    )
    assert resp.status_code == 200
    assert resp.json()["name"] == "Dallas → Nashville"
    assert resp.json()["destination"]["city"] == "Nashville"


@pytest.mark.asyncio
async def test_archive_lane(client: AsyncClient):
    lane, _, _ = await _lane(client)
    resp = await client.delete(f"/api/v1/lanes/{lane['id']}")
    assert resp.status_code == 200
    assert resp.json()["archived"] is True
    assert (await client.get(f"/api/v1/lanes/{lane['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_lane_customer_assignment(client: AsyncClient):
    lane, _, _ = await _lane(client)
    customer = await _create(client, "customers", {"name": "Best Buy Co. Inc."})
    path = f"/api/v1/lanes/{lane['id']}/customers"

    resp = await client.post(path, json={"customer_id": customer["id"]})
    assert resp.status_code == 201
    assert resp.json()["customer"]["name"] == "Best Buy Co. Inc."

    resp = await client.post(path, json={"customer_id": customer["id"]})
    assert resp.status_code == 409

    lane_resp = await client.get(f"/api/v1/lanes/{lane['id']}")
    assert [cl["customer_id"] for cl in lane_resp.json()["customer_lanes"]] == [
        customer["id"]
    ]

    resp = await client.delete(f"{path}/{customer['id']}")
    assert resp.status_code == 200
    assert resp.json() == {"message": "Customer removed from lane"}

    resp = await client.delete(f"{path}/{customer['id']}")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_lane_carrier_assignment(client: AsyncClient):
    lane, _, _ = await _lane(client)
    carrier = await _create(client, "carriers", {"name": "Lone Star Freight LLC"})
    path = f"/api/v1/lanes/{lane['id']}/carriers"

    resp = await client.post(
        path, json={"carrier_id": carrier["id"], "price": 4850.0, "service_level": "FTL"}
    )
    assert resp.status_code == 201
    assert resp.json()["currency"] == "USD"
    assert resp.json()["carrier"]["name"] == "Lone Star Freight LLC"

    resp = await client.put(f"{path}/{carrier['id']}", json={"price": 4700.0})
    assert resp.status_code == 200
    assert resp.json()["price"] == 4700.0
    assert resp.json()["service_level"] == "FTL"

    resp = await client.delete(f"{path}/{carrier['id']}")
    assert resp.json() == {"message": "Carrier removed from lane"}


@pytest.mark.asyncio
async def test_lane_carrier_unknown_carrier(client: AsyncClient):
    lane, _, _ = await _lane(client)
    resp = await client.post(
        f"/api/v1/lanes/{lane['id']}/carriers", json={"carrier_id": 9999}
    )
    assert resp.status_code == 404


# ── Shipments ─────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_shipment_on_lane_copies_endpoints(client: AsyncClient):
    lane, origin, destination = await _lane(client)
    customer = await _create(client, "customers", {"name": "Walmart Inc."})

    shipment = await _create(
        client,
        "shipments",
        {
            "reference": "WMT-100231",
            "customer_id": customer["id"],
            "lane_id": lane["id"],
            "items": [{"sku": "TV-55-4K", "quantity": 120, "weight_kg": 2160.0}],
        },
    )
    assert shipment["status"] == "draft"
    assert shipment["origin_id"] == origin["id"]
    assert shipment["destination_id"] == destination["id"]
    assert shipment["lane"]["name"] == "Dallas → New York"
    assert shipment["items"][0]["sku"] == "TV-55-4K"


@pytest.mark.asyncio
async def test_shipment_between_locations(client: AsyncClient):
    origin = await _create(client, "locations", DALLAS)
    destination = await _create(client, "locations", NEW_YORK)
    customer = await _create(client, "customers", {"name": "Target Corporation"})

    shipment = await _create(
        client,
        "shipments",
        {
            "reference": "TGT-55012",
            "customer_id": customer["id"],
            "origin_id": origin["id"],
            "destination_id": destination["id"],
        },
    )
    assert shipment["lane_id"] is None
    assert shipment["lane"] is None
    assert shipment["items"] == []


@pytest.mark.asyncio
async def test_shipment_needs_lane_or_both_endpoints(client: AsyncClient):
    lane, origin, _ = await _lane(client)
    customer = await _create(client, "customers", {"name": "Walmart Inc."})
    base = {"reference": "X-1", "customer_id": customer["id"]}

    resp = await client.post("/api/v1/shipments", json=base)
    assert resp.status_code == 422

    resp = await client.post(
        "/api/v1/shipments", json={**base, "origin_id": origin["id"]}
    )
    assert resp.status_code == 422

    resp = await client.post(
        "/api/v1/shipments",
        json={**base, "lane_id": lane["id"], "origin_id": origin["id"]},
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_shipment_unknown_customer(client: AsyncClient):
    lane, _, _ = await _lane(client)
    resp = await client.post(
        "/api/v1/shipments",
        json={"reference": "X-1", "customer_id": 9999, "lane_id": lane["id"]},
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Customer not found"


@pytest.mark.asyncio
async def test_shipment_status_lifecycle(client: AsyncClient):
    lane, _, _ = await _lane(client)
    customer = await _create(client, "customers", {"name": "Walmart Inc."})
    shipment = await _create(
        client,
        "shipments",
        {"reference": "WMT-1", "customer_id": customer["id"], "lane_id": lane["id"]},
    )
    path = f"/api/v1/shipments/{shipment['id']}"

    resp = await client.put(path, json={"status": "delivered"})
    assert resp.status_code == 409
    assert resp.json()["detail"] == "Cannot transition from draft to delivered"

    for status in ("planned", "in_transit", "delivered"):
        resp = await client.put(path, json={"status": status})
        assert resp.status_code == 200, resp.text
        assert resp.json()["status"] == status

    resp = await client.put(path, json={"status": "cancelled"})
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_shipment_reroute_drops_lane(client: AsyncClient):
    lane, origin, _ = await _lane(client)
    nashville = await _create(client, "locations", NASHVILLE)
    customer = await _create(client, "customers", {"name": "Walmart Inc."})
    shipment = await _create(
        client,
        "shipments",
        {"reference": "WMT-2", "customer_id": customer["id"], "lane_id": lane["id"]},
    )

    resp = await client.put(
        f"/api/v1/shipments/{shipment['id']}",
        json={"origin_id": origin["id"], "destination_id": nashville["id"]},
    )
    assert resp.status_code == 200
    assert resp.json()["lane_id"] is None
    assert resp.json()["destination"]["city"] == "Nashville"


@pytest.mark.asyncio
async def test_shipments_listed_newest_first_and_archive(client: AsyncClient):
    lane, _, _ = await _lane(client)
    customer = await _create(client, "customers", {"name": "Walmart Inc."})
    ids = []
    for ref in ("A-1", "A-2", "A-3"):
        shipment = await _create(
            client,
            "shipments",
            {"reference": ref, "customer_id": customer["id"], "lane_id": lane["id"]},
        )
        ids.append(shipment["id"])

    resp = await client.get("/api/v1/shipments")
    assert [s["id"] for s in resp.json()] == list(reversed(ids))

    resp = await client.delete(f"/api/v1/shipments/{ids[0]}")
    assert resp.status_code == 200
    assert resp.json()["archived"] is True
    assert [s["id"] for s in (await client.get("/api/v1/shipments")).json()] == [
        ids[2],
        ids[1],
    ]


# ── Distance ──────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_distance_from_provider(client: AsyncClient, distance_provider):
    origin = await _create(client, "locations", DALLAS)
    destination = await _create(client, "locations", NEW_YORK)

    resp = await client.post(
        "/api/v1/distance/calculate",
        json={"origin_id": origin["id"], "destination_id": destination["id"]},
    )
    assert resp.status_code == 200
    assert resp.json() == {"distance": 2205.7, "duration": 2206}
    assert len(distance_provider.calls) == 1


@pytest.mark.asyncio
async def test_distance_fallback_has_error_and_no_duration(
    client: AsyncClient, distance_provider
):
    distance_provider.answer = None
    distance_provider.exc = RuntimeError("ORS down")
    origin = await _create(client, "locations", DALLAS)
    destination = await _create(client, "locations", NEW_YORK)

    resp = await client.post(
        "/api/v1/distance/calculate",
        json={"origin_id": origin["id"], "destination_id": destination["id"]},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert abs(body["distance"] - 2205.7) <= 1.0
    assert "duration" not in body
    assert body["error"] == STRAIGHT_LINE_FALLBACK


@pytest.mark.asyncio
async def test_distance_location_not_found(client: AsyncClient):
    origin = await _create(client, "locations", DALLAS)
    resp = await client.post(
        "/api/v1/distance/calculate",
        json={"origin_id": origin["id"], "destination_id": 9999},
    )
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Origin or destination location not found"


@pytest.mark.asyncio
async def test_distance_archived_location_not_found(client: AsyncClient):
    origin = await _create(client, "locations", DALLAS)
    destination = await _create(client, "locations", NEW_YORK)
    await client.delete(f"/api/v1/locations/{destination['id']}")

    resp = await client.post(
        "/api/v1/distance/calculate",
        json={"origin_id": origin["id"], "destination_id": destination["id"]},
    )
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_distance_requires_coordinates(client: AsyncClient, distance_provider):
    origin = await _create(client, "locations", DALLAS)
    destination = await _create(client, "locations", MEMPHIS_NO_COORDS)

    resp = await client.post(
        "/api/v1/distance/calculate",
        json={"origin_id": origin["id"], "destination_id": destination["id"]},
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == (
        "Both locations must have latitude and longitude coordinates "
        "for distance calculation"
    )
    assert distance_provider.calls == []


@pytest.mark.asyncio
async def test_distance_stub_answer_is_rounded(client: AsyncClient, distance_provider):
    distance_provider.answer = RawDistance(2205.789123, 10.4)
    origin = await _create(client, "locations", DALLAS)
    destination = await _create(client, "locations", NEW_YORK)

    resp = await client.post(
        "/api/v1/distance/calculate",
        json={"origin_id": origin["id"], "destination_id": destination["id"]},
    )
    assert resp.json() == {"distance": 2205.8, "duration": 10}
