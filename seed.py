"""
Seed script -- populates the database with sample data for reviewers.

Run after migrations:
    python seed.py

Creates:
  - 6 sample customers
  - 10 sample locations (one without coordinates, to exercise validation)
  - 4 sample carriers
  - 5 sample lanes (two with intermediate stops)
  - 4 sample shipments (mix of draft, planned, in_transit)
"""

import asyncio

from sqlalchemy import text

from tms.domain.enums import ShipmentStatus
from tms.domain.lanes import lane_name
from tms.infrastructure.database import async_session_factory, engine
from tms.infrastructure.models import (
    CarrierModel,
    CustomerLaneModel,
    CustomerModel,
    LaneCarrierModel,
    LaneModel,
    LaneStopModel,
    LocationModel,
    ShipmentModel,
)


CUSTOMERS = [
    {"name": "Walmart Inc.", "contact_email": "logistics@walmart.com"},
    {"name": "Best Buy Co. Inc.", "contact_email": "supply@bestbuy.com"},
    {"name": "Target Corporation", "contact_email": "operations@target.com"},
    {"name": "Home Depot Inc.", "contact_email": "distribution@homedepot.com"},
    {"name": "Costco Wholesale Corporation", "contact_email": "supply@costco.com"},
    {"name": "Kroger Company", "contact_email": "distribution@kroger.com"},
]

LOCATIONS = [
    # Head office
    {"name": "Head Office - Dallas", "address1": "1234 Commerce Street",
     "city": "Dallas", "state": "Texas", "postal_code": "75201",
     "country": "USA", "lat": 32.7767, "lng": -96.7970},
    # Distribution centers
    {"name": "Central Distribution Center - Chicago", "address1": "5000 W 159th St",
     "city": "Chicago", "state": "Illinois", "postal_code": "60477",
     "country": "USA", "lat": 41.8781, "lng": -87.6298},
    {"name": "West Coast Hub - Los Angeles", "address1": "12000 E 40th St",
     "city": "Los Angeles", "state": "California", "postal_code": "90058",
     "country": "USA", "lat": 34.0522, "lng": -118.2437},
    {"name": "Northeast Distribution - New York", "address1": "1000 6th Ave",
     "city": "New York", "state": "New York", "postal_code": "10018",
     "country": "USA", "lat": 40.7128, "lng": -74.0060},
    {"name": "Southeast Warehouse - Atlanta", "address1": "2000 Peachtree Rd",
     "city": "Atlanta", "state": "Georgia", "postal_code": "30309",
     "country": "USA", "lat": 33.7490, "lng": -84.3880},
    {"name": "Midwest Logistics Center - Kansas City", "address1": "3000 Main St",
     "city": "Kansas City", "state": "Missouri", "postal_code": "64111",
     "country": "USA", "lat": 39.0997, "lng": -94.5786},
    {"name": "Gulf Coast Warehouse - Houston", "address1": "8000 Navigation Blvd",
     "city": "Houston", "state": "Texas", "postal_code": "77011",
     "country": "USA", "lat": 29.7604, "lng": -95.3698},
    {"name": "Appalachian Distribution - Nashville", "address1": "500 Broadway",
     "city": "Nashville", "state": "Tennessee", "postal_code": "37203",
     "country": "USA", "lat": 36.1627, "lng": -86.7816},
    {"name": "Rocky Mountain Distribution - Denver", "address1": "4000 Brighton Blvd",
     "city": "Denver", "state": "Colorado", "postal_code": "80216",
     "country": "USA", "lat": 39.7392, "lng": -104.9903},
    # Not geocoded yet
    {"name": "Cross-Dock - Memphis", "address1": "100 Airways Blvd",
     "city": "Memphis", "state": "Tennessee", "postal_code": "38116",
     "country": "USA", "lat": None, "lng": None},
]

CARRIERS = [
    {"name": "Lone Star Freight LLC", "mc_number": "MC-123456",
     "dot_number": "2345678", "contact_name": "Maria Lopez",
     "contact_email": "dispatch@lonestarfreight.com"},
    {"name": "Great Lakes Transport", "mc_number": "MC-234567",
     "dot_number": "3456789", "contact_phone": "+1-312-555-0142"},
    {"name": "Pacific Coast Carriers", "mc_number": "MC-345678",
     "dot_number": "4567890"},
    {"name": "Eastern Seaboard Logistics", "mc_number": "MC-456789",
     "dot_number": "5678901"},
]


async def seed():
    async with async_session_factory() as session:
        # Check if already seeded
        result = await session.execute(text("SELECT count(*) FROM customers"))
        if result.scalar() > 0:
            print("Database already seeded. Skipping.")
            return

        # ── Customers ─────────────────────────────────────────────────
        customers = [CustomerModel(**c) for c in CUSTOMERS]
        session.add_all(customers)
        await session.flush()
        print(f"  Created {len(customers)} customers")

        # ── Locations ─────────────────────────────────────────────────
        locations = [LocationModel(**loc) for loc in LOCATIONS]
        session.add_all(locations)
        await session.flush()
        print(f"  Created {len(locations)} locations")
        dallas, chicago, los_angeles, new_york, atlanta, kansas_city, \
            houston, nashville, denver, _memphis = locations

        # ── Carriers ──────────────────────────────────────────────────
        carriers = [CarrierModel(**c) for c in CARRIERS]
        session.add_all(carriers)
        await session.flush()
        print(f"  Created {len(carriers)} carriers")

        # ── Lanes ─────────────────────────────────────────────────────
        lane_specs = [
            # (origin, destination, km, stops)
            (dallas, new_york, 2490.0, [nashville]),
            (dallas, chicago, 1295.0, [kansas_city]),
            (houston, los_angeles, 2490.0, []),
            (chicago, atlanta, None, []),
            (dallas, denver, 1065.0, []),
        ]
        lanes = []
        for origin, destination, km, stops in lane_specs:
            lane = LaneModel(
                name=lane_name(origin.city, destination.city),
                origin_id=origin.id,
                destination_id=destination.id,
                distance=km,
                stops=[
                    LaneStopModel(location_id=stop.id, order=i)
                    for i, stop in enumerate(stops, start=1)
                ],
            )
            session.add(lane)
            lanes.append(lane)
        await session.flush()
        print(f"  Created {len(lanes)} lanes")

        session.add_all(
            [
                CustomerLaneModel(lane_id=lanes[0].id, customer_id=customers[0].id),
                CustomerLaneModel(lane_id=lanes[1].id, customer_id=customers[1].id),
                LaneCarrierModel(
                    lane_id=lanes[0].id, carrier_id=carriers[0].id,
                    price=4850.00, service_level="FTL",
                ),
                LaneCarrierModel(
                    lane_id=lanes[0].id, carrier_id=carriers[3].id,
                    price=5100.00, service_level="FTL",
                ),
                LaneCarrierModel(
                    lane_id=lanes[1].id, carrier_id=carriers[1].id,
                    price=2600.00, service_level="LTL",
                ),
            ]
        )
        await session.flush()

        # ── Shipments ─────────────────────────────────────────────────
        shipments_data = [
            {"reference": "WMT-100231", "customer": customers[0], "lane": lanes[0],
             "status": ShipmentStatus.PLANNED,
             "items": [{"sku": "TV-55-4K", "description": "55in 4K TV",
                        "quantity": 120, "weight_kg": 2160.0}]},
            {"reference": "BBY-88410", "customer": customers[1], "lane": lanes[1],
             "status": ShipmentStatus.IN_TRANSIT,
             "items": [{"sku": "LAP-14", "quantity": 300, "weight_kg": 600.0}]},
            {"reference": "TGT-55012", "customer": customers[2], "lane": None,
             "origin": atlanta, "destination": new_york,
             "status": ShipmentStatus.DRAFT,
             "items": [{"sku": "TOY-BLK", "quantity": 48, "volume_m3": 3.2}]},
            {"reference": "HD-7781", "customer": customers[3], "lane": lanes[2],
             "status": ShipmentStatus.DRAFT, "items": []},
        ]
        for s in shipments_data:
            lane = s["lane"]
            session.add(
                ShipmentModel(
                    reference=s["reference"],
                    customer_id=s["customer"].id,
                    lane_id=lane.id if lane else None,
                    origin_id=lane.origin_id if lane else s["origin"].id,
                    destination_id=(
                        lane.destination_id if lane else s["destination"].id
                    ),
                    status=s["status"],
                    items=s["items"],
                )
            )
        await session.flush()
        print(f"  Created {len(shipments_data)} shipments")

        await session.commit()
        print("\nSeed complete!")


async def main():
    print("Seeding database...")
    await seed()
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
