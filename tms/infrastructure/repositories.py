"""
Repository Pattern -- abstracts DB access so route handlers stay thin.

Each repository receives an ``AsyncSession`` (unit-of-work) and exposes
domain-relevant queries only.  Lookups of archivable aggregates ignore
archived rows.  Relationships are always loaded eagerly with
``selectinload`` because lazy loading is not available under asyncio.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from .models import (
    CarrierModel,
    CustomerLaneModel,
    CustomerModel,
    LaneCarrierModel,
    LaneModel,
    LaneStopModel,
    LocationModel,
    ShipmentModel,
)
from tms.domain.entities import LaneStop


def _apply(obj: Any, fields: dict[str, Any]) -> None:
    for key, value in fields.items():
        setattr(obj, key, value)


def _mark_archived(obj: Any) -> None:
    obj.archived = True
    obj.archived_at = datetime.now(timezone.utc)


async def _count(session: AsyncSession, model, *criteria) -> int:
    result = await session.execute(
        select(func.count()).select_from(model).where(*criteria)
    )
    return result.scalar() or 0


class CustomerRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_active(self) -> list[CustomerModel]:
        result = await self.session.execute(
            select(CustomerModel)
            .where(CustomerModel.archived.is_(False))
            .order_by(CustomerModel.name)
        )
        return list(result.scalars().all())

    async def get_by_id(self, customer_id: int) -> Optional[CustomerModel]:
        result = await self.session.execute(
            select(CustomerModel).where(
                CustomerModel.id == customer_id,
                CustomerModel.archived.is_(False),
            )
        )
        return result.scalar_one_or_none()

    async def create(self, **fields) -> CustomerModel:
        customer = CustomerModel(**fields)
        self.session.add(customer)
        await self.session.flush()
        return customer

    async def update(self, customer: CustomerModel, fields: dict) -> CustomerModel:
        _apply(customer, fields)
        await self.session.flush()
        await self.session.refresh(customer)
        return customer

    async def archive(self, customer: CustomerModel) -> CustomerModel:
        _mark_archived(customer)
        await self.session.flush()
        await self.session.refresh(customer)
        return customer

    async def count_active(self) -> int:
        return await _count(
            self.session, CustomerModel, CustomerModel.archived.is_(False)
        )


class LocationRepository:
    SEARCH_LIMIT = 20

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_active(self) -> list[LocationModel]:
        result = await self.session.execute(
            select(LocationModel)
            .where(LocationModel.archived.is_(False))
            .order_by(LocationModel.name)
        )
        return list(result.scalars().all())

    async def get_by_id(self, location_id: int) -> Optional[LocationModel]:
        result = await self.session.execute(
            select(LocationModel).where(
                LocationModel.id == location_id,
                LocationModel.archived.is_(False),
            )
        )
        return result.scalar_one_or_none()

    async def get_many_active(self, ids: Sequence[int]) -> list[LocationModel]:
        if not ids:
            return []
        result = await self.session.execute(
            select(LocationModel).where(
                LocationModel.id.in_(ids),
                LocationModel.archived.is_(False),
            )
        )
        return list(result.scalars().all())

    async def search(self, query: str) -> list[LocationModel]:
        """Case-insensitive substring match over the address fields."""
        pattern = f"%{query.strip().lower()}%"
        columns = (
            LocationModel.name,
            LocationModel.city,
            LocationModel.state,
            LocationModel.country,
            LocationModel.address1,
            LocationModel.postal_code,
        )
        result = await self.session.execute(
            select(LocationModel)
            .where(
                LocationModel.archived.is_(False),
                or_(*(func.lower(c).like(pattern) for c in columns)),
            )
            .order_by(LocationModel.name, LocationModel.city)
            .limit(self.SEARCH_LIMIT)
        )
        return list(result.scalars().all())

    async def create(self, **fields) -> LocationModel:
        location = LocationModel(**fields)
        self.session.add(location)
        await self.session.flush()
        return location

    async def update(self, location: LocationModel, fields: dict) -> LocationModel:
        _apply(location, fields)
        await self.session.flush()
        await self.session.refresh(location)
        return location

    async def archive(self, location: LocationModel) -> LocationModel:
        _mark_archived(location)
        await self.session.flush()
        await self.session.refresh(location)
        return location

    async def count_active(self) -> int:
        return await _count(
            self.session, LocationModel, LocationModel.archived.is_(False)
        )


class CarrierRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_all(self) -> list[CarrierModel]:
        result = await self.session.execute(
            select(CarrierModel).order_by(CarrierModel.name)
        )
        return list(result.scalars().all())

    async def get_by_id(self, carrier_id: int) -> Optional[CarrierModel]:
        return await self.session.get(CarrierModel, carrier_id)

    async def create(self, **fields) -> CarrierModel:
        carrier = CarrierModel(**fields)
        self.session.add(carrier)
        await self.session.flush()
        return carrier

    async def update(self, carrier: CarrierModel, fields: dict) -> CarrierModel:
        _apply(carrier, fields)
        await self.session.flush()
        await self.session.refresh(carrier)
        return carrier

    async def delete(self, carrier: CarrierModel) -> None:
        await self.session.delete(carrier)
        await self.session.flush()

    async def count(self) -> int:
        return await _count(self.session, CarrierModel)


_LANE_RELATIONS = (
    selectinload(LaneModel.origin),
    selectinload(LaneModel.destination),
    selectinload(LaneModel.stops).selectinload(LaneStopModel.location),
    selectinload(LaneModel.customer_lanes).selectinload(
        CustomerLaneModel.customer
    ),
    selectinload(LaneModel.lane_carriers).selectinload(
        LaneCarrierModel.carrier
    ),
)


def _stop_models(stops: Sequence[LaneStop]) -> list[LaneStopModel]:
    return [
        LaneStopModel(location_id=s.location_id, order=s.order, notes=s.notes)
        for s in sorted(stops, key=lambda s: s.order)
    ]


class LaneRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_active(self) -> list[LaneModel]:
        result = await self.session.execute(
            select(LaneModel)
            .where(LaneModel.archived.is_(False))
            .options(*_LANE_RELATIONS)
            .order_by(LaneModel.name)
        )
        return list(result.scalars().all())

    async def get_by_id(self, lane_id: int) -> Optional[LaneModel]:
        result = await self.session.execute(
            select(LaneModel)
            .where(LaneModel.id == lane_id, LaneModel.archived.is_(False))
            .options(*_LANE_RELATIONS)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def create(
        self,
        *,
        name: str,
        origin_id: int,
        destination_id: int,
        distance: float | None = None,
        notes: str | None = None,
        stops: Sequence[LaneStop] = (),
    ) -> LaneModel:
        """Create a lane and its stops in one flush."""
        lane = LaneModel(
            name=name,
            origin_id=origin_id,
            destination_id=destination_id,
            distance=distance,
            notes=notes,
            stops=_stop_models(stops),
        )
        self.session.add(lane)
        await self.session.flush()
        return await self.get_by_id(lane.id)

    async def update(
        self,
        lane: LaneModel,
        fields: dict,
        stops: Optional[Sequence[LaneStop]] = None,
    ) -> LaneModel:
        """Apply *fields*; when *stops* is given it replaces the stop list.

        *lane* must have been loaded through ``get_by_id``.
        """
        _apply(lane, fields)
        if stops is not None:
            # delete old rows first so (lane_id, order) stays unique
            lane.stops.clear()
            await self.session.flush()
            lane.stops.extend(_stop_models(stops))
        await self.session.flush()
        return await self.get_by_id(lane.id)

    async def archive(self, lane: LaneModel) -> LaneModel:
        _mark_archived(lane)
        await self.session.flush()
        return await self._get_any(lane.id)

    async def _get_any(self, lane_id: int) -> Optional[LaneModel]:
        result = await self.session.execute(
            select(LaneModel)
            .where(LaneModel.id == lane_id)
            .options(*_LANE_RELATIONS)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def count_active(self) -> int:
        return await _count(self.session, LaneModel, LaneModel.archived.is_(False))

    # ── Customer assignments ──────────────────────────────────────────

    async def find_customer_lane(
        self, lane_id: int, customer_id: int
    ) -> Optional[CustomerLaneModel]:
        result = await self.session.execute(
            select(CustomerLaneModel)
            .where(
                CustomerLaneModel.lane_id == lane_id,
                CustomerLaneModel.customer_id == customer_id,
            )
            .options(selectinload(CustomerLaneModel.customer))
        )
        return result.scalar_one_or_none()

    async def add_customer(
        self, lane_id: int, customer: CustomerModel
    ) -> CustomerLaneModel:
        link = CustomerLaneModel(
            lane_id=lane_id, customer_id=customer.id, customer=customer
        )
        self.session.add(link)
        await self.session.flush()
        return link

    async def remove_customer(self, link: CustomerLaneModel) -> None:
        await self.session.delete(link)
        await self.session.flush()

    # ── Carrier assignments ───────────────────────────────────────────

    async def find_lane_carrier(
        self, lane_id: int, carrier_id: int
    ) -> Optional[LaneCarrierModel]:
        result = await self.session.execute(
            select(LaneCarrierModel)
            .where(
                LaneCarrierModel.lane_id == lane_id,
                LaneCarrierModel.carrier_id == carrier_id,
            )
            .options(selectinload(LaneCarrierModel.carrier))
        )
        return result.scalar_one_or_none()

    async def add_carrier(
        self, lane_id: int, carrier: CarrierModel, **fields
    ) -> LaneCarrierModel:
        link = LaneCarrierModel(
            lane_id=lane_id, carrier_id=carrier.id, carrier=carrier, **fields
        )
        self.session.add(link)
        await self.session.flush()
        return link

    async def update_carrier(
        self, link: LaneCarrierModel, fields: dict
    ) -> LaneCarrierModel:
        _apply(link, fields)
        await self.session.flush()
        return link

    async def remove_carrier(self, link: LaneCarrierModel) -> None:
        await self.session.delete(link)
        await self.session.flush()


_SHIPMENT_RELATIONS = (
    selectinload(ShipmentModel.customer),
    selectinload(ShipmentModel.origin),
    selectinload(ShipmentModel.destination),
    selectinload(ShipmentModel.lane).selectinload(LaneModel.origin),
    selectinload(ShipmentModel.lane).selectinload(LaneModel.destination),
)


class ShipmentRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_active(self) -> list[ShipmentModel]:
        result = await self.session.execute(
            select(ShipmentModel)
            .where(ShipmentModel.archived.is_(False))
            .options(*_SHIPMENT_RELATIONS)
            .order_by(ShipmentModel.created_at.desc(), ShipmentModel.id.desc())
        )
        return list(result.scalars().all())

    async def get_by_id(
        self, shipment_id: int, include_archived: bool = False
    ) -> Optional[ShipmentModel]:
        stmt = select(ShipmentModel).where(ShipmentModel.id == shipment_id)
        if not include_archived:
            stmt = stmt.where(ShipmentModel.archived.is_(False))
        result = await self.session.execute(
            stmt.options(*_SHIPMENT_RELATIONS).execution_options(
                populate_existing=True
            )
        )
        return result.scalar_one_or_none()

    async def create(self, **fields) -> ShipmentModel:
        shipment = ShipmentModel(**fields)
        self.session.add(shipment)
        await self.session.flush()
        return await self.get_by_id(shipment.id)

    async def update(self, shipment: ShipmentModel, fields: dict) -> ShipmentModel:
        _apply(shipment, fields)
        await self.session.flush()
        return await self.get_by_id(shipment.id)

    async def archive(self, shipment: ShipmentModel) -> ShipmentModel:
        _mark_archived(shipment)
        await self.session.flush()
        return await self.get_by_id(shipment.id, include_archived=True)

    async def count_active(self) -> int:
        return await _count(
            self.session, ShipmentModel, ShipmentModel.archived.is_(False)
        )
