"""
SQLAlchemy ORM models  (maps to PostgreSQL).

Tables
------
* ``customers``       -- shippers we move freight for
* ``locations``       -- warehouses, DCs and stores; coordinates optional
* ``carriers``        -- trucking companies
* ``lanes``           -- reusable origin -> destination routes
* ``lane_stops``      -- ordered intermediate stops of a lane
* ``customer_lanes``  -- which customers ship on which lanes
* ``lane_carriers``   -- carriers serving a lane, with their rate
* ``shipments``       -- individual orders moving between two locations

Customers, locations, lanes and shipments are soft-deleted via ``archived``.

Indexes
-------
* **B-Tree** on ``archived`` flags, foreign keys and ``shipments.status``
  for the list / lookup queries used by the API.
"""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from .database import Base
from tms.domain.enums import LaneStatus, ShipmentStatus


class TimestampMixin:
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # fetch server-generated timestamps with RETURNING after flush
    __mapper_args__ = {"eager_defaults": True}


class ArchivableMixin:
    archived = Column(Boolean, default=False, nullable=False)
    archived_at = Column(DateTime(timezone=True), nullable=True)


class CustomerModel(TimestampMixin, ArchivableMixin, Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    contact_email = Column(String(255), nullable=True)

    __table_args__ = (Index("idx_customers_archived", "archived"),)


class LocationModel(TimestampMixin, ArchivableMixin, Base):
    __tablename__ = "locations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    address1 = Column(String(255), nullable=False)
    address2 = Column(String(255), nullable=True)
    city = Column(String(120), nullable=False)
    state = Column(String(120), nullable=True)
    postal_code = Column(String(20), nullable=True)
    country = Column(String(60), nullable=False)

    # Nullable: a location may be saved before it is geocoded
    lat = Column(Float, nullable=True)
    lng = Column(Float, nullable=True)

    __table_args__ = (Index("idx_locations_archived", "archived"),)


class CarrierModel(TimestampMixin, Base):
    __tablename__ = "carriers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    mc_number = Column(String(20), nullable=True)
    dot_number = Column(String(20), nullable=True)
    contact_name = Column(String(120), nullable=True)
    contact_email = Column(String(255), nullable=True)
    contact_phone = Column(String(40), nullable=True)


class LaneModel(TimestampMixin, ArchivableMixin, Base):
    __tablename__ = "lanes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    origin_id = Column(Integer, ForeignKey("locations.id"), nullable=False)
    destination_id = Column(Integer, ForeignKey("locations.id"), nullable=False)
    distance = Column(Float, nullable=True)  # km
    notes = Column(Text, nullable=True)
    status = Column(Enum(LaneStatus), default=LaneStatus.ACTIVE, nullable=False)

    origin = relationship("LocationModel", foreign_keys=[origin_id])
    destination = relationship("LocationModel", foreign_keys=[destination_id])
    stops = relationship(
        "LaneStopModel",
        order_by="LaneStopModel.order",
        cascade="all, delete-orphan",
    )
    # Links are created and deleted through LaneRepository, not the collection
    customer_lanes = relationship("CustomerLaneModel")
    lane_carriers = relationship("LaneCarrierModel")

    __table_args__ = (
        Index("idx_lanes_archived", "archived"),
        Index("idx_lanes_origin", "origin_id"),
        Index("idx_lanes_destination", "destination_id"),
    )


class LaneStopModel(Base):
    __tablename__ = "lane_stops"

    id = Column(Integer, primary_key=True, autoincrement=True)
    lane_id = Column(
        Integer, ForeignKey("lanes.id", ondelete="CASCADE"), nullable=False
    )
    location_id = Column(Integer, ForeignKey("locations.id"), nullable=False)
    order = Column(Integer, nullable=False)
    notes = Column(Text, nullable=True)

    location = relationship("LocationModel")

    __table_args__ = (
        UniqueConstraint("lane_id", "order", name="uq_lane_stops_order"),
    )


class CustomerLaneModel(TimestampMixin, Base):
    __tablename__ = "customer_lanes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    lane_id = Column(
        Integer, ForeignKey("lanes.id", ondelete="CASCADE"), nullable=False
    )
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False)

    customer = relationship("CustomerModel")

    __table_args__ = (
        UniqueConstraint("lane_id", "customer_id", name="uq_customer_lanes"),
    )


class LaneCarrierModel(TimestampMixin, Base):
    __tablename__ = "lane_carriers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    lane_id = Column(
        Integer, ForeignKey("lanes.id", ondelete="CASCADE"), nullable=False
    )
    carrier_id = Column(
        Integer, ForeignKey("carriers.id", ondelete="CASCADE"), nullable=False
    )
    price = Column(Float, nullable=True)
    currency = Column(String(3), default="USD", nullable=False)
    service_level = Column(String(60), nullable=True)
    notes = Column(Text, nullable=True)

    carrier = relationship("CarrierModel")

    __table_args__ = (
        UniqueConstraint("lane_id", "carrier_id", name="uq_lane_carriers"),
    )


class ShipmentModel(TimestampMixin, ArchivableMixin, Base):
    __tablename__ = "shipments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    reference = Column(String(120), nullable=False)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False)
    lane_id = Column(Integer, ForeignKey("lanes.id"), nullable=True)
    origin_id = Column(Integer, ForeignKey("locations.id"), nullable=False)
    destination_id = Column(Integer, ForeignKey("locations.id"), nullable=False)
    pickup_date = Column(DateTime(timezone=True), nullable=True)
    delivery_date = Column(DateTime(timezone=True), nullable=True)
    status = Column(
        Enum(ShipmentStatus), default=ShipmentStatus.DRAFT, nullable=False
    )
    items = Column(JSON, default=list, nullable=False)

    customer = relationship("CustomerModel")
    origin = relationship("LocationModel", foreign_keys=[origin_id])
    destination = relationship("LocationModel", foreign_keys=[destination_id])
    lane = relationship("LaneModel")

    __table_args__ = (
        Index("idx_shipments_archived", "archived"),
        Index("idx_shipments_status", "status"),
        Index("idx_shipments_customer", "customer_id"),
        Index("idx_shipments_lane", "lane_id"),
    )
