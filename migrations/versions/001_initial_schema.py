"""Initial schema with all core TMS tables.

Revision ID: 001
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa


revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    ]


def _archive_flags() -> list[sa.Column]:
    return [
        sa.Column("archived", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("archived_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    # ── customers ─────────────────────────────────────────────────────
    op.create_table(
        "customers",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("contact_email", sa.String(255), nullable=True),
        *_archive_flags(),
        *_timestamps(),
    )
    op.create_index("idx_customers_archived", "customers", ["archived"])

    # ── locations ─────────────────────────────────────────────────────
    op.create_table(
        "locations",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("address1", sa.String(255), nullable=False),
        sa.Column("address2", sa.String(255), nullable=True),
        sa.Column("city", sa.String(120), nullable=False),
        sa.Column("state", sa.String(120), nullable=True),
        sa.Column("postal_code", sa.String(20), nullable=True),
        sa.Column("country", sa.String(60), nullable=False),
        sa.Column("lat", sa.Float, nullable=True),
        sa.Column("lng", sa.Float, nullable=True),
        *_archive_flags(),
        *_timestamps(),
    )
    op.create_index("idx_locations_archived", "locations", ["archived"])

    # ── carriers ──────────────────────────────────────────────────────
    op.create_table(
        "carriers",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("mc_number", sa.String(20), nullable=True),
        sa.Column("dot_number", sa.String(20), nullable=True),
        sa.Column("contact_name", sa.String(120), nullable=True),
        sa.Column("contact_email", sa.String(255), nullable=True),
        sa.Column("contact_phone", sa.String(40), nullable=True),
        *_timestamps(),
    )

    # ── lanes ─────────────────────────────────────────────────────────
    op.create_table(
        "lanes",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column(
            "origin_id", sa.Integer, sa.ForeignKey("locations.id"), nullable=False
        ),
        sa.Column(
            "destination_id",
            sa.Integer,
            sa.ForeignKey("locations.id"),
            nullable=False,
        ),
        sa.Column("distance", sa.Float, nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column(
            "status",
            sa.Enum("ACTIVE", "INACTIVE", name="lanestatus"),
            nullable=False,
            server_default="ACTIVE",
        ),
        *_archive_flags(),
        *_timestamps(),
    )
    op.create_index("idx_lanes_archived", "lanes", ["archived"])
    op.create_index("idx_lanes_origin", "lanes", ["origin_id"])
    op.create_index("idx_lanes_destination", "lanes", ["destination_id"])

    # ── lane_stops ────────────────────────────────────────────────────
    op.create_table(
        "lane_stops",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "lane_id",
            sa.Integer,
            sa.ForeignKey("lanes.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "location_id", sa.Integer, sa.ForeignKey("locations.id"), nullable=False
        ),
        sa.Column("order", sa.Integer, nullable=False),
        sa.Column("notes", sa.Text, nullable=True),
        sa.UniqueConstraint("lane_id", "order", name="uq_lane_stops_order"),
    )

    # ── customer_lanes ────────────────────────────────────────────────
    op.create_table(
        "customer_lanes",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "lane_id",
            sa.Integer,
            sa.ForeignKey("lanes.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "customer_id", sa.Integer, sa.ForeignKey("customers.id"), nullable=False
        ),
        *_timestamps(),
        sa.UniqueConstraint("lane_id", "customer_id", name="uq_customer_lanes"),
    )

    # ── lane_carriers ─────────────────────────────────────────────────
    op.create_table(
        "lane_carriers",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "lane_id",
            sa.Integer,
            sa.ForeignKey("lanes.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "carrier_id",
            sa.Integer,
            sa.ForeignKey("carriers.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("price", sa.Float, nullable=True),
        sa.Column("currency", sa.String(3), nullable=False, server_default="USD"),
        sa.Column("service_level", sa.String(60), nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("lane_id", "carrier_id", name="uq_lane_carriers"),
    )

    # ── shipments ─────────────────────────────────────────────────────
    op.create_table(
        "shipments",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("reference", sa.String(120), nullable=False),
        sa.Column(
            "customer_id", sa.Integer, sa.ForeignKey("customers.id"), nullable=False
        ),
        sa.Column("lane_id", sa.Integer, sa.ForeignKey("lanes.id"), nullable=True),
        sa.Column(
            "origin_id", sa.Integer, sa.ForeignKey("locations.id"), nullable=False
        ),
        sa.Column(
            "destination_id",
            sa.Integer,
            sa.ForeignKey("locations.id"),
            nullable=False,
        ),
        sa.Column("pickup_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("delivery_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "status",
            sa.Enum(
                "DRAFT",
                "PLANNED",
                "IN_TRANSIT",
                "DELIVERED",
                "CANCELLED",
                name="shipmentstatus",
            ),
            nullable=False,
            server_default="DRAFT",
        ),
        sa.Column("items", sa.JSON, nullable=False),
        *_archive_flags(),
        *_timestamps(),
    )
    op.create_index("idx_shipments_archived", "shipments", ["archived"])
    op.create_index("idx_shipments_status", "shipments", ["status"])
    op.create_index("idx_shipments_customer", "shipments", ["customer_id"])
    op.create_index("idx_shipments_lane", "shipments", ["lane_id"])


def downgrade() -> None:
    op.drop_table("shipments")
    op.drop_table("lane_carriers")
    op.drop_table("customer_lanes")
    op.drop_table("lane_stops")
    op.drop_table("lanes")
    op.drop_table("carriers")
    op.drop_table("locations")
    op.drop_table("customers")
    op.execute("DROP TYPE IF EXISTS shipmentstatus")
    op.execute("DROP TYPE IF EXISTS lanestatus")
