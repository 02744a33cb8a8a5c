"""Unit tests for shipment entity state transitions (State Pattern)."""

import pytest

from tms.domain.entities import InvalidStateTransition, Shipment
from tms.domain.enums import ShipmentStatus


class TestShipmentStateMachine:
    def test_initial_status_is_draft(self):
        shipment = Shipment()
        assert shipment.status == ShipmentStatus.DRAFT

    # ── Valid transitions ─────────────────────────────────────────

    def test_draft_to_planned(self):
        shipment = Shipment(status=ShipmentStatus.DRAFT)
        shipment.transition_to(ShipmentStatus.PLANNED)
        assert shipment.status == ShipmentStatus.PLANNED

    def test_draft_to_cancelled(self):
        shipment = Shipment(status=ShipmentStatus.DRAFT)
        shipment.transition_to(ShipmentStatus.CANCELLED)
        assert shipment.status == ShipmentStatus.CANCELLED

    def test_planned_back_to_draft(self):
        shipment = Shipment(status=ShipmentStatus.PLANNED)
        shipment.transition_to(ShipmentStatus.DRAFT)
        assert shipment.status == ShipmentStatus.DRAFT

    def test_planned_to_in_transit(self):
        shipment = Shipment(status=ShipmentStatus.PLANNED)
        shipment.transition_to(ShipmentStatus.IN_TRANSIT)
        assert shipment.status == ShipmentStatus.IN_TRANSIT

    def test_in_transit_to_delivered(self):
        shipment = Shipment(status=ShipmentStatus.IN_TRANSIT)
        shipment.transition_to(ShipmentStatus.DELIVERED)
        assert shipment.status == ShipmentStatus.DELIVERED

    def test_same_status_is_noop(self):
        shipment = Shipment(status=ShipmentStatus.DELIVERED)
        shipment.transition_to(ShipmentStatus.DELIVERED)
        assert shipment.status == ShipmentStatus.DELIVERED

    # ── Invalid transitions ───────────────────────────────────────

    def test_draft_to_delivered_fails(self):
        shipment = Shipment(status=ShipmentStatus.DRAFT)
        with pytest.raises(InvalidStateTransition):
            shipment.transition_to(ShipmentStatus.DELIVERED)

    def test_in_transit_to_cancelled_fails(self):
        """Once the truck has left, the shipment can only be delivered."""
        shipment = Shipment(status=ShipmentStatus.IN_TRANSIT)
        with pytest.raises(InvalidStateTransition):
            shipment.transition_to(ShipmentStatus.CANCELLED)

    def test_delivered_is_terminal(self):
        shipment = Shipment(status=ShipmentStatus.DELIVERED)
        with pytest.raises(InvalidStateTransition):
            shipment.transition_to(ShipmentStatus.IN_TRANSIT)

    def test_cancelled_is_terminal(self):
        shipment = Shipment(status=ShipmentStatus.CANCELLED)
        with pytest.raises(InvalidStateTransition):
            shipment.transition_to(ShipmentStatus.DRAFT)

    def test_error_message_names_both_states(self):
        shipment = Shipment(status=ShipmentStatus.DRAFT)
        with pytest.raises(InvalidStateTransition, match="from draft to in_transit"):
            shipment.transition_to(ShipmentStatus.IN_TRANSIT)
        assert shipment.status == ShipmentStatus.DRAFT
