"""
Tests for order status transitions and table coupling.
"""

from decimal import Decimal

import pytest

from zexpos import models
from zexpos.services.orders.lifecycle import (
    InvalidStatusTransition,
    apply_status,
    can_transition,
    occupy_table,
    release_table,
)


@pytest.fixture
def order(db, restaurant, table):
    order = models.Order(
        restaurant_id=restaurant.id,
        table_id=table.id,
        order_number=1,
        subtotal=Decimal("10.00"),
        tax_amount=Decimal("1.00"),
        total_amount=Decimal("11.00"),
    )
    db.add(order)
    db.flush()
    occupy_table(db, order)
    db.commit()
    return order


class TestCanTransition:
    """The allowed status graph."""

    @pytest.mark.parametrize("current,target", [
        ("pending", "confirmed"),
        ("pending", "cancelled"),
        ("confirmed", "completed"),
        ("confirmed", "cancelled"),
        ("pending", "pending"),
        ("completed", "completed"),
    ])
    def test_allowed(self, current, target):
        assert can_transition(current, target)

    @pytest.mark.parametrize("current,target", [
        ("pending", "completed"),
        ("confirmed", "pending"),
        ("completed", "cancelled"),
        ("completed", "pending"),
        ("cancelled", "confirmed"),
        ("cancelled", "pending"),
    ])
    def test_rejected(self, current, target):
        assert not can_transition(current, target)


class TestApplyStatus:
    """Applying transitions to persisted orders."""

    def test_creating_on_table_occupies_it(self, db, order, table):
        assert table.status == "occupied"
        assert table.current_order_id == order.id

    def test_confirm_then_complete(self, db, order, table):
        assert apply_status(db, order, "confirmed") is True
        assert order.completed_at is None
        assert apply_status(db, order, "completed") is True
        db.commit()

        assert order.status == "completed"
        assert order.completed_at is not None
        assert table.status == "cleaning"
        assert table.current_order_id is None

    def test_cancel_frees_table(self, db, order, table):
        apply_status(db, order, "cancelled")
        db.commit()
        assert table.status == "available"
        assert table.current_order_id is None

    def test_same_status_is_noop(self, db, order):
        assert apply_status(db, order, "pending") is False
        assert order.status == "pending"

    def test_skipping_confirmation_fails(self, db, order):
        with pytest.raises(InvalidStatusTransition) as exc:
            apply_status(db, order, "completed")
        assert exc.value.current == "pending"
        assert order.status == "pending"

    def test_terminal_states(self, db, order):
        apply_status(db, order, "cancelled")
        with pytest.raises(InvalidStatusTransition):
            apply_status(db, order, "confirmed")

    def test_unknown_status(self, db, order):
        with pytest.raises(InvalidStatusTransition):
            apply_status(db, order, "served")

    def test_table_taken_by_other_order_is_left_alone(self, db, order, table):
        table.current_order_id = order.id + 100
        db.commit()
        apply_status(db, order, "cancelled")
        assert table.status == "occupied"

    def test_released_table_is_not_touched_again(self, db, order, table):
        apply_status(db, order, "cancelled")
        table.status = "reserved"
        db.commit()

        release_table(db, order, "available")
        assert table.status == "reserved"
        assert table.current_order_id is None
