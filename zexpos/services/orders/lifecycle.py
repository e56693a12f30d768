import logging
from datetime import datetime

from sqlalchemy.orm import Session

from zexpos import models


logger = logging.getLogger(__name__)

PENDING = "pending"
CONFIRMED = "confirmed"
COMPLETED = "completed"
CANCELLED = "cancelled"

ORDER_STATUSES = (PENDING, CONFIRMED, COMPLETED, CANCELLED)

TRANSITIONS = {
    PENDING: {CONFIRMED, CANCELLED},
    CONFIRMED: {COMPLETED, CANCELLED},
    COMPLETED: set(),
    CANCELLED: set(),
}

# statuses whose lines can still change
EDITABLE_STATUSES = (PENDING, CONFIRMED)

TABLE_STATUSES = ("available", "occupied", "reserved", "cleaning")


class InvalidStatusTransition(ValueError):
    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot change order status from {current} to {target}")


def can_transition(current: str, target: str) -> bool:
    if current == target:
        return True
    return target in TRANSITIONS.get(current, set())


def is_editable(order: models.Order) -> bool:
    return order.status in EDITABLE_STATUSES


def occupy_table(db: Session, order: models.Order) -> None:
    """mark the order's table as taken by it"""
    if order.table_id is None:
        return
    table = db.get(models.RestaurantTable, order.table_id)
    if table is None:
        return
    table.status = "occupied"
    table.current_order_id = order.id
    db.add(table)


def release_table(db: Session, order: models.Order, table_status: str) -> None:
    if order.table_id is None:
        return
    table = db.get(models.RestaurantTable, order.table_id)
    # only the order holding the table may release it
    if table is None or table.current_order_id != order.id:
        return
    table.status = table_status
    table.current_order_id = None
    db.add(table)


def apply_status(db: Session, order: models.Order, target: str) -> bool:
    """move an order to a new status; returns False when nothing changed.

    raises InvalidStatusTransition for anything outside the allowed graph.
    """
    if target not in ORDER_STATUSES:
        raise InvalidStatusTransition(order.status, target)
    if order.status == target:
        return False
    if not can_transition(order.status, target):
        raise InvalidStatusTransition(order.status, target)

    previous = order.status
    order.status = target
    if target == COMPLETED:
        order.completed_at = datetime.utcnow()
        release_table(db, order, "cleaning")
    elif target == CANCELLED:
        release_table(db, order, "available")
    db.add(order)

    logger.info("order %s (#%s) status %s -> %s", order.id, order.order_number, previous, target)
    return True
