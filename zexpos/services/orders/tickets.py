from datetime import datetime
from typing import Iterable, Optional

from zexpos import models
from zexpos.services.orders.cart import CartLine


KITCHEN = "kitchen"
ADDITIONAL = "additional"


def _ticket_line(name: str, quantity: int, special_instructions: Optional[str]) -> dict:
    return {
        "name": name,
        "quantity": quantity,
        "special_instructions": special_instructions,
    }


def _ticket(order: models.Order, ticket_type: str, items: list) -> dict:
    table = order.table
    return {
        "ticket_type": ticket_type,
        "order_id": order.id,
        "order_number": order.order_number,
        "order_type": order.order_type,
        "table_number": table.table_number if table else None,
        "table_name": table.table_name if table else None,
        "customer_name": order.customer_name,
        "kitchen_notes": order.kitchen_notes,
        "items": items,
        "printed_at": datetime.utcnow().isoformat(),
    }


def kitchen_ticket(order: models.Order) -> dict:
    """full ticket for every line on the order"""
    items = [_ticket_line(i.name_snapshot, i.quantity, i.special_instructions) for i in order.items]
    return _ticket(order, KITCHEN, items)


def additional_items_ticket(order: models.Order, lines: Iterable[CartLine]) -> dict:
    """ticket for lines added after the kitchen already has the order"""
    items = [_ticket_line(line.name, line.quantity, line.special_instructions) for line in lines]
    return _ticket(order, ADDITIONAL, items)
