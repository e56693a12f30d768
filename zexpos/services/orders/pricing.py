from typing import Iterable, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from zexpos import models
from zexpos.services.orders.cart import CartError, OrderCart, OrderTotals, resolve_tax_rate


def line_key(row: models.OrderItem) -> int:
    return row.menu_item_id if row.menu_item_id is not None else -row.id


def build_cart(db: Session, restaurant: models.Restaurant, items: Iterable, discount=None) -> OrderCart:
    """price request lines from the menu; client prices are never trusted

    `items` are objects with menu_item_id, quantity and special_instructions.
    """
    cart = OrderCart(tax_rate=resolve_tax_rate(restaurant))
    for entry in items:
        menu_item = db.get(models.MenuItem, entry.menu_item_id)
        if not menu_item or menu_item.restaurant_id != restaurant.id:
            raise CartError(f"Menu item {entry.menu_item_id} not found")
        if not menu_item.is_available:
            raise CartError(f"{menu_item.name} is not available")
        cart.add_item(
            menu_item_id=menu_item.id,
            name=menu_item.name,
            unit_price=menu_item.price,
            quantity=entry.quantity,
            special_instructions=entry.special_instructions,
        )
    return cart


def cart_for_order(order: models.Order) -> OrderCart:
    return OrderCart.from_order(order, tax_rate=resolve_tax_rate(order.restaurant))


def sync_items(order: models.Order, cart: OrderCart) -> None:
    """make the persisted lines match the cart, keeping rows that survive"""
    existing = {line_key(row): row for row in order.items}
    for key, row in existing.items():
        if key not in cart:
            order.items.remove(row)

    for line in cart.lines:
        row = existing.get(line.menu_item_id)
        if row is not None:
            row.quantity = line.quantity
            row.unit_price = line.unit_price
            row.total_price = line.total_price
            row.special_instructions = line.special_instructions
            continue
        order.items.append(models.OrderItem(
            menu_item_id=line.menu_item_id,
            name_snapshot=line.name,
            quantity=line.quantity,
            unit_price=line.unit_price,
            total_price=line.total_price,
            special_instructions=line.special_instructions,
        ))


def recalculate(order: models.Order, cart: Optional[OrderCart] = None, discount=None) -> OrderTotals:
    """recompute the stored subtotal, tax and total of an order"""
    if cart is None:
        cart = cart_for_order(order)
    if discount is None:
        discount = order.discount_amount or 0
    totals = cart.totals(discount=discount)
    totals.apply_to(order)
    return totals


def next_order_number(db: Session, restaurant_id: int) -> int:
    current = (
        db.query(func.max(models.Order.order_number))
        .filter(models.Order.restaurant_id == restaurant_id)
        .scalar()
    )
    return (current or 0) + 1
