from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from zexpos.db.session import get_db
from zexpos import models
from zexpos.core.security import get_current_user, ensure_restaurant_access
from zexpos.schemas.orders import OrderItemCreate, OrderItemUpdate, OrderItemOut, OrderOut
from zexpos.services.orders import CartError, build_cart, cart_for_order, is_editable, recalculate, sync_items
from zexpos.services.orders.pricing import line_key
from zexpos.api.v1.routers.orders import get_order_for_user

router = APIRouter(prefix="/order-items", tags=["orders"])


def _open_order(db: Session, user: models.Staff, order_id: int) -> models.Order:
    order = get_order_for_user(db, user, order_id)
    if not is_editable(order):
        raise HTTPException(status_code=400, detail=f"Cannot change items on a {order.status} order")
    return order


def _get_item(db: Session, user: models.Staff, item_id: int) -> models.OrderItem:
    item = db.get(models.OrderItem, item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Order item not found")
    ensure_restaurant_access(db, user, item.order.restaurant_id)
    return item


@router.get("", response_model=List[OrderItemOut])
def list_order_items(
    order_id: int,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(get_current_user),
):
    order = get_order_for_user(db, user, order_id)
    return order.items


@router.post("", response_model=OrderOut, status_code=201)
def add_order_item(
    payload: OrderItemCreate,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(get_current_user),
):
    """add a line, or bump the quantity of the line for the same menu item"""
    order = _open_order(db, user, payload.order_id)
    try:
        priced = build_cart(db, order.restaurant, [payload]).get(payload.menu_item_id)
    except CartError as e:
        raise HTTPException(status_code=400, detail=str(e))

    cart = cart_for_order(order)
    cart.add_item(
        menu_item_id=priced.menu_item_id,
        name=priced.name,
        unit_price=priced.unit_price,
        quantity=priced.quantity,
        special_instructions=priced.special_instructions,
    )
    sync_items(order, cart)
    recalculate(order, cart)

    db.add(order)
    db.commit()
    db.refresh(order)
    return order


@router.put("/{item_id}", response_model=OrderOut)
def update_order_item(
    item_id: int,
    payload: OrderItemUpdate,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(get_current_user),
):
    """change quantity (0 removes the line), instructions or kitchen status"""
    item = _get_item(db, user, item_id)
    order = item.order
    data = payload.model_dump(exclude_unset=True)

    if "quantity" in data or "special_instructions" in data:
        if not is_editable(order):
            raise HTTPException(status_code=400, detail=f"Cannot change items on a {order.status} order")
        cart = cart_for_order(order)
        key = line_key(item)
        if "special_instructions" in data:
            cart.set_instructions(key, data["special_instructions"])
        if data.get("quantity") is not None:
            cart.set_quantity(key, data["quantity"])
        sync_items(order, cart)
        recalculate(order, cart)

    if data.get("status") and item in order.items:
        item.status = data["status"]

    db.add(order)
    db.commit()
    db.refresh(order)
    return order


@router.delete("/{item_id}", response_model=OrderOut)
def delete_order_item(
    item_id: int,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(get_current_user),
):
    item = _get_item(db, user, item_id)
    order = item.order
    if not is_editable(order):
        raise HTTPException(status_code=400, detail=f"Cannot change items on a {order.status} order")

    cart = cart_for_order(order)
    cart.remove_item(line_key(item))
    sync_items(order, cart)
    recalculate(order, cart)

    db.add(order)
    db.commit()
    db.refresh(order)
    return order
