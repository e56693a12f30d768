import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from zexpos.db.session import get_db
from zexpos import models
from zexpos.core.security import get_current_user, require_manager, ensure_restaurant_access
from zexpos.schemas.orders import (
    OrderCreate,
    OrderUpdate,
    OrderOut,
    OrderStatusUpdate,
    OrderAction,
    OrderWithTicket,
    QuoteRequest,
    QuoteOut,
)
from zexpos.services.orders import (
    CartError,
    InvalidStatusTransition,
    apply_status,
    build_cart,
    cart_for_order,
    is_editable,
    next_order_number,
    recalculate,
    sync_items,
)
from zexpos.services.orders.cart import to_money
from zexpos.services.orders.lifecycle import CONFIRMED, COMPLETED, PENDING, occupy_table, release_table
from zexpos.services.orders.tickets import kitchen_ticket, additional_items_ticket

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/orders", tags=["orders"])


def get_order_for_user(db: Session, user: models.Staff, order_id: int) -> models.Order:
    order = db.get(models.Order, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    ensure_restaurant_access(db, user, order.restaurant_id)
    return order


def _check_table(db: Session, restaurant_id: int, table_id: Optional[int], order_id: Optional[int] = None) -> None:
    if table_id is None:
        return
    table = db.get(models.RestaurantTable, table_id)
    if not table or table.restaurant_id != restaurant_id:
        raise HTTPException(status_code=400, detail="Table does not belong to this restaurant")
    if table.current_order_id is not None and table.current_order_id != order_id:
        raise HTTPException(status_code=409, detail=f"Table {table.table_number} already has an open order")


@router.get("", response_model=List[OrderOut])
def list_orders(
    restaurant_id: int,
    status: Optional[str] = None,
    table_id: Optional[int] = None,
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    user: models.Staff = Depends(get_current_user),
):
    ensure_restaurant_access(db, user, restaurant_id)
    q = db.query(models.Order).filter(models.Order.restaurant_id == restaurant_id)
    if status:
        q = q.filter(models.Order.status == status)
    if table_id is not None:
        q = q.filter(models.Order.table_id == table_id)
    return q.order_by(models.Order.created_at.desc(), models.Order.id.desc()).offset(offset).limit(limit).all()


@router.post("/quote", response_model=QuoteOut)
def quote(
    payload: QuoteRequest,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(get_current_user),
):
    """running totals for the order-entry screen, nothing is stored"""
    restaurant = ensure_restaurant_access(db, user, payload.restaurant_id)
    try:
        cart = build_cart(db, restaurant, payload.items)
    except CartError as e:
        raise HTTPException(status_code=400, detail=str(e))

    totals = cart.totals(discount=payload.discount_amount)
    return QuoteOut(
        tax_rate=float(cart.tax_rate),
        lines=[line.dict() for line in cart.lines],
        **{k: float(v) for k, v in totals.dict().items()},
    )


@router.post("", response_model=OrderOut, status_code=201)
def create_order(
    payload: OrderCreate,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(get_current_user),
):
    restaurant = ensure_restaurant_access(db, user, payload.restaurant_id)
    _check_table(db, restaurant.id, payload.table_id)
    try:
        cart = build_cart(db, restaurant, payload.items)
    except CartError as e:
        raise HTTPException(status_code=400, detail=str(e))

    order = models.Order(
        restaurant_id=restaurant.id,
        table_id=payload.table_id,
        order_number=next_order_number(db, restaurant.id),
        customer_name=payload.customer_name,
        customer_phone=payload.customer_phone,
        order_type=payload.order_type,
        kitchen_notes=payload.kitchen_notes,
        status=PENDING,
        payment_status="pending",
        server_id=user.id,
    )
    sync_items(order, cart)
    recalculate(order, cart, discount=to_money(payload.discount_amount))
    db.add(order)
    db.flush()
    occupy_table(db, order)
    db.commit()
    db.refresh(order)

    logger.info("order %s (#%s) created for restaurant %s, total %s", order.id, order.order_number, restaurant.id, order.total_amount)
    return order


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(get_current_user),
):
    return get_order_for_user(db, user, order_id)


@router.put("/{order_id}", response_model=OrderWithTicket)
def update_order(
    order_id: int,
    payload: OrderUpdate,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(get_current_user),
):
    """edit an open order; a confirmed order gets an additional-items ticket"""
    order = get_order_for_user(db, user, order_id)
    if not is_editable(order):
        raise HTTPException(status_code=400, detail=f"Cannot edit a {order.status} order")

    data = payload.model_dump(exclude_unset=True)
    data.pop("items", None)

    if "table_id" in data and data["table_id"] != order.table_id:
        _check_table(db, order.restaurant_id, data["table_id"], order.id)
        release_table(db, order, "available")
        order.table_id = data.pop("table_id")
        occupy_table(db, order)
    else:
        data.pop("table_id", None)

    discount = data.pop("discount_amount", None)
    for field, value in data.items():
        setattr(order, field, value)

    previous = cart_for_order(order)
    cart = previous
    if payload.items is not None:
        if not payload.items:
            raise HTTPException(status_code=400, detail="An order needs at least one item")
        try:
            cart = build_cart(db, order.restaurant, payload.items)
        except CartError as e:
            raise HTTPException(status_code=400, detail=str(e))
        sync_items(order, cart)

    recalculate(order, cart, discount=to_money(discount) if discount is not None else None)

    ticket = None
    if order.status == CONFIRMED:
        added = cart.additions_since(previous)
        if added:
            ticket = additional_items_ticket(order, added)

    db.add(order)
    db.commit()
    db.refresh(order)
    return OrderWithTicket(order=order, ticket=ticket)


@router.delete("/{order_id}")
def delete_order(
    order_id: int,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(require_manager),
):
    order = get_order_for_user(db, user, order_id)
    if order.payment_status == "paid":
        raise HTTPException(status_code=400, detail="Paid orders cannot be deleted")

    release_table(db, order, "available")
    db.delete(order)
    db.commit()
    logger.info("order %s deleted by staff %s", order_id, user.id)
    return {"message": "Order deleted successfully"}


@router.put("/{order_id}/status", response_model=OrderOut)
def update_order_status(
    order_id: int,
    payload: OrderStatusUpdate,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(get_current_user),
):
    order = get_order_for_user(db, user, order_id)
    try:
        changed = apply_status(db, order, payload.status)
    except InvalidStatusTransition as e:
        raise HTTPException(status_code=400, detail=str(e))

    if changed:
        db.commit()
        db.refresh(order)
    return order


@router.post("/{order_id}/actions", response_model=OrderWithTicket)
def order_action(
    order_id: int,
    payload: OrderAction,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(get_current_user),
):
    """kitchen-side actions: send to kitchen, print add-ons, complete"""
    order = get_order_for_user(db, user, order_id)
    ticket = None
    try:
        if payload.action == "print_kitchen_ticket":
            apply_status(db, order, CONFIRMED)
            ticket = kitchen_ticket(order)
        elif payload.action == "print_additional_items":
            if order.status != CONFIRMED:
                raise HTTPException(status_code=400, detail="Additional items can only be printed for confirmed orders")
            if not payload.items:
                raise HTTPException(status_code=400, detail="No items to print")
            lines = build_cart(db, order.restaurant, payload.items).lines
            ticket = additional_items_ticket(order, lines)
        elif payload.action == "complete":
            apply_status(db, order, COMPLETED)
    except InvalidStatusTransition as e:
        raise HTTPException(status_code=400, detail=str(e))
    except CartError as e:
        raise HTTPException(status_code=400, detail=str(e))

    db.commit()
    db.refresh(order)
    return OrderWithTicket(order=order, ticket=ticket)
