import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from zexpos.db.session import get_db
from zexpos import models
from zexpos.core.security import PAYMENT_ROLES, get_current_user, require_roles, ensure_restaurant_access
from zexpos.schemas.receipts import ReceiptCreate, ReceiptOut
from zexpos.services.orders import apply_status
from zexpos.services.orders.lifecycle import CONFIRMED, COMPLETED
from zexpos.services.receipts import PaymentError, build_receipt_data, generate_receipt_number, resolve_payment
from zexpos.services.receipts.builder import RECEIPT_TYPES
from zexpos.api.v1.routers.orders import get_order_for_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/receipts", tags=["receipts"])


@router.get("", response_model=List[ReceiptOut])
def list_receipts(
    restaurant_id: int,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    receipt_type: Optional[str] = Query(None, description="payment, refund or void"),
    db: Session = Depends(get_db),
    user: models.Staff = Depends(get_current_user),
):
    ensure_restaurant_access(db, user, restaurant_id)
    if receipt_type and receipt_type not in RECEIPT_TYPES:
        raise HTTPException(status_code=400, detail=f"receipt_type must be one of: {', '.join(RECEIPT_TYPES)}")

    q = db.query(models.Receipt).filter(models.Receipt.restaurant_id == restaurant_id)
    if date_from:
        q = q.filter(models.Receipt.generated_at >= date_from)
    if date_to:
        q = q.filter(models.Receipt.generated_at <= date_to)
    if receipt_type:
        q = q.filter(models.Receipt.receipt_type == receipt_type)
    return q.order_by(models.Receipt.generated_at.desc(), models.Receipt.id.desc()).all()


@router.post("", response_model=ReceiptOut, status_code=201)
def create_receipt(
    payload: ReceiptCreate,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(require_roles(*PAYMENT_ROLES)),
):
    """take payment for an order and snapshot its receipt"""
    order = get_order_for_user(db, user, payload.order_id)
    if order.status not in (CONFIRMED, COMPLETED):
        raise HTTPException(status_code=400, detail=f"Cannot take payment for a {order.status} order")
    if order.payment_status == "paid":
        raise HTTPException(status_code=409, detail="Order is already paid")

    try:
        payment = resolve_payment(
            payload.payment_method,
            order.total_amount,
            amount_tendered=payload.amount_tendered,
            payment_reference=payload.payment_reference,
        )
    except PaymentError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if order.status == CONFIRMED:
        apply_status(db, order, COMPLETED)
    order.payment_status = "paid"
    order.payment_method = payment.method
    db.add(order)

    receipt = models.Receipt(
        order_id=order.id,
        restaurant_id=order.restaurant_id,
        receipt_number=generate_receipt_number(),
        generated_at=datetime.utcnow(),
        generated_by=user.id,
        receipt_type="payment",
        receipt_data=build_receipt_data(order, order.restaurant, payment),
    )
    db.add(receipt)
    db.commit()
    db.refresh(receipt)

    logger.info("receipt %s for order %s (%s %s)", receipt.receipt_number, order.id, payment.method, order.total_amount)
    return receipt


@router.get("/by-order/{order_id}", response_model=ReceiptOut)
def get_receipt_by_order(
    order_id: int,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(get_current_user),
):
    """latest receipt for an order"""
    get_order_for_user(db, user, order_id)
    receipt = (
        db.query(models.Receipt)
        .filter(models.Receipt.order_id == order_id)
        .order_by(models.Receipt.generated_at.desc(), models.Receipt.id.desc())
        .first()
    )
    if not receipt:
        raise HTTPException(status_code=404, detail="No receipt found for this order")
    return receipt


@router.get("/{receipt_id}", response_model=ReceiptOut)
def get_receipt(
    receipt_id: int,
    db: Session = Depends(get_db),
    user: models.Staff = Depends(get_current_user),
):
    receipt = db.get(models.Receipt, receipt_id)
    if not receipt:
        raise HTTPException(status_code=404, detail="Receipt not found")
    ensure_restaurant_access(db, user, receipt.restaurant_id)
    return receipt
