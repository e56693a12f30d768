import random
import time
from datetime import datetime
from decimal import Decimal
from typing import Optional

from zexpos import models
from zexpos.core.config import settings
from zexpos.services.orders.cart import to_money


PAYMENT_METHODS = ("cash", "card", "digital_wallet")
RECEIPT_TYPES = ("payment", "refund", "void")


class PaymentError(ValueError):
    pass


class PaymentDetails:
    def __init__(self, method: str, amount_tendered: Decimal, change_amount: Decimal, payment_reference: Optional[str] = None):
        self.method = method
        self.amount_tendered = amount_tendered
        self.change_amount = change_amount
        self.payment_reference = payment_reference

    def dict(self):
        data = {
            "method": self.method,
            "amount_tendered": float(self.amount_tendered),
            "change_amount": float(self.change_amount),
        }
        if self.payment_reference:
            data["payment_reference"] = self.payment_reference
        return data


def generate_receipt_number() -> str:
    """RCP + epoch millis + 3 random digits"""
    timestamp = int(time.time() * 1000)
    return f"RCP{timestamp}{random.randint(0, 999):03d}"


def resolve_payment(method: str, total, amount_tendered=None, payment_reference: Optional[str] = None) -> PaymentDetails:
    if method not in PAYMENT_METHODS:
        raise PaymentError(f"Unsupported payment method: {method}")
    total = to_money(total)

    if method == "cash":
        if amount_tendered is None:
            raise PaymentError("Amount tendered is required for cash payments")
        tendered = to_money(amount_tendered)
        if tendered < total:
            raise PaymentError("Amount tendered is less than the order total")
        return PaymentDetails(method, tendered, tendered - total, payment_reference)

    # card and wallet are charged the exact total
    return PaymentDetails(method, total, Decimal('0.00'), payment_reference)


def _money(value) -> float:
    return float(to_money(value or 0))


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def build_receipt_data(order: models.Order, restaurant: models.Restaurant, payment: PaymentDetails) -> dict:
    """snapshot of everything printed on the receipt, stored as JSON"""
    table = order.table
    data = {
        "restaurant": {
            "name": restaurant.name,
            "address": restaurant.address,
            "phone": restaurant.phone,
            "email": restaurant.email,
            "logo_url": restaurant.logo_url,
            "currency": restaurant.currency or settings.DEFAULT_CURRENCY,
        },
        "order": {
            "order_number": order.order_number,
            "table_number": str(table.table_number) if table else None,
            "table_name": table.table_name if table else None,
            "server_name": order.server.full_name if order.server else None,
            "order_type": order.order_type,
            "created_at": _iso(order.created_at),
            "completed_at": _iso(order.completed_at or datetime.utcnow()),
        },
        "items": [
            {
                "name": item.name_snapshot or "Unknown Item",
                "quantity": item.quantity,
                "unit_price": _money(item.unit_price),
                "total_price": _money(item.total_price),
                "special_instructions": item.special_instructions,
            }
            for item in order.items
        ],
        "summary": {
            "subtotal": _money(order.subtotal),
            "tax_amount": _money(order.tax_amount),
            "discount_amount": _money(order.discount_amount),
            "total_amount": _money(order.total_amount),
        },
        "payment": payment.dict(),
        "footer": {
            "thank_you_message": settings.RECEIPT_THANK_YOU,
            "return_policy": settings.RECEIPT_RETURN_POLICY,
        },
    }
    if order.customer_name:
        data["customer"] = {
            "name": order.customer_name,
            "phone": order.customer_phone,
        }
    return data
