"""
Tests for receipt numbers, payment resolution and receipt snapshots.
"""

import re
from datetime import datetime
from decimal import Decimal

import pytest

from zexpos import models
from zexpos.services.receipts.builder import (
    PaymentError,
    build_receipt_data,
    generate_receipt_number,
    resolve_payment,
)


class TestReceiptNumber:
    def test_format(self):
        assert re.fullmatch(r"RCP\d{13}\d{3}", generate_receipt_number())


class TestResolvePayment:
    """Cash change and non-cash defaults."""

    def test_cash_change(self):
        payment = resolve_payment("cash", Decimal("31.90"), amount_tendered=50)
        assert payment.amount_tendered == Decimal("50.00")
        assert payment.change_amount == Decimal("18.10")

    def test_cash_exact(self):
        payment = resolve_payment("cash", Decimal("31.90"), amount_tendered="31.90")
        assert payment.change_amount == Decimal("0.00")

    def test_cash_short(self):
        with pytest.raises(PaymentError):
            resolve_payment("cash", Decimal("31.90"), amount_tendered=30)

    def test_cash_requires_tendered(self):
        with pytest.raises(PaymentError):
            resolve_payment("cash", Decimal("31.90"))

    @pytest.mark.parametrize("method", ["card", "digital_wallet"])
    def test_non_cash_charges_total(self, method):
        payment = resolve_payment(method, Decimal("31.90"), amount_tendered=100, payment_reference="txn-1")
        assert payment.amount_tendered == Decimal("31.90")
        assert payment.change_amount == Decimal("0.00")
        assert payment.dict()["payment_reference"] == "txn-1"

    def test_unknown_method(self):
        with pytest.raises(PaymentError):
            resolve_payment("cheque", Decimal("1.00"))


class TestBuildReceiptData:
    """The JSON snapshot stored with each receipt."""

    @pytest.fixture
    def order(self, db, restaurant, table, server):
        order = models.Order(
            restaurant_id=restaurant.id,
            table_id=table.id,
            order_number=7,
            order_type="dine_in",
            status="completed",
            server_id=server.id,
            subtotal=Decimal("29.00"),
            tax_amount=Decimal("2.90"),
            discount_amount=Decimal("0.00"),
            total_amount=Decimal("31.90"),
            completed_at=datetime(2026, 1, 1, 12, 0),
        )
        order.items.append(models.OrderItem(
            menu_item_id=None, name_snapshot="Burger", quantity=2,
            unit_price=Decimal("12.50"), total_price=Decimal("25.00"), special_instructions="no onions",
        ))
        order.items.append(models.OrderItem(
            menu_item_id=None, name_snapshot="Fries", quantity=1,
            unit_price=Decimal("4.00"), total_price=Decimal("4.00"),
        ))
        db.add(order)
        db.commit()
        return order

    def test_sections(self, order, restaurant):
        payment = resolve_payment("cash", order.total_amount, amount_tendered=40)
        data = build_receipt_data(order, restaurant, payment)

        assert set(data) == {"restaurant", "order", "items", "summary", "payment", "footer"}
        assert data["restaurant"]["name"] == "Harbor Grill"
        assert data["order"]["order_number"] == 7
        assert data["order"]["table_number"] == "5"
        assert data["order"]["server_name"] == "Test Server"
        assert data["order"]["completed_at"] == "2026-01-01T12:00:00"
        assert data["items"][0] == {
            "name": "Burger",
            "quantity": 2,
            "unit_price": 12.5,
            "total_price": 25.0,
            "special_instructions": "no onions",
        }
        assert data["summary"] == {
            "subtotal": 29.0,
            "tax_amount": 2.9,
            "discount_amount": 0.0,
            "total_amount": 31.9,
        }
        assert data["payment"] == {"method": "cash", "amount_tendered": 40.0, "change_amount": 8.1}
        assert data["footer"]["thank_you_message"] == "Thank you for dining with us!"

    def test_customer_section_only_with_name(self, db, order, restaurant):
        payment = resolve_payment("card", order.total_amount)
        assert "customer" not in build_receipt_data(order, restaurant, payment)

        order.customer_name = "Dana"
        order.customer_phone = "555-0199"
        data = build_receipt_data(order, restaurant, payment)
        assert data["customer"] == {"name": "Dana", "phone": "555-0199"}
