from .cart import CartError, CartLine, OrderCart, OrderTotals, compute_totals, resolve_tax_rate, to_money
from .lifecycle import InvalidStatusTransition, apply_status, can_transition, is_editable
from .pricing import build_cart, cart_for_order, next_order_number, recalculate, sync_items

__all__ = [
    "CartError",
    "CartLine",
    "OrderCart",
    "OrderTotals",
    "compute_totals",
    "resolve_tax_rate",
    "to_money",
    "InvalidStatusTransition",
    "apply_status",
    "can_transition",
    "is_editable",
    "build_cart",
    "cart_for_order",
    "next_order_number",
    "recalculate",
    "sync_items",
]
