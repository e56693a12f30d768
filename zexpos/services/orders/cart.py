from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional

from zexpos.core.config import settings


CENTS = Decimal('0.01')


class CartError(ValueError):
    pass


def to_money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


class OrderTotals:
    def __init__(self, subtotal: Decimal, tax_amount: Decimal, discount_amount: Decimal, total_amount: Decimal):
        self.subtotal = subtotal
        self.tax_amount = tax_amount
        self.discount_amount = discount_amount
        self.total_amount = total_amount

    def dict(self):
        return {
            "subtotal": self.subtotal,
            "tax_amount": self.tax_amount,
            "discount_amount": self.discount_amount,
            "total_amount": self.total_amount,
        }

    def apply_to(self, order) -> None:
        order.subtotal = self.subtotal
        order.tax_amount = self.tax_amount
        order.discount_amount = self.discount_amount
        order.total_amount = self.total_amount


def compute_totals(line_totals: Iterable, tax_rate, discount=Decimal('0')) -> OrderTotals:
    """subtotal, tax and total for a set of line totals"""
    subtotal = to_money(sum((Decimal(str(t)) for t in line_totals), Decimal('0')))
    tax = to_money(subtotal * Decimal(str(tax_rate)))
    gross = subtotal + tax

    discount = to_money(discount or 0)
    discount = min(max(Decimal('0.00'), discount), gross)

    total = max(Decimal('0.00'), gross - discount)
    return OrderTotals(subtotal=subtotal, tax_amount=tax, discount_amount=discount, total_amount=total)


def resolve_tax_rate(restaurant=None) -> Decimal:
    if restaurant is not None and restaurant.tax_rate is not None:
        return Decimal(str(restaurant.tax_rate))
    return settings.TAX_RATE


class CartLine:
    def __init__(self, menu_item_id: int, name: str, unit_price, quantity: int = 1, special_instructions: Optional[str] = None):
        unit_price = to_money(unit_price)
        if unit_price < 0:
            raise CartError("unit price must not be negative")
        self.menu_item_id = menu_item_id
        self.name = name
        self.unit_price = unit_price
        self.quantity = quantity
        self.special_instructions = special_instructions

    @property
    def total_price(self) -> Decimal:
        return to_money(self.unit_price * self.quantity)

    def copy(self, quantity: Optional[int] = None) -> "CartLine":
        return CartLine(
            menu_item_id=self.menu_item_id,
            name=self.name,
            unit_price=self.unit_price,
            quantity=self.quantity if quantity is None else quantity,
            special_instructions=self.special_instructions,
        )

    def dict(self):
        return {
            "menu_item_id": self.menu_item_id,
            "name": self.name,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
            "total_price": self.total_price,
            "special_instructions": self.special_instructions,
        }


class OrderCart:
    """order lines keyed by menu item, in insertion order"""

    def __init__(self, tax_rate=None, lines: Iterable[CartLine] = ()):
        self.tax_rate = Decimal(str(tax_rate)) if tax_rate is not None else settings.TAX_RATE
        self._lines: dict = {}
        for line in lines:
            self._put(line)

    def _put(self, line: CartLine) -> None:
        if line.quantity <= 0:
            return
        existing = self._lines.get(line.menu_item_id)
        if existing:
            existing.quantity += line.quantity
        else:
            self._lines[line.menu_item_id] = line

    @property
    def lines(self) -> List[CartLine]:
        return list(self._lines.values())

    def __len__(self) -> int:
        return len(self._lines)

    def __contains__(self, menu_item_id) -> bool:
        return menu_item_id in self._lines

    def get(self, menu_item_id) -> CartLine:
        line = self._lines.get(menu_item_id)
        if line is None:
            raise CartError(f"menu item {menu_item_id} is not in the cart")
        return line

    def add_item(self, menu_item_id: int, name: str, unit_price, quantity: int = 1, special_instructions: Optional[str] = None) -> CartLine:
        if quantity <= 0:
            raise CartError("quantity must be positive")
        existing = self._lines.get(menu_item_id)
        if existing:
            existing.quantity += quantity
            if special_instructions:
                existing.special_instructions = special_instructions
            return existing
        line = CartLine(menu_item_id, name, unit_price, quantity, special_instructions)
        self._lines[menu_item_id] = line
        return line

    def set_quantity(self, menu_item_id: int, quantity: int) -> Optional[CartLine]:
        line = self.get(menu_item_id)
        if quantity <= 0:
            del self._lines[menu_item_id]
            return None
        line.quantity = quantity
        return line

    def remove_item(self, menu_item_id: int) -> None:
        self.get(menu_item_id)
        del self._lines[menu_item_id]

    def set_instructions(self, menu_item_id: int, text: Optional[str]) -> CartLine:
        line = self.get(menu_item_id)
        line.special_instructions = text or None
        return line

    def clear(self) -> None:
        self._lines.clear()

    def totals(self, discount=Decimal('0')) -> OrderTotals:
        return compute_totals((line.total_price for line in self._lines.values()), self.tax_rate, discount)

    def additions_since(self, previous: "OrderCart") -> List[CartLine]:
        """lines added, or grown in quantity, relative to an earlier cart"""
        added = []
        for key, line in self._lines.items():
            before = previous._lines.get(key)
            delta = line.quantity - (before.quantity if before else 0)
            if delta > 0:
                added.append(line.copy(quantity=delta))
        return added

    @classmethod
    def from_order(cls, order, tax_rate=None) -> "OrderCart":
        cart = cls(tax_rate=tax_rate)
        for item in order.items:
            # items whose menu entry was deleted keep a negative key
            key = item.menu_item_id if item.menu_item_id is not None else -item.id
            cart._put(CartLine(
                menu_item_id=key,
                name=item.name_snapshot,
                unit_price=item.unit_price,
                quantity=item.quantity,
                special_instructions=item.special_instructions,
            ))
        return cart
