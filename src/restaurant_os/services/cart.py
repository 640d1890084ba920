from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional


@dataclass
class CartLine:
    item_id: str
    name: str
    price: Decimal
    quantity: int = 1
    notes: Optional[str] = None

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity

    def to_dict(self) -> dict:
        # JSON snapshot stored on the order row
        return {
            "item_id": self.item_id,
            "name": self.name,
            "price": str(self.price),
            "quantity": self.quantity,
            "notes": self.notes,
        }


class Cart:
    """
    Client-side cart before it becomes an order.
    Lines keep insertion order; a line whose quantity drops to 0 is removed.
    """

    def __init__(self):
        self._lines: dict[str, CartLine] = {}

    @classmethod
    def from_lines(cls, lines: Iterable[dict]) -> "Cart":
        cart = cls()
        for line in lines:
            cart.add(
                line["item_id"],
                line["name"],
                line["price"],
                quantity=line.get("quantity", 1),
                notes=line.get("notes"),
            )
        return cart

    def add(self, item_id: str, name: str, price, quantity: int = 1, notes: Optional[str] = None) -> None:
        if quantity < 1:
            raise ValueError("quantity must be >= 1")

        line = self._lines.get(item_id)
        if line:
            line.quantity += quantity
            if notes:
                line.notes = notes
            return

        self._lines[item_id] = CartLine(
            item_id=item_id,
            name=name,
            price=Decimal(str(price)),
            quantity=quantity,
            notes=notes or None,
        )

    def set_quantity(self, item_id: str, quantity: int) -> None:
        if quantity <= 0:
            self._lines.pop(item_id, None)
            return
        if item_id not in self._lines:
            raise KeyError(item_id)
        self._lines[item_id].quantity = quantity

    def remove(self, item_id: str) -> None:
        self._lines.pop(item_id, None)

    def update_notes(self, item_id: str, notes: Optional[str]) -> None:
        if item_id not in self._lines:
            raise KeyError(item_id)
        self._lines[item_id].notes = notes or None

    def quantity_of(self, item_id: str) -> int:
        line = self._lines.get(item_id)
        return line.quantity if line else 0

    def clear(self) -> None:
        self._lines.clear()

    @property
    def lines(self) -> list[CartLine]:
        return list(self._lines.values())

    @property
    def is_empty(self) -> bool:
        return not self._lines

    @property
    def subtotal(self) -> Decimal:
        return sum((line.line_total for line in self._lines.values()), Decimal("0"))

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    def __len__(self) -> int:
        return len(self._lines)
