from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional

from shopeasy.app.models import CartLine, Product, ProductId

CENTS = Decimal("0.01")


def format_amount(amount: Decimal) -> str:
    return str(amount.quantize(CENTS, rounding=ROUND_HALF_UP))


class Cart:
    """Insertion-ordered product id -> CartLine.

    Quantities are trusted to be whole numbers; the UI only ever sends +1/-1
    steps or an explicit removal.
    """

    def __init__(self, lines: Iterable[CartLine] = ()) -> None:
        self._lines: Dict[ProductId, CartLine] = {}
        for line in lines:
            if line.quantity > 0:
                self._lines[line.product.id] = line

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[CartLine]:
        return iter(self._lines.values())

    @property
    def lines(self) -> List[CartLine]:
        return list(self._lines.values())

    def get(self, product_id: ProductId) -> Optional[CartLine]:
        return self._lines.get(product_id)

    def resolve_id(self, raw: str) -> Optional[ProductId]:
        """Map an id taken from a URL back to the id the line is stored under."""
        for product_id in self._lines:
            if str(product_id) == raw:
                return product_id
        return None

    def add(self, product: Product) -> CartLine:
        existing = self._lines.get(product.id)
        quantity = existing.quantity + 1 if existing else 1
        # dict assignment keeps an existing key in place
        line = CartLine(product=product, quantity=quantity)
        self._lines[product.id] = line
        return line

    def set_quantity(self, product_id: ProductId, quantity: int) -> None:
        if quantity <= 0:
            self.remove(product_id)
            return
        existing = self._lines.get(product_id)
        if existing is None:
            return
        self._lines[product_id] = CartLine(product=existing.product, quantity=quantity)

    def remove(self, product_id: ProductId) -> None:
        self._lines.pop(product_id, None)

    def clear(self) -> None:
        self._lines.clear()

    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    def total(self) -> str:
        return format_amount(sum((line.line_total() for line in self._lines.values()), Decimal("0")))

    def snapshot(self) -> List[Dict[str, Any]]:
        """Cart items as sent with an order: product fields plus quantity."""
        items = []
        for line in self._lines.values():
            item = line.product.to_dict()
            item["price"] = float(line.product.price)
            item["quantity"] = line.quantity
            items.append(item)
        return items

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lines": [
                {"product": line.product.to_dict(), "quantity": line.quantity}
                for line in self._lines.values()
            ]
        }

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "Cart":
        if not data:
            return cls()
        return cls(
            CartLine(product=Product.from_dict(raw["product"]), quantity=int(raw["quantity"]))
            for raw in data.get("lines", [])
        )
