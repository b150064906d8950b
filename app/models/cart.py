# app/models/cart.py
from collections.abc import Mapping
from dataclasses import dataclass, replace
from decimal import Decimal
from types import MappingProxyType

from app.models.product import Product


@dataclass(frozen=True)
class CartProduct:
    """
    Copy of a product taken when it is put in a cart.

    Its price is what the cart shows and what checkout charges. Stock
    decisions are always made against a fresh read of the store.
    """

    id: int
    name: str
    price: Decimal
    description: str | None = None

    @classmethod
    def from_product(cls, product: Product) -> "CartProduct":
        if product.id is None:
            raise ValueError("Product must be persisted before it can be added to a cart")
        return cls(
            id=product.id,
            name=product.name,
            price=Decimal(product.price),
            description=product.description,
        )


@dataclass(frozen=True)
class CartLine:
    """A product and the quantity requested for it (always >= 1)."""

    product: CartProduct
    quantity: int

    @property
    def line_total(self) -> Decimal:
        return self.product.price * self.quantity


def _product_id(product: Product | CartProduct | int) -> int:
    if product is None:
        raise TypeError("product must not be None")
    if isinstance(product, int):
        return product
    if product.id is None:
        raise ValueError("Product has no id")
    return product.id


class CartLedger:
    """
    Shopping cart for a single session: product id -> requested quantity.

    Rules:
      - adding a product increments its quantity (starting at 1)
      - removing decrements; a line reaching 0 is dropped, never stored
      - removing an absent product is a no-op
      - no stock checks here; stock is validated only at checkout

    Lines are keyed by product id rather than by product object, so later
    changes to a loaded Product cannot corrupt the mapping.
    """

    def __init__(self) -> None:
        self._lines: dict[int, CartLine] = {}

    def add_product(self, product: Product | CartProduct) -> CartLine:
        if product is None:
            raise TypeError("product must not be None")
        snapshot = (
            product
            if isinstance(product, CartProduct)
            else CartProduct.from_product(product)
        )
        current = self._lines.get(snapshot.id)
        quantity = current.quantity + 1 if current else 1
        line = CartLine(product=snapshot, quantity=quantity)
        self._lines[snapshot.id] = line
        return line

    def remove_product(self, product: Product | CartProduct | int) -> None:
        product_id = _product_id(product)
        line = self._lines.get(product_id)
        if line is None:
            return
        if line.quantity > 1:
            self._lines[product_id] = replace(line, quantity=line.quantity - 1)
        else:
            del self._lines[product_id]

    def get_products_in_cart(self) -> Mapping[int, CartLine]:
        """Read-only snapshot of the current lines."""
        return MappingProxyType(dict(self._lines))

    def get_quantity(self, product_id: int) -> int:
        line = self._lines.get(product_id)
        return line.quantity if line else 0

    def get_total(self) -> Decimal:
        return sum(
            (line.line_total for line in self._lines.values()),
            Decimal("0"),
        )

    @property
    def total_quantity(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def clear(self) -> None:
        self._lines.clear()

    def __len__(self) -> int:
        return len(self._lines)

    def __contains__(self, product: object) -> bool:
        if isinstance(product, (Product, CartProduct)):
            return product.id in self._lines
        return product in self._lines
