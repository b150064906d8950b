# app/core/exceptions.py
"""
Checkout failures.

Raised by the checkout service when a cart cannot be converted into an
order. The router catches these and translates them into HTTP responses.
None of them leave stock, orders or the cart partially modified.
"""


class CheckoutError(Exception):
    """Base class for every checkout failure."""

    retryable = False


class EmptyCart(CheckoutError):
    """Checkout was requested for a cart with no lines."""

    def __init__(self) -> None:
        super().__init__("Cart is empty")


class ProductNotFound(CheckoutError):
    """A cart line references a product that is no longer in the store."""

    def __init__(self, product_id: int) -> None:
        self.product_id = product_id
        super().__init__(f"Product {product_id} not found")


class InsufficientStock(CheckoutError):
    """Requested quantity exceeds the product's current stock."""

    def __init__(
        self,
        product_id: int,
        product_name: str,
        available: int,
        requested: int,
    ) -> None:
        self.product_id = product_id
        self.product_name = product_name
        self.available = available
        self.requested = requested
        super().__init__(
            f"Not enough stock for {product_name!r} "
            f"(have {available}, requested {requested})"
        )


class ConcurrentModificationConflict(CheckoutError):
    """
    Stock changed between validation and the write.

    Another checkout (or a restock) committed first. Re-running checkout
    validates against fresh stock.
    """

    retryable = True

    def __init__(self, product_id: int) -> None:
        self.product_id = product_id
        super().__init__(f"Stock for product {product_id} was modified concurrently")
