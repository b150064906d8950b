# app/services/cart_service.py
from sqlmodel import Session

from app.core.exceptions import ProductNotFound
from app.models.cart import CartLedger
from app.repositories.product_repo import ProductRepository
from app.schemas.cart import CartLineRead, CartSummary


class CartService:
    """
    Cart operations on a session's ledger.

    Responsibilities:
      - resolve product ids against the store before adding
      - delegate quantity accounting to CartLedger
      - compute line totals and cart totals for responses

    Stock is deliberately not checked here; see CheckoutService.
    """

    def __init__(self, product_repo: ProductRepository):
        self.product_repo = product_repo

    def get_cart_summary(self, ledger: CartLedger) -> CartSummary:
        """
        Return full cart summary:
          - list of CartLineRead (with line_total)
          - total_quantity
          - total_price
        """
        items = [
            CartLineRead(
                product_id=line.product.id,
                product_name=line.product.name,
                description=line.product.description,
                unit_price=line.product.price,
                quantity=line.quantity,
                line_total=line.line_total,
            )
            for line in ledger.get_products_in_cart().values()
        ]
        return CartSummary(
            items=items,
            total_quantity=ledger.total_quantity,
            total_price=ledger.get_total(),
        )

    def add_to_cart(
        self,
        session: Session,
        ledger: CartLedger,
        product_id: int,
    ) -> CartSummary:
        """
        Add one unit of a product to the cart.

        Raises:
            ProductNotFound: if the id is not in the store.
        """
        product = self.product_repo.get_by_id(session, product_id)
        if product is None:
            raise ProductNotFound(product_id)

        ledger.add_product(product)
        return self.get_cart_summary(ledger)

    def remove_from_cart(self, ledger: CartLedger, product_id: int) -> CartSummary:
        """
        Remove one unit of a product. Absent products are ignored.
        """
        ledger.remove_product(product_id)
        return self.get_cart_summary(ledger)

    def clear_cart(self, ledger: CartLedger) -> CartSummary:
        ledger.clear()
        return self.get_cart_summary(ledger)
