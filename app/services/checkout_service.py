# app/services/checkout_service.py
import logging
from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from decimal import Decimal

from sqlmodel import Session

from app.core.exceptions import (
    ConcurrentModificationConflict,
    EmptyCart,
    InsufficientStock,
    ProductNotFound,
)
from app.models.cart import CartLedger, CartLine
from app.models.order import Order, Sold
from app.models.product import Product
from app.models.user import User
from app.repositories.order_repo import OrderRepository
from app.repositories.product_repo import ProductRepository, StockChange
from app.repositories.unit_of_work import UnitOfWork
from app.schemas.order import OrderWithSoldRead, SoldRead

logger = logging.getLogger(__name__)


class CheckoutService:
    """
    Converts a cart into a persisted order, all-or-nothing.

    Responsibilities:
      - re-read every product from the store for stock (never trust the cart copy)
      - reject missing products and insufficient stock
      - charge the prices the cart showed, so payment equals the cart total
      - write Order + Sold rows and the stock decrements in one transaction
      - clear the cart only after the commit succeeded
      - retry on concurrent stock modification, re-validating each time
    """

    def __init__(
        self,
        product_repo: ProductRepository,
        order_repo: OrderRepository,
        session_factory: Callable[[], Session],
        max_attempts: int = 3,
        clock: Callable[[], datetime] | None = None,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.product_repo = product_repo
        self.order_repo = order_repo
        self.session_factory = session_factory
        self.max_attempts = max_attempts
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def checkout(self, ledger: CartLedger, user: User) -> OrderWithSoldRead:
        """
        Check out the given cart for `user`.

        Steps (per attempt, inside one UnitOfWork):
          1. Load each product fresh from the store.
          2. Missing product => ProductNotFound.
          3. Stock below requested quantity => InsufficientStock.
          4. Compute payment, Sold rows and new stock levels.
          5. Persist order + sold, write stock (compare-and-set), commit.

        Then clear the cart. On any error the store, the orders table and the
        cart are exactly as they were before the call.

        Raises:
            EmptyCart, ProductNotFound, InsufficientStock,
            ConcurrentModificationConflict (after max_attempts conflicts).
        """
        if ledger.is_empty:
            raise EmptyCart()

        lines = ledger.get_products_in_cart()

        attempt = 1
        while True:
            try:
                receipt = self._attempt(lines, user)
                break
            except ConcurrentModificationConflict as exc:
                if attempt >= self.max_attempts:
                    logger.warning(
                        "Checkout for user %s gave up after %d attempts: %s",
                        user.id,
                        attempt,
                        exc,
                    )
                    raise
                logger.warning(
                    "Checkout conflict for user %s on product %s (attempt %d/%d), retrying",
                    user.id,
                    exc.product_id,
                    attempt,
                    self.max_attempts,
                )
                attempt += 1

        ledger.clear()
        logger.info(
            "Order %s placed by user %s: %d line(s), payment %s",
            receipt.id,
            user.id,
            len(receipt.items),
            receipt.payment,
        )
        return receipt

    # -------- One transactional attempt --------

    def _attempt(
        self,
        lines: Mapping[int, CartLine],
        user: User,
    ) -> OrderWithSoldRead:
        with UnitOfWork(
            self.session_factory,
            products=self.product_repo,
            orders=self.order_repo,
        ) as uow:
            validated = self._validate(uow, lines)

            payment = Decimal("0")
            sold: list[Sold] = []
            changes: list[StockChange] = []
            for product, line in validated:
                # charge what the cart showed, not the current list price
                price = line.product.price
                requested = line.quantity
                payment += price * requested
                sold.append(
                    Sold(
                        product_id=product.id,
                        quantity=requested,
                        unit_price=price,
                    )
                )
                changes.append(
                    StockChange(
                        product_id=product.id,
                        expected_version=product.version,
                        new_quantity=product.quantity - requested,
                    )
                )

            order = Order(
                user_id=user.id,
                payment=payment,
                created_at=self._clock(),
            )
            uow.orders.save(uow.session, order, sold)
            uow.products.save_all(uow.session, changes)
            uow.commit()

            return self._build_order_dto(order, sold)

    def _validate(
        self,
        uow: UnitOfWork,
        lines: Mapping[int, CartLine],
    ) -> list[tuple[Product, CartLine]]:
        validated: list[tuple[Product, CartLine]] = []
        for product_id, line in lines.items():
            product = uow.products.get_by_id(uow.session, product_id)
            if product is None:
                raise ProductNotFound(product_id)
            if product.quantity < line.quantity:
                raise InsufficientStock(
                    product_id=product_id,
                    product_name=product.name,
                    available=product.quantity,
                    requested=line.quantity,
                )
            validated.append((product, line))
        return validated

    # -------- Helper DTO builder --------

    def _build_order_dto(self, order: Order, sold: list[Sold]) -> OrderWithSoldRead:
        return OrderWithSoldRead(
            id=order.id,
            user_id=order.user_id,
            payment=order.payment,
            created_at=order.created_at,
            items=[
                SoldRead(
                    id=item.id,
                    product_id=item.product_id,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    line_total=item.unit_price * item.quantity,
                )
                for item in sold
            ],
        )
