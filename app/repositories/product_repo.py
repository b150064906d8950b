# app/repositories/product_repo.py
from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy import update
from sqlmodel import Session

from app.core.exceptions import ConcurrentModificationConflict
from app.models.product import Product


@dataclass(frozen=True)
class StockChange:
    """
    New stock level for one product, conditional on the version it was
    read at.
    """

    product_id: int
    expected_version: int
    new_quantity: int


class ProductRepository:
    """
    Data access layer for Product (the stock store).

    - Pure DB operations, no FastAPI, no business logic.
    - Stock writes go through `save_all` only, so every write bumps
      `version`.

    NOTE:
      - `save_all` does not commit; it runs inside the caller's
        unit of work.
    """

    def get_by_id(self, session: Session, product_id: int) -> Product | None:
        """
        Load a product straight from the database.

        `populate_existing` overwrites any copy already in the identity map,
        so a second read in the same session never returns stale stock.
        """
        return session.get(Product, product_id, populate_existing=True)

    def create(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def save_all(
        self,
        session: Session,
        changes: Iterable[StockChange],
    ) -> list[Product]:
        """
        Apply stock changes as compare-and-set writes and flush.

        Each row is updated only if its version still matches the one the
        caller validated against.

        Raises:
            ConcurrentModificationConflict: if any row was changed since it
            was read. Nothing is committed; the caller rolls back.
        """
        changes = list(changes)
        for change in changes:
            if change.new_quantity < 0:
                raise ValueError(
                    f"Stock for product {change.product_id} cannot go below zero"
                )
            stmt = (
                update(Product)
                .where(
                    Product.id == change.product_id,
                    Product.version == change.expected_version,
                )
                .values(
                    quantity=change.new_quantity,
                    version=Product.version + 1,
                )
                .execution_options(synchronize_session=False)
            )
            result = session.exec(stmt)
            if result.rowcount != 1:
                raise ConcurrentModificationConflict(change.product_id)

        session.flush()
        return [self.get_by_id(session, change.product_id) for change in changes]
