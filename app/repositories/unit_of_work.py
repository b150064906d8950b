# app/repositories/unit_of_work.py
from collections.abc import Callable

from sqlmodel import Session

from app.repositories.order_repo import OrderRepository
from app.repositories.product_repo import ProductRepository


class UnitOfWork:
    """
    One database transaction spanning the stock store and the order store.

    Usage:

        with UnitOfWork(session_factory) as uow:
            product = uow.products.get_by_id(uow.session, product_id)
            ...
            uow.commit()

    Leaving the block without calling commit(), or because of an exception,
    rolls everything back. The session is always closed on exit.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        products: ProductRepository | None = None,
        orders: OrderRepository | None = None,
    ):
        self._session_factory = session_factory
        self.products = products or ProductRepository()
        self.orders = orders or OrderRepository()
        self._session: Session | None = None
        self._committed = False

    @property
    def session(self) -> Session:
        if self._session is None:
            raise RuntimeError("UnitOfWork is not active; use it as a context manager")
        return self._session

    def __enter__(self) -> "UnitOfWork":
        self._session = self._session_factory()
        self._committed = False
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if not self._committed:
                self.rollback()
        finally:
            self._session.close()
            self._session = None

    def commit(self) -> None:
        self.session.commit()
        self._committed = True

    def rollback(self) -> None:
        self.session.rollback()
