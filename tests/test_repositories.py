"""Tests for the stock store, order store and unit of work."""

from decimal import Decimal

import pytest
from sqlmodel import select

from app.core.exceptions import ConcurrentModificationConflict
from app.models.order import Order, Sold
from app.repositories.product_repo import ProductRepository, StockChange
from app.repositories.unit_of_work import UnitOfWork


class TestProductRepository:
    def test_save_all_writes_quantity_and_bumps_version(
        self, session_factory, make_product
    ):
        product = make_product(quantity=5)
        repo = ProductRepository()

        with session_factory() as session:
            (saved,) = repo.save_all(
                session,
                [StockChange(product.id, expected_version=1, new_quantity=2)],
            )
            session.commit()

            assert saved.quantity == 2
            assert saved.version == 2

    def test_stale_version_is_a_conflict(self, session_factory, make_product, stock_of):
        product = make_product(quantity=5)
        repo = ProductRepository()

        with session_factory() as session:
            repo.save_all(session, [StockChange(product.id, 1, 4)])
            session.commit()

        with session_factory() as session:
            with pytest.raises(ConcurrentModificationConflict) as info:
                repo.save_all(session, [StockChange(product.id, 1, 3)])
            session.rollback()

        assert info.value.product_id == product.id
        assert stock_of(product.id) == 4

    def test_negative_stock_rejected(self, session_factory, make_product):
        product = make_product(quantity=1)
        with session_factory() as session:
            with pytest.raises(ValueError):
                ProductRepository().save_all(session, [StockChange(product.id, 1, -1)])

    def test_get_by_id_sees_writes_from_other_sessions(
        self, session_factory, make_product
    ):
        product = make_product(quantity=5)
        repo = ProductRepository()

        with session_factory() as reader:
            assert repo.get_by_id(reader, product.id).quantity == 5

            with session_factory() as writer:
                repo.save_all(writer, [StockChange(product.id, 1, 0)])
                writer.commit()

            reader.rollback()  # end the read transaction
            assert repo.get_by_id(reader, product.id).quantity == 0

    def test_missing_product(self, session_factory):
        with session_factory() as session:
            assert ProductRepository().get_by_id(session, 404) is None


class TestUnitOfWork:
    def _order_with_line(self, uow, user_id, product_id):
        order = Order(user_id=user_id, payment=Decimal("10.00"))
        sold = [Sold(product_id=product_id, quantity=1, unit_price=Decimal("10.00"))]
        return uow.orders.save(uow.session, order, sold)

    def test_commit_persists_both_stores(
        self, session_factory, make_product, make_user, stock_of
    ):
        product = make_product(quantity=3)
        user = make_user()

        with UnitOfWork(session_factory) as uow:
            order = self._order_with_line(uow, user.id, product.id)
            uow.products.save_all(uow.session, [StockChange(product.id, 1, 2)])
            uow.commit()
            order_id = order.id

        with session_factory() as session:
            assert session.get(Order, order_id) is not None
            sold = session.exec(select(Sold).where(Sold.order_id == order_id)).all()
            assert len(sold) == 1
        assert stock_of(product.id) == 2

    def test_exit_without_commit_rolls_back(
        self, session_factory, make_product, make_user, stock_of, order_count
    ):
        product = make_product(quantity=3)
        user = make_user()

        with UnitOfWork(session_factory) as uow:
            self._order_with_line(uow, user.id, product.id)
            uow.products.save_all(uow.session, [StockChange(product.id, 1, 2)])

        assert order_count() == 0
        assert stock_of(product.id) == 3

    def test_exception_rolls_back_and_propagates(
        self, session_factory, make_product, make_user, stock_of, order_count
    ):
        product = make_product(quantity=3)
        user = make_user()

        with pytest.raises(RuntimeError):
            with UnitOfWork(session_factory) as uow:
                self._order_with_line(uow, user.id, product.id)
                raise RuntimeError("boom")

        assert order_count() == 0
        assert stock_of(product.id) == 3

    def test_session_unavailable_outside_block(self, session_factory):
        uow = UnitOfWork(session_factory)
        with pytest.raises(RuntimeError):
            uow.session

    def test_order_store_reads(self, session_factory, make_product, make_user):
        product = make_product()
        user = make_user()
        with UnitOfWork(session_factory) as uow:
            order_id = self._order_with_line(uow, user.id, product.id).id
            uow.commit()

        with UnitOfWork(session_factory) as uow:
            order = uow.orders.get_by_id(uow.session, order_id)
            sold = uow.orders.list_sold_for_order(uow.session, order_id)
            assert order.payment == Decimal("10.00")
            assert [s.product_id for s in sold] == [product.id]
