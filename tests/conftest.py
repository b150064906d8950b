import os

# Keep the application engine off the developer's cart.db; every test gets
# its own database through the fixtures below.
os.environ.setdefault("DATABASE_URL", "sqlite://")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine, select

from app.database import get_session, get_session_factory
from app.main import app
from app.models.order import Order
from app.models.product import Product
from app.models.user import User
from app.repositories.order_repo import OrderRepository
from app.repositories.product_repo import ProductRepository
from app.repositories.user_repo import UserRepository
from app.routers.cart import get_cart_store
from app.services.cart_session_store import CartSessionStore
from app.services.checkout_service import CheckoutService


@pytest.fixture
def engine(tmp_path):
    # File-backed so separate sessions use separate connections, the same
    # way concurrent requests would.
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False},
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    def factory() -> Session:
        return Session(engine)

    return factory


@pytest.fixture
def make_product(session_factory):
    def _make(name: str = "Widget", price: str = "10.00", quantity: int = 5) -> Product:
        with session_factory() as session:
            product = Product(name=name, price=Decimal(price), quantity=quantity)
            return ProductRepository().create(session, product)

    return _make


@pytest.fixture
def make_user(session_factory):
    counter = iter(range(1, 1000))

    def _make(active: bool = True) -> User:
        n = next(counter)
        with session_factory() as session:
            user = User(
                email=f"customer{n}@example.com",
                username=f"customer{n}",
                name="Test",
                last_name=f"Customer{n}",
                active=active,
            )
            return UserRepository().create(session, user)

    return _make


@pytest.fixture
def stock_of(session_factory):
    def _stock(product_id: int) -> int:
        with session_factory() as session:
            return session.get(Product, product_id).quantity

    return _stock


@pytest.fixture
def order_count(session_factory):
    def _count() -> int:
        with session_factory() as session:
            return len(session.exec(select(Order)).all())

    return _count


@pytest.fixture
def checkout_service(session_factory):
    return CheckoutService(ProductRepository(), OrderRepository(), session_factory)


@pytest.fixture
def cart_store():
    return CartSessionStore(ttl_seconds=None)


@pytest.fixture
def client(engine, session_factory, cart_store):
    def override_get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_cart_store] = lambda: cart_store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
