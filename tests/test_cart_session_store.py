"""Tests for the session-keyed cart registry."""

from decimal import Decimal

import pytest

from app.models.cart import CartProduct
from app.services.cart_session_store import CartSessionStore

APPLE = CartProduct(id=1, name="Apple", price=Decimal("10.00"))


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


def test_same_session_gets_same_ledger():
    store = CartSessionStore()
    assert store.get_or_create("abc") is store.get_or_create("abc")


def test_sessions_are_isolated():
    store = CartSessionStore()
    store.get_or_create("a").add_product(APPLE)
    assert store.get_or_create("b").is_empty


def test_get_does_not_create():
    store = CartSessionStore()
    assert store.get("missing") is None
    assert len(store) == 0


def test_new_session_ids_are_unique():
    assert CartSessionStore.new_session_id() != CartSessionStore.new_session_id()


def test_idle_session_expires_and_is_cleared(clock):
    store = CartSessionStore(ttl_seconds=60, clock=clock)
    ledger = store.get_or_create("s1")
    ledger.add_product(APPLE)

    clock.now = 61
    fresh = store.get_or_create("s1")

    assert fresh is not ledger
    assert fresh.is_empty
    assert ledger.is_empty


def test_activity_extends_session(clock):
    store = CartSessionStore(ttl_seconds=60, clock=clock)
    store.get_or_create("s1").add_product(APPLE)

    clock.now = 50
    store.get("s1")
    clock.now = 100

    assert store.get("s1").get_quantity(APPLE.id) == 1


def test_purge_expired(clock):
    store = CartSessionStore(ttl_seconds=60, clock=clock)
    stale = store.get_or_create("stale")
    stale.add_product(APPLE)
    clock.now = 40
    store.get_or_create("live")

    clock.now = 70
    assert store.purge_expired() == 1
    assert store.get("stale") is None
    assert store.get("live") is not None
    assert stale.is_empty


def test_no_ttl_never_expires(clock):
    store = CartSessionStore(ttl_seconds=None, clock=clock)
    store.get_or_create("s1").add_product(APPLE)
    clock.now = 10**9
    assert store.purge_expired() == 0
    assert not store.get("s1").is_empty


def test_discard_clears_ledger():
    store = CartSessionStore()
    ledger = store.get_or_create("s1")
    ledger.add_product(APPLE)
    store.discard("s1")
    assert ledger.is_empty
    assert store.get("s1") is None


def test_ttl_must_be_positive():
    with pytest.raises(ValueError):
        CartSessionStore(ttl_seconds=0)
