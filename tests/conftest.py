"""Pytest configuration for storefront tests."""

import pytest

from storefront.core.session import session_manager
from storefront.database.carts import LocalCartStore, RemoteCartStore, local_cart_store, remote_cart_store
from storefront.database.orders import OrderDatabase, order_db
from storefront.database.products import ProductDatabase
from storefront.models.product import Product


# ---------------------------------------------------------------------------
# Store isolation: carts, orders and chat sessions live in module-level
# singletons. Clear them before AND after every test.
# ---------------------------------------------------------------------------

@pytest.fixture(scope="function", autouse=True)
def _isolate_stores():
    """Wipe in-memory stores before and after every test."""
    local_cart_store.reset()
    remote_cart_store.reset()
    order_db.reset()
    session_manager.sessions.clear()
    yield
    local_cart_store.reset()
    remote_cart_store.reset()
    order_db.reset()
    session_manager.sessions.clear()


@pytest.fixture
def catalog():
    """Small catalog with round prices"""
    return ProductDatabase({
        "p1": Product(id="p1", title="Trail Shoe", description="Light trail running shoe", price=100.0,
                      category="sports", brand="Acme", stock=5),
        "p2": Product(id="p2", title="Water Bottle", description="Insulated steel bottle", price=10.0,
                      category="sports", brand="Acme", stock=20),
        "p3": Product(id="p3", title="Rain Jacket", description=None, price=80.0, discount_percentage=25,
                      category="clothing", brand="Northwind", stock=1),
    })


@pytest.fixture
def local_store():
    return LocalCartStore(storage_key="test_cart")


@pytest.fixture
def remote_store():
    return RemoteCartStore()


@pytest.fixture
def orders():
    return OrderDatabase()


