# Database modules

from .products import product_db, ProductDatabase
from .carts import (
    CartStore,
    LocalCartStore,
    RemoteCartStore,
    local_cart_store,
    remote_cart_store,
)
from .orders import order_db, OrderDatabase

__all__ = [
    "product_db",
    "ProductDatabase",
    "CartStore",
    "LocalCartStore",
    "RemoteCartStore",
    "local_cart_store",
    "remote_cart_store",
    "order_db",
    "OrderDatabase",
]
