# Storefront Models

from .product import Product, ProductCategory, ProductSort, ProductSearchResponse
from .cart import (
    RawCartLine,
    CartLine,
    Cart,
    AddToCartRequest,
    UpdateCartItemRequest,
    CartResponse,
)
from .checkout import Order, OrderItem, OrderStatus, CheckoutResponse
from .chat import (
    ParsedProductSummary,
    ChatMessage,
    ChatRequest,
    ChatResponse,
    SessionMessageRequest,
    SessionMessageResponse,
)

__all__ = [
    "Product",
    "ProductCategory",
    "ProductSort",
    "ProductSearchResponse",
    "RawCartLine",
    "CartLine",
    "Cart",
    "AddToCartRequest",
    "UpdateCartItemRequest",
    "CartResponse",
    "Order",
    "OrderItem",
    "OrderStatus",
    "CheckoutResponse",
    "ParsedProductSummary",
    "ChatMessage",
    "ChatRequest",
    "ChatResponse",
    "SessionMessageRequest",
    "SessionMessageResponse",
]
