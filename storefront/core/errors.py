"""Storefront exception hierarchy"""


class StorefrontError(Exception):
    """Base exception for storefront errors"""
    pass


class BackendUnavailable(StorefrontError):
    """A cart store or the product catalog could not be reached"""
    pass


class AssistantUnavailable(StorefrontError):
    """The language model call failed"""
    pass


class ValidationError(StorefrontError):
    """Request rejected before any write"""
    code = "invalid_request"


class NotAuthenticated(ValidationError):
    code = "not_authenticated"

    def __init__(self, message: str = "Please log in to checkout"):
        super().__init__(message)


class EmptyCart(ValidationError):
    code = "empty_cart"

    def __init__(self, message: str = "Cart is empty"):
        super().__init__(message)


class InvalidQuantity(ValidationError):
    code = "invalid_quantity"

    def __init__(self, quantity):
        super().__init__(f"Quantity must be a positive integer, got {quantity!r}")
        self.quantity = quantity


class InsufficientStock(ValidationError):
    code = "insufficient_stock"

    def __init__(self, title: str, available: int):
        super().__init__(f"Insufficient stock for {title}. Available: {available}")
        self.title = title
        self.available = available


class CartLineNotFound(ValidationError):
    code = "not_in_cart"

    def __init__(self, product_id: str):
        super().__init__(f"Item not in cart: {product_id}")
        self.product_id = product_id


class TurnInProgress(StorefrontError):
    """A session already has an assistant turn in flight"""

    def __init__(self, session_id: str):
        super().__init__(f"Session {session_id} already has a turn in progress")
        self.session_id = session_id
