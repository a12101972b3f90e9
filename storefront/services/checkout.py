"""Checkout processing"""

import logging
from typing import Optional

from ..core.config import settings
from ..core.errors import (
    BackendUnavailable,
    EmptyCart,
    InsufficientStock,
    NotAuthenticated,
    ValidationError,
)
from ..core.identity import Identity
from ..database.carts import CartStore
from ..database.orders import OrderDatabase
from ..models.cart import Cart
from ..models.checkout import CheckoutResponse, OrderItem

logger = logging.getLogger(__name__)


def shipping_cost(
    subtotal: float,
    free_threshold: Optional[float] = None,
    fee: Optional[float] = None,
) -> float:
    """Flat fee below the free-shipping threshold, free at or above it"""
    free_threshold = settings.free_shipping_threshold if free_threshold is None else free_threshold
    fee = settings.shipping_fee if fee is None else fee
    return 0.0 if subtotal >= free_threshold else fee


class CheckoutProcessor:
    """
    Turns a hydrated cart into a pending order.

    Success is decided by order persistence alone; clearing the carts
    afterwards is best effort.
    """

    def __init__(
        self,
        order_db: OrderDatabase,
        local_store: CartStore,
        remote_store: CartStore,
        device_id: str,
    ):
        self.order_db = order_db
        self.local_store = local_store
        self.remote_store = remote_store
        self.device_id = device_id

    def checkout(self, identity: Identity, cart: Cart) -> CheckoutResponse:
        """
        Validate, price and persist the order, then clear both cart scopes.

        Validation failures and order persistence failures come back as
        CheckoutResponse(success=False); nothing is raised.
        """
        try:
            self.validate(identity, cart)
        except ValidationError as e:
            logger.info(f"Checkout rejected: {e}")
            return CheckoutResponse(success=False, error_message=str(e), error_code=e.code)

        subtotal = cart.total_price
        total_amount = subtotal + shipping_cost(subtotal)

        items = [
            OrderItem(
                product_id=line.product_id,
                title=line.title,
                quantity=line.quantity,
                price=line.unit_price,
                discount_percentage=line.discount_percentage,
            )
            for line in cart.lines
        ]

        try:
            order = self.order_db.create_order(
                user_id=identity.user_id,
                total_amount=total_amount,
                items=items,
            )
        except BackendUnavailable as e:
            logger.error(f"Order creation failed for user={identity.user_id}: {e}", exc_info=True)
            return CheckoutResponse(
                success=False,
                error_message="Failed to create order",
                error_code="order_failed",
            )

        logger.info(
            f"Order {order.id} created for user={identity.user_id}: "
            f"${order.total_amount:.2f} ({len(items)} line(s))"
        )

        if not self.remote_store.clear(identity.user_id):
            logger.error(f"Order {order.id} committed but user cart was not cleared")
        if not self.local_store.clear(self.device_id):
            logger.error(f"Order {order.id} committed but device cart was not cleared")

        return CheckoutResponse(success=True, order_id=order.id)

    @staticmethod
    def validate(identity: Identity, cart: Cart) -> None:
        """Raise a ValidationError if the checkout may not proceed"""
        if not identity.is_authenticated:
            raise NotAuthenticated()

        if cart.is_empty:
            raise EmptyCart()

        # Point-in-time check only, nothing is reserved
        for line in cart.lines:
            if line.quantity > line.stock:
                raise InsufficientStock(line.title, line.stock)
