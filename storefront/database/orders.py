"""Order storage"""

import uuid
from datetime import datetime, timezone
from typing import Iterable, Optional

from ..models.checkout import Order, OrderItem, OrderStatus


class OrderDatabase:
    """In-memory order storage"""

    def __init__(self):
        self.orders: dict[str, Order] = {}

    def create_order(
        self,
        user_id: str,
        total_amount: float,
        items: Iterable[OrderItem],
    ) -> Order:
        """Persist a new pending order"""
        order = Order(
            id=f"ORD-{uuid.uuid4().hex[:8].upper()}",
            user_id=user_id,
            total_amount=total_amount,
            status=OrderStatus.PENDING,
            created_at=datetime.now(timezone.utc),
            items=tuple(items),
        )

        self.orders[order.id] = order
        return order

    def get_order(self, order_id: str) -> Optional[Order]:
        """Get an order by ID"""
        return self.orders.get(order_id)

    def list_orders_for_user(self, user_id: str, limit: int = 50) -> list[Order]:
        """List a user's orders, newest first"""
        orders = [o for o in self.orders.values() if o.user_id == user_id]
        orders.sort(key=lambda o: o.created_at, reverse=True)
        return orders[:limit]

    def reset(self) -> None:
        self.orders.clear()


# Singleton instance
order_db = OrderDatabase()
