"""Checkout and order models"""

from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime
from enum import Enum


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class OrderItem(BaseModel):
    """Line snapshot captured at order time"""
    model_config = ConfigDict(frozen=True)

    product_id: str
    title: str
    quantity: int
    price: float
    discount_percentage: float = 0.0


class Order(BaseModel):
    """Placed order; only status changes after creation"""
    id: str
    user_id: str
    total_amount: float
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime
    items: tuple[OrderItem, ...]


class CheckoutResponse(BaseModel):
    """Response from checkout"""
    success: bool
    order_id: Optional[str] = None
    error_message: Optional[str] = None
    error_code: Optional[str] = None
