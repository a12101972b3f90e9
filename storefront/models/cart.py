"""Cart models"""

from pydantic import BaseModel, ConfigDict, Field, computed_field
from typing import Optional


class RawCartLine(BaseModel):
    """Persisted cart entry, unique per product within a store scope"""
    product_id: str
    quantity: int = Field(gt=0)


class CartLine(BaseModel):
    """Cart entry joined with the catalog snapshot, never persisted"""
    model_config = ConfigDict(frozen=True)

    product_id: str
    quantity: int = Field(gt=0)
    title: str
    unit_price: float = Field(ge=0)
    discount_percentage: float = Field(default=0.0, ge=0, le=100)
    thumbnail: Optional[str] = None
    stock: int = 0

    @computed_field
    @property
    def effective_price(self) -> float:
        if self.discount_percentage > 0:
            return max(self.unit_price * (1 - self.discount_percentage / 100), 0.0)
        return self.unit_price

    @computed_field
    @property
    def line_total(self) -> float:
        return self.effective_price * self.quantity


class Cart(BaseModel):
    """
    Hydrated cart.

    Totals are derived from the lines on every access, so a Cart can only
    change by being rebuilt from a new set of lines.
    """
    model_config = ConfigDict(frozen=True)

    lines: tuple[CartLine, ...] = ()

    @computed_field
    @property
    def total_item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    @computed_field
    @property
    def total_price(self) -> float:
        return sum((line.effective_price * line.quantity for line in self.lines), 0.0)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def get_line(self, product_id: str) -> Optional[CartLine]:
        return next((line for line in self.lines if line.product_id == product_id), None)


class AddToCartRequest(BaseModel):
    """Request to add item to cart"""
    product_id: str
    quantity: int = 1


class UpdateCartItemRequest(BaseModel):
    """Request to update cart item quantity (zero or less removes the line)"""
    quantity: int


class CartResponse(BaseModel):
    """Cart API response"""
    cart: Cart
    message: Optional[str] = None
