"""Product models for the storefront catalog"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from enum import Enum


class ProductCategory(str, Enum):
    ELECTRONICS = "electronics"
    CLOTHING = "clothing"
    HOME = "home"
    SPORTS = "sports"
    BOOKS = "books"


class ProductSort(str, Enum):
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    TITLE = "title"
    DISCOUNT = "discount"


class Product(BaseModel):
    """Product in the catalog"""
    id: str
    title: str
    description: Optional[str] = None
    price: float = Field(ge=0)
    discount_percentage: float = Field(default=0.0, ge=0, le=100)
    category: Optional[str] = None
    brand: Optional[str] = None
    thumbnail: Optional[str] = None
    stock: int = Field(ge=0, default=0)
    warranty_information: Optional[str] = None
    shipping_information: Optional[str] = None
    return_policy: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    @property
    def effective_price(self) -> float:
        """Price after discount"""
        if self.discount_percentage > 0:
            return self.price * (1 - self.discount_percentage / 100)
        return self.price

    @property
    def in_stock(self) -> bool:
        return self.stock > 0


class ProductSearchResponse(BaseModel):
    """Response from product search"""
    products: list[Product]
    total: int
    limit: int
    offset: int
