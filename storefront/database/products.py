"""In-memory product catalog"""

from typing import Iterable, Optional
from ..models.product import Product, ProductCategory, ProductSort

# Seed catalog
PRODUCTS: dict[str, Product] = {
    "prod-001": Product(
        id="prod-001",
        title="Sony WH-1000XM5 Wireless Headphones",
        description="Industry-leading noise cancellation with 30-hour battery life. Premium sound quality with LDAC support and multipoint pairing for two devices at once.",
        price=349.99,
        discount_percentage=10,
        category=ProductCategory.ELECTRONICS.value,
        brand="Sony",
        thumbnail="/static/images/sony-headphones.jpg",
        stock=50,
        warranty_information="1 year manufacturer warranty",
    ),
    "prod-002": Product(
        id="prod-002",
        title="Apple AirPods Pro (2nd Gen)",
        description="Active Noise Cancellation, Adaptive Transparency, and Personalized Spatial Audio with dynamic head tracking.",
        price=249.00,
        category=ProductCategory.ELECTRONICS.value,
        brand="Apple",
        thumbnail="/static/images/airpods-pro.jpg",
        stock=100,
        warranty_information="1 year limited warranty",
    ),
    "prod-003": Product(
        id="prod-003",
        title="Samsung Galaxy Tab S9",
        description="11-inch Dynamic AMOLED 2X display. Snapdragon 8 Gen 2. S Pen included.",
        price=799.99,
        discount_percentage=15,
        category=ProductCategory.ELECTRONICS.value,
        brand="Samsung",
        thumbnail="/static/images/galaxy-tab.jpg",
        stock=30,
    ),
    "prod-004": Product(
        id="prod-004",
        title="Patagonia Better Sweater Jacket",
        description="Classic fleece jacket made with recycled polyester. Perfect for layering.",
        price=139.00,
        category=ProductCategory.CLOTHING.value,
        brand="Patagonia",
        thumbnail="/static/images/patagonia-sweater.jpg",
        stock=75,
        return_policy="60 days return policy",
    ),
    "prod-005": Product(
        id="prod-005",
        title="Nike Air Max 90",
        description="Iconic design with Max Air cushioning. Leather and textile upper.",
        price=130.00,
        discount_percentage=20,
        category=ProductCategory.CLOTHING.value,
        brand="Nike",
        thumbnail="/static/images/airmax90.jpg",
        stock=60,
    ),
    "prod-006": Product(
        id="prod-006",
        title="Dyson V15 Detect Vacuum",
        description="Laser reveals microscopic dust. Piezo sensor counts and sizes particles.",
        price=749.99,
        category=ProductCategory.HOME.value,
        brand="Dyson",
        thumbnail="/static/images/dyson-v15.jpg",
        stock=25,
        warranty_information="2 year warranty",
    ),
    "prod-007": Product(
        id="prod-007",
        title="KitchenAid Stand Mixer",
        description="5.5-Quart bowl-lift stand mixer. 11 speeds. Includes flat beater, dough hook, and wire whip.",
        price=449.99,
        discount_percentage=5,
        category=ProductCategory.HOME.value,
        brand="KitchenAid",
        thumbnail="/static/images/kitchenaid.jpg",
        stock=40,
    ),
    "prod-008": Product(
        id="prod-008",
        title="Yeti Tundra 45 Cooler",
        description="Rotomolded construction. PermaFrost insulation. Bear-resistant certified.",
        price=325.00,
        category=ProductCategory.SPORTS.value,
        brand="Yeti",
        thumbnail="/static/images/yeti-cooler.jpg",
        stock=35,
    ),
    "prod-009": Product(
        id="prod-009",
        title="Garmin Forerunner 965",
        description="Premium GPS running watch with AMOLED display. Advanced training metrics and maps.",
        price=599.99,
        category=ProductCategory.SPORTS.value,
        brand="Garmin",
        thumbnail="/static/images/garmin-watch.jpg",
        stock=0,
    ),
    "prod-010": Product(
        id="prod-010",
        title="Atomic Habits by James Clear",
        description="An Easy & Proven Way to Build Good Habits & Break Bad Ones. Hardcover.",
        price=24.99,
        category=ProductCategory.BOOKS.value,
        brand=None,
        thumbnail="/static/images/atomic-habits.jpg",
        stock=200,
    ),
}

_SORT_KEYS = {
    ProductSort.PRICE_ASC: (lambda p: p.effective_price, False),
    ProductSort.PRICE_DESC: (lambda p: p.effective_price, True),
    ProductSort.TITLE: (lambda p: p.title.lower(), False),
    ProductSort.DISCOUNT: (lambda p: p.discount_percentage, True),
}


def _matches_text(product: Product, query_lower: str) -> bool:
    """Case-insensitive substring match over title, description, category and brand"""
    fields = (product.title, product.description, product.category, product.brand)
    return any(query_lower in value.lower() for value in fields if value)


class ProductDatabase:
    """In-memory product catalog"""

    def __init__(self, products: Optional[dict[str, Product]] = None):
        source = PRODUCTS if products is None else products
        self.products = {pid: p.model_copy() for pid, p in source.items()}

    def get_product(self, product_id: str) -> Optional[Product]:
        """Get a product by ID"""
        return self.products.get(product_id)

    def get_products(self, product_ids: Iterable[str]) -> dict[str, Product]:
        """Batched lookup; ids absent from the catalog are absent from the result"""
        return {
            pid: self.products[pid]
            for pid in dict.fromkeys(product_ids)
            if pid in self.products
        }

    def text_search(self, query: str, limit: int = 10) -> list[Product]:
        """Substring search across title/description/category/brand, in catalog order"""
        query_lower = (query or "").lower()
        results = [p for p in self.products.values() if _matches_text(p, query_lower)]
        return results[:limit]

    def search_products(
        self,
        query: Optional[str] = None,
        category: Optional[str] = None,
        brand: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        in_stock_only: bool = False,
        sort: Optional[ProductSort] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Product], int]:
        """
        Search products with filters.

        Price bounds apply to the discounted price.

        Returns:
            Tuple of (matching products, total count)
        """
        results = list(self.products.values())

        if query:
            query_lower = query.lower()
            results = [p for p in results if _matches_text(p, query_lower)]

        if category:
            results = [p for p in results if (p.category or "").lower() == category.lower()]

        if brand:
            results = [p for p in results if (p.brand or "").lower() == brand.lower()]

        if min_price is not None:
            results = [p for p in results if p.effective_price >= min_price]
        if max_price is not None:
            results = [p for p in results if p.effective_price <= max_price]

        if in_stock_only:
            results = [p for p in results if p.in_stock]

        if sort:
            key, reverse = _SORT_KEYS[sort]
            results.sort(key=key, reverse=reverse)

        # Get total before pagination
        total = len(results)

        results = results[offset : offset + limit]

        return results, total

    def get_categories(self) -> list[str]:
        """Distinct categories present in the catalog"""
        return sorted({p.category for p in self.products.values() if p.category})


# Singleton instance
product_db = ProductDatabase()
