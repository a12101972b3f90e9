"""
Assistant product tools

Each tool turns free-text arguments into catalog lookups and renders the
results as a fixed text template. The template doubles as the format read
back by response_parser, so both must change together:

    **<title>** (ID: <id>)
    - Category: <category|N/A>
    - Brand: <brand|N/A>
    - Price: $<price>[ (<discount>% off - Now $<discounted>)]
    - Description: <first 150 chars>...

Tools always return a string; catalog failures become error text.
"""

import logging
from typing import Optional

from ..core.config import settings
from ..database.products import ProductDatabase
from ..models.product import Product

logger = logging.getLogger(__name__)


def format_percent(value: float) -> str:
    """10.0 -> '10', 12.5 -> '12.5'; never rounds, so the parser reads back the same value"""
    value = float(value)
    return str(int(value)) if value.is_integer() else repr(value)


def format_description(product: Product, preview_chars: Optional[int] = None) -> str:
    preview_chars = settings.description_preview_chars if preview_chars is None else preview_chars
    if not product.description:
        return "No description available"
    return product.description[:preview_chars] + "..."


def format_search_block(product: Product, preview_chars: Optional[int] = None) -> str:
    """Render one product in the search template"""
    price_line = f"- Price: ${product.price:.2f}"
    if product.discount_percentage > 0:
        price_line += (
            f" ({format_percent(product.discount_percentage)}% off"
            f" - Now ${product.effective_price:.2f})"
        )

    return "\n".join([
        f"**{product.title or 'Unknown Product'}** (ID: {product.id})",
        f"- Category: {product.category or 'N/A'}",
        f"- Brand: {product.brand or 'N/A'}",
        price_line,
        f"- Description: {format_description(product, preview_chars)}",
    ])


def format_comparison_block(product: Product, preview_chars: Optional[int] = None) -> str:
    """Render one product for comparison: effective price, stock and warranty"""
    price_line = f"- Price: ${product.effective_price:.2f}"
    if product.discount_percentage > 0:
        price_line += (
            f" ({format_percent(product.discount_percentage)}% off,"
            f" originally ${product.price:.2f})"
        )

    lines = [
        f"**{product.title or 'Unknown Product'}** (ID: {product.id})",
        f"- Category: {product.category or 'N/A'}",
        f"- Brand: {product.brand or 'N/A'}",
        price_line,
        f"- Stock: {product.stock} units",
        f"- Description: {format_description(product, preview_chars)}",
    ]
    if product.warranty_information:
        lines.append(f"- Warranty: {product.warranty_information}")
    return "\n".join(lines)


class ProductSearchTool:
    """getData(query): catalog search rendered for the model"""

    name = "getData"

    def __init__(self, catalog: ProductDatabase, limit: Optional[int] = None):
        self.catalog = catalog
        self.limit = settings.search_result_limit if limit is None else limit

    def run(self, query: str) -> str:
        query = query or ""
        try:
            products = self.catalog.text_search(query.lower(), limit=self.limit)
        except Exception as e:
            logger.error(f"{self.name} catalog error: {e}", exc_info=True)
            return f"Error fetching products: {e}"

        if not products:
            return f'No products found matching "{query}". Try a different search term or category.'

        blocks = "\n\n".join(format_search_block(p) for p in products)
        return f"Found {len(products)} product(s):\n\n{blocks}"


class ProductCompareTool:
    """compareProducts(product1, product2): first match per side, side by side"""

    name = "compareProducts"

    def __init__(self, catalog: ProductDatabase):
        self.catalog = catalog

    def _first_match(self, name: str) -> Optional[Product]:
        results = self.catalog.text_search((name or "").lower(), limit=1)
        return results[0] if results else None

    def run(self, product1: str, product2: str) -> str:
        try:
            first = self._first_match(product1)
            second = self._first_match(product2)
        except Exception as e:
            logger.error(f"{self.name} catalog error: {e}", exc_info=True)
            return f"Error fetching products: {e}"

        if first is None:
            return f'Could not find any product matching "{product1}". Please try a different search term.'
        if second is None:
            return f'Could not find any product matching "{product2}". Please try a different search term.'

        if first.id == second.id:
            return (
                f'Both searches returned the same product: "{first.title}". '
                "Please provide two different product names."
            )

        return "\n\n".join([
            "Here's a comparison of the two products:",
            format_comparison_block(first),
            format_comparison_block(second),
            self._key_differences(first, second),
        ])

    @staticmethod
    def _key_differences(first: Product, second: Product) -> str:
        price1 = first.effective_price
        price2 = second.effective_price
        if price1 < price2:
            price_line = f"{first.title} is cheaper (${price1:.2f} vs ${price2:.2f})"
        elif price1 > price2:
            price_line = f"{second.title} is cheaper (${price2:.2f} vs ${price1:.2f})"
        else:
            price_line = "Same price"

        return "\n".join([
            "**Key Differences:**",
            f"- Price: {price_line}",
            f"- Availability: {first.title} ({first.stock} units) vs {second.title} ({second.stock} units)",
        ])
