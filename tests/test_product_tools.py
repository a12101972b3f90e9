"""Tests for the getData and compareProducts tools."""

import pytest

from storefront.core.errors import BackendUnavailable
from storefront.database.products import ProductDatabase
from storefront.services.product_tools import (
    ProductCompareTool,
    ProductSearchTool,
    format_description,
)


def _down(*args, **kwargs):
    raise BackendUnavailable("catalog offline")


class TestSearchTool:

    def test_renders_template(self, catalog):
        result = ProductSearchTool(catalog).run("Jacket")
        assert result == (
            "Found 1 product(s):\n\n"
            "**Rain Jacket** (ID: p3)\n"
            "- Category: clothing\n"
            "- Brand: Northwind\n"
            "- Price: $80.00 (25% off - Now $60.00)\n"
            "- Description: No description available"
        )

    def test_matches_brand_case_insensitively(self, catalog):
        result = ProductSearchTool(catalog).run("ACME")
        assert result.startswith("Found 2 product(s):")
        assert "(ID: p1)" in result and "(ID: p2)" in result

    def test_respects_limit(self):
        result = ProductSearchTool(ProductDatabase(), limit=2).run("")
        assert result.startswith("Found 2 product(s):")

    def test_no_results(self, catalog):
        assert ProductSearchTool(catalog).run("Kayak") == (
            'No products found matching "Kayak". Try a different search term or category.'
        )

    def test_catalog_error_becomes_text(self, catalog, monkeypatch):
        monkeypatch.setattr(catalog, "text_search", _down)
        assert ProductSearchTool(catalog).run("shoe") == "Error fetching products: catalog offline"

    def test_description_truncated(self):
        catalog = ProductDatabase()
        product = catalog.get_product("prod-001")
        preview = format_description(product, preview_chars=150)
        assert preview == product.description[:150] + "..."


class TestCompareTool:

    def test_compares_first_matches(self, catalog):
        result = ProductCompareTool(catalog).run("shoe", "bottle")
        assert result.startswith("Here's a comparison of the two products:")
        assert "**Trail Shoe** (ID: p1)" in result
        assert "**Water Bottle** (ID: p2)" in result
        assert "- Stock: 5 units" in result
        assert "- Price: Water Bottle is cheaper ($10.00 vs $100.00)" in result
        assert "- Availability: Trail Shoe (5 units) vs Water Bottle (20 units)" in result

    def test_discounted_side_shows_effective_price(self, catalog):
        result = ProductCompareTool(catalog).run("jacket", "shoe")
        assert "- Price: $60.00 (25% off, originally $80.00)" in result
        assert "Rain Jacket is cheaper ($60.00 vs $100.00)" in result

    def test_same_price(self):
        from storefront.models.product import Product

        catalog = ProductDatabase({
            "a": Product(id="a", title="Red Mug", price=12.0, stock=1),
            "b": Product(id="b", title="Blue Mug", price=12.0, stock=4),
        })
        assert "- Price: Same price" in ProductCompareTool(catalog).run("red", "blue")

    def test_same_product_rejected(self, catalog):
        assert ProductCompareTool(catalog).run("acme", "acme") == (
            'Both searches returned the same product: "Trail Shoe". '
            "Please provide two different product names."
        )

    @pytest.mark.parametrize("first, second, missing", [
        ("kayak", "shoe", "kayak"),
        ("shoe", "kayak", "kayak"),
    ])
    def test_not_found(self, catalog, first, second, missing):
        assert ProductCompareTool(catalog).run(first, second) == (
            f'Could not find any product matching "{missing}". Please try a different search term.'
        )

    def test_catalog_error_becomes_text(self, catalog, monkeypatch):
        monkeypatch.setattr(catalog, "text_search", _down)
        assert ProductCompareTool(catalog).run("a", "b").startswith("Error fetching products:")
