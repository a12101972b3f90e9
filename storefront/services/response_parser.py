"""
Product extraction from assistant text

Recovers product summaries from text written in the product tool template
so clients can render add-to-cart controls. Best effort: malformed or
plain text yields an empty list, never an exception.
"""

import logging
import re
from typing import Optional

from ..models.chat import ParsedProductSummary

logger = logging.getLogger(__name__)

# **Product Name** (ID: prod-001)
PRODUCT_HEADER_RE = re.compile(r"\*\*([^*]+)\*\*\s*\(ID:\s*([\w-]+)\)", re.IGNORECASE)

BRAND_RE = re.compile(r"Brand:\s*([^\n]+)", re.IGNORECASE)
PRICE_RE = re.compile(r"Price:\s*\$([0-9][0-9,]*(?:\.[0-9]+)?)", re.IGNORECASE)
ORIGINAL_PRICE_RE = re.compile(r"originally\s*\$([0-9][0-9,]*(?:\.[0-9]+)?)", re.IGNORECASE)
DISCOUNT_RE = re.compile(r"([0-9]+(?:\.[0-9]+)?)%\s*off", re.IGNORECASE)
DESCRIPTION_RE = re.compile(r"Description:\s*([^\n]+)", re.IGNORECASE)

_MISSING_VALUES = {"n/a", "none", "unknown", "no description available"}


def _number(match: Optional[re.Match]) -> Optional[float]:
    if not match:
        return None
    try:
        return float(match.group(1).replace(",", ""))
    except ValueError:
        return None


def _text(match: Optional[re.Match]) -> Optional[str]:
    if not match:
        return None
    value = match.group(1).strip()
    if not value or value.lower() in _MISSING_VALUES:
        return None
    return value


def parse_products(text: Optional[str]) -> list[ParsedProductSummary]:
    """
    Extract every "**title** (ID: id)" block from text.

    Each block's fields are read from the text between its header and the
    next header (or the end). A missing price label yields price 0, which
    callers must treat as unknown.
    """
    if not text:
        return []

    headers = list(PRODUCT_HEADER_RE.finditer(text))
    products: list[ParsedProductSummary] = []

    for index, header in enumerate(headers):
        end = headers[index + 1].start() if index + 1 < len(headers) else len(text)
        section = text[header.start():end]

        price = _number(PRICE_RE.search(section))
        products.append(
            ParsedProductSummary(
                id=header.group(2),
                title=header.group(1).strip(),
                price=price if price is not None else 0.0,
                original_price=_number(ORIGINAL_PRICE_RE.search(section)),
                discount_percent=_number(DISCOUNT_RE.search(section)),
                brand=_text(BRAND_RE.search(section)),
                description=_text(DESCRIPTION_RE.search(section)),
            )
        )

    if not products:
        logger.debug("No product blocks found in assistant text")
    return products
