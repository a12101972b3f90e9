"""Storefront cart, checkout and shopping assistant service"""

__version__ = "1.0.0"
