"""Storefront backend: product cart, guest cart merge and checkout"""

__version__ = "1.0.0"
