"""
PATH: catalog/models/__init__.py

Catalog models export surface.
"""

from .product import ModifierOption, Product, ProductModifier

__all__ = [
    "Product",
    "ProductModifier",
    "ModifierOption",
]
