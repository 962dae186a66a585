from .product import (
    ModifierOptionSerializer,
    ProductModifierSerializer,
    ProductSerializer,
)

__all__ = [
    "ProductSerializer",
    "ProductModifierSerializer",
    "ModifierOptionSerializer",
]
